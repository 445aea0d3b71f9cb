"""
ComfyUI-MediaFX: FFmpeg media operations as ComfyUI nodes

Merge, trim, retime, transition and fade videos; burn in subtitles and
text; mix audio; stamp images; probe metadata. Every node runs a single
FFmpeg invocation built from its inputs.

Example usage:
    - Merge three clips into one mp4, then add an SRT subtitle track
    - Mix background music into a video, fading it in and out
    - Write a two-line caption onto an image with automatic font sizing
"""

__version__ = "1.0.0"
__author__ = "MediaFX Team"

# Import node mappings for ComfyUI
from .nodes import NODE_CLASS_MAPPINGS, NODE_DISPLAY_NAME_MAPPINGS

__all__ = [
    "NODE_CLASS_MAPPINGS",
    "NODE_DISPLAY_NAME_MAPPINGS",
]


def check_dependencies():
    """Check if required dependencies are available."""
    from .core.config import get_settings
    from .core.executor.binaries import BinaryLocator

    issues = []

    # Check FFMPEG
    locator = BinaryLocator.from_settings(get_settings())
    if not locator.find("ffmpeg"):
        issues.append("FFMPEG not found. Install FFMPEG or set MEDIAFX_FFMPEG_PATH.")

    if not locator.find("ffprobe"):
        issues.append("FFprobe not found. Install FFMPEG or set MEDIAFX_FFPROBE_PATH.")

    # Check optional dependencies
    try:
        import httpx  # noqa: F401
    except ImportError:
        issues.append("httpx not installed. Run: pip install httpx")

    try:
        import yaml  # noqa: F401
    except ImportError:
        issues.append("PyYAML not installed. Run: pip install pyyaml")

    return issues


# Run dependency check on import
_dependency_issues = check_dependencies()
if _dependency_issues:
    print("MediaFX Warning - Missing dependencies:")
    for issue in _dependency_issues:
        print(f"  - {issue}")
