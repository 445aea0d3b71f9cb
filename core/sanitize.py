"""Path validation and filter-string escaping for MediaFX.

Paths handed to FFmpeg pass through :func:`validate_path`; paths and
text embedded *inside* a filter expression are escaped with
:func:`escape_filter_path` / :func:`escape_drawtext_text`.
"""

from pathlib import Path

from .errors import ConfigurationError

# Common video, image, and audio extensions
ALLOWED_EXTENSIONS = {
    # Video
    '.mp4', '.mkv', '.avi', '.mov', '.webm', '.flv', '.wmv', '.m4v', '.mpg', '.mpeg', '.3gp', '.ts',
    '.m2ts', '.mts', '.vob', '.ogv',
    # Image
    '.png', '.jpg', '.jpeg', '.webp', '.bmp', '.gif', '.tiff', '.tif', '.heic',
    # Audio
    '.mp3', '.wav', '.aac', '.flac', '.m4a', '.ogg', '.wma', '.opus'
}

IMAGE_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.webp', '.bmp', '.gif', '.tiff', '.tif'}
ALLOWED_SUBTITLE_EXTENSIONS = {'.srt', '.ass', '.ssa'}
NATIVE_ASS_EXTENSIONS = {'.ass', '.ssa'}
ALLOWED_FONT_EXTENSIONS = {'.ttf', '.otf', '.ttc', '.otc', '.woff', '.woff2'}
SYSTEM_FONT_EXTENSIONS = {'.ttf', '.otf', '.ttc', '.otc'}

# Characters with meaning inside a filter-graph option value
_FILTER_PATH_SPECIALS = {
    "\\": "\\\\\\\\",
    ":": "\\:",
    "[": "\\[",
    "]": "\\]",
    "'": "\\'",
}


def validate_path(path: str, allowed_extensions: set[str], must_exist: bool = True) -> str:
    """Generic path validator for file inputs.

    Args:
        path: The path string to validate.
        allowed_extensions: Set of allowed file extensions (e.g. {'.srt', '.ass'}).
            An empty set accepts any extension.
        must_exist: If True, raises when the file doesn't exist.

    Returns:
        The resolved, absolute path string.

    Raises:
        ConfigurationError: If path is empty, contains traversal, has an
            invalid extension, or doesn't exist (when must_exist=True).
    """
    if not path or not str(path).strip():
        raise ConfigurationError("Path cannot be empty")

    path = str(path).strip()
    if ".." in Path(path).parts:
        raise ConfigurationError(f"Path contains directory traversal (..): {path}")

    resolved = Path(path).resolve()

    if allowed_extensions and resolved.suffix.lower() not in allowed_extensions:
        raise ConfigurationError(
            f"Invalid file extension: {resolved.suffix}. "
            f"Allowed: {sorted(allowed_extensions)}"
        )

    if must_exist:
        if not resolved.exists():
            raise ConfigurationError(f"File not found: {resolved}")
        if not resolved.is_file():
            raise ConfigurationError(f"Path is not a file: {resolved}")

    return str(resolved)


def validate_subtitle_path(path: str) -> str:
    return validate_path(path, ALLOWED_SUBTITLE_EXTENSIONS)


def escape_filter_path(path: str | Path) -> str:
    """Escape a filesystem path for use inside a filter expression.

    Backslash, colon, square brackets and single quote are all
    significant to the filter-graph parser. Backslashes are doubled
    twice because the value passes through two levels of unescaping.

    Args:
        path: Path to embed, e.g. a subtitle or font file.

    Returns:
        The escaped path, without surrounding quotes.
    """
    text = str(path)
    if not any(ch in text for ch in _FILTER_PATH_SPECIALS):
        return text
    return "".join(_FILTER_PATH_SPECIALS.get(ch, ch) for ch in text)


def escape_drawtext_text(text: str) -> str:
    """Escape literal text for a single-quoted drawtext ``text`` option.

    A single quote inside the literal is doubled.
    """
    if not text:
        return ""
    return text.replace("'", "''")


def is_image_path(path: str | Path) -> bool:
    return Path(path).suffix.lower() in IMAGE_EXTENSIONS
