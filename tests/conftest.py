"""Pytest configuration for ComfyUI-MediaFX tests.

Sets up sys.path so that both direct package imports (e.g. `from core.filters.text import ...`)
and relative imports within the package (e.g. `from ..core import ...`) work correctly
when running pytest from the project root.
"""

import sys
import os
import types
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to sys.path so `core` and `nodes` are importable
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Create a mock for folder_paths (ComfyUI-specific module)
if "folder_paths" not in sys.modules:
    mock_fp = types.ModuleType("folder_paths")
    mock_fp.get_output_directory = lambda: "/tmp/comfyui_output"
    sys.modules["folder_paths"] = mock_fp

from core.config import MediaFXSettings  # noqa: E402
from core.fonts import FontRegistry, SystemFontCache  # noqa: E402
from core.operations.context import OperationContext  # noqa: E402
from core.sources import TempStore  # noqa: E402
from core.video.analyzer import normalize  # noqa: E402
from helpers import ok_result, probe_data  # noqa: E402


@pytest.fixture
def settings(tmp_path):
    return MediaFXSettings(
        temp_dir=tmp_path / "temp",
        fonts_dir=tmp_path / "fonts",
        cleanup_probability=0.0,
    )


@pytest.fixture
def font_file(settings):
    """A bundled font entry whose file exists."""
    settings.fonts_dir.mkdir(parents=True, exist_ok=True)
    (settings.fonts_dir / "fonts.yaml").write_text(
        "noto-sans-kr:\n"
        "  name: Noto Sans KR\n"
        "  filename: NotoSansKR-Regular.ttf\n"
        "  description: Google Noto Sans KR\n"
        "  type: korean\n",
        encoding="utf-8",
    )
    path = settings.fonts_dir / "NotoSansKR-Regular.ttf"
    path.write_bytes(b"font")
    return path


@pytest.fixture
def ctx(settings, font_file):
    """OperationContext with FFmpeg and ffprobe mocked out.

    ``ctx.probes`` maps a path to a ``probe_data()`` dict; paths not in
    the map probe as a 10 second 1920x1080 video with audio.
    ``ctx.process_manager.run`` records every command.
    """
    process_manager = MagicMock()
    process_manager.run = AsyncMock(side_effect=lambda command, **kw: ok_result())
    analyzer = MagicMock()
    probes = {}

    async def probe(path):
        return normalize(probes.get(str(path), probe_data()))

    async def has_audio(path):
        return (await probe(path)).has_audio

    async def dimensions(path):
        return (await probe(path)).resolution

    analyzer.probe = AsyncMock(side_effect=probe)
    analyzer.has_audio = AsyncMock(side_effect=has_audio)
    analyzer.dimensions = AsyncMock(side_effect=dimensions)
    analyzer.image_extension = AsyncMock(return_value=".jpg")

    context = OperationContext(
        settings=settings,
        temp_store=TempStore(settings.temp_dir),
        process_manager=process_manager,
        analyzer=analyzer,
        fonts=FontRegistry(settings.fonts_dir, system_cache=SystemFontCache(directories=[])),
    )
    context.probes = probes
    return context
