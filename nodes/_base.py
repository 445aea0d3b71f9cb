"""Shared plumbing for MediaFX nodes.

Nodes resolve their STRING sources (URL or local path) into temp files,
run one operation, move the result into ComfyUI's output directory and
return its path. With ``continue_on_fail`` a failure is reported on the
node's ``error`` output instead of halting the graph.
"""

import logging
import shutil
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Sequence

from ..core.errors import ConfigurationError, MediaFXError
from ..core.operations.context import OperationContext, default_context
from ..core.sources import ResolvedSources, remove_quietly, resolve_sources

logger = logging.getLogger("mediafx")

CATEGORY = "MediaFX"
OUTPUT_SUBFOLDER = "mediafx"

VIDEO_FORMATS = ["mp4", "mov", "mkv", "avi", "webm"]
AUDIO_FORMATS = ["mp3", "aac", "m4a", "wav", "flac", "ogg", "opus"]
AUDIO_CODECS = ["copy", "aac", "libmp3lame", "libopus", "libvorbis", "flac", "pcm_s16le"]

CONTINUE_ON_FAIL = ("BOOLEAN", {
    "default": False,
    "tooltip": (
        "If true, a failure returns an empty result and the error "
        "message on the 'error' output instead of stopping the workflow."
    ),
})


def source_input(tooltip: str) -> tuple:
    return ("STRING", {
        "default": "",
        "multiline": False,
        "placeholder": "Local file path or http(s) URL",
        "tooltip": tooltip,
    })


def split_sources(value: str) -> list[str]:
    """One source per non-empty line."""
    return [line.strip() for line in (value or "").splitlines() if line.strip()]


async def resolve(ctx: OperationContext, sources: Sequence[str]) -> ResolvedSources:
    return await resolve_sources(sources, ctx.temp_store, timeout=ctx.settings.download_timeout)


def publish(path: str) -> str:
    """Move an operation's temp output into ``<output>/mediafx/``."""
    import folder_paths

    target_dir = Path(folder_paths.get_output_directory()) / OUTPUT_SUBFOLDER
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / Path(path).name
    shutil.move(path, target)
    logger.info("Saved output to %s", target)
    return str(target)


def image_input_to_file(ctx: OperationContext, image) -> str:
    """Write an IMAGE tensor to a temp PNG; the caller removes it."""
    from ..core.media_converter import MediaConverter

    path = ctx.temp_store.path(".png")
    return MediaConverter().tensor_to_image_file(image, path)


def image_output(path: str):
    """Load a result image as an IMAGE tensor."""
    from ..core.media_converter import MediaConverter

    return MediaConverter().image_file_to_tensor(path)


def empty_image():
    import torch

    return torch.zeros(1, 64, 64, 3, dtype=torch.float32)


async def run_node(
    work: Callable[[OperationContext], Awaitable[tuple]],
    continue_on_fail: bool,
    empty: Callable[[], tuple],
    name: str,
) -> tuple:
    """Run ``work`` and append the ``error`` output.

    Before running, the temp directory is swept of stale files with
    probability ``cleanup_probability``.
    """
    ctx = default_context()
    await ctx.temp_store.maybe_sweep(
        ctx.settings.cleanup_probability,
        ctx.settings.temp_max_age_hours,
    )
    try:
        result = await work(ctx)
    except (MediaFXError, OSError) as e:
        if not continue_on_fail:
            raise
        logger.error("%s failed: %s", name, e)
        return (*empty(), str(e))
    return (*result, "")


class LocalImage:
    """Image source from an IMAGE tensor or a path/URL string.

    The tensor wins when both are connected. Temp files are removed on
    exit.
    """

    def __init__(self, ctx: OperationContext, image=None, source: str = ""):
        self.ctx = ctx
        self.image = image
        self.source = source
        self.path: Optional[str] = None
        self._tensor_file: Optional[str] = None
        self._resolved: Optional[ResolvedSources] = None

    async def __aenter__(self) -> str:
        if self.image is not None:
            self._tensor_file = image_input_to_file(self.ctx, self.image)
            self.path = self._tensor_file
        else:
            if not self.source.strip():
                raise ConfigurationError("Connect an IMAGE or enter an image path or URL")
            self._resolved = await resolve(self.ctx, [self.source])
            self.path = self._resolved.paths[0]
        return self.path

    async def __aexit__(self, exc_type, exc, tb) -> None:
        remove_quietly(self._tensor_file)
        if self._resolved is not None:
            await self._resolved.cleanup()


def node_options(**values: Any) -> dict[str, Any]:
    """Drop unset optional inputs so option objects keep their defaults."""
    return {k: v for k, v in values.items() if v is not None and v != ""}


def font_choices() -> list[str]:
    """Font keys for combo inputs, the configured default first."""
    ctx = default_context()
    try:
        keys = list(ctx.fonts.available())
    except (MediaFXError, OSError) as e:
        logger.warning("Could not list fonts: %s", e)
        keys = []
    default = ctx.settings.default_font_key
    return [default] + [key for key in keys if key != default]


def style_inputs(**defaults: Any) -> dict:
    """Optional inputs shared by the text and subtitle nodes.

    Keyword arguments replace the default value of the named input.
    """
    inputs = {
        "font_key": (font_choices(), {"tooltip": "Bundled or uploaded font."}),
        "font_path": ("STRING", {
            "default": "",
            "tooltip": "Path to a system font file; overrides font_key when set.",
        }),
        "color": ("STRING", {"default": "white", "tooltip": "#RRGGBB or a color name."}),
        "outline_width": ("FLOAT", {"default": 1.0, "min": 0.0, "max": 20.0, "step": 0.5}),
        "outline_color": ("STRING", {"default": "black"}),
        "background": ("BOOLEAN", {"default": False, "tooltip": "Draw a box behind the text."}),
        "background_color": ("STRING", {"default": "black"}),
        "background_opacity": ("FLOAT", {"default": 0.5, "min": 0.0, "max": 1.0, "step": 0.05}),
        "box_padding": ("INT", {"default": 5, "min": 0, "max": 200}),
        "position": (["alignment", "custom"], {"default": "alignment"}),
        "horizontal_align": (["left", "center", "right"], {"default": "center"}),
        "vertical_align": (["top", "middle", "bottom"], {"default": "bottom"}),
        "padding_x": ("INT", {"default": 20, "min": 0, "max": 4096}),
        "padding_y": ("INT", {"default": 20, "min": 0, "max": 4096}),
        "x": ("STRING", {"default": "(w-text_w)/2", "tooltip": "X expression for custom position."}),
        "y": ("STRING", {"default": "h-th-50", "tooltip": "Y expression for custom position."}),
    }
    for name, value in defaults.items():
        kind, config = inputs[name]
        inputs[name] = (kind, {**config, "default": value})
    return inputs
