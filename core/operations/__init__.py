"""One coroutine per media operation."""

from .context import OperationContext, default_context
from .audio import extract_audio, mix_audio
from .fonts import delete_font, list_fonts, upload_font
from .image import add_text_to_image, image_to_video, stamp_image
from .probe import get_metadata
from .subtitle import add_subtitle, add_text
from .video import (
    change_speed,
    merge,
    multi_transition,
    overlay_video,
    separate_audio,
    single_fade,
    trim,
)

__all__ = [
    "OperationContext",
    "default_context",
    "add_subtitle",
    "add_text",
    "add_text_to_image",
    "change_speed",
    "delete_font",
    "extract_audio",
    "get_metadata",
    "image_to_video",
    "list_fonts",
    "merge",
    "mix_audio",
    "multi_transition",
    "overlay_video",
    "separate_audio",
    "single_fade",
    "stamp_image",
    "trim",
    "upload_font",
]
