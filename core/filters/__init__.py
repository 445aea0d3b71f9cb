"""Filter-expression builders: text, subtitles, audio mixing, tempo, transitions."""

from .contract import FilterResult, make_result
from .styles import StyleSpec
from .audio_mix import MixPlan
from .compositing import OverlayOptions, StampOptions

__all__ = [
    "FilterResult",
    "make_result",
    "StyleSpec",
    "MixPlan",
    "OverlayOptions",
    "StampOptions",
]
