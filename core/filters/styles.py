"""Immutable option objects shared by the text and subtitle builders."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Union

from ..errors import ConfigurationError

AUTO_SIZE_MULTIPLIERS = {
    "auto-small": 0.5,
    "auto-medium": 0.75,
    "auto-large": 1.0,
    "auto-xlarge": 1.1,
    "auto-huge": 1.2,
    "auto-max": 1.3,
}

HORIZONTAL_ALIGNMENTS = ("left", "center", "right")
VERTICAL_ALIGNMENTS = ("top", "middle", "bottom")


@dataclass(frozen=True)
class StyleSpec:
    """Visual style for subtitles and overlaid text.

    ``size`` is either a pixel size or one of the auto tiers in
    :data:`AUTO_SIZE_MULTIPLIERS`. When ``position`` is ``"custom"`` the
    ``x``/``y`` expressions are used verbatim instead of the alignment.
    """

    font_key: str = "noto-sans-kr"
    font_path: Optional[str] = None
    size: Union[int, str] = 48
    color: str = "white"
    outline_width: float = 1
    outline_color: str = "black"
    background: bool = False
    background_color: str = "black"
    background_opacity: float = 0.5
    box_padding: int = 5
    position: str = "alignment"
    horizontal_align: str = "center"
    vertical_align: str = "bottom"
    padding_x: int = 20
    padding_y: int = 20
    x: str = "(w-text_w)/2"
    y: str = "h-th-50"
    line_spacing: int = 10
    line_colors: Optional[tuple[str, str]] = None
    method: str = "ass"

    def __post_init__(self):
        if self.horizontal_align not in HORIZONTAL_ALIGNMENTS:
            raise ConfigurationError(f"Unknown horizontal alignment: {self.horizontal_align}")
        if self.vertical_align not in VERTICAL_ALIGNMENTS:
            raise ConfigurationError(f"Unknown vertical alignment: {self.vertical_align}")
        if self.position not in ("alignment", "custom"):
            raise ConfigurationError(f"Unknown position type: {self.position}")
        if self.method not in ("ass", "force_style"):
            raise ConfigurationError(f"Unknown subtitle style method: {self.method}")
        if isinstance(self.size, str) and self.size not in AUTO_SIZE_MULTIPLIERS:
            raise ConfigurationError(
                f"Unknown font size '{self.size}'. "
                f"Use a number or one of {sorted(AUTO_SIZE_MULTIPLIERS)}"
            )
        if not 0 <= self.background_opacity <= 1:
            raise ConfigurationError("background_opacity must be between 0 and 1")

    @property
    def is_auto_size(self) -> bool:
        return isinstance(self.size, str)

    @property
    def fixed_size(self) -> int:
        if self.is_auto_size:
            raise ConfigurationError("Font size is automatic and must be computed from the image")
        return int(self.size)

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None, **overrides) -> "StyleSpec":
        """Build a style from a loose mapping, ignoring unknown keys."""
        merged = dict(options or {})
        merged.update(overrides)
        names = {f.name for f in fields(cls)}
        values = {k: v for k, v in merged.items() if k in names and v is not None}
        size = values.get("size")
        if isinstance(size, str) and size.strip().lstrip("-").isdigit():
            values["size"] = int(size)
        if values.get("font_path") == "":
            values.pop("font_path")
        colors = values.get("line_colors")
        if colors is not None:
            values["line_colors"] = tuple(colors)
        return cls(**values)
