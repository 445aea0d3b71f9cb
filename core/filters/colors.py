"""Color and alignment conversion for the ASS subtitle renderer."""

import math

NAMED_COLORS = {
    "white": "FFFFFF",
    "black": "000000",
    "red": "FF0000",
    "green": "00FF00",
    "blue": "0000FF",
    "yellow": "FFFF00",
    "cyan": "00FFFF",
    "magenta": "FF00FF",
    "orange": "FFA500",
}

_HEX_DIGITS = set("0123456789abcdefABCDEF")

_VERTICAL_ROW = {"bottom": 1, "middle": 4, "top": 7}
_HORIZONTAL_OFFSET = {"left": 0, "center": 1, "right": 2}


def _to_rgb_hex(color: str) -> str:
    value = (color or "").strip()
    if value.startswith("#") and len(value) == 7 and set(value[1:]) <= _HEX_DIGITS:
        return value[1:].upper()
    # Unknown names fall back to white
    return NAMED_COLORS.get(value.lower(), NAMED_COLORS["white"])


def opacity_to_alpha(opacity: float) -> int:
    """Map an opacity in [0, 1] to the renderer's inverted alpha byte."""
    opacity = min(max(float(opacity), 0.0), 1.0)
    return int(math.floor((1.0 - opacity) * 255 + 0.5))


def color_to_ass(color: str, opacity: float = 1.0) -> str:
    """Convert ``#RRGGBB`` or a color name to ``&HAABBGGRR``.

    Args:
        color: Hex color (``#RRGGBB``) or one of :data:`NAMED_COLORS`.
        opacity: 1.0 is fully opaque; alpha is stored inverted.

    Returns:
        The ASS color literal, e.g. ``&H000000FF`` for opaque red.
    """
    rgb = _to_rgb_hex(color)
    red, green, blue = rgb[0:2], rgb[2:4], rgb[4:6]
    return f"&H{opacity_to_alpha(opacity):02X}{blue}{green}{red}"


def alignment_to_code(horizontal: str = "center", vertical: str = "bottom") -> int:
    """Return the numpad alignment code (1-9) for a position.

    Bottom row is 1-3, middle 4-6, top 7-9; left/center/right pick the
    column. Unknown values default to bottom and center.
    """
    row = _VERTICAL_ROW.get(vertical, _VERTICAL_ROW["bottom"])
    return row + _HORIZONTAL_OFFSET.get(horizontal, _HORIZONTAL_OFFSET["center"])


def ffmpeg_color(color: str, opacity: float | None = None) -> str:
    """Render a color for drawtext-style options, with optional ``@alpha``."""
    value = (color or "white").strip()
    if opacity is None:
        return value
    return f"{value}@{opacity:g}"
