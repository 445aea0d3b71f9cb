"""drawtext-based text overlays for video and still images."""

from __future__ import annotations

import math
import re
from pathlib import Path
from typing import Optional

from ..sanitize import escape_drawtext_text, escape_filter_path
from .colors import ffmpeg_color
from .contract import FilterResult, format_number, make_result
from .styles import AUTO_SIZE_MULTIPLIERS, StyleSpec

DEFAULT_SIZE_MULTIPLIER = 0.75
CHAR_WIDTH_RATIO = 0.55
MIN_FONT_SIZE = 12
MAX_FONT_SIZE = 500

# Hangul syllables, Hangul compatibility Jamo, CJK unified ideographs, Hiragana, Katakana
_WIDE_RANGES = (
    (0xAC00, 0xD7AF),
    (0x3130, 0x318F),
    (0x4E00, 0x9FFF),
    (0x3040, 0x309F),
    (0x30A0, 0x30FF),
)
WIDE_CHAR_WEIGHT = 1.8

_EMOJI_PATTERN = re.compile(
    "["
    "\U0001F600-\U0001F64F"
    "\U0001F300-\U0001F5FF"
    "\U0001F680-\U0001F6FF"
    "\U0001F700-\U0001F77F"
    "\U0001F780-\U0001F7FF"
    "\U0001F800-\U0001F8FF"
    "\U0001F900-\U0001F9FF"
    "\U0001FA00-\U0001FA6F"
    "\U0001FA70-\U0001FAFF"
    "\u2600-\u26FF"
    "\u2700-\u27BF"
    "\u2300-\u23FF"
    "\u2B50\u2B55"
    "\u25AA\u25AB\u25B6\u25C0\u25FB-\u25FE"
    "\uFE00-\uFE0F"
    "\u200D"
    "\u20E3"
    "\U000E0020-\U000E007F"
    "]"
)
_MULTI_SPACE = re.compile(r"  +")


def effective_text_length(text: str) -> float:
    """Approximate rendered width of ``text`` in Latin-character units."""
    length = 0.0
    for char in text:
        if char == "\n":
            continue
        code = ord(char)
        if any(low <= code <= high for low, high in _WIDE_RANGES):
            length += WIDE_CHAR_WEIGHT
        else:
            length += 1
    return length


def strip_emoji(text: str) -> str:
    """Remove emoji and tidy the spaces they leave behind, keeping newlines."""
    cleaned = _EMOJI_PATTERN.sub("", text)
    return "\n".join(
        _MULTI_SPACE.sub(" ", line).strip() for line in cleaned.split("\n")
    )


def calculate_auto_font_size(
    width: int,
    height: int,
    text: str,
    tier: str,
    padding_x: int = 20,
) -> int:
    """Pick a font size so the longest line fits the image.

    The width-derived size is scaled by the tier multiplier, capped so
    all lines fit within 80% of the height at 1.2 line spacing, and
    clamped to [12, 500].

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        text: Text to render (may contain newlines).
        tier: One of the auto-size tiers, e.g. ``"auto-medium"``.
        padding_x: Horizontal padding applied on both sides.

    Returns:
        Font size in pixels.
    """
    lines = text.split("\n")
    longest = max((effective_text_length(line) for line in lines), default=0)
    if longest == 0:
        longest = 1

    available_width = width - padding_x * 2
    base_size = available_width / (longest * CHAR_WIDTH_RATIO)
    multiplier = AUTO_SIZE_MULTIPLIERS.get(tier, DEFAULT_SIZE_MULTIPLIER)
    font_size = math.floor(base_size * multiplier)

    height_cap = math.floor((height * 0.8) / (len(lines) * 1.2))
    font_size = min(font_size, height_cap)

    return max(MIN_FONT_SIZE, min(font_size, MAX_FONT_SIZE))


def position_from_alignment(
    horizontal: str,
    vertical: str,
    padding_x: int,
    padding_y: int,
) -> tuple[str, str]:
    """drawtext ``x``/``y`` expressions for an alignment.

    Unknown horizontal values center; unknown vertical values use the
    middle row.
    """
    if horizontal == "left":
        x = f"{padding_x}"
    elif horizontal == "right":
        x = f"w-text_w-{padding_x}"
    else:
        x = "(w-text_w)/2"

    if vertical == "top":
        y = f"{padding_y}"
    elif vertical == "bottom":
        y = f"h-text_h-{padding_y}"
    else:
        y = "(h-text_h)/2"

    return x, y


def _drawtext(
    font_file: str | Path,
    text: str,
    font_size: int,
    color: str,
    x: str,
    y: str,
    style: Optional[StyleSpec] = None,
    enable: Optional[str] = None,
) -> str:
    parts = [
        f"drawtext=fontfile='{escape_filter_path(font_file)}'",
        f"text='{escape_drawtext_text(text)}'",
        f"fontsize={font_size}",
        f"fontcolor={color}",
        f"x={x}",
        f"y={y}",
    ]
    if style is not None:
        if style.outline_width > 0:
            parts.append(f"borderw={format_number(style.outline_width)}")
            parts.append(f"bordercolor={style.outline_color}")
        if style.background:
            parts.append("box=1")
            parts.append(
                f"boxcolor={ffmpeg_color(style.background_color, style.background_opacity)}"
            )
            parts.append(f"boxborderw={style.box_padding}")
    if enable:
        parts.append(f"enable='{enable}'")
    return ":".join(parts)


def build_video_text_filter(
    text: str,
    style: StyleSpec,
    font_file: str | Path,
    start_time: float = 0,
    end_time: float = 5,
) -> FilterResult:
    """drawtext overlay shown between ``start_time`` and ``end_time``.

    Audio is stream-copied by the caller.
    """
    if style.position == "custom":
        x, y = style.x, style.y
    else:
        x, y = position_from_alignment(
            style.horizontal_align, style.vertical_align, style.padding_x, style.padding_y
        )
    enable = f"between(t,{format_number(start_time)},{format_number(end_time)})"
    vf = _drawtext(font_file, text, style.fixed_size, style.color, x, y, style, enable)
    return make_result(vf=[vf], opts=["-c:a", "copy"])


def build_image_text_filters(
    text: str,
    style: StyleSpec,
    font_file: str | Path,
    font_size: int,
) -> FilterResult:
    """One drawtext per non-empty line, stacked as a block.

    The block height is ``n*size + (n-1)*spacing``; each line is offset
    by ``i*(size + spacing)`` from the block's anchor. With
    ``line_colors`` set, line 1 and line 2 take their own colors and
    lines 3+ reuse the first. Empty text produces a single empty
    drawtext so the graph is never empty.
    """
    lines = [line for line in text.split("\n") if line]
    spacing = style.line_spacing
    line_height = font_size + spacing
    total_height = len(lines) * font_size + (len(lines) - 1) * spacing

    filters: list[str] = []
    for index, line in enumerate(lines):
        color = style.color
        if style.line_colors:
            first, second = style.line_colors
            color = second if index == 1 else first

        x, _ = position_from_alignment(style.horizontal_align, "middle", style.padding_x, 0)
        offset = index * line_height
        if style.position == "custom":
            x = style.x
            y = f"({style.y})+{offset}" if offset else style.y
        elif style.vertical_align == "top":
            y = f"{style.padding_y + offset}"
        elif style.vertical_align == "bottom":
            y = f"h-{style.padding_y + total_height - offset}"
        else:
            y = f"(h-{total_height})/2+{offset}"

        filters.append(_drawtext(font_file, line, font_size, color, x, y, style))

    if not filters:
        filters.append(_drawtext(font_file, "", font_size, style.color, "0", "0"))

    return make_result(vf=filters, opts=["-frames:v", "1"])
