"""SRT parsing, ASS synthesis and the ``subtitles`` filter expression."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..sanitize import NATIVE_ASS_EXTENSIONS, escape_filter_path
from .colors import alignment_to_code, color_to_ass
from .contract import FilterResult, make_result
from .styles import StyleSpec

# Share of the frame height used as the bottom margin for "middle"
MIDDLE_MARGIN_RATIO = 0.37
DEFAULT_VIDEO_HEIGHT = 1080

_BLOCK_SEPARATOR = re.compile(r"\n\s*\n")
_TIMESTAMP = re.compile(
    r"(\d{1,2}):(\d{2}):(\d{2})[,.](\d{3})\s*-->\s*(\d{1,2}):(\d{2}):(\d{2})[,.](\d{3})"
)


@dataclass(frozen=True)
class SubtitleCue:
    """One timed subtitle, times already in ``H:MM:SS.cc`` form."""
    start: str
    end: str
    text: str


def _ass_time(hours: str, minutes: str, seconds: str, millis: str) -> str:
    # Milliseconds truncate to centiseconds
    return f"{int(hours)}:{minutes}:{seconds}.{int(millis) // 10:02d}"


def parse_srt(content: str) -> list[SubtitleCue]:
    """Parse SRT text into cues.

    Blocks are separated by blank lines and need an index line, a
    timestamp line and at least one text line. Blocks that don't match
    are skipped. Multi-line text is joined with the ``\\N`` hard break.
    """
    normalized = content.replace("\r\n", "\n").replace("\r", "\n").lstrip("\ufeff")
    cues: list[SubtitleCue] = []
    for block in _BLOCK_SEPARATOR.split(normalized.strip()):
        lines = [line.strip() for line in block.strip().split("\n")]
        if len(lines) < 3:
            continue
        match = _TIMESTAMP.search(lines[1])
        if not match:
            continue
        groups = match.groups()
        cues.append(SubtitleCue(
            start=_ass_time(*groups[:4]),
            end=_ass_time(*groups[4:]),
            text="\\N".join(lines[2:]),
        ))
    return cues


def vertical_margin(style: StyleSpec, video_height: Optional[int]) -> int:
    """Bottom-anchored margin for the style's vertical alignment."""
    if style.vertical_align == "middle":
        height = video_height or DEFAULT_VIDEO_HEIGHT
        return round(height * MIDDLE_MARGIN_RATIO)
    return style.padding_y


def _ass_style_fields(
    style: StyleSpec,
    font_name: str,
    video_height: Optional[int],
) -> dict[str, str | int | float]:
    return {
        "Fontname": font_name,
        "Fontsize": style.fixed_size,
        "PrimaryColour": color_to_ass(style.color),
        "SecondaryColour": color_to_ass(style.color),
        "OutlineColour": color_to_ass(style.outline_color),
        "BackColour": color_to_ass(style.background_color, style.background_opacity),
        "Bold": 0,
        "Italic": 0,
        "BorderStyle": 4 if style.background else 1,
        "Outline": style.outline_width,
        "Shadow": 0,
        "Alignment": alignment_to_code(style.horizontal_align, style.vertical_align),
        "MarginL": style.padding_x,
        "MarginR": style.padding_x,
        "MarginV": vertical_margin(style, video_height),
    }


def build_ass_document(
    cues: list[SubtitleCue],
    style: StyleSpec,
    font_name: str,
    video_width: Optional[int] = None,
    video_height: Optional[int] = None,
) -> str:
    """Render cues as a complete ASS script with a single ``Default`` style."""
    fields = _ass_style_fields(style, font_name, video_height)
    style_line = ",".join([
        "Default",
        str(fields["Fontname"]),
        str(fields["Fontsize"]),
        str(fields["PrimaryColour"]),
        str(fields["SecondaryColour"]),
        str(fields["OutlineColour"]),
        str(fields["BackColour"]),
        "0", "0", "0", "0",
        "100", "100", "0", "0",
        str(fields["BorderStyle"]),
        f"{fields['Outline']:g}",
        "0",
        str(fields["Alignment"]),
        str(fields["MarginL"]),
        str(fields["MarginR"]),
        str(fields["MarginV"]),
        "1",
    ])

    lines = [
        "[Script Info]",
        "ScriptType: v4.00+",
        "WrapStyle: 0",
        "ScaledBorderAndShadow: yes",
    ]
    # Without PlayRes libass assumes a 384x288 script and rescales margins and font size
    play_res_y = video_height or DEFAULT_VIDEO_HEIGHT
    play_res_x = video_width or round(play_res_y * 16 / 9)
    lines.extend([f"PlayResX: {play_res_x}", f"PlayResY: {play_res_y}"])
    lines.extend([
        "",
        "[V4+ Styles]",
        "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, "
        "BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, "
        "BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding",
        f"Style: {style_line}",
        "",
        "[Events]",
        "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text",
    ])
    for cue in cues:
        lines.append(f"Dialogue: 0,{cue.start},{cue.end},Default,,0,0,0,,{cue.text}")
    return "\n".join(lines) + "\n"


def build_force_style(
    style: StyleSpec,
    font_name: str,
    video_height: Optional[int] = None,
) -> str:
    """``force_style`` value applying the style over an SRT file."""
    fields = _ass_style_fields(style, font_name, video_height)
    order = (
        "Fontname", "Fontsize", "PrimaryColour", "OutlineColour", "BackColour",
        "Bold", "Italic", "BorderStyle", "Outline", "Shadow", "Alignment",
        "MarginL", "MarginR", "MarginV",
    )
    rendered = []
    for key in order:
        value = fields[key]
        if isinstance(value, float):
            value = f"{value:g}"
        rendered.append(f"{key}={value}")
    return ",".join(rendered)


def is_native_ass(path: str | Path) -> bool:
    return Path(path).suffix.lower() in NATIVE_ASS_EXTENSIONS


def build_subtitles_filter(
    subtitle_path: str | Path,
    force_style: Optional[str] = None,
    fonts_dir: Optional[str | Path] = None,
) -> FilterResult:
    """``subtitles`` filter burning ``subtitle_path`` into the video.

    Audio is stream-copied.
    """
    expression = f"subtitles='{escape_filter_path(subtitle_path)}'"
    if fonts_dir:
        expression += f":fontsdir='{escape_filter_path(fonts_dir)}'"
    if force_style:
        expression += f":force_style='{force_style}'"
    return make_result(vf=[expression], opts=["-c:a", "copy"])
