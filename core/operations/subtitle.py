"""Burning subtitles and text overlays into video."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..errors import ProbeError
from ..executor.command_builder import CommandBuilder
from ..filters.styles import StyleSpec
from ..filters.subtitles import (
    build_ass_document,
    build_force_style,
    build_subtitles_filter,
    is_native_ass,
    parse_srt,
)
from ..filters.text import build_video_text_filter
from ..sanitize import validate_subtitle_path
from .context import OperationContext, apply_filters

logger = logging.getLogger("mediafx")


def _output_extension(video_path: str) -> str:
    return Path(video_path).suffix.lower() or ".mp4"


async def _video_size(ctx: OperationContext, video_path: str) -> tuple[Optional[int], Optional[int]]:
    """Best-effort video size; only subtitle margins tolerate a failed probe."""
    try:
        width, height = await ctx.analyzer.dimensions(video_path)
    except ProbeError as e:
        logger.warning("Could not read video size, assuming 1080 lines for subtitle margins: %s", e)
        return None, None
    return width, height


async def add_subtitle(
    ctx: OperationContext,
    video_path: str,
    subtitle_path: str,
    style: StyleSpec,
) -> str:
    """Burn a subtitle file into a video.

    ``.ass``/``.ssa`` tracks are rendered as authored. SRT files are
    either converted to a styled ASS script (``style.method == "ass"``)
    or rendered over the original with ``force_style``.
    """
    subtitle_path = validate_subtitle_path(subtitle_path)
    font = ctx.fonts.resolve(style.font_key, style.font_path)
    fonts_dir = Path(font.path).parent
    output = ctx.output_path(_output_extension(video_path))

    if is_native_ass(subtitle_path):
        builder = apply_filters(
            CommandBuilder().input(video_path),
            build_subtitles_filter(subtitle_path, fonts_dir=fonts_dir),
        )
        return await ctx.render(builder, output, "adding subtitles to video")

    width, height = await _video_size(ctx, video_path)
    if style.method == "force_style":
        force_style = build_force_style(style, font.name, height)
        builder = apply_filters(
            CommandBuilder().input(video_path),
            build_subtitles_filter(subtitle_path, force_style=force_style, fonts_dir=fonts_dir),
        )
        return await ctx.render(builder, output, "adding subtitles to video")

    content = Path(subtitle_path).read_text(encoding="utf-8", errors="replace")
    cues = parse_srt(content)
    if not cues:
        logger.warning("No valid cues found in %s", subtitle_path)
    document = build_ass_document(cues, style, font.name, width, height)

    async with ctx.temp_store.artifact(".ass") as ass_path:
        ass_path.write_text(document, encoding="utf-8")
        builder = apply_filters(
            CommandBuilder().input(video_path),
            build_subtitles_filter(ass_path, fonts_dir=fonts_dir),
        )
        return await ctx.render(builder, output, "adding subtitles to video")


async def add_text(
    ctx: OperationContext,
    video_path: str,
    text: str,
    style: StyleSpec,
    start_time: float = 0.0,
    end_time: float = 5.0,
) -> str:
    """Draw ``text`` on the video between ``start_time`` and ``end_time``."""
    font = ctx.fonts.resolve(style.font_key, style.font_path)
    result = build_video_text_filter(text, style, font.path, start_time, end_time)
    builder = apply_filters(CommandBuilder().input(video_path), result)
    return await ctx.render(builder, ctx.output_path(_output_extension(video_path)), "adding text to video")
