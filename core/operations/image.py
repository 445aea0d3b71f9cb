"""Still-image operations: text on images, images to video, image stamps."""

from __future__ import annotations

import logging
from pathlib import Path

from ..executor.command_builder import CommandBuilder
from ..filters.compositing import StampOptions, build_image_to_video, build_stamp_graph
from ..filters.styles import StyleSpec
from ..filters.text import build_image_text_filters, calculate_auto_font_size, strip_emoji
from ..sanitize import is_image_path
from ..video.formats import VIDEO_CONTAINERS, VideoCodec, container_extension, video_output_format
from .context import OperationContext, apply_filters

logger = logging.getLogger("mediafx")


async def _image_output_extension(ctx: OperationContext, image_path: str) -> str:
    if is_image_path(image_path):
        return Path(image_path).suffix.lower()
    return await ctx.analyzer.image_extension(image_path)


async def add_text_to_image(
    ctx: OperationContext,
    image_path: str,
    text: str,
    style: StyleSpec,
) -> str:
    """Render ``text`` onto a still image, one drawtext per line.

    Emoji are removed first since most fonts have no glyphs for them.
    With an automatic size tier the font size is derived from the
    image's dimensions; a failed probe is fatal in that case.
    """
    font = ctx.fonts.resolve(style.font_key, style.font_path)
    cleaned = strip_emoji(text)

    if style.is_auto_size:
        width, height = await ctx.analyzer.dimensions(image_path)
        font_size = calculate_auto_font_size(width, height, cleaned, str(style.size), style.padding_x)
        logger.debug("Auto font size %s for %dx%d image: %d", style.size, width, height, font_size)
    else:
        font_size = style.fixed_size

    extension = await _image_output_extension(ctx, image_path)
    result = build_image_text_filters(cleaned, style, font.path, font_size)
    builder = apply_filters(CommandBuilder().input(image_path), result)
    return await ctx.render(builder, ctx.output_path(extension), "adding text to image")


async def image_to_video(
    ctx: OperationContext,
    image_path: str,
    duration: float = 5.0,
    width: int = 1920,
    height: int = 1080,
    output_format: str = "mp4",
) -> str:
    """Show a still image for ``duration`` seconds as a silent video."""
    encoders = video_output_format(output_format)
    result = build_image_to_video(duration, width, height)
    builder = apply_filters(CommandBuilder().input(image_path), result)
    builder.output_options(*encoders.video.to_ffmpeg_args())
    if encoders.video.codec == VideoCodec.H264:
        builder.output_options("-tune", "stillimage")
    builder.no_audio()
    return await ctx.render(builder, ctx.output_path(container_extension(output_format)), "creating video from image")


async def stamp_image(
    ctx: OperationContext,
    video_path: str,
    image_path: str,
    options: StampOptions,
) -> str:
    """Overlay a (possibly rotated, translucent) image onto a video."""
    extension = Path(video_path).suffix.lower()
    if extension.lstrip(".") not in VIDEO_CONTAINERS:
        extension = ".mp4"
    encoders = video_output_format(extension)

    main_has_audio = await ctx.analyzer.has_audio(video_path)
    result = build_stamp_graph(options, main_has_audio)
    builder = apply_filters(CommandBuilder().input(video_path).input(image_path), result)
    builder.output_options(*encoders.video.to_ffmpeg_args())
    return await ctx.render(builder, ctx.output_path(extension), "stamping image onto video")
