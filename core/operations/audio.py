"""Audio operations: extraction and mixing a second track into a video."""

from __future__ import annotations

import logging
from pathlib import Path

from ..errors import ConfigurationError
from ..executor.command_builder import CommandBuilder
from ..filters.audio_mix import MixPlan, build_mix_graph
from ..filters.contract import format_number
from ..filters.transitions import SILENCE_SOURCE
from ..sources import remove_quietly
from ..video.formats import AudioCodec, audio_output_format, container_extension
from .context import OperationContext, apply_filters

logger = logging.getLogger("mediafx")

MIN_SILENCE_DURATION = 0.01


async def extract_audio(
    ctx: OperationContext,
    path: str,
    audio_format: str = "mp3",
    codec: str = "copy",
    bitrate: str = "192k",
) -> str:
    """Write the audio track of ``path`` to an audio-only file.

    ``codec="copy"`` keeps the source encoding; the container must be
    able to hold it.
    """
    encoder = audio_output_format(audio_format, codec, bitrate)
    if not await ctx.analyzer.has_audio(path):
        raise ConfigurationError("Input has no audio stream to extract")

    builder = CommandBuilder().input(path).no_video()
    builder.output_options(*encoder.to_ffmpeg_args())
    return await ctx.render(builder, ctx.output_path(container_extension(audio_format)), "extracting audio")


async def add_silent_track(ctx: OperationContext, video_path: str, duration: float) -> Path:
    """Copy of ``video_path`` with a silent stereo track of ``duration`` seconds.

    The caller owns the returned temp file.
    """
    duration = max(duration, MIN_SILENCE_DURATION)
    builder = (
        CommandBuilder()
        .input(video_path)
        .input(SILENCE_SOURCE, ["-f", "lavfi", "-t", format_number(duration)])
        .output_options("-map", "0:v", "-map", "1:a", "-c:v", "copy", "-shortest")
        .audio_codec(AudioCodec.AAC.value)
    )
    output = ctx.output_path(".mp4")
    await ctx.render(builder, output, "adding silent audio track")
    return output


async def mix_audio(
    ctx: OperationContext,
    video_path: str,
    audio_path: str,
    plan: MixPlan,
) -> str:
    """Mix the audio of ``audio_path`` into the video at ``video_path``.

    A video without sound first gets a silent track of its own length;
    that intermediate file is removed once the mix has run, whether or
    not it succeeded.

    Raises:
        ConfigurationError: If ``audio_path`` has no audio stream.
        ProbeError: If a duration the plan depends on cannot be read.
    """
    secondary = await ctx.analyzer.probe(audio_path)
    if not secondary.has_audio:
        raise ConfigurationError("The secondary audio source does not contain any audio stream")
    primary = await ctx.analyzer.probe(video_path)

    working_video = video_path
    composite = None
    if not primary.has_audio:
        composite = await add_silent_track(ctx, video_path, primary.duration)
        working_video = str(composite)

    try:
        if composite is not None:
            # A still image only gets a duration once it is a clip
            primary = await ctx.analyzer.probe(working_video)
        result = build_mix_graph(plan, primary.duration, secondary.duration)
        builder = CommandBuilder().input(working_video).input(audio_path)
        apply_filters(builder, result)
        return await ctx.render(builder, ctx.output_path(".mp4"), "mixing audio")
    finally:
        remove_quietly(composite)
