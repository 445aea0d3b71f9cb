"""Video operations: merge, trim, speed, transitions, fades, overlay, audio split."""

from __future__ import annotations

import logging
from typing import Sequence

from ..errors import ConfigurationError, FFmpegError, ProbeError
from ..executor.command_builder import CommandBuilder
from ..filters.compositing import OverlayOptions, build_overlay_graph
from ..filters.contract import format_number
from ..filters.tempo import build_speed_filters
from ..filters.transitions import (
    SILENCE_SOURCE,
    build_concat_graph,
    build_fade_filters,
    build_xfade_graph,
)
from ..sources import remove_quietly
from ..video.analyzer import MediaMetadata
from ..video.formats import (
    VideoCodec,
    audio_output_format,
    container_extension,
    video_output_format,
)
from .context import OperationContext, apply_filters

logger = logging.getLogger("mediafx")

DEFAULT_FPS = 30.0
# Silent tracks for zero-length inputs (still images) still need a length
MIN_SILENCE_DURATION = 0.01


def _canvas(metadata: MediaMetadata, path: str) -> tuple[int, int, float]:
    if not metadata.resolution:
        raise ProbeError(f"No video stream found in {path}")
    width, height = metadata.resolution
    fps = (metadata.video.frame_rate if metadata.video else None) or DEFAULT_FPS
    return width, height, fps


async def merge(ctx: OperationContext, paths: Sequence[str], output_format: str = "mp4") -> str:
    """Concatenate videos end to end.

    All inputs are scaled and padded to the first input's size and
    frame rate. Inputs without sound get a silent track of their own
    length, so the result is as long as all inputs together.
    """
    if not paths:
        raise ConfigurationError("At least one video is required to merge")
    encoders = video_output_format(output_format)
    metadata = [await ctx.analyzer.probe(path) for path in paths]
    width, height, fps = _canvas(metadata[0], paths[0])

    builder = CommandBuilder()
    for path in paths:
        builder.input(path)

    audio_inputs = []
    for index, meta in enumerate(metadata):
        if meta.has_audio:
            audio_inputs.append(f"{index}:a")
            continue
        audio_inputs.append(f"{builder.input_count}:a")
        duration = max(meta.duration, MIN_SILENCE_DURATION)
        builder.input(SILENCE_SOURCE, ["-f", "lavfi", "-t", format_number(duration)])

    apply_filters(builder, build_concat_graph(audio_inputs, width, height, fps))
    builder.output_options(*encoders.to_ffmpeg_args())
    return await ctx.render(builder, ctx.output_path(container_extension(output_format)), "merging videos")


async def trim(
    ctx: OperationContext,
    path: str,
    start_time: float,
    end_time: float,
    output_format: str = "mp4",
) -> str:
    if start_time < 0:
        raise ConfigurationError("Start time must not be negative")
    if end_time <= start_time:
        raise ConfigurationError("End time must be greater than start time")
    encoders = video_output_format(output_format)

    builder = CommandBuilder().input(path, ["-ss", format_number(start_time)])
    builder.trim(duration=end_time - start_time)
    builder.output_options(*encoders.to_ffmpeg_args())
    return await ctx.render(builder, ctx.output_path(container_extension(output_format)), "trimming video")


async def change_speed(
    ctx: OperationContext,
    path: str,
    speed: float,
    adjust_audio: bool = True,
    maintain_pitch: bool = False,
    output_format: str = "mp4",
) -> str:
    """Play a video ``speed`` times faster (or slower below 1).

    With ``maintain_pitch`` the ``rubberband`` filter is tried first.
    FFmpeg builds without it fail, in which case the render is retried
    once with an ``atempo`` chain.
    """
    result = build_speed_filters(speed, adjust_audio, maintain_pitch)
    encoders = video_output_format(output_format)
    if adjust_audio and not await ctx.analyzer.has_audio(path):
        adjust_audio = False
        result = build_speed_filters(speed, adjust_audio=False)

    def command(filters) -> CommandBuilder:
        builder = apply_filters(CommandBuilder().input(path), filters)
        return builder.output_options(*encoders.to_ffmpeg_args())

    output = ctx.output_path(container_extension(output_format))
    if adjust_audio and maintain_pitch:
        try:
            return await ctx.render(command(result), output, "adjusting video speed")
        except FFmpegError as e:
            logger.warning("rubberband filter failed, retrying with atempo: %s", e.stderr.strip() or e)
            result = build_speed_filters(speed, adjust_audio=True, maintain_pitch=False)
    return await ctx.render(command(result), output, "adjusting video speed")


async def multi_transition(
    ctx: OperationContext,
    paths: Sequence[str],
    effect: str = "fade",
    duration: float = 1.0,
    output_format: str = "mp4",
) -> str:
    """Join clips with an ``xfade`` transition between each pair.

    Sound is cross-faded only when every clip has an audio track;
    otherwise the result is silent.
    """
    if len(paths) < 2:
        raise ConfigurationError("A transition needs at least two videos")
    encoders = video_output_format(output_format)
    metadata = [await ctx.analyzer.probe(path) for path in paths]
    width, height, fps = _canvas(metadata[0], paths[0])
    durations = [meta.duration for meta in metadata]
    if any(d <= 0 for d in durations):
        raise ProbeError("Could not determine the duration of every clip")
    with_audio = all(meta.has_audio for meta in metadata)

    result = build_xfade_graph(durations, effect, duration, with_audio, width, height, fps)
    builder = CommandBuilder()
    for path in paths:
        builder.input(path)
    apply_filters(builder, result)
    builder.output_options(*encoders.video.to_ffmpeg_args())
    if with_audio:
        builder.output_options(*encoders.audio.to_ffmpeg_args())
    return await ctx.render(builder, ctx.output_path(container_extension(output_format)), "applying transition")


async def single_fade(
    ctx: OperationContext,
    path: str,
    effect: str = "in",
    start_time: float = 0.0,
    duration: float = 1.0,
    output_format: str = "mp4",
) -> str:
    encoders = video_output_format(output_format)
    with_audio = await ctx.analyzer.has_audio(path)
    result = build_fade_filters(effect, start_time, duration, with_audio)

    builder = apply_filters(CommandBuilder().input(path), result)
    builder.output_options(*encoders.to_ffmpeg_args())
    return await ctx.render(builder, ctx.output_path(container_extension(output_format)), "applying fade")


async def overlay_video(
    ctx: OperationContext,
    main_path: str,
    overlay_path: str,
    options: OverlayOptions,
    output_format: str = "mp4",
) -> str:
    """Picture-in-picture: draw one video on top of another."""
    encoders = video_output_format(output_format)
    main = await ctx.analyzer.probe(main_path)
    overlay = await ctx.analyzer.probe(overlay_path)
    width, height, _ = _canvas(main, main_path)
    if not overlay.has_video:
        raise ProbeError(f"No video stream found in {overlay_path}")

    result = build_overlay_graph(options, width, height, main.has_audio, overlay.has_audio)
    builder = CommandBuilder().input(main_path).input(overlay_path)
    apply_filters(builder, result)
    builder.output_options(*encoders.video.to_ffmpeg_args())
    if "-an" not in result.output_options:
        builder.output_options(*encoders.audio.to_ffmpeg_args())
    return await ctx.render(builder, ctx.output_path(container_extension(output_format)), "overlaying video")


async def separate_audio(
    ctx: OperationContext,
    path: str,
    video_format: str = "mp4",
    audio_format: str = "mp3",
    audio_codec: str = "copy",
    audio_bitrate: str = "192k",
) -> tuple[str, str]:
    """Split a video into a silent video and an audio-only file.

    Returns:
        ``(video_path, audio_path)``. If the audio step fails the video
        output is removed too.
    """
    video_output_format(video_format)
    audio_encoder = audio_output_format(audio_format, audio_codec, audio_bitrate)
    if not await ctx.analyzer.has_audio(path):
        raise ConfigurationError("Input has no audio stream to separate")

    video_builder = CommandBuilder().input(path).video_codec(VideoCodec.COPY.value).no_audio()
    video_path = await ctx.render(
        video_builder, ctx.output_path(container_extension(video_format)), "separating video"
    )

    audio_builder = CommandBuilder().input(path).no_video()
    audio_builder.output_options(*audio_encoder.to_ffmpeg_args())
    try:
        audio_path = await ctx.render(
            audio_builder, ctx.output_path(container_extension(audio_format)), "separating audio"
        )
    except BaseException:
        remove_quietly(video_path)
        raise
    return video_path, audio_path
