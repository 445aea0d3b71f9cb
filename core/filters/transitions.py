"""Cross-fade transitions, single fades and concatenation."""

from __future__ import annotations

from typing import Sequence

from ..errors import ConfigurationError
from ..executor.command_builder import FilterGraph
from .contract import FilterResult, format_number, make_result

XFADE_TRANSITIONS = (
    "fade", "fadeblack", "fadewhite", "fadegrays", "fadefast", "fadeslow",
    "wipeleft", "wiperight", "wipeup", "wipedown",
    "wipetl", "wipetr", "wipebl", "wipebr",
    "slideleft", "slideright", "slideup", "slidedown",
    "smoothleft", "smoothright", "smoothup", "smoothdown",
    "circlecrop", "rectcrop", "circleopen", "circleclose",
    "vertopen", "vertclose", "horzopen", "horzclose",
    "dissolve", "pixelize", "distance", "radial",
    "diagtl", "diagtr", "diagbl", "diagbr",
    "hlslice", "hrslice", "vuslice", "vdslice",
    "hblur", "squeezeh", "squeezev", "zoomin",
)

SILENCE_SOURCE = "anullsrc=channel_layout=stereo:sample_rate=44100"


def normalize_video_chain(width: int, height: int, fps: float) -> list[str]:
    """Scale/pad to a common canvas and frame rate so inputs can be joined."""
    return [
        f"scale={width}:{height}:force_original_aspect_ratio=decrease",
        f"pad={width}:{height}:(ow-iw)/2:(oh-ih)/2",
        "setsar=1",
        f"fps={format_number(fps)}",
        "format=yuv420p",
    ]


def normalize_audio_chain() -> list[str]:
    return ["aresample=44100", "aformat=channel_layouts=stereo"]


def xfade_offsets(durations: Sequence[float], transition_duration: float) -> list[float]:
    """Start time of each transition on the joined timeline.

    The k-th transition (1-based) starts at the sum of the first k clip
    durations minus k overlaps.
    """
    offsets = []
    elapsed = 0.0
    for k, duration in enumerate(durations[:-1], start=1):
        elapsed += duration
        offsets.append(elapsed - k * transition_duration)
    return offsets


def build_xfade_graph(
    durations: Sequence[float],
    effect: str,
    transition_duration: float,
    with_audio: bool,
    width: int,
    height: int,
    fps: float,
) -> FilterResult:
    """Chain ``xfade`` across all inputs, and ``acrossfade`` when ``with_audio``.

    Raises:
        ConfigurationError: For fewer than two inputs, an unknown effect,
            or a transition not shorter than every clip.
    """
    count = len(durations)
    if count < 2:
        raise ConfigurationError("A transition needs at least two videos")
    if effect not in XFADE_TRANSITIONS:
        raise ConfigurationError(f"Unknown transition effect: {effect}")
    if transition_duration <= 0:
        raise ConfigurationError("Transition duration must be greater than 0")
    shortest = min(durations)
    if transition_duration >= shortest:
        raise ConfigurationError(
            f"Transition duration {transition_duration}s must be shorter than "
            f"the shortest clip ({shortest:.2f}s)"
        )

    graph = FilterGraph()
    for index in range(count):
        graph.add_chain([f"{index}:v"], normalize_video_chain(width, height, fps), [f"v{index}"])
        if with_audio:
            graph.add_chain([f"{index}:a"], normalize_audio_chain(), [f"a{index}"])

    d = format_number(transition_duration)
    previous_video, previous_audio = "v0", "a0"
    for k, offset in enumerate(xfade_offsets(durations, transition_duration), start=1):
        last = k == count - 1
        video_out = "vout" if last else f"vx{k}"
        graph.add_chain(
            [previous_video, f"v{k}"],
            [f"xfade=transition={effect}:duration={d}:offset={format_number(offset)}"],
            [video_out],
        )
        previous_video = video_out
        if with_audio:
            audio_out = "aout" if last else f"ax{k}"
            graph.add_chain([previous_audio, f"a{k}"], [f"acrossfade=d={d}"], [audio_out])
            previous_audio = audio_out

    graph.expose("vout")
    opts = []
    if with_audio:
        graph.expose("aout")
    else:
        opts.append("-an")
    return make_result(graph=graph, opts=[*graph.map_args(), *opts])


def build_fade_filters(
    effect: str,
    start_time: float,
    duration: float,
    with_audio: bool,
) -> FilterResult:
    """Fade the picture (and sound, when present) in or out."""
    if effect not in ("in", "out"):
        raise ConfigurationError(f"Fade effect must be 'in' or 'out', got '{effect}'")
    if duration <= 0:
        raise ConfigurationError("Fade duration must be greater than 0")
    if start_time < 0:
        raise ConfigurationError("Fade start time must not be negative")
    args = f"t={effect}:st={format_number(start_time)}:d={format_number(duration)}"
    return make_result(
        vf=[f"fade={args}"],
        af=[f"afade={args}"] if with_audio else [],
    )


def build_concat_graph(
    audio_inputs: Sequence[str],
    width: int,
    height: int,
    fps: float,
) -> FilterResult:
    """Join inputs end to end with ``concat``.

    Args:
        audio_inputs: Audio stream per segment, in order; segments without
            their own audio point at a silent lavfi input (e.g. ``"3:a"``).
            Video is always taken from input ``i`` for segment ``i``.
    """
    count = len(audio_inputs)
    if count < 1:
        raise ConfigurationError("Nothing to merge")

    graph = FilterGraph()
    concat_inputs = []
    for index, audio in enumerate(audio_inputs):
        graph.add_chain([f"{index}:v"], normalize_video_chain(width, height, fps), [f"v{index}"])
        graph.add_chain([audio], normalize_audio_chain(), [f"a{index}"])
        concat_inputs.extend([f"v{index}", f"a{index}"])

    graph.add_chain(concat_inputs, [f"concat=n={count}:v=1:a=1"], ["vout", "aout"])
    graph.expose("vout", "aout")
    return make_result(graph=graph, opts=graph.map_args())
