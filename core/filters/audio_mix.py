"""Filter graphs for mixing a secondary audio track into a video."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..errors import ConfigurationError, ProbeError
from ..executor.command_builder import FilterGraph
from .contract import FilterResult, format_number, make_result
from .tempo import atempo_chain

MATCH_LENGTH_MODES = ("shortest", "longest", "first", "audio", "audio-speed")


@dataclass(frozen=True)
class MixPlan:
    """How the secondary track is combined with the primary one.

    ``partial`` confines the secondary track to a window starting at
    ``start_time`` lasting ``duration`` seconds (the secondary's own
    length when unset); ``match_length`` is ignored in that case.
    """

    video_volume: float = 1.0
    audio_volume: float = 1.0
    match_length: str = "first"
    partial: bool = False
    start_time: float = 0.0
    duration: Optional[float] = None
    loop: bool = False
    fade_in: Optional[float] = None
    fade_out: Optional[float] = None

    def __post_init__(self):
        if self.match_length not in MATCH_LENGTH_MODES:
            raise ConfigurationError(
                f"Unknown match length '{self.match_length}'. Use one of {MATCH_LENGTH_MODES}"
            )
        if self.video_volume < 0 or self.audio_volume < 0:
            raise ConfigurationError("Volumes must not be negative")
        if self.start_time < 0:
            raise ConfigurationError("start_time must not be negative")
        if self.duration is not None and self.duration <= 0:
            raise ConfigurationError("duration must be greater than 0")

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "MixPlan":
        """Build a plan from flat options (fades enabled by ``enable_fade_*``)."""
        fade_in = options.get("fade_in_duration", 1.0) if options.get("enable_fade_in") else None
        fade_out = options.get("fade_out_duration", 1.0) if options.get("enable_fade_out") else None
        duration = options.get("duration") or None
        return cls(
            video_volume=float(options.get("video_volume", 1.0)),
            audio_volume=float(options.get("audio_volume", 1.0)),
            match_length=options.get("match_length", "first"),
            partial=bool(options.get("partial", False)),
            start_time=float(options.get("start_time", 0.0)),
            duration=float(duration) if duration else None,
            loop=bool(options.get("loop", False)),
            fade_in=float(fade_in) if fade_in else None,
            fade_out=float(fade_out) if fade_out else None,
        )


def fade_filters(plan: MixPlan, duration: float) -> list[str]:
    """``afade`` in/out for a track of ``duration`` seconds."""
    filters = []
    if plan.fade_in:
        filters.append(f"afade=t=in:st=0:d={format_number(plan.fade_in)}")
    if plan.fade_out:
        start = max(0.0, duration - plan.fade_out)
        filters.append(
            f"afade=t=out:st={format_number(start)}:d={format_number(plan.fade_out)}"
        )
    return filters


def _partial_mix(plan: MixPlan, secondary_duration: float) -> FilterResult:
    window = plan.duration or secondary_duration
    chain: list[str] = []
    if plan.loop and secondary_duration < window:
        chain.append("aloop=loop=-1:size=2e9")
    if (plan.loop and secondary_duration < window) or secondary_duration >= window:
        chain.append(f"atrim=duration={format_number(window)}")
    chain.append("asetpts=PTS-STARTPTS")
    chain.extend(fade_filters(plan, window))
    delay = int(round(plan.start_time * 1000))
    chain.append(f"volume={format_number(plan.audio_volume)}")
    chain.append(f"adelay={delay}|{delay}")

    graph = FilterGraph()
    graph.add_chain(["1:a"], chain, ["overlay_audio"])
    graph.add_chain(["0:a"], [f"volume={format_number(plan.video_volume)}"], ["main_audio"])
    graph.add_chain(
        ["main_audio", "overlay_audio"],
        ["amix=inputs=2:duration=first:dropout_transition=0"],
        ["mixed_audio"],
    )
    graph.expose("mixed_audio")
    return make_result(graph=graph, opts=["-map", "0:v", *graph.map_args(), "-c:v", "copy"])


def _secondary_chain(plan: MixPlan, duration: float) -> list[str]:
    return [*fade_filters(plan, duration), f"volume={format_number(plan.audio_volume)}"]


def _match_audio(plan: MixPlan, primary_duration: float, secondary_duration: float) -> FilterResult:
    graph = FilterGraph()
    target = format_number(secondary_duration)
    volume = f"volume={format_number(plan.video_volume)}"

    if plan.match_length == "audio-speed":
        ratio = primary_duration / secondary_duration
        graph.add_chain(["0:v"], [f"setpts=PTS/{format_number(ratio)}"], ["v_adjusted"])
        graph.add_chain(
            ["0:a"],
            [*atempo_chain(ratio), volume, "apad", f"atrim=duration={target}", "asetpts=PTS-STARTPTS"],
            ["a0"],
        )
    elif primary_duration < secondary_duration:
        loops = math.ceil(secondary_duration / primary_duration)
        graph.add_chain(
            ["0:v"],
            [f"loop=loop={loops}:size=32767:start=0", f"trim=duration={target}", "setpts=PTS-STARTPTS"],
            ["v_adjusted"],
        )
        graph.add_chain(
            ["0:a"],
            [f"aloop=loop={loops}:size=2e9", f"atrim=duration={target}", "asetpts=PTS-STARTPTS", volume],
            ["a0"],
        )
    else:
        graph.add_chain(["0:v"], [f"trim=duration={target}", "setpts=PTS-STARTPTS"], ["v_adjusted"])
        graph.add_chain(
            ["0:a"],
            [f"atrim=duration={target}", "asetpts=PTS-STARTPTS", volume],
            ["a0"],
        )

    graph.add_chain(["1:a"], _secondary_chain(plan, secondary_duration), ["a1"])
    graph.add_chain(["a0", "a1"], ["amix=inputs=2:duration=first:dropout_transition=0"], ["a"])
    graph.expose("v_adjusted", "a")
    # Video is retimed, so it cannot be stream-copied
    return make_result(
        graph=graph,
        opts=[*graph.map_args(), "-c:v", "libx264", "-pix_fmt", "yuv420p", "-c:a", "aac"],
    )


def _match_mix(plan: MixPlan, primary_duration: float, secondary_duration: float) -> FilterResult:
    if plan.match_length == "shortest":
        effective = min(primary_duration, secondary_duration)
    elif plan.match_length == "longest":
        effective = max(primary_duration, secondary_duration)
    else:
        effective = primary_duration

    graph = FilterGraph()
    graph.add_chain(["1:a"], _secondary_chain(plan, effective), ["a1"])
    graph.add_chain(["0:a"], [f"volume={format_number(plan.video_volume)}"], ["a0"])
    graph.add_chain(["a0", "a1"], [f"amix=inputs=2:duration={plan.match_length}"], ["a"])
    graph.expose("a")
    return make_result(graph=graph, opts=["-map", "0:v", *graph.map_args(), "-c:v", "copy"])


def build_mix_graph(
    plan: MixPlan,
    primary_duration: float,
    secondary_duration: float,
) -> FilterResult:
    """Build the ``-filter_complex`` graph mixing input 1's audio into input 0.

    Both inputs must carry an audio stream; callers add a silent track
    to a primary that lacks one before calling this.

    Args:
        plan: Mixing options.
        primary_duration: Duration of input 0 in seconds.
        secondary_duration: Duration of input 1 in seconds.

    Raises:
        ProbeError: If a duration needed by the chosen mode is not positive.
    """
    if secondary_duration <= 0:
        raise ProbeError("Could not determine the duration of the secondary audio")
    if plan.partial:
        return _partial_mix(plan, secondary_duration)
    if plan.match_length in ("audio", "audio-speed"):
        if primary_duration <= 0:
            raise ProbeError("Could not determine the duration of the primary video")
        return _match_audio(plan, primary_duration, secondary_duration)
    return _match_mix(plan, primary_duration, secondary_duration)
