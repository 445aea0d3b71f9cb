"""Overlay graphs: picture-in-picture video, image stamps and still-image video."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from ..errors import ConfigurationError
from ..executor.command_builder import FilterGraph
from .contract import FilterResult, format_number, make_result
from .transitions import normalize_video_chain

AUDIO_HANDLING_MODES = ("main", "overlay", "mix", "none")


def _even(value: float) -> int:
    # yuv420p needs even dimensions
    return max(2, int(round(value / 2.0)) * 2)


def _auto(value: int) -> int:
    return -2 if value is None or value < 0 else int(value)


def enable_expression(start_time: float, end_time: float) -> str:
    """``enable`` window; an end time of 0 or less means until the end."""
    if end_time > start_time:
        return f"between(t,{format_number(start_time)},{format_number(end_time)})"
    return f"gte(t,{format_number(start_time)})"


def overlay_position(horizontal: str, vertical: str, padding_x: int, padding_y: int) -> tuple[str, str]:
    """``overlay`` x/y expressions (``W,H`` main size, ``w,h`` overlay size)."""
    if horizontal == "left":
        x = f"{padding_x}"
    elif horizontal == "right":
        x = f"W-w-{padding_x}"
    else:
        x = "(W-w)/2"

    if vertical == "top":
        y = f"{padding_y}"
    elif vertical == "bottom":
        y = f"H-h-{padding_y}"
    else:
        y = "(H-h)/2"
    return x, y


def _options_from(cls, options: Mapping[str, Any]):
    names = cls.__dataclass_fields__.keys()
    return cls(**{k: v for k, v in options.items() if k in names and v is not None})


@dataclass(frozen=True)
class OverlayOptions:
    """Placement, size, timing and audio handling of an overlaid video."""

    position_mode: str = "alignment"
    horizontal_align: str = "center"
    vertical_align: str = "middle"
    padding_x: int = 0
    padding_y: int = 0
    x: str = "0"
    y: str = "0"
    size_mode: str = "percentage"
    width_percent: float = 50
    height_mode: str = "auto"
    height_percent: float = 50
    width_pixels: int = 640
    height_pixels: int = -1
    opacity: float = 1.0
    time_control: bool = False
    start_time: float = 0
    end_time: float = 0
    audio_handling: str = "main"
    main_volume: float = 1.0
    overlay_volume: float = 0.5

    def __post_init__(self):
        if self.position_mode not in ("alignment", "coordinates"):
            raise ConfigurationError(f"Unknown overlay position mode: {self.position_mode}")
        if self.size_mode not in ("percentage", "pixels", "original"):
            raise ConfigurationError(f"Unknown overlay size mode: {self.size_mode}")
        if self.height_mode not in ("auto", "percentage"):
            raise ConfigurationError(f"Unknown overlay height mode: {self.height_mode}")
        if self.audio_handling not in AUDIO_HANDLING_MODES:
            raise ConfigurationError(f"Unknown audio handling: {self.audio_handling}")
        if not 0 <= self.opacity <= 1:
            raise ConfigurationError("Overlay opacity must be between 0 and 1")
        if self.size_mode == "percentage" and self.width_percent <= 0:
            raise ConfigurationError("Overlay width percentage must be greater than 0")

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "OverlayOptions":
        return _options_from(cls, options)


@dataclass(frozen=True)
class StampOptions:
    """Size, placement, rotation and timing of a stamped image."""

    width: int = 150
    height: int = -1
    x: str = "10"
    y: str = "10"
    rotation: float = 0
    opacity: float = 1.0
    time_control: bool = False
    start_time: float = 0
    end_time: float = 5

    def __post_init__(self):
        if not 0 <= self.opacity <= 1:
            raise ConfigurationError("Stamp opacity must be between 0 and 1")
        if self.width == 0 or self.height == 0:
            raise ConfigurationError("Stamp width and height must not be 0")

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "StampOptions":
        return _options_from(cls, options)


def _alpha_filters(opacity: float) -> list[str]:
    if opacity >= 1:
        return []
    return ["format=rgba", f"colorchannelmixer=aa={format_number(opacity)}"]


def _overlay_scale(options: OverlayOptions, main_width: int, main_height: int) -> list[str]:
    if options.size_mode == "original":
        return []
    if options.size_mode == "pixels":
        return [f"scale={_auto(options.width_pixels)}:{_auto(options.height_pixels)}"]
    width = _even(main_width * options.width_percent / 100)
    if options.height_mode == "percentage":
        height = _even(main_height * options.height_percent / 100)
    else:
        height = -2
    return [f"scale={width}:{height}"]


def build_overlay_graph(
    options: OverlayOptions,
    main_width: int,
    main_height: int,
    main_has_audio: bool,
    overlay_has_audio: bool,
) -> FilterResult:
    """Overlay input 1 onto input 0.

    Args:
        options: Overlay settings.
        main_width: Width of the main video, for percentage sizing.
        main_height: Height of the main video, for percentage sizing.
        main_has_audio: Whether input 0 has an audio stream.
        overlay_has_audio: Whether input 1 has an audio stream.
    """
    graph = FilterGraph()

    overlay_chain = _overlay_scale(options, main_width, main_height)
    overlay_chain += _alpha_filters(options.opacity)
    if options.time_control and options.start_time > 0:
        overlay_chain.append(f"setpts=PTS-STARTPTS+{format_number(options.start_time)}/TB")
    overlay_label = "1:v"
    if overlay_chain:
        graph.add_chain(["1:v"], overlay_chain, ["ovl"])
        overlay_label = "ovl"

    if options.position_mode == "coordinates":
        x, y = options.x, options.y
    else:
        x, y = overlay_position(
            options.horizontal_align, options.vertical_align, options.padding_x, options.padding_y
        )
    overlay = f"overlay=x={x}:y={y}:eof_action=pass"
    if options.time_control:
        overlay += f":enable='{enable_expression(options.start_time, options.end_time)}'"
    graph.add_chain(["0:v", overlay_label], [overlay], ["vout"])
    graph.expose("vout")

    handling = options.audio_handling
    if handling == "mix" and not (main_has_audio and overlay_has_audio):
        handling = "main" if main_has_audio else "overlay"

    delay = []
    if options.time_control and options.start_time > 0:
        ms = int(round(options.start_time * 1000))
        delay = [f"adelay={ms}|{ms}"]

    opts: list[str] = []
    if handling == "mix":
        graph.add_chain(["0:a"], [f"volume={format_number(options.main_volume)}"], ["ma"])
        graph.add_chain(["1:a"], [*delay, f"volume={format_number(options.overlay_volume)}"], ["oa"])
        graph.add_chain(["ma", "oa"], ["amix=inputs=2:duration=first:dropout_transition=0"], ["aout"])
        graph.expose("aout")
    elif handling == "main" and main_has_audio:
        opts += ["-map", "0:a"]
    elif handling == "overlay" and overlay_has_audio:
        if delay:
            graph.add_chain(["1:a"], delay, ["aout"])
            graph.expose("aout")
        else:
            opts += ["-map", "1:a"]
    else:
        opts.append("-an")

    return make_result(graph=graph, opts=[*graph.map_args(), *opts])


def build_stamp_graph(options: StampOptions, main_has_audio: bool) -> FilterResult:
    """Overlay a still image (input 1) onto a video (input 0)."""
    chain = [f"scale={options.width}:{options.height}", "format=rgba"]
    if options.opacity < 1:
        chain.append(f"colorchannelmixer=aa={format_number(options.opacity)}")
    if options.rotation:
        radians = format_number(math.radians(options.rotation))
        chain.append(f"rotate={radians}:c=none:ow=rotw({radians}):oh=roth({radians})")

    graph = FilterGraph()
    graph.add_chain(["1:v"], chain, ["stamp"])
    overlay = f"overlay=x={options.x}:y={options.y}"
    if options.time_control:
        overlay += f":enable='{enable_expression(options.start_time, options.end_time)}'"
    graph.add_chain(["0:v", "stamp"], [overlay], ["vout"])
    graph.expose("vout")

    opts = graph.map_args()
    if main_has_audio:
        opts += ["-map", "0:a", "-c:a", "copy"]
    return make_result(graph=graph, opts=opts)


def build_image_to_video(
    duration: float,
    width: int,
    height: int,
    fps: float = 30,
) -> FilterResult:
    """Loop a still image for ``duration`` seconds on a ``width`` x ``height`` canvas."""
    if duration <= 0:
        raise ConfigurationError("Duration must be greater than 0")
    if width <= 0 or height <= 0:
        raise ConfigurationError("Width and height must be greater than 0")
    return make_result(
        vf=normalize_video_chain(width, height, fps),
        io=["-loop", "1"],
        opts=["-t", format_number(duration)],
    )
