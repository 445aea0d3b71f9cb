"""Video nodes: merge, trim, speed, transition, fade, overlay, separate audio."""

from ..core.filters.compositing import OverlayOptions
from ..core.filters.transitions import XFADE_TRANSITIONS
from ..core.operations import video as ops
from ._base import (
    CATEGORY,
    CONTINUE_ON_FAIL,
    AUDIO_CODECS,
    AUDIO_FORMATS,
    VIDEO_FORMATS,
    node_options,
    publish,
    resolve,
    run_node,
    source_input,
    split_sources,
)


def _single_video_inputs(extra: dict) -> dict:
    return {
        "required": {
            "video": source_input("Video file path or URL."),
            **extra,
        },
        "optional": {
            "continue_on_fail": CONTINUE_ON_FAIL,
        },
    }


class MergeVideosNode:
    """Join several videos end to end."""

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "videos": ("STRING", {
                    "default": "",
                    "multiline": True,
                    "tooltip": "One video path or URL per line, in playback order.",
                }),
                "output_format": (VIDEO_FORMATS, {"default": "mp4"}),
            },
            "optional": {
                "continue_on_fail": CONTINUE_ON_FAIL,
            },
        }

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("video_path", "error")
    FUNCTION = "merge"
    CATEGORY = CATEGORY
    DESCRIPTION = (
        "Concatenate videos. All clips are scaled to the first clip's size "
        "and frame rate; clips without sound get silence."
    )

    async def merge(self, videos: str, output_format: str = "mp4", continue_on_fail: bool = False):
        async def work(ctx):
            async with await resolve(ctx, split_sources(videos)) as sources:
                return (publish(await ops.merge(ctx, sources.paths, output_format)),)
        return await run_node(work, continue_on_fail, lambda: ("",), "Merge")


class TrimVideoNode:
    """Cut a section out of a video."""

    @classmethod
    def INPUT_TYPES(cls):
        return _single_video_inputs({
            "start_time": ("FLOAT", {"default": 0.0, "min": 0.0, "step": 0.1}),
            "end_time": ("FLOAT", {"default": 10.0, "min": 0.0, "step": 0.1}),
            "output_format": (VIDEO_FORMATS, {"default": "mp4"}),
        })

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("video_path", "error")
    FUNCTION = "trim"
    CATEGORY = CATEGORY
    DESCRIPTION = "Keep only the part of a video between start and end time (seconds)."

    async def trim(
        self,
        video: str,
        start_time: float = 0.0,
        end_time: float = 10.0,
        output_format: str = "mp4",
        continue_on_fail: bool = False,
    ):
        async def work(ctx):
            async with await resolve(ctx, [video]) as sources:
                output = await ops.trim(ctx, sources.paths[0], start_time, end_time, output_format)
                return (publish(output),)
        return await run_node(work, continue_on_fail, lambda: ("",), "Trim")


class VideoSpeedNode:
    """Speed a video up or slow it down."""

    @classmethod
    def INPUT_TYPES(cls):
        return _single_video_inputs({
            "speed": ("FLOAT", {
                "default": 1.0, "min": 0.01, "max": 100.0, "step": 0.05,
                "tooltip": "Playback multiplier: 2.0 is twice as fast, 0.5 half speed.",
            }),
            "adjust_audio": ("BOOLEAN", {
                "default": True,
                "tooltip": "Retime the audio too. When off the audio track is dropped.",
            }),
            "maintain_pitch": ("BOOLEAN", {
                "default": False,
                "tooltip": "Keep the original pitch using rubberband (falls back to atempo).",
            }),
            "output_format": (VIDEO_FORMATS, {"default": "mp4"}),
        })

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("video_path", "error")
    FUNCTION = "change_speed"
    CATEGORY = CATEGORY

    async def change_speed(
        self,
        video: str,
        speed: float = 1.0,
        adjust_audio: bool = True,
        maintain_pitch: bool = False,
        output_format: str = "mp4",
        continue_on_fail: bool = False,
    ):
        async def work(ctx):
            async with await resolve(ctx, [video]) as sources:
                output = await ops.change_speed(
                    ctx, sources.paths[0], speed, adjust_audio, maintain_pitch, output_format
                )
                return (publish(output),)
        return await run_node(work, continue_on_fail, lambda: ("",), "Speed")


class VideoTransitionNode:
    """Join clips with a transition effect between each pair."""

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "videos": ("STRING", {
                    "default": "",
                    "multiline": True,
                    "tooltip": "Two or more video paths or URLs, one per line.",
                }),
                "effect": (list(XFADE_TRANSITIONS), {"default": "fade"}),
                "duration": ("FLOAT", {"default": 1.0, "min": 0.1, "max": 10.0, "step": 0.1}),
                "output_format": (VIDEO_FORMATS, {"default": "mp4"}),
            },
            "optional": {
                "continue_on_fail": CONTINUE_ON_FAIL,
            },
        }

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("video_path", "error")
    FUNCTION = "transition"
    CATEGORY = CATEGORY
    DESCRIPTION = (
        "Cross-fade between clips with an xfade effect. Some effects need "
        "FFmpeg 4.3 or newer."
    )

    async def transition(
        self,
        videos: str,
        effect: str = "fade",
        duration: float = 1.0,
        output_format: str = "mp4",
        continue_on_fail: bool = False,
    ):
        async def work(ctx):
            async with await resolve(ctx, split_sources(videos)) as sources:
                output = await ops.multi_transition(ctx, sources.paths, effect, duration, output_format)
                return (publish(output),)
        return await run_node(work, continue_on_fail, lambda: ("",), "Transition")


class VideoFadeNode:
    """Fade a video in from or out to black."""

    @classmethod
    def INPUT_TYPES(cls):
        return _single_video_inputs({
            "effect": (["in", "out"], {"default": "in"}),
            "start_time": ("FLOAT", {"default": 0.0, "min": 0.0, "step": 0.1}),
            "duration": ("FLOAT", {"default": 1.0, "min": 0.1, "max": 60.0, "step": 0.1}),
            "output_format": (VIDEO_FORMATS, {"default": "mp4"}),
        })

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("video_path", "error")
    FUNCTION = "fade"
    CATEGORY = CATEGORY

    async def fade(
        self,
        video: str,
        effect: str = "in",
        start_time: float = 0.0,
        duration: float = 1.0,
        output_format: str = "mp4",
        continue_on_fail: bool = False,
    ):
        async def work(ctx):
            async with await resolve(ctx, [video]) as sources:
                output = await ops.single_fade(
                    ctx, sources.paths[0], effect, start_time, duration, output_format
                )
                return (publish(output),)
        return await run_node(work, continue_on_fail, lambda: ("",), "Fade")


class OverlayVideoNode:
    """Picture-in-picture overlay of one video on another."""

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "main_video": source_input("Background video path or URL."),
                "overlay_video": source_input("Video drawn on top."),
                "position_mode": (["alignment", "coordinates"], {"default": "alignment"}),
                "horizontal_align": (["left", "center", "right"], {"default": "center"}),
                "vertical_align": (["top", "middle", "bottom"], {"default": "middle"}),
                "size_mode": (["percentage", "pixels", "original"], {"default": "percentage"}),
                "audio_handling": (["main", "overlay", "mix", "none"], {"default": "main"}),
                "output_format": (VIDEO_FORMATS, {"default": "mp4"}),
            },
            "optional": {
                "padding_x": ("INT", {"default": 0, "min": 0, "max": 4096}),
                "padding_y": ("INT", {"default": 0, "min": 0, "max": 4096}),
                "x": ("STRING", {"default": "0", "tooltip": "Overlay X expression (W, H, w, h allowed)."}),
                "y": ("STRING", {"default": "0", "tooltip": "Overlay Y expression (W, H, w, h allowed)."}),
                "width_percent": ("FLOAT", {"default": 50.0, "min": 1.0, "max": 100.0}),
                "height_mode": (["auto", "percentage"], {"default": "auto"}),
                "height_percent": ("FLOAT", {"default": 50.0, "min": 1.0, "max": 100.0}),
                "width_pixels": ("INT", {"default": 640, "min": -1, "max": 8192}),
                "height_pixels": ("INT", {"default": -1, "min": -1, "max": 8192}),
                "opacity": ("FLOAT", {"default": 1.0, "min": 0.0, "max": 1.0, "step": 0.05}),
                "time_control": ("BOOLEAN", {"default": False}),
                "start_time": ("FLOAT", {"default": 0.0, "min": 0.0, "step": 0.1}),
                "end_time": ("FLOAT", {
                    "default": 0.0, "min": 0.0, "step": 0.1,
                    "tooltip": "0 keeps the overlay until the end.",
                }),
                "main_volume": ("FLOAT", {"default": 1.0, "min": 0.0, "max": 2.0, "step": 0.05}),
                "overlay_volume": ("FLOAT", {"default": 0.5, "min": 0.0, "max": 2.0, "step": 0.05}),
                "continue_on_fail": CONTINUE_ON_FAIL,
            },
        }

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("video_path", "error")
    FUNCTION = "overlay"
    CATEGORY = CATEGORY

    async def overlay(self, main_video: str, overlay_video: str, output_format: str = "mp4",
                      continue_on_fail: bool = False, **options):
        async def work(ctx):
            overlay_options = OverlayOptions.from_options(node_options(**options))
            async with await resolve(ctx, [main_video, overlay_video]) as sources:
                main_path, overlay_path = sources.paths
                output = await ops.overlay_video(ctx, main_path, overlay_path, overlay_options, output_format)
                return (publish(output),)
        return await run_node(work, continue_on_fail, lambda: ("",), "Overlay Video")


class SeparateAudioNode:
    """Split a video into a silent video and its audio track."""

    @classmethod
    def INPUT_TYPES(cls):
        return _single_video_inputs({
            "video_format": (VIDEO_FORMATS, {"default": "mp4"}),
            "audio_format": (AUDIO_FORMATS, {"default": "mp3"}),
            "audio_codec": (AUDIO_CODECS, {"default": "copy"}),
            "audio_bitrate": ("STRING", {"default": "192k"}),
        })

    RETURN_TYPES = ("STRING", "STRING", "STRING")
    RETURN_NAMES = ("video_path", "audio_path", "error")
    FUNCTION = "separate"
    CATEGORY = CATEGORY

    async def separate(
        self,
        video: str,
        video_format: str = "mp4",
        audio_format: str = "mp3",
        audio_codec: str = "copy",
        audio_bitrate: str = "192k",
        continue_on_fail: bool = False,
    ):
        async def work(ctx):
            async with await resolve(ctx, [video]) as sources:
                video_path, audio_path = await ops.separate_audio(
                    ctx, sources.paths[0], video_format, audio_format, audio_codec, audio_bitrate
                )
                return (publish(video_path), publish(audio_path))
        return await run_node(work, continue_on_fail, lambda: ("", ""), "Separate Audio")
