"""Subtitle and text overlay nodes."""

from ..core.filters.styles import StyleSpec
from ..core.operations import subtitle as ops
from ._base import (
    CATEGORY,
    CONTINUE_ON_FAIL,
    node_options,
    publish,
    resolve,
    run_node,
    source_input,
    style_inputs,
)


class AddSubtitleNode:
    """Burn an SRT/ASS subtitle file into a video."""

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "video": source_input("Video file path or URL."),
                "subtitle_file": source_input("Subtitle file (.srt, .ass, .ssa) path or URL."),
            },
            "optional": {
                "size": ("INT", {"default": 48, "min": 8, "max": 500}),
                "method": (["ass", "force_style"], {
                    "default": "ass",
                    "tooltip": (
                        "ass: convert SRT to a styled ASS script. "
                        "force_style: style the SRT directly. ASS files are used as authored."
                    ),
                }),
                **style_inputs(),
                "continue_on_fail": CONTINUE_ON_FAIL,
            },
        }

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("video_path", "error")
    FUNCTION = "add_subtitle"
    CATEGORY = CATEGORY

    async def add_subtitle(self, video: str, subtitle_file: str, continue_on_fail: bool = False, **options):
        async def work(ctx):
            style = StyleSpec.from_options(node_options(**options))
            async with await resolve(ctx, [video, subtitle_file]) as sources:
                video_path, subtitle_path = sources.paths
                return (publish(await ops.add_subtitle(ctx, video_path, subtitle_path, style)),)
        return await run_node(work, continue_on_fail, lambda: ("",), "Add Subtitle")


class AddTextNode:
    """Draw text on a video for a time window."""

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "video": source_input("Video file path or URL."),
                "text": ("STRING", {"default": "", "multiline": True}),
                "start_time": ("FLOAT", {"default": 0.0, "min": 0.0, "step": 0.1}),
                "end_time": ("FLOAT", {"default": 5.0, "min": 0.0, "step": 0.1}),
            },
            "optional": {
                "size": ("INT", {"default": 48, "min": 8, "max": 500}),
                **style_inputs(),
                "continue_on_fail": CONTINUE_ON_FAIL,
            },
        }

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("video_path", "error")
    FUNCTION = "add_text"
    CATEGORY = CATEGORY

    async def add_text(
        self,
        video: str,
        text: str,
        start_time: float = 0.0,
        end_time: float = 5.0,
        continue_on_fail: bool = False,
        **options,
    ):
        async def work(ctx):
            style = StyleSpec.from_options(node_options(**options))
            async with await resolve(ctx, [video]) as sources:
                output = await ops.add_text(ctx, sources.paths[0], text, style, start_time, end_time)
                return (publish(output),)
        return await run_node(work, continue_on_fail, lambda: ("",), "Add Text")
