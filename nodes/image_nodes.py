"""Still-image nodes. Images come from an IMAGE input or a path/URL string."""

from ..core.filters.compositing import StampOptions
from ..core.filters.styles import AUTO_SIZE_MULTIPLIERS, StyleSpec
from ..core.operations import image as ops
from ._base import (
    CATEGORY,
    CONTINUE_ON_FAIL,
    VIDEO_FORMATS,
    LocalImage,
    empty_image,
    image_output,
    node_options,
    publish,
    resolve,
    run_node,
    source_input,
    style_inputs,
)

SIZE_MODES = [*AUTO_SIZE_MULTIPLIERS, "fixed"]

# Captions on stills sit centered without an outline
IMAGE_TEXT_DEFAULTS = {"vertical_align": "middle", "outline_width": 0.0}


def _image_inputs() -> dict:
    return {
        "image": ("IMAGE", {"tooltip": "Image tensor; takes precedence over image_path."}),
        "image_path": source_input("Image file path or URL, used when no IMAGE is connected."),
    }


class AddTextToImageNode:
    """Write (multi-line) text onto an image."""

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "text": ("STRING", {"default": "", "multiline": True}),
                "size_mode": (SIZE_MODES, {
                    "default": "auto-medium",
                    "tooltip": "Auto sizes fit the longest line to the image width.",
                }),
            },
            "optional": {
                **_image_inputs(),
                "font_size": ("INT", {"default": 48, "min": 8, "max": 500}),
                "line_spacing": ("INT", {"default": 10, "min": 0, "max": 500}),
                "enable_line_colors": ("BOOLEAN", {"default": False}),
                "line1_color": ("STRING", {"default": "white"}),
                "line2_color": ("STRING", {"default": "yellow"}),
                **style_inputs(**IMAGE_TEXT_DEFAULTS),
                "continue_on_fail": CONTINUE_ON_FAIL,
            },
        }

    RETURN_TYPES = ("STRING", "IMAGE", "STRING")
    RETURN_NAMES = ("image_path", "image", "error")
    FUNCTION = "add_text"
    CATEGORY = CATEGORY
    DESCRIPTION = "Render text onto a still image. Emoji are removed since most fonts lack them."

    async def add_text(
        self,
        text: str,
        size_mode: str = "auto-medium",
        image=None,
        image_path: str = "",
        font_size: int = 48,
        enable_line_colors: bool = False,
        line1_color: str = "white",
        line2_color: str = "yellow",
        continue_on_fail: bool = False,
        **options,
    ):
        async def work(ctx):
            line_colors = (line1_color, line2_color) if enable_line_colors else None
            size = font_size if size_mode == "fixed" else size_mode
            style = StyleSpec.from_options(
                {**IMAGE_TEXT_DEFAULTS, **node_options(**options)}, size=size, line_colors=line_colors
            )
            async with LocalImage(ctx, image, image_path) as source:
                output = publish(await ops.add_text_to_image(ctx, source, text, style))
            return (output, image_output(output))
        return await run_node(work, continue_on_fail, lambda: ("", empty_image()), "Add Text To Image")


class ImageToVideoNode:
    """Turn a still image into a video clip."""

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "duration": ("FLOAT", {"default": 5.0, "min": 0.1, "max": 3600.0, "step": 0.1}),
                "width": ("INT", {"default": 1920, "min": 16, "max": 7680, "step": 2}),
                "height": ("INT", {"default": 1080, "min": 16, "max": 4320, "step": 2}),
                "output_format": (VIDEO_FORMATS, {"default": "mp4"}),
            },
            "optional": {
                **_image_inputs(),
                "continue_on_fail": CONTINUE_ON_FAIL,
            },
        }

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("video_path", "error")
    FUNCTION = "image_to_video"
    CATEGORY = CATEGORY

    async def image_to_video(
        self,
        duration: float = 5.0,
        width: int = 1920,
        height: int = 1080,
        output_format: str = "mp4",
        image=None,
        image_path: str = "",
        continue_on_fail: bool = False,
    ):
        async def work(ctx):
            async with LocalImage(ctx, image, image_path) as source:
                output = await ops.image_to_video(ctx, source, duration, width, height, output_format)
                return (publish(output),)
        return await run_node(work, continue_on_fail, lambda: ("",), "Image To Video")


class StampImageNode:
    """Stamp an image (logo, watermark) onto a video."""

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "video": source_input("Video file path or URL."),
            },
            "optional": {
                **_image_inputs(),
                "width": ("INT", {"default": 150, "min": -1, "max": 8192, "tooltip": "-1 keeps aspect ratio."}),
                "height": ("INT", {"default": -1, "min": -1, "max": 8192, "tooltip": "-1 keeps aspect ratio."}),
                "x": ("STRING", {"default": "10", "tooltip": "X expression (W, H, w, h allowed)."}),
                "y": ("STRING", {"default": "10", "tooltip": "Y expression (W, H, w, h allowed)."}),
                "rotation": ("FLOAT", {"default": 0.0, "min": -360.0, "max": 360.0, "step": 1.0}),
                "opacity": ("FLOAT", {"default": 1.0, "min": 0.0, "max": 1.0, "step": 0.05}),
                "time_control": ("BOOLEAN", {"default": False}),
                "start_time": ("FLOAT", {"default": 0.0, "min": 0.0, "step": 0.1}),
                "end_time": ("FLOAT", {"default": 5.0, "min": 0.0, "step": 0.1}),
                "continue_on_fail": CONTINUE_ON_FAIL,
            },
        }

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("video_path", "error")
    FUNCTION = "stamp"
    CATEGORY = CATEGORY

    async def stamp(self, video: str, image=None, image_path: str = "", continue_on_fail: bool = False, **options):
        async def work(ctx):
            stamp_options = StampOptions.from_options(node_options(**options))
            async with await resolve(ctx, [video]) as sources:
                async with LocalImage(ctx, image, image_path) as source:
                    output = await ops.stamp_image(ctx, sources.paths[0], source, stamp_options)
                    return (publish(output),)
        return await run_node(work, continue_on_fail, lambda: ("",), "Stamp Image")
