"""Font management nodes."""

import json

from ..core.operations import fonts as ops
from ._base import CATEGORY, CONTINUE_ON_FAIL, resolve, run_node, source_input


class FontListNode:
    """List the fonts text and subtitle nodes can use."""

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "font_type": (["all", "korean", "global", "fallback", "user", "system"], {"default": "all"}),
                "include_system": ("BOOLEAN", {"default": False}),
            },
        }

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("fonts_json", "error")
    FUNCTION = "list_fonts"
    CATEGORY = CATEGORY

    async def list_fonts(self, font_type: str = "all", include_system: bool = False):
        async def work(ctx):
            fonts = ops.list_fonts(ctx, font_type, include_system or font_type == "system")
            return (json.dumps(fonts, indent=2, ensure_ascii=False),)
        return await run_node(work, False, lambda: ("{}",), "Font List")


class FontUploadNode:
    """Add a font file to the user font registry."""

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "font_key": ("STRING", {
                    "default": "",
                    "tooltip": "3-50 letters, digits, '-' or '_'. Must not be in use.",
                }),
                "font_file": source_input("Font file (.ttf, .otf, .ttc, .otc, .woff, .woff2) path or URL."),
            },
            "optional": {
                "name": ("STRING", {"default": ""}),
                "description": ("STRING", {"default": ""}),
                "continue_on_fail": CONTINUE_ON_FAIL,
            },
        }

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("font_json", "error")
    FUNCTION = "upload"
    CATEGORY = CATEGORY

    async def upload(
        self,
        font_key: str,
        font_file: str,
        name: str = "",
        description: str = "",
        continue_on_fail: bool = False,
    ):
        async def work(ctx):
            async with await resolve(ctx, [font_file]) as sources:
                record = await ops.upload_font(ctx, font_key.strip(), sources.paths[0], name, description)
            return (json.dumps(record, indent=2, ensure_ascii=False),)
        return await run_node(work, continue_on_fail, lambda: ("{}",), "Font Upload")


class FontDeleteNode:
    """Remove a user font."""

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "font_key": ("STRING", {"default": ""}),
            },
            "optional": {
                "continue_on_fail": CONTINUE_ON_FAIL,
            },
        }

    RETURN_TYPES = ("STRING", "STRING")
    RETURN_NAMES = ("result_json", "error")
    FUNCTION = "delete"
    CATEGORY = CATEGORY

    async def delete(self, font_key: str, continue_on_fail: bool = False):
        async def work(ctx):
            return (json.dumps(await ops.delete_font(ctx, font_key.strip())),)
        return await run_node(work, continue_on_fail, lambda: ("{}",), "Font Delete")
