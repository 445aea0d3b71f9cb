"""Media metadata node."""

import json

from ..core.operations.probe import get_metadata
from ._base import CATEGORY, CONTINUE_ON_FAIL, resolve, run_node, source_input


class GetMetadataNode:
    """Read container and stream information with ffprobe."""

    @classmethod
    def INPUT_TYPES(cls):
        return {
            "required": {
                "media": source_input("Media file path or URL."),
            },
            "optional": {
                "continue_on_fail": CONTINUE_ON_FAIL,
            },
        }

    RETURN_TYPES = ("STRING", "FLOAT", "INT", "INT", "STRING")
    RETURN_NAMES = ("metadata_json", "duration", "width", "height", "error")
    FUNCTION = "get_metadata"
    CATEGORY = CATEGORY

    async def get_metadata(self, media: str, continue_on_fail: bool = False):
        async def work(ctx):
            async with await resolve(ctx, [media]) as sources:
                metadata = await get_metadata(ctx, sources.paths[0])
            video = metadata.get("video") or {}
            return (
                json.dumps(metadata, indent=2),
                float(metadata["format"].get("duration") or 0.0),
                int(video.get("width") or 0),
                int(video.get("height") or 0),
            )
        return await run_node(work, continue_on_fail, lambda: ("{}", 0.0, 0, 0), "Get Metadata")
