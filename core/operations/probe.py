"""Media metadata lookup."""

from typing import Any

from .context import OperationContext


async def get_metadata(ctx: OperationContext, path: str) -> dict[str, Any]:
    """Normalized, JSON-serializable probe result for ``path``.

    Raises:
        ProbeError: If ffprobe cannot read the file.
    """
    metadata = await ctx.analyzer.probe(path)
    return metadata.to_dict()
