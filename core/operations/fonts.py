"""Font management: listing, uploading and deleting user fonts."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from ..errors import SourceError
from .context import OperationContext


def list_fonts(ctx: OperationContext, font_type: str = "all", include_system: bool = False) -> dict[str, Any]:
    """Fonts keyed by font key, as plain dicts."""
    fonts = ctx.fonts.list(font_type, include_system=include_system)
    return {key: record.model_dump(exclude_none=True) for key, record in fonts.items()}


async def upload_font(
    ctx: OperationContext,
    key: str,
    source_path: str,
    name: str = "",
    description: str = "",
) -> dict[str, Any]:
    """Copy a font file into the user font directory under ``key``."""
    source = Path(source_path)
    if not source.is_file():
        raise SourceError(f"Font file not found: {source_path}")
    data = await asyncio.to_thread(source.read_bytes)
    record = await asyncio.to_thread(
        ctx.fonts.save_user_font, key, data, source.name, name, description
    )
    return record.model_dump(exclude_none=True)


async def delete_font(ctx: OperationContext, key: str) -> dict[str, Any]:
    await asyncio.to_thread(ctx.fonts.delete_user_font, key)
    return {"deleted": True, "key": key}
