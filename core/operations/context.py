"""Shared collaborators for operations and the render step they end with."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import MediaFXSettings, get_settings
from ..executor.binaries import BinaryLocator
from ..executor.command_builder import CommandBuilder
from ..executor.process_manager import ProcessManager
from ..filters.contract import FilterResult
from ..fonts import FontRegistry, SystemFontCache
from ..sources import TempStore, remove_quietly
from ..video.analyzer import MediaAnalyzer

logger = logging.getLogger("mediafx")


@dataclass
class OperationContext:
    """Everything an operation needs besides its own parameters."""
    settings: MediaFXSettings
    temp_store: TempStore
    process_manager: ProcessManager
    analyzer: MediaAnalyzer
    fonts: FontRegistry

    @classmethod
    def from_settings(cls, settings: Optional[MediaFXSettings] = None) -> "OperationContext":
        settings = settings or get_settings()
        process_manager = ProcessManager(
            locator=BinaryLocator.from_settings(settings),
            timeout=settings.ffmpeg_timeout,
        )
        return cls(
            settings=settings,
            temp_store=TempStore(settings.temp_dir),
            process_manager=process_manager,
            analyzer=MediaAnalyzer(process_manager, timeout=settings.probe_timeout),
            fonts=FontRegistry(
                settings.fonts_dir,
                settings.resolved_user_fonts_dir,
                SystemFontCache(ttl=settings.system_font_cache_ttl),
                default_key=settings.default_font_key,
            ),
        )

    def output_path(self, extension: str) -> Path:
        return self.temp_store.path(extension)

    async def render(self, builder: CommandBuilder, output: str | Path, description: str) -> str:
        """Run the built command writing ``output``.

        A partially written output is removed when FFmpeg fails or the
        task is cancelled.

        Raises:
            FFmpegError: With FFmpeg's stderr attached.
        """
        builder.output(output)
        try:
            await self.process_manager.run(builder.build(), description=description)
        except BaseException:
            remove_quietly(output)
            raise
        logger.debug("Finished %s: %s", description, output)
        return str(output)


_default_context: Optional[OperationContext] = None


def default_context() -> OperationContext:
    """Process-wide context built from :func:`get_settings`."""
    global _default_context
    if _default_context is None:
        _default_context = OperationContext.from_settings()
    return _default_context


def apply_filters(builder: CommandBuilder, result: FilterResult, input_index: int = 0) -> CommandBuilder:
    """Copy a filter builder's result onto a command.

    Input options go before ``-i`` of ``input_index``. A filter graph
    takes precedence over simple ``-vf``/``-af`` chains.
    """
    if result.input_options:
        builder.add_input_options(input_index, result.input_options)
    if result.filter_graph is not None:
        builder.complex_filter(result.filter_graph)
    else:
        if result.video_filters:
            builder.vf(*result.video_filters)
        if result.audio_filters:
            builder.af(*result.audio_filters)
    builder.output_options(*result.output_options)
    return builder
