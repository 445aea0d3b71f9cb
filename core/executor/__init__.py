"""FFMPEG command execution modules."""

from .binaries import BinaryLocator
from .command_builder import CommandBuilder, Filter, FilterChain, FilterGraph, FFMPEGCommand
from .process_manager import ProcessManager, ProcessResult

__all__ = [
    "BinaryLocator",
    "CommandBuilder",
    "Filter",
    "FilterChain",
    "FilterGraph",
    "FFMPEGCommand",
    "ProcessManager",
    "ProcessResult",
]
