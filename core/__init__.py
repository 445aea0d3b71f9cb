"""
MediaFX Core Module

Contains the host-independent pieces: FFmpeg command building and
execution, media probing, filter-graph construction and the operations
built on top of them.
"""

from .executor.command_builder import CommandBuilder, FilterGraph
from .executor.process_manager import ProcessManager
from .video.analyzer import MediaAnalyzer, MediaMetadata
from .video.formats import VideoFormat, AudioFormat, OutputFormat

__all__ = [
    "CommandBuilder",
    "FilterGraph",
    "ProcessManager",
    "MediaAnalyzer",
    "MediaMetadata",
    "VideoFormat",
    "AudioFormat",
    "OutputFormat",
]
