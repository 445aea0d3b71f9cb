"""Media probing and output format tables."""

from .analyzer import MediaAnalyzer, MediaMetadata, StreamInfo
from .formats import VideoFormat, AudioFormat, OutputFormat

__all__ = [
    "MediaAnalyzer",
    "MediaMetadata",
    "StreamInfo",
    "VideoFormat",
    "AudioFormat",
    "OutputFormat",
]
