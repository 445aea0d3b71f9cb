"""Error taxonomy for MediaFX.

Every failure raised by an operation derives from :class:`MediaFXError`
so host glue can catch a single type and still tell configuration
mistakes apart from probe and invocation failures.
"""

from typing import Optional


class MediaFXError(RuntimeError):
    """Base class for all MediaFX failures."""


class ConfigurationError(MediaFXError, ValueError):
    """A parameter is invalid (unknown font key, speed <= 0, bad time window...)."""


class SourceError(MediaFXError):
    """An input could not be resolved (download failed, file missing)."""


class BinaryNotFoundError(MediaFXError):
    """ffmpeg or ffprobe could not be located by any discovery strategy."""


class ProbeError(MediaFXError):
    """ffprobe failed or returned a result the operation cannot use."""


class FilterGraphError(MediaFXError, ValueError):
    """A filter graph violates pad-label discipline."""


class FFmpegError(MediaFXError):
    """An FFmpeg invocation failed.

    The diagnostic stream is kept verbatim on ``stderr`` and appended to
    the message so it reaches the user unchanged.
    """

    def __init__(
        self,
        message: str,
        stderr: str = "",
        return_code: Optional[int] = None,
        command: Optional[str] = None,
    ):
        self.summary = message
        self.stderr = stderr
        self.return_code = return_code
        self.command = command
        if stderr:
            message = f"{message}. FFmpeg error: {stderr.strip()}"
        super().__init__(message)
