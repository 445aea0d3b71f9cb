"""Container, codec and encoder-argument tables."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel

from ..errors import ConfigurationError


class VideoCodec(str, Enum):
    """Video encoders used for re-encoded output."""
    H264 = "libx264"
    MPEG4 = "mpeg4"
    VP9 = "libvpx-vp9"
    COPY = "copy"


class AudioCodec(str, Enum):
    """Audio encoders."""
    AAC = "aac"
    MP3 = "libmp3lame"
    OPUS = "libopus"
    VORBIS = "libvorbis"
    FLAC = "flac"
    PCM = "pcm_s16le"
    COPY = "copy"


class PixelFormat(str, Enum):
    YUV420P = "yuv420p"


class VideoFormat(BaseModel):
    """Video encoder settings."""
    codec: VideoCodec = VideoCodec.H264
    crf: Optional[int] = None
    preset: Optional[str] = None
    pixel_format: Optional[PixelFormat] = PixelFormat.YUV420P

    def to_ffmpeg_args(self) -> list[str]:
        """Convert to FFMPEG command arguments."""
        args = ["-c:v", self.codec.value]
        if self.codec == VideoCodec.COPY:
            return args

        if self.crf is not None:
            args.extend(["-crf", str(self.crf)])
        if self.preset:
            args.extend(["-preset", self.preset])
        if self.pixel_format:
            args.extend(["-pix_fmt", self.pixel_format.value])

        return args


class AudioFormat(BaseModel):
    """Audio encoder settings."""
    codec: AudioCodec = AudioCodec.AAC
    bitrate: Optional[str] = None

    def to_ffmpeg_args(self) -> list[str]:
        """Convert to FFMPEG command arguments."""
        args = ["-c:a", self.codec.value]
        if self.bitrate and self.codec not in (AudioCodec.COPY, AudioCodec.FLAC, AudioCodec.PCM):
            args.extend(["-b:a", self.bitrate])
        return args


class OutputFormat(BaseModel):
    """Encoder pair for a container."""
    video: VideoFormat
    audio: AudioFormat

    def to_ffmpeg_args(self) -> list[str]:
        return self.video.to_ffmpeg_args() + self.audio.to_ffmpeg_args()


_H264 = VideoFormat(codec=VideoCodec.H264, crf=23, preset="medium")

VIDEO_CONTAINERS: dict[str, OutputFormat] = {
    "mp4": OutputFormat(video=_H264, audio=AudioFormat(codec=AudioCodec.AAC)),
    "mov": OutputFormat(video=_H264, audio=AudioFormat(codec=AudioCodec.AAC)),
    "mkv": OutputFormat(video=_H264, audio=AudioFormat(codec=AudioCodec.AAC)),
    "avi": OutputFormat(
        video=VideoFormat(codec=VideoCodec.MPEG4, pixel_format=PixelFormat.YUV420P),
        audio=AudioFormat(codec=AudioCodec.MP3),
    ),
    "webm": OutputFormat(
        video=VideoFormat(codec=VideoCodec.VP9, crf=32),
        audio=AudioFormat(codec=AudioCodec.OPUS),
    ),
}

AUDIO_CONTAINERS: dict[str, AudioCodec] = {
    "mp3": AudioCodec.MP3,
    "aac": AudioCodec.AAC,
    "m4a": AudioCodec.AAC,
    "wav": AudioCodec.PCM,
    "flac": AudioCodec.FLAC,
    "ogg": AudioCodec.VORBIS,
    "opus": AudioCodec.OPUS,
}


def _clean(fmt: str) -> str:
    return (fmt or "").strip().lower().lstrip(".")


def video_output_format(fmt: str) -> OutputFormat:
    """Encoders for a video container.

    Raises:
        ConfigurationError: For containers not in :data:`VIDEO_CONTAINERS`.
    """
    key = _clean(fmt)
    if key not in VIDEO_CONTAINERS:
        raise ConfigurationError(
            f"Unsupported video format '{fmt}'. Use one of {sorted(VIDEO_CONTAINERS)}"
        )
    return VIDEO_CONTAINERS[key]


def audio_output_format(fmt: str, codec: str = "copy", bitrate: Optional[str] = None) -> AudioFormat:
    """Encoder for an audio-only container.

    ``codec="copy"`` keeps the source stream; anything else must be a
    known :class:`AudioCodec` value.
    """
    key = _clean(fmt)
    if key not in AUDIO_CONTAINERS:
        raise ConfigurationError(
            f"Unsupported audio format '{fmt}'. Use one of {sorted(AUDIO_CONTAINERS)}"
        )
    try:
        audio_codec = AudioCodec(codec or "copy")
    except ValueError as e:
        raise ConfigurationError(f"Unsupported audio codec '{codec}'") from e
    return AudioFormat(codec=audio_codec, bitrate=bitrate)


def container_extension(fmt: str) -> str:
    """``"MP4"`` -> ``".mp4"``."""
    return f".{_clean(fmt)}"
