"""Media probing with ffprobe and normalization of its output."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

from ..errors import MediaFXError, ProbeError
from ..executor.process_manager import ProcessManager

logger = logging.getLogger("mediafx")

# ffprobe container names for single-image inputs
IMAGE_FORMAT_EXTENSIONS = {
    "jpeg_pipe": ".jpg",
    "png_pipe": ".png",
    "gif_pipe": ".gif",
    "webp_pipe": ".webp",
    "bmp_pipe": ".bmp",
    "tiff_pipe": ".tiff",
    "image2": ".jpg",
}
DEFAULT_IMAGE_EXTENSION = ".jpg"


class FormatInfo(BaseModel):
    """Container-level information."""
    filename: Optional[str] = None
    format_name: Optional[str] = None
    format_long_name: Optional[str] = None
    duration: Optional[float] = None
    size: Optional[int] = None
    bit_rate: Optional[int] = None
    probe_score: Optional[int] = None


class StreamInfo(BaseModel):
    """A single stream, with only the fields that apply to its type set."""
    index: int
    type: str
    codec: Optional[str] = None
    codec_long_name: Optional[str] = None
    profile: Optional[str] = None
    bit_rate: Optional[int] = None
    duration: Optional[float] = None
    language: Optional[str] = None
    title: Optional[str] = None
    # Video
    width: Optional[int] = None
    height: Optional[int] = None
    aspect_ratio: Optional[str] = None
    pixel_format: Optional[str] = None
    frame_rate: Optional[float] = None
    # Audio
    sample_rate: Optional[int] = None
    channels: Optional[int] = None
    channel_layout: Optional[str] = None
    bits_per_sample: Optional[int] = None


class MediaMetadata(BaseModel):
    """Normalized probe result."""
    format: FormatInfo
    streams: list[StreamInfo] = []
    video: Optional[StreamInfo] = None
    audio: Optional[StreamInfo] = None
    has_video: bool = False
    has_audio: bool = False
    tags: dict[str, str] = {}

    @property
    def duration(self) -> float:
        """Container duration, falling back to the first video or audio stream."""
        for candidate in (self.format.duration,
                          self.video.duration if self.video else None,
                          self.audio.duration if self.audio else None):
            if candidate:
                return candidate
        return 0.0

    @property
    def resolution(self) -> Optional[tuple[int, int]]:
        if self.video and self.video.width and self.video.height:
            return (self.video.width, self.video.height)
        return None

    def to_dict(self) -> dict[str, Any]:
        """camelCase mapping suitable for JSON output."""
        data = _camelize(self.model_dump(exclude_none=True, exclude={"tags"}))
        data["tags"] = dict(self.tags)
        return data


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {_camel(k): _camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camelize(v) for v in value]
    return value


def _int(value: Any) -> Optional[int]:
    if value in (None, "", "N/A"):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _float(value: Any) -> Optional[float]:
    if value in (None, "", "N/A"):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_frame_rate(value: Optional[str]) -> Optional[float]:
    """``"30000/1001"`` -> ``29.97``; a zero denominator gives None."""
    if not value:
        return None
    try:
        num, _, den = value.partition("/")
        numerator = float(num)
        denominator = float(den) if den else 1.0
    except ValueError:
        return None
    if denominator == 0:
        return None
    return round(numerator / denominator, 2)


def _normalize_stream(stream: dict) -> StreamInfo:
    codec_type = stream.get("codec_type", "unknown")
    tags = stream.get("tags") or {}
    info = StreamInfo(
        index=stream.get("index", 0),
        type=codec_type,
        codec=stream.get("codec_name"),
        codec_long_name=stream.get("codec_long_name"),
        profile=stream.get("profile"),
        bit_rate=_int(stream.get("bit_rate")),
        duration=_float(stream.get("duration")),
        language=tags.get("language"),
        title=tags.get("title"),
    )
    if codec_type == "video":
        info.width = _int(stream.get("width"))
        info.height = _int(stream.get("height"))
        info.aspect_ratio = stream.get("display_aspect_ratio")
        info.pixel_format = stream.get("pix_fmt")
        info.frame_rate = parse_frame_rate(stream.get("r_frame_rate"))
    elif codec_type == "audio":
        info.sample_rate = _int(stream.get("sample_rate"))
        info.channels = _int(stream.get("channels"))
        info.channel_layout = stream.get("channel_layout")
        info.bits_per_sample = _int(stream.get("bits_per_sample")) or None
    return info


def normalize(data: dict) -> MediaMetadata:
    """Turn raw ``ffprobe -show_format -show_streams`` JSON into :class:`MediaMetadata`."""
    fmt = data.get("format") or {}
    streams = [_normalize_stream(s) for s in data.get("streams") or []]
    video = next((s for s in streams if s.type == "video"), None)
    audio = next((s for s in streams if s.type == "audio"), None)
    return MediaMetadata(
        format=FormatInfo(
            filename=fmt.get("filename"),
            format_name=fmt.get("format_name"),
            format_long_name=fmt.get("format_long_name"),
            duration=_float(fmt.get("duration")),
            size=_int(fmt.get("size")),
            bit_rate=_int(fmt.get("bit_rate")),
            probe_score=_int(fmt.get("probe_score")),
        ),
        streams=streams,
        video=video,
        audio=audio,
        has_video=video is not None,
        has_audio=audio is not None,
        tags={k: str(v) for k, v in (fmt.get("tags") or {}).items()},
    )


class MediaAnalyzer:
    """Probes media files through ffprobe."""

    def __init__(self, process_manager: ProcessManager, timeout: Optional[float] = 30.0):
        self.process_manager = process_manager
        self.timeout = timeout

    async def probe_raw(self, path: str | Path) -> dict:
        """Raw ffprobe JSON for ``path``.

        Raises:
            ProbeError: If ffprobe fails or prints something other than JSON.
        """
        cmd = [
            "ffprobe",
            "-v", "error",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]
        try:
            result = await self.process_manager.execute_async(cmd, timeout=self.timeout)
        except MediaFXError as e:
            raise ProbeError(f"Failed to probe media file: {e}") from e
        if not result.success:
            raise ProbeError(f"Failed to probe media file: {result.stderr.strip() or result.error_message}")
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ProbeError(f"Failed to probe media file: invalid ffprobe output ({e})") from e

    async def probe(self, path: str | Path) -> MediaMetadata:
        return normalize(await self.probe_raw(path))

    async def duration(self, path: str | Path) -> float:
        return (await self.probe(path)).duration

    async def has_audio(self, path: str | Path) -> bool:
        return (await self.probe(path)).has_audio

    async def dimensions(self, path: str | Path) -> tuple[int, int]:
        """Width and height of the first video stream (images included).

        Raises:
            ProbeError: If there is no video stream with known dimensions.
        """
        resolution = (await self.probe(path)).resolution
        if not resolution:
            raise ProbeError(f"Could not determine dimensions of {Path(path).name}")
        return resolution

    async def image_extension(self, path: str | Path) -> str:
        """Output extension for an image whose own extension is unknown."""
        try:
            metadata = await self.probe(path)
        except ProbeError as e:
            logger.warning("Could not detect image format, using %s: %s", DEFAULT_IMAGE_EXTENSION, e)
            return DEFAULT_IMAGE_EXTENSION
        return IMAGE_FORMAT_EXTENSIONS.get(metadata.format.format_name or "", DEFAULT_IMAGE_EXTENSION)
