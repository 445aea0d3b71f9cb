"""Runtime settings for MediaFX.

Values come from ``MEDIAFX_``-prefixed environment variables (or a
``.env`` file next to the working directory) and fall back to defaults
rooted in the custom-node directory.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_ROOT = Path(__file__).resolve().parent.parent


class MediaFXSettings(BaseSettings):
    """Settings shared by every operation."""

    model_config = SettingsConfigDict(
        env_prefix="MEDIAFX_",
        env_file=".env",
        extra="ignore",
    )

    temp_dir: Path = PACKAGE_ROOT / "temp"
    fonts_dir: Path = PACKAGE_ROOT / "fonts"
    user_fonts_dir: Optional[Path] = None

    ffmpeg_path: Optional[str] = None
    ffprobe_path: Optional[str] = None

    # Seconds; None keeps FFmpeg running until it exits on its own.
    ffmpeg_timeout: Optional[float] = Field(default=None, gt=0)
    probe_timeout: float = Field(default=30.0, gt=0)
    download_timeout: float = Field(default=120.0, gt=0)

    cleanup_probability: float = Field(default=0.1, ge=0, le=1)
    temp_max_age_hours: float = Field(default=24.0, gt=0)
    system_font_cache_ttl: float = Field(default=3600.0, ge=0)

    default_font_key: str = "noto-sans-kr"

    @property
    def resolved_user_fonts_dir(self) -> Path:
        return self.user_fonts_dir or self.fonts_dir / "user"


@lru_cache(maxsize=1)
def get_settings() -> MediaFXSettings:
    """Return the process-wide settings instance."""
    return MediaFXSettings()
