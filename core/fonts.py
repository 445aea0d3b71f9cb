"""Font registry: bundled, user-uploaded and system fonts.

Bundled fonts are listed in ``fonts.yaml`` inside the fonts directory and
only offered when their file is present. User fonts live in a ``user/``
subdirectory with a ``user-fonts.json`` index. System fonts are found by
scanning the platform's font directories, cached for an hour.
"""

from __future__ import annotations

import json
import logging
import os
import platform
import re
import tempfile
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Sequence

import yaml
from pydantic import BaseModel

from .errors import ConfigurationError
from .sanitize import ALLOWED_FONT_EXTENSIONS, SYSTEM_FONT_EXTENSIONS

logger = logging.getLogger("mediafx")

MANIFEST_NAME = "fonts.yaml"
USER_INDEX_NAME = "user-fonts.json"
FONT_KEY_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{3,50}$")

# Serializes writes to the user font index across threads
_REGISTRY_LOCK = threading.RLock()


class FontRecord(BaseModel):
    """A font that text and subtitle operations can use."""
    key: str
    name: str
    filename: str
    path: str
    description: str = ""
    type: str = "bundled"
    created_at: Optional[str] = None


def system_font_directories(system: Optional[str] = None) -> list[Path]:
    home = Path.home()
    system = system or platform.system()
    if system == "Darwin":
        return [Path("/System/Library/Fonts"), Path("/Library/Fonts"), home / "Library/Fonts"]
    if system == "Windows":
        return [
            Path("C:/Windows/Fonts"),
            home / "AppData/Local/Microsoft/Windows/Fonts",
        ]
    return [
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
        home / ".fonts",
        home / ".local/share/fonts",
    ]


def system_font_key(filename: str) -> str:
    """``DejaVuSans-Bold.ttf`` -> ``system-dejavusans-bold``."""
    base = Path(filename).stem.lower()
    return "system-" + re.sub(r"[^a-z0-9]", "-", base)


def scan_font_directory(directory: Path, fonts: dict[str, FontRecord]) -> None:
    """Recursively add font files under ``directory``; first key wins."""
    if not directory.is_dir():
        return
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        logger.warning("Could not scan font directory %s: %s", directory, e)
        return
    for entry in entries:
        if entry.is_dir():
            scan_font_directory(entry, fonts)
        elif entry.suffix.lower() in SYSTEM_FONT_EXTENSIONS:
            key = system_font_key(entry.name)
            if key not in fonts:
                fonts[key] = FontRecord(
                    key=key,
                    name=entry.stem,
                    filename=entry.name,
                    path=str(entry),
                    description=f"System font from {directory}",
                    type="system",
                )


class SystemFontCache:
    """Time-limited cache of the system font scan."""

    def __init__(
        self,
        directories: Optional[Sequence[Path]] = None,
        ttl: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.directories = list(directories) if directories is not None else system_font_directories()
        self.ttl = ttl
        self.clock = clock
        self._fonts: Optional[dict[str, FontRecord]] = None
        self._loaded_at = 0.0
        self._lock = threading.Lock()

    def get(self) -> dict[str, FontRecord]:
        with self._lock:
            now = self.clock()
            if self._fonts is None or now - self._loaded_at >= self.ttl:
                fonts: dict[str, FontRecord] = {}
                for directory in self.directories:
                    scan_font_directory(Path(directory), fonts)
                self._fonts = fonts
                self._loaded_at = now
            return dict(self._fonts)

    def invalidate(self) -> None:
        with self._lock:
            self._fonts = None


def font_from_path(path: str | Path) -> Optional[FontRecord]:
    """Describe an arbitrary font file, or None if it isn't a usable font."""
    font_path = Path(path)
    if not font_path.is_file() or font_path.suffix.lower() not in SYSTEM_FONT_EXTENSIONS:
        return None
    return FontRecord(
        key=system_font_key(font_path.name),
        name=font_path.stem,
        filename=font_path.name,
        path=str(font_path),
        description="System font",
        type="system",
    )


class FontRegistry:
    """Lookup and management of the fonts available to text operations."""

    def __init__(
        self,
        fonts_dir: str | Path,
        user_dir: Optional[str | Path] = None,
        system_cache: Optional[SystemFontCache] = None,
        default_key: str = "noto-sans-kr",
    ):
        self.fonts_dir = Path(fonts_dir)
        self.default_key = default_key
        self.user_dir = Path(user_dir) if user_dir else self.fonts_dir / "user"
        self.system_cache = system_cache or SystemFontCache()

    @property
    def user_index(self) -> Path:
        return self.user_dir / USER_INDEX_NAME

    def _manifest(self) -> dict:
        manifest = self.fonts_dir / MANIFEST_NAME
        if not manifest.is_file():
            return {}
        with open(manifest, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Invalid font manifest {manifest}: top-level must be a mapping")
        return data

    def bundled_fonts(self) -> dict[str, FontRecord]:
        fonts = {}
        for key, entry in self._manifest().items():
            path = self.fonts_dir / entry["filename"]
            if path.is_file():
                fonts[key] = FontRecord(
                    key=key,
                    name=entry.get("name", key),
                    filename=entry["filename"],
                    path=str(path),
                    description=entry.get("description", ""),
                    type=entry.get("type", "bundled"),
                )
        return fonts

    def _read_user_index(self) -> dict[str, dict]:
        if not self.user_index.is_file():
            return {}
        try:
            with open(self.user_index, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable user font index %s: %s", self.user_index, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_user_index(self, data: dict[str, dict]) -> None:
        self.user_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.user_dir, prefix=".user-fonts-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp_path, self.user_index)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def user_fonts(self) -> dict[str, FontRecord]:
        fonts = {}
        for key, entry in self._read_user_index().items():
            path = self.user_dir / entry.get("filename", "")
            if path.is_file():
                fonts[key] = FontRecord(
                    key=key,
                    name=entry.get("name", key),
                    filename=entry["filename"],
                    path=str(path),
                    description=entry.get("description", ""),
                    type="user",
                    created_at=entry.get("createdAt"),
                )
        return fonts

    def available(self, include_system: bool = False) -> dict[str, FontRecord]:
        """Bundled, then user fonts; system fonts never shadow either."""
        fonts = self.bundled_fonts()
        fonts.update(self.user_fonts())
        if include_system:
            for key, record in self.system_cache.get().items():
                fonts.setdefault(key, record)
        return fonts

    def list(self, font_type: str = "all", include_system: bool = False) -> dict[str, FontRecord]:
        fonts = self.available(include_system)
        if font_type == "all":
            return fonts
        return {k: v for k, v in fonts.items() if v.type == font_type}

    def get(self, key: str, include_system: bool = True) -> FontRecord:
        """Look up a font by key.

        Raises:
            ConfigurationError: If the key is unknown or its file is gone.
        """
        font = self.available(include_system).get(key)
        if font is None:
            raise ConfigurationError(
                f"Selected font key '{key}' is not valid or its file path is missing."
            )
        return font

    def resolve(self, key: Optional[str] = None, path: Optional[str] = None) -> FontRecord:
        """Font for an operation: an explicit font file wins over a key."""
        if path:
            font = font_from_path(path)
            if font is None:
                raise ConfigurationError(f"Font file not found or not a font: {path}")
            return font
        return self.get(key or self.default_key)

    def validate_key(self, key: str) -> None:
        if not key or not FONT_KEY_PATTERN.match(key):
            raise ConfigurationError(
                "Font key must be 3-50 characters, containing only letters, "
                "numbers, hyphens, and underscores."
            )
        if key in self.available():
            raise ConfigurationError("Font key already exists. Please use a different key.")

    def save_user_font(
        self,
        key: str,
        data: bytes,
        original_filename: str,
        name: str = "",
        description: str = "",
    ) -> FontRecord:
        """Store an uploaded font under ``<key><ext>`` and index it."""
        extension = Path(original_filename).suffix.lower()
        if extension not in ALLOWED_FONT_EXTENSIONS:
            raise ConfigurationError(
                f"Invalid font file extension: {extension or '(none)'}. "
                f"Allowed: {sorted(ALLOWED_FONT_EXTENSIONS)}"
            )
        with _REGISTRY_LOCK:
            self.validate_key(key)
            self.user_dir.mkdir(parents=True, exist_ok=True)
            filename = f"{key}{extension}"
            font_path = self.user_dir / filename
            font_path.write_bytes(data)

            index = self._read_user_index()
            index[key] = {
                "name": name or key,
                "filename": filename,
                "description": description,
                "createdAt": datetime.now(timezone.utc).isoformat(),
            }
            self._write_user_index(index)
        logger.info("Saved user font '%s' to %s", key, font_path)
        return self.user_fonts()[key]

    def delete_user_font(self, key: str) -> None:
        """Remove a user font file and its index entry.

        Raises:
            ConfigurationError: If no user font has that key.
        """
        with _REGISTRY_LOCK:
            index = self._read_user_index()
            entry = index.pop(key, None)
            if entry is None:
                raise ConfigurationError(f"User font with key '{key}' not found.")
            font_path = self.user_dir / entry.get("filename", "")
            if font_path.is_file():
                font_path.unlink()
            self._write_user_index(index)
        logger.info("Deleted user font '%s'", key)
