"""FFmpeg / ffprobe binary discovery.

Discovery is an ordered list of strategies, each a callable taking a
binary name and returning a path or ``None``. The default order is:
explicit setting, ``PATH``, well-known install directories, then the
binary bundled with ``imageio-ffmpeg`` (ffmpeg only).

Lookups are lazy and only successful results are cached, so a binary
installed after a failed lookup is found on the next call.
"""

import logging
import os
import pathlib
import platform
import shutil
import stat
import threading
from typing import Callable, Optional, Sequence

from ..errors import BinaryNotFoundError

logger = logging.getLogger("mediafx")

Strategy = Callable[[str], Optional[str]]


def _build_search_dirs() -> list[pathlib.Path]:
    """Well-known directories where package managers put ffmpeg."""
    home = pathlib.Path.home()
    dirs: list[pathlib.Path] = []
    system = platform.system()

    if system == "Windows":
        dirs.append(pathlib.Path("C:/ffmpeg/bin"))
        programfiles = os.environ.get("PROGRAMFILES")
        if programfiles:
            dirs.append(pathlib.Path(programfiles) / "ffmpeg" / "bin")
        localappdata = os.environ.get("LOCALAPPDATA")
        if localappdata:
            dirs.append(pathlib.Path(localappdata) / "Microsoft" / "WinGet" / "Links")
        dirs.append(home / "scoop" / "shims")
        dirs.append(pathlib.Path("C:/ProgramData/chocolatey/bin"))
    else:
        dirs.append(pathlib.Path("/usr/bin"))
        dirs.append(pathlib.Path("/usr/local/bin"))
        dirs.append(home / ".local" / "bin")
        dirs.append(pathlib.Path("/snap/bin"))
        if system == "Darwin":
            dirs.append(pathlib.Path("/opt/homebrew/bin"))
            dirs.append(pathlib.Path("/opt/local/bin"))

    return dirs


def _executable_names(name: str) -> list[str]:
    if platform.system() == "Windows" and not name.lower().endswith(".exe"):
        return [f"{name}.exe", name]
    return [name]


def from_explicit(paths: dict[str, Optional[str]]) -> Strategy:
    """Strategy returning a configured path when it exists."""
    def strategy(name: str) -> Optional[str]:
        configured = paths.get(name)
        if configured and os.path.isfile(configured):
            return configured
        if configured:
            logger.warning("Configured %s path does not exist: %s", name, configured)
        return None
    return strategy


def from_path(name: str) -> Optional[str]:
    for candidate in _executable_names(name):
        found = shutil.which(candidate)
        if found:
            return found
    return None


def from_search_dirs(directories: Optional[Sequence[pathlib.Path]] = None) -> Strategy:
    search_dirs = list(directories) if directories is not None else _build_search_dirs()

    def strategy(name: str) -> Optional[str]:
        for directory in search_dirs:
            for candidate in _executable_names(name):
                path = directory / candidate
                if path.is_file():
                    return str(path)
        return None
    return strategy


def from_imageio(name: str) -> Optional[str]:
    """The ffmpeg build shipped with the ``imageio-ffmpeg`` wheel."""
    if name != "ffmpeg":
        return None
    import imageio_ffmpeg

    try:
        return imageio_ffmpeg.get_ffmpeg_exe()
    except RuntimeError as e:
        logger.debug("imageio-ffmpeg has no usable binary: %s", e)
        return None


def ensure_executable(path: str) -> None:
    """Add execute permission on POSIX systems; failures are only logged."""
    if os.name == "nt":
        return
    try:
        mode = os.stat(path).st_mode
        if not mode & stat.S_IXUSR:
            os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        logger.warning("Could not make %s executable: %s", path, e)


class BinaryLocator:
    """Resolves ffmpeg/ffprobe through an ordered list of strategies."""

    def __init__(self, strategies: Optional[Sequence[Strategy]] = None):
        self.strategies = list(strategies) if strategies is not None else [
            from_path,
            from_search_dirs(),
            from_imageio,
        ]
        self._found: dict[str, str] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "BinaryLocator":
        explicit = from_explicit({
            "ffmpeg": settings.ffmpeg_path,
            "ffprobe": settings.ffprobe_path,
        })
        return cls([explicit, from_path, from_search_dirs(), from_imageio])

    def find(self, name: str) -> Optional[str]:
        """Return the binary path or ``None``; successes are cached."""
        with self._lock:
            if name in self._found:
                return self._found[name]
            for strategy in self.strategies:
                path = strategy(name)
                if path:
                    ensure_executable(path)
                    logger.info("Using %s at %s", name, path)
                    self._found[name] = path
                    return path
            return None

    def locate(self, name: str) -> str:
        """Return the binary path.

        Raises:
            BinaryNotFoundError: If no strategy finds the binary.
        """
        path = self.find(name)
        if not path:
            raise BinaryNotFoundError(
                f"{name} not found. Install FFmpeg or set MEDIAFX_{name.upper()}_PATH."
            )
        return path
