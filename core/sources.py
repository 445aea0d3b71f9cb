"""Input resolution and temp-file lifecycle.

Every ephemeral file (downloaded inputs, synthesized subtitle tracks,
silent audio, operation outputs) is a path inside one temp directory,
named with a random UUID plus an extension. Whoever creates an
artifact removes it; a probabilistic sweep catches anything leaked.
"""

from __future__ import annotations

import asyncio
import logging
import os
import random
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Iterable, Optional
from urllib.parse import urlparse

import httpx

from .errors import ConfigurationError, SourceError

logger = logging.getLogger("mediafx")

_URL_SCHEMES = ("http", "https")


def remove_quietly(path: Optional[str | Path]) -> None:
    """Delete a file, logging instead of raising if that fails."""
    if not path:
        return
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Failed to remove temp file %s: %s", path, e)


class TempStore:
    """A directory of uniquely named ephemeral files."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def path(self, extension: str = "") -> Path:
        """A fresh, not yet existing path with ``extension`` (``.mp4`` or ``mp4``)."""
        self.directory.mkdir(parents=True, exist_ok=True)
        if extension and not extension.startswith("."):
            extension = f".{extension}"
        return self.directory / f"{uuid.uuid4()}{extension}"

    @asynccontextmanager
    async def artifact(self, extension: str = "") -> AsyncIterator[Path]:
        """Yield a temp path that is removed on every exit path."""
        path = self.path(extension)
        try:
            yield path
        finally:
            remove_quietly(path)

    def _sweep(self, max_age_hours: float) -> int:
        if not self.directory.is_dir():
            return 0
        cutoff = time.time() - max_age_hours * 3600
        removed = 0
        for entry in self.directory.iterdir():
            try:
                if entry.is_file() and entry.stat().st_mtime < cutoff:
                    entry.unlink()
                    removed += 1
            except OSError as e:
                logger.warning("Failed to remove stale temp file %s: %s", entry, e)
        return removed

    async def sweep(self, max_age_hours: float = 24.0) -> int:
        """Remove files older than ``max_age_hours``; never raises OSError."""
        try:
            removed = await asyncio.to_thread(self._sweep, max_age_hours)
        except OSError as e:
            logger.warning("Temp directory sweep failed: %s", e)
            return 0
        if removed:
            logger.info("Removed %d stale temp file(s) from %s", removed, self.directory)
        return removed

    async def maybe_sweep(
        self,
        probability: float = 0.1,
        max_age_hours: float = 24.0,
        rng: Optional[random.Random] = None,
    ) -> int:
        """Sweep with the given probability; returns the number of files removed."""
        roll = (rng or random).random()
        if roll >= probability:
            return 0
        return await self.sweep(max_age_hours)


def is_url(source: str) -> bool:
    return urlparse(source).scheme.lower() in _URL_SCHEMES


def url_extension(url: str) -> str:
    """Extension of the URL's path, or ``.tmp`` when it has none."""
    suffix = Path(urlparse(url).path).suffix.lower()
    return suffix if suffix and len(suffix) <= 6 else ".tmp"


async def download(
    url: str,
    store: TempStore,
    timeout: float = 120.0,
    client: Optional[httpx.AsyncClient] = None,
) -> Path:
    """Stream ``url`` into a new temp file.

    Raises:
        SourceError: On HTTP errors; the partial file is removed.
    """
    target = store.path(url_extension(url))
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
    try:
        async with client.stream("GET", url) as response:
            response.raise_for_status()
            with open(target, "wb") as fh:
                async for chunk in response.aiter_bytes():
                    fh.write(chunk)
    except httpx.HTTPError as e:
        remove_quietly(target)
        raise SourceError(f"Failed to download {url}: {e}") from e
    except BaseException:
        remove_quietly(target)
        raise
    finally:
        if owns_client:
            await client.aclose()
    logger.info("Downloaded %s to %s", url, target)
    return target


class ResolvedSources:
    """Local paths for a set of sources, plus the downloads to clean up.

    Use as an async context manager; downloaded files are removed on
    exit whether or not the operation succeeded.
    """

    def __init__(self, paths: list[str], downloaded: Optional[list[Path]] = None):
        self.paths = paths
        self.downloaded = downloaded or []

    async def cleanup(self) -> None:
        for path in self.downloaded:
            remove_quietly(path)
        self.downloaded = []

    async def __aenter__(self) -> "ResolvedSources":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.cleanup()


async def resolve_sources(
    sources: Iterable[str],
    store: TempStore,
    timeout: float = 120.0,
    client: Optional[httpx.AsyncClient] = None,
) -> ResolvedSources:
    """Turn URLs and local paths into local file paths.

    Raises:
        ConfigurationError: If a source is empty.
        SourceError: If a download fails or a local file does not exist.
    """
    resolved = ResolvedSources([])
    try:
        for index, source in enumerate(sources):
            source = (source or "").strip()
            if not source:
                raise ConfigurationError(f"Source #{index + 1} is empty")
            if is_url(source):
                path = await download(source, store, timeout=timeout, client=client)
                resolved.downloaded.append(path)
                resolved.paths.append(str(path))
            else:
                local = Path(source).expanduser()
                if not local.is_file():
                    raise SourceError(f"Input file not found: {source}")
                resolved.paths.append(str(local.resolve()))
    except BaseException:
        await resolved.cleanup()
        raise
    return resolved
