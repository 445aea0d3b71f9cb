"""Tests for ffmpeg/ffprobe discovery."""

import os
import stat
from unittest.mock import MagicMock, patch

import pytest

from core.config import MediaFXSettings
from core.errors import BinaryNotFoundError
from core.executor.binaries import (
    BinaryLocator,
    ensure_executable,
    from_explicit,
    from_imageio,
    from_search_dirs,
)


def _binary(directory, name):
    path = directory / name
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


class TestStrategies:
    """Tests for the individual discovery strategies."""

    def test_explicit_path_used_when_it_exists(self, tmp_path):
        binary = _binary(tmp_path, "ffmpeg")
        strategy = from_explicit({"ffmpeg": str(binary)})
        assert strategy("ffmpeg") == str(binary)

    def test_explicit_missing_path_is_skipped(self, tmp_path):
        strategy = from_explicit({"ffmpeg": str(tmp_path / "missing")})
        assert strategy("ffmpeg") is None

    def test_explicit_unset(self):
        assert from_explicit({"ffmpeg": None})("ffmpeg") is None

    @pytest.mark.skipif(os.name == "nt", reason="POSIX executable names")
    def test_search_dirs_in_order(self, tmp_path):
        first, second = tmp_path / "a", tmp_path / "b"
        first.mkdir()
        second.mkdir()
        _binary(second, "ffprobe")
        strategy = from_search_dirs([first, second])
        assert strategy("ffprobe") == str(second / "ffprobe")
        assert strategy("ffmpeg") is None

    def test_imageio_only_provides_ffmpeg(self):
        assert from_imageio("ffprobe") is None

    def test_imageio_ffmpeg(self):
        with patch("imageio_ffmpeg.get_ffmpeg_exe", return_value="/wheel/ffmpeg"):
            assert from_imageio("ffmpeg") == "/wheel/ffmpeg"

    def test_imageio_without_binary(self):
        with patch("imageio_ffmpeg.get_ffmpeg_exe", side_effect=RuntimeError("no binary")):
            assert from_imageio("ffmpeg") is None


class TestBinaryLocator:
    """Tests for BinaryLocator."""

    def test_first_successful_strategy_wins(self):
        missing = MagicMock(return_value=None)
        locator = BinaryLocator([missing, lambda name: f"/x/{name}", lambda name: "/never"])
        with patch("core.executor.binaries.ensure_executable"):
            assert locator.locate("ffmpeg") == "/x/ffmpeg"
        missing.assert_called_once_with("ffmpeg")

    def test_success_is_cached(self):
        strategy = MagicMock(return_value="/x/ffmpeg")
        locator = BinaryLocator([strategy])
        with patch("core.executor.binaries.ensure_executable"):
            locator.find("ffmpeg")
            locator.find("ffmpeg")
        strategy.assert_called_once()

    def test_failure_is_not_cached(self):
        results = iter([None, "/late/ffmpeg"])
        locator = BinaryLocator([lambda name: next(results)])
        with patch("core.executor.binaries.ensure_executable"):
            assert locator.find("ffmpeg") is None
            assert locator.find("ffmpeg") == "/late/ffmpeg"

    def test_locate_raises_when_missing(self):
        locator = BinaryLocator([lambda name: None])
        with pytest.raises(BinaryNotFoundError, match="MEDIAFX_FFPROBE_PATH"):
            locator.locate("ffprobe")

    def test_from_settings_prefers_explicit(self, tmp_path):
        binary = _binary(tmp_path, "custom-ffmpeg")
        locator = BinaryLocator.from_settings(MediaFXSettings(ffmpeg_path=str(binary)))
        assert locator.locate("ffmpeg") == str(binary)


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
class TestEnsureExecutable:
    """Tests for ensure_executable."""

    def test_adds_execute_bit(self, tmp_path):
        path = tmp_path / "ffmpeg"
        path.write_text("")
        path.chmod(0o644)
        ensure_executable(str(path))
        assert os.stat(path).st_mode & stat.S_IXUSR

    def test_missing_file_only_logs(self, tmp_path):
        ensure_executable(str(tmp_path / "missing"))
