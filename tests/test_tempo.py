"""Tests for speed and tempo filters."""

import math

import pytest

from core.errors import ConfigurationError
from core.filters.contract import format_number
from core.filters.tempo import (
    ATEMPO_MAX,
    ATEMPO_MIN,
    atempo_chain,
    build_speed_filters,
    decompose_tempo,
    setpts_for_speed,
)


class TestDecomposeTempo:
    """Tests for decompose_tempo."""

    def test_fast(self):
        assert decompose_tempo(5.0) == [2.0, 2.0, 1.25]

    def test_slow(self):
        assert decompose_tempo(0.2) == pytest.approx([0.5, 0.5, 0.8])

    def test_in_range_is_single_stage(self):
        assert decompose_tempo(1.5) == [1.5]
        assert decompose_tempo(2.0) == [2.0]
        assert decompose_tempo(0.5) == [0.5]

    def test_just_above_limit(self):
        stages = decompose_tempo(2.0000001)
        assert len(stages) == 2
        assert stages[0] == 2.0

    @pytest.mark.parametrize("ratio", [0.01, 0.3, 0.75, 1.0, 3.3, 7.0, 100.0])
    def test_product_and_stage_bounds(self, ratio):
        stages = decompose_tempo(ratio)
        assert math.prod(stages) == pytest.approx(ratio)
        assert all(ATEMPO_MIN <= s <= ATEMPO_MAX for s in stages)

    @pytest.mark.parametrize("ratio", [0, -1.5])
    def test_non_positive_rejected(self, ratio):
        with pytest.raises(ConfigurationError):
            decompose_tempo(ratio)


class TestSpeedFilters:
    """Tests for setpts/atempo construction."""

    def test_atempo_chain(self):
        assert atempo_chain(5.0) == ["atempo=2", "atempo=2", "atempo=1.25"]

    def test_setpts(self):
        assert setpts_for_speed(2.0) == "setpts=0.5*PTS"
        assert setpts_for_speed(0.5) == "setpts=2*PTS"
        assert setpts_for_speed(3.0) == "setpts=0.333333*PTS"

    def test_zero_speed_rejected(self):
        with pytest.raises(ConfigurationError, match="greater than 0"):
            build_speed_filters(0)

    def test_default_retimes_audio(self):
        result = build_speed_filters(4.0)
        assert result.video_filters == ["setpts=0.25*PTS"]
        assert result.audio_filters == ["atempo=2", "atempo=2"]

    def test_maintain_pitch_uses_rubberband(self):
        result = build_speed_filters(1.5, maintain_pitch=True)
        assert result.audio_filters == ["rubberband=tempo=1.5"]

    def test_without_audio_adjustment_drops_audio(self):
        result = build_speed_filters(2.0, adjust_audio=False)
        assert result.audio_filters == []
        assert result.output_options == ["-an"]


class TestFormatNumber:
    """Tests for format_number."""

    @pytest.mark.parametrize("value,expected", [
        (2.0, "2"), (0.5, "0.5"), (1 / 3, "0.333333"), (0.0, "0"), (-0.0000001, "0"), (10, "10"),
    ])
    def test_compact(self, value, expected):
        assert format_number(value) == expected
