"""Tests for transitions, fades and concatenation graphs."""

import pytest

from core.errors import ConfigurationError
from core.filters.transitions import (
    XFADE_TRANSITIONS,
    build_concat_graph,
    build_fade_filters,
    build_xfade_graph,
    normalize_video_chain,
    xfade_offsets,
)

NORMALIZE_640 = (
    "scale=640:360:force_original_aspect_ratio=decrease,"
    "pad=640:360:(ow-iw)/2:(oh-ih)/2,setsar=1,fps=30,format=yuv420p"
)
NORMALIZE_AUDIO = "aresample=44100,aformat=channel_layouts=stereo"


class TestXfadeOffsets:
    """Tests for xfade_offsets."""

    def test_offsets_subtract_overlaps(self):
        assert xfade_offsets([5, 5, 5], 1) == [4, 8]

    def test_uneven_clips(self):
        assert xfade_offsets([3, 10, 2, 4], 0.5) == pytest.approx([2.5, 12.0, 13.5])


class TestXfadeGraph:
    """Tests for build_xfade_graph."""

    def test_two_clips_with_audio(self):
        result = build_xfade_graph([5, 6], "wipeleft", 1, True, 640, 360, 30)

        assert result.filter_complex == ";".join([
            f"[0:v]{NORMALIZE_640}[v0]",
            f"[0:a]{NORMALIZE_AUDIO}[a0]",
            f"[1:v]{NORMALIZE_640}[v1]",
            f"[1:a]{NORMALIZE_AUDIO}[a1]",
            "[v0][v1]xfade=transition=wipeleft:duration=1:offset=4[vout]",
            "[a0][a1]acrossfade=d=1[aout]",
        ])
        assert result.output_options == ["-map", "[vout]", "-map", "[aout]"]

    def test_three_clips_chain_intermediate_labels(self):
        graph = build_xfade_graph([5, 5, 5], "fade", 1, True, 640, 360, 30).filter_complex
        assert "[v0][v1]xfade=transition=fade:duration=1:offset=4[vx1]" in graph
        assert "[vx1][v2]xfade=transition=fade:duration=1:offset=8[vout]" in graph
        assert "[ax1][a2]acrossfade=d=1[aout]" in graph

    def test_silent_when_audio_missing(self):
        result = build_xfade_graph([5, 5], "fade", 1, False, 640, 360, 30)
        assert "acrossfade" not in result.filter_complex
        assert "[0:a]" not in result.filter_complex
        assert result.output_options == ["-map", "[vout]", "-an"]

    def test_needs_two_clips(self):
        with pytest.raises(ConfigurationError, match="at least two"):
            build_xfade_graph([5], "fade", 1, True, 640, 360, 30)

    def test_unknown_effect(self):
        with pytest.raises(ConfigurationError, match="Unknown transition"):
            build_xfade_graph([5, 5], "spin", 1, True, 640, 360, 30)

    def test_transition_must_be_shorter_than_clips(self):
        with pytest.raises(ConfigurationError, match="shorter"):
            build_xfade_graph([5, 1], "fade", 1, True, 640, 360, 30)

    def test_all_effects_are_xfade_names(self):
        assert "fade" in XFADE_TRANSITIONS
        assert len(set(XFADE_TRANSITIONS)) == len(XFADE_TRANSITIONS)


class TestFadeFilters:
    """Tests for build_fade_filters."""

    def test_fade_out_with_audio(self):
        result = build_fade_filters("out", 8, 2, True)
        assert result.video_filters == ["fade=t=out:st=8:d=2"]
        assert result.audio_filters == ["afade=t=out:st=8:d=2"]

    def test_fade_in_silent(self):
        result = build_fade_filters("in", 0, 1.5, False)
        assert result.video_filters == ["fade=t=in:st=0:d=1.5"]
        assert result.audio_filters == []

    @pytest.mark.parametrize("effect,start,duration", [("both", 0, 1), ("in", 0, 0), ("in", -1, 1)])
    def test_invalid(self, effect, start, duration):
        with pytest.raises(ConfigurationError):
            build_fade_filters(effect, start, duration, True)


class TestConcatGraph:
    """Tests for build_concat_graph."""

    def test_silent_segment_uses_lavfi_input(self):
        result = build_concat_graph(["0:a", "2:a"], 640, 360, 30)

        assert result.filter_complex == ";".join([
            f"[0:v]{NORMALIZE_640}[v0]",
            f"[0:a]{NORMALIZE_AUDIO}[a0]",
            f"[1:v]{NORMALIZE_640}[v1]",
            f"[2:a]{NORMALIZE_AUDIO}[a1]",
            "[v0][a0][v1][a1]concat=n=2:v=1:a=1[vout][aout]",
        ])
        assert result.output_options == ["-map", "[vout]", "-map", "[aout]"]

    def test_nothing_to_merge(self):
        with pytest.raises(ConfigurationError):
            build_concat_graph([], 640, 360, 30)


def test_normalize_chain_fractional_fps():
    assert normalize_video_chain(640, 360, 29.97)[3] == "fps=29.97"
