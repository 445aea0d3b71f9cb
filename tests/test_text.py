"""Tests for drawtext builders, emoji stripping and automatic font sizing."""

import pytest

from core.errors import ConfigurationError
from core.filters.styles import AUTO_SIZE_MULTIPLIERS, StyleSpec
from core.filters.text import (
    MAX_FONT_SIZE,
    MIN_FONT_SIZE,
    build_image_text_filters,
    build_video_text_filter,
    calculate_auto_font_size,
    effective_text_length,
    position_from_alignment,
    strip_emoji,
)

TIERS = ["auto-small", "auto-medium", "auto-large", "auto-xlarge", "auto-huge", "auto-max"]


class TestStripEmoji:
    """Tests for strip_emoji."""

    def test_removes_emoji_and_collapses_spaces(self):
        text = "Hello \U0001F600 World\n\U0001F389 Party"
        assert strip_emoji(text) == "Hello World\nParty"

    def test_keeps_plain_and_cjk_text(self):
        assert strip_emoji("안녕하세요 world") == "안녕하세요 world"

    def test_joiners_and_variation_selectors(self):
        text = "Team \U0001F468\u200d\U0001F469\u200d\U0001F467 \u2764\ufe0f go"
        assert strip_emoji(text) == "Team go"


class TestEffectiveTextLength:
    """Tests for effective_text_length."""

    def test_latin(self):
        assert effective_text_length("abc") == 3

    def test_wide_characters_weigh_more(self):
        assert effective_text_length("안녕 hi") == pytest.approx(2 * 1.8 + 3)

    def test_newlines_ignored(self):
        assert effective_text_length("ab\ncd") == 4


class TestCalculateAutoFontSize:
    """Tests for calculate_auto_font_size."""

    def test_known_value(self):
        assert calculate_auto_font_size(1920, 1080, "Hello World", "auto-medium") == 233

    def test_monotonic_in_tier(self):
        sizes = [calculate_auto_font_size(1920, 1080, "A fairly long caption line", tier) for tier in TIERS]
        assert sizes == sorted(sizes)
        assert sizes[0] < sizes[-1]

    @pytest.mark.parametrize("text", ["Hello World", "안녕하세요 여러분", "Two\nlines of caption"])
    @pytest.mark.parametrize("tier", ["auto-small", "auto-large", "auto-max"])
    def test_non_decreasing_in_width(self, text, tier):
        sizes = [calculate_auto_font_size(width, 1080, text, tier) for width in range(64, 8001, 97)]

        assert sizes == sorted(sizes)
        assert all(MIN_FONT_SIZE <= size <= MAX_FONT_SIZE for size in sizes)

    def test_clamped_to_bounds(self):
        assert calculate_auto_font_size(100, 100, "x" * 500, "auto-max") == MIN_FONT_SIZE
        assert calculate_auto_font_size(8000, 8000, "Hi", "auto-max") == MAX_FONT_SIZE

    def test_height_caps_many_lines(self):
        text = "\n".join(["ab"] * 10)
        size = calculate_auto_font_size(1920, 400, text, "auto-large")
        assert size == 26

    def test_empty_text(self):
        size = calculate_auto_font_size(640, 480, "", "auto-small")
        assert MIN_FONT_SIZE <= size <= MAX_FONT_SIZE

    def test_tiers_match_multipliers(self):
        assert sorted(AUTO_SIZE_MULTIPLIERS) == sorted(TIERS)


class TestPositionFromAlignment:
    """Tests for position_from_alignment."""

    @pytest.mark.parametrize("horizontal,vertical,expected", [
        ("left", "top", ("10", "20")),
        ("center", "middle", ("(w-text_w)/2", "(h-text_h)/2")),
        ("right", "bottom", ("w-text_w-10", "h-text_h-20")),
    ])
    def test_alignments(self, horizontal, vertical, expected):
        assert position_from_alignment(horizontal, vertical, 10, 20) == expected


class TestVideoTextFilter:
    """Tests for build_video_text_filter."""

    def test_timed_drawtext(self):
        result = build_video_text_filter("it's on", StyleSpec(size=36), "/fonts/a.ttf", 1, 3.5)

        (vf,) = result.video_filters
        assert vf.startswith("drawtext=fontfile='/fonts/a.ttf':text='it''s on':fontsize=36:fontcolor=white")
        assert "x=(w-text_w)/2:y=h-text_h-20" in vf
        assert "borderw=1:bordercolor=black" in vf
        assert vf.endswith("enable='between(t,1,3.5)'")
        assert result.output_options == ["-c:a", "copy"]

    def test_custom_position_and_box(self):
        style = StyleSpec(position="custom", x="100", y="h-200", background=True,
                          background_color="blue", background_opacity=0.25, box_padding=8,
                          outline_width=0)
        (vf,) = build_video_text_filter("Hi", style, "/f.ttf").video_filters
        assert "x=100:y=h-200" in vf
        assert "box=1:boxcolor=blue@0.25:boxborderw=8" in vf
        assert "borderw" not in vf.replace("boxborderw", "")

    def test_auto_size_not_allowed_on_video(self):
        with pytest.raises(ConfigurationError):
            build_video_text_filter("Hi", StyleSpec(size="auto-large"), "/f.ttf")


class TestImageTextFilters:
    """Tests for build_image_text_filters."""

    def test_bottom_block(self):
        result = build_image_text_filters("One\nTwo", StyleSpec(outline_width=0), "/f.ttf", 40)

        assert len(result.video_filters) == 2
        assert "y=h-110" in result.video_filters[0]
        assert "y=h-60" in result.video_filters[1]
        assert result.output_options == ["-frames:v", "1"]

    def test_middle_block(self):
        style = StyleSpec(vertical_align="middle")
        result = build_image_text_filters("One\nTwo", style, "/f.ttf", 40)
        assert "y=(h-90)/2+0" in result.video_filters[0]
        assert "y=(h-90)/2+50" in result.video_filters[1]

    def test_top_block_with_left_alignment(self):
        style = StyleSpec(vertical_align="top", horizontal_align="left", padding_x=5, padding_y=7)
        result = build_image_text_filters("A\nB", style, "/f.ttf", 20)
        assert "x=5:y=7" in result.video_filters[0]
        assert "x=5:y=37" in result.video_filters[1]

    def test_blank_lines_are_dropped(self):
        result = build_image_text_filters("A\n\nB", StyleSpec(), "/f.ttf", 20)
        assert len(result.video_filters) == 2

    def test_line_colors(self):
        style = StyleSpec(line_colors=("red", "blue"))
        result = build_image_text_filters("1\n2\n3", style, "/f.ttf", 20)
        colors = [f.split("fontcolor=")[1].split(":")[0] for f in result.video_filters]
        assert colors == ["red", "blue", "red"]

    def test_empty_text_still_produces_a_filter(self):
        result = build_image_text_filters("", StyleSpec(), "/f.ttf", 20)
        assert result.video_filters == [
            "drawtext=fontfile='/f.ttf':text='':fontsize=20:fontcolor=white:x=0:y=0"
        ]
