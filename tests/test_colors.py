"""Tests for color and alignment conversion."""

import random

import pytest

from core.filters.colors import alignment_to_code, color_to_ass, ffmpeg_color, opacity_to_alpha


class TestColorToAss:
    """Tests for color_to_ass."""

    def test_opaque_red(self):
        assert color_to_ass("#FF0000", 1.0) == "&H000000FF"

    def test_half_transparent_black(self):
        assert color_to_ass("black", 0.5) == "&H80000000"

    def test_hex_is_case_insensitive(self):
        assert color_to_ass("#00ff80") == "&H0080FF00"

    def test_named_colors(self):
        assert color_to_ass("yellow") == "&H0000FFFF"
        assert color_to_ass("Orange") == "&H0000A5FF"

    @pytest.mark.parametrize("value", ["chartreuse", "#12345", "#GGGGGG", ""])
    def test_unknown_falls_back_to_white(self, value):
        assert color_to_ass(value) == "&H00FFFFFF"

    def test_fully_transparent(self):
        assert color_to_ass("white", 0.0) == "&HFFFFFFFF"

    @pytest.mark.parametrize("seed", range(8))
    def test_channels_round_trip(self, seed):
        """Every #RRGGBB comes back out of the BBGGRR bytes unchanged."""
        rng = random.Random(seed)
        for _ in range(256):
            red, green, blue = (rng.randrange(256) for _ in range(3))
            packed = color_to_ass(f"#{red:02x}{green:02X}{blue:02x}", 0.25)

            assert packed.startswith("&H") and len(packed) == 10
            assert int(packed[2:4], 16) == opacity_to_alpha(0.25)
            assert (int(packed[8:10], 16), int(packed[6:8], 16), int(packed[4:6], 16)) == (red, green, blue)


class TestOpacityToAlpha:
    """Tests for opacity_to_alpha."""

    def test_bounds(self):
        assert opacity_to_alpha(1.0) == 0
        assert opacity_to_alpha(0.0) == 255

    def test_out_of_range_is_clamped(self):
        assert opacity_to_alpha(2.0) == 0
        assert opacity_to_alpha(-1.0) == 255


class TestAlignmentToCode:
    """Tests for alignment_to_code."""

    @pytest.mark.parametrize("horizontal,vertical,code", [
        ("left", "bottom", 1),
        ("center", "bottom", 2),
        ("right", "bottom", 3),
        ("left", "middle", 4),
        ("center", "middle", 5),
        ("right", "middle", 6),
        ("left", "top", 7),
        ("center", "top", 8),
        ("right", "top", 9),
    ])
    def test_numpad_layout(self, horizontal, vertical, code):
        assert alignment_to_code(horizontal, vertical) == code

    def test_unknown_values_default(self):
        assert alignment_to_code("diagonal", "sideways") == 2


class TestFFmpegColor:
    """Tests for ffmpeg_color."""

    def test_plain(self):
        assert ffmpeg_color("red") == "red"

    def test_with_opacity(self):
        assert ffmpeg_color("black", 0.5) == "black@0.5"
