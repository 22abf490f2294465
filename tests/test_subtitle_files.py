import pytest

from reelcut.captions.burn_in_style import BurnInStyle, build_force_style, parse_color, to_ass_color
from reelcut.captions.srt import format_srt_time, render_srt
from reelcut.captions.word_timing import SubtitleWord


class TestSrt:
    @pytest.mark.parametrize(
        "seconds, expected",
        [(0.0, "00:00:00,000"), (1.25, "00:00:01,250"), (3661.5, "01:01:01,500"), (-2.0, "00:00:00,000")],
    )
    def test_format_srt_time(self, seconds, expected):
        assert format_srt_time(seconds) == expected

    def test_render_one_cue_per_word(self):
        words = [
            SubtitleWord(word="hello", start_time=0.0, end_time=0.5),
            SubtitleWord(word="world", start_time=0.5, end_time=1.2),
        ]

        assert render_srt(words) == (
            "1\n00:00:00,000 --> 00:00:00,500\nhello\n"
            "\n"
            "2\n00:00:00,500 --> 00:00:01,200\nworld\n"
        )

    def test_render_empty(self):
        assert render_srt([]) == ""


class TestAssColors:
    def test_hex_is_reordered_to_bgr(self):
        assert to_ass_color("#ff0000") == "&H000000FF"
        assert to_ass_color("00ff00") == "&H0000FF00"

    def test_hex_alpha_is_inverted(self):
        assert to_ass_color("#00000080") == "&H7F000000"

    def test_rgba(self):
        assert to_ass_color("rgba(0, 0, 255, 0.5)") == "&H80FF0000"
        assert parse_color("rgb(300, 10, 10)") == (255, 10, 10, 1.0)

    @pytest.mark.parametrize("token", ["transparent", "none", "", "not-a-color"])
    def test_unparseable_falls_back_to_default(self, token):
        assert to_ass_color(token, default="&H00FFFFFF") == "&H00FFFFFF"

    def test_named_color(self):
        assert to_ass_color("Yellow") == "&H0000FFFF"


class TestForceStyle:
    def test_without_background(self):
        force_style = build_force_style(BurnInStyle(color="#ffffff", font_size=32))

        assert force_style == "FontSize=32,PrimaryColour=&H00FFFFFF,OutlineColour=&H00000000,Outline=2,MarginV=60"
        assert "BorderStyle" not in force_style

    def test_background_adds_opaque_box(self):
        force_style = build_force_style(BurnInStyle(background_color="#000000"))

        assert force_style.endswith("BorderStyle=3,BackColour=&H00000000")
