"""Tests for SRT parsing and writing."""

import pytest

from msub.core.models import Segment
from msub.subtitles.srt import format_srt, format_srt_time, load_srt, parse_srt, parse_srt_time, save_srt

MALFORMED = """\
1
00:00:00,000 --> 00:00:01,000
one

2
00:00:01,000 --> 00:00:02,000
two

bad block without timing

3
00:00:02,000 --> 00:00:03,000
three

4
00:00:aa,000 --> 00:00:04,000
broken timestamp

5
00:00:04,000 --> 00:00:05,000
four

6
00:00:05,000 --> 00:00:06,000
five
"""


class TestParseTime:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("00:00:01,500", 1.5),
            ("01:02:03,004", 3723.004),
            ("00:00:01.250", 1.25),
        ],
        ids=["comma", "hours", "dot"],
    )
    def test_valid(self, value, expected):
        assert parse_srt_time(value) == pytest.approx(expected)

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_srt_time("1.5s")


class TestParseSrt:
    def test_malformed_blocks_are_dropped(self):
        segments = parse_srt(MALFORMED)
        assert [s.text for s in segments] == ["one", "two", "three", "four", "five"]

    def test_multiline_text_joined_with_space(self, sample_srt):
        segments = load_srt(sample_srt)
        assert len(segments) == 3
        assert segments[2].text == "今天的节目 内容很精彩"

    def test_crlf_line_endings(self):
        content = "1\r\n00:00:00,000 --> 00:00:01,000\r\nhello\r\n\r\n"
        assert parse_srt(content) == [Segment(start=0.0, end=1.0, text="hello")]

    def test_zero_length_and_empty_blocks_dropped(self):
        content = (
            "1\n00:00:02,000 --> 00:00:01,000\nbackwards\n\n"
            "2\n00:00:03,000 --> 00:00:04,000\n\n\n"
            "3\n00:00:05,000 --> 00:00:06,000\nkept\n"
        )
        assert [s.text for s in parse_srt(content)] == ["kept"]

    def test_empty_input(self):
        assert parse_srt("") == []


def test_round_trip(tmp_path):
    segments = [
        Segment(start=0.0, end=1.25, text="第一句"),
        Segment(start=61.5, end=63.999, text="second line"),
        Segment(start=3600.0, end=3601.1, text="third"),
        Segment(start=3602.0, end=3603.0, text="press {enter} now"),
        Segment(start=3604.0, end=3605.0, text=r"a\Nb C:\path {\an8}"),
    ]
    path = save_srt(segments, tmp_path / "nested" / "out.srt")
    loaded = load_srt(path)
    assert [s.text for s in loaded] == [s.text for s in segments]
    for orig, back in zip(segments, loaded):
        assert back.start == pytest.approx(orig.start, abs=0.001)
        assert back.end == pytest.approx(orig.end, abs=0.001)


def test_format_srt_keeps_text_verbatim():
    text = format_srt([Segment(start=0.0, end=1.0, text="{b}\\N")])
    assert text == "1\n00:00:00,000 --> 00:00:01,000\n{b}\\N\n"


def test_format_srt_time():
    assert format_srt_time(3723.456) == "01:02:03,456"
    assert format_srt_time(0.0) == "00:00:00,000"


def test_format_srt_uses_one_based_indices():
    text = format_srt([Segment(start=0.0, end=1.0, text="a"), Segment(start=1.0, end=2.0, text="b")])
    assert text.startswith("1\n00:00:00,000 --> 00:00:01,000\na")
    assert "\n2\n00:00:01,000 --> 00:00:02,000\nb" in text
