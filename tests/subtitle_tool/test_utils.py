import textwrap

import pytest

from subtitle_tool.segments import Segment, parse_segments
from subtitle_tool.utils import format_timestamp, segments_to_srt


def test_format_timestamp_zero():
    assert format_timestamp(0) == "00:00:00,000"


def test_format_timestamp_truncates_milliseconds():
    assert format_timestamp(3725.4567) == "01:02:05,456"
    assert format_timestamp(59.999) == "00:00:59,999"
    assert format_timestamp(2.5) == "00:00:02,500"


def test_format_timestamp_does_not_wrap_hours():
    assert format_timestamp(360000.25) == "100:00:00,250"


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0.001, "00:00:00,001"),
        (1e-05, "00:00:00,000"),
        (0.1, "00:00:00,100"),
        (61.5, "00:01:01,500"),
        (3599.999, "00:59:59,999"),
        (3600, "01:00:00,000"),
        (3600.0005, "01:00:00,000"),
    ],
)
def test_format_timestamp_truncates_and_carries(seconds, expected):
    assert format_timestamp(seconds) == expected


def test_format_timestamp_handles_huge_values():
    segments = parse_segments("0-" + "9" * 35 + ": far away")
    hours, remainder = divmod(10**35, 3600)
    minutes, seconds = divmod(remainder, 60)

    output = segments_to_srt(segments)

    assert f"00:00:00,000 --> {hours}:{minutes:02}:{seconds:02},000" in output


def test_segments_to_srt_basic():
    segments = parse_segments(
        "0-2.5: Hello there\n2.5-5: How are you\nSome disclaimer text with no numbers"
    )
    expected = textwrap.dedent(
        """
        1
        00:00:00,000 --> 00:00:02,500
        Hello there

        2
        00:00:02,500 --> 00:00:05,000
        How are you
        """
    ).lstrip()
    assert segments_to_srt(segments) == expected


def test_segments_to_srt_renumbers_blocks():
    segments = [
        Segment(text="a", start=10.0, end=11.0),
        Segment(text="b", start=20.0, end=21.0),
        Segment(text="c", start=30.0, end=31.0),
    ]
    output = segments_to_srt(segments)
    indices = [block.splitlines()[0] for block in output.split("\n\n")]
    assert indices == ["1", "2", "3"]


def test_segments_to_srt_is_deterministic():
    segments = parse_segments("3-4: third\n0-1: first\n1-2: second")
    assert segments_to_srt(segments) == segments_to_srt(segments)
    assert segments_to_srt(segments).startswith("1\n00:00:00,000 --> 00:00:01,000\nfirst\n")


def test_segments_to_srt_returns_empty_string_when_no_segments():
    assert segments_to_srt([]) == ""
