"""SRT rendering helpers shared across subtitle tool components."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from .segments import Segment


def format_timestamp(seconds: float) -> str:
    """Convert seconds to SRT timestamp (HH:MM:SS,mmm).

    Milliseconds are truncated, not rounded. The fraction is read from the
    decimal form of the value so that 59.999 stays ``59,999``.
    """

    value = Decimal(str(seconds))
    # Whole seconds as int so huge values never overflow the decimal context.
    whole = int(value)
    hours, remainder = divmod(whole, 3600)
    minutes, seconds_whole = divmod(remainder, 60)
    milliseconds = int((value - whole) * 1000)
    return f"{hours:02}:{minutes:02}:{seconds_whole:02},{milliseconds:03}"


def segments_to_srt(segments: Iterable[Segment]) -> str:
    """Convert parsed segments to SRT formatted subtitle content."""

    blocks = [
        f"{index}\n{format_timestamp(segment.start)} --> {format_timestamp(segment.end)}\n{segment.text}\n"
        for index, segment in enumerate(segments, start=1)
    ]
    return "\n".join(blocks)


__all__ = ["format_timestamp", "segments_to_srt"]
