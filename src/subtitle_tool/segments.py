"""Extract timed segments from free-text transcription responses."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, replace
from typing import Iterable, List

LOGGER = logging.getLogger(__name__)

# "<start>-<end>: <text>" anywhere in the line, e.g. "1.5-4.2: Some text". ASCII digits only.
SEGMENT_PATTERN = re.compile(r"([0-9]+\.?[0-9]*)\s*-\s*([0-9]+\.?[0-9]*)\s*:\s*(.+)")


@dataclass(frozen=True)
class Segment:
    text: str
    start: float
    end: float


def parse_segments(raw_text: str) -> List[Segment]:
    """Collect ``start-end: text`` lines from a provider response.

    Lines that do not carry a time range are skipped, as are ranges that are
    empty or inverted. The result is sorted by start time; ties keep the
    order they appeared in.
    """

    segments: List[Segment] = []
    for line in raw_text.splitlines():
        if not line.strip():
            continue

        match = SEGMENT_PATTERN.search(line)
        if match is None:
            continue

        start = float(match.group(1))
        end = float(match.group(2))
        text = match.group(3).strip()
        if not (math.isfinite(start) and math.isfinite(end)) or end <= start:
            LOGGER.debug("Skipping invalid time range %s-%s: %r", start, end, line)
            continue
        if not text:
            LOGGER.debug("Skipping segment without text: %r", line)
            continue

        segments.append(Segment(text=text, start=start, end=end))

    # list.sort is stable, so equal start times keep their encounter order.
    segments.sort(key=lambda segment: segment.start)
    return segments


def resolve_overlaps(segments: Iterable[Segment]) -> List[Segment]:
    """Clamp each segment's end to the next segment's start.

    Expects segments sorted by start time. Segments left without any duration
    after clamping are dropped.
    """

    ordered = list(segments)
    resolved: List[Segment] = []
    for current, following in zip(ordered, ordered[1:] + [None]):
        if following is not None and current.end > following.start:
            if following.start <= current.start:
                LOGGER.debug("Dropping segment fully shadowed by its successor: %r", current.text)
                continue
            current = replace(current, end=following.start)
        resolved.append(current)
    return resolved


__all__ = ["Segment", "SEGMENT_PATTERN", "parse_segments", "resolve_overlaps"]
