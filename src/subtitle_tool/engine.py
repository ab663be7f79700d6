"""Conversion pipeline from audio to SRT built on a transcription provider."""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .provider import TRANSCRIPTION_PROMPT, TranscriptionProvider
from .segments import Segment, parse_segments, resolve_overlaps
from .utils import segments_to_srt

LOGGER = logging.getLogger(__name__)


class NoSegmentsFound(RuntimeError):
    """The provider answered, but no timed segment could be extracted."""

    def __init__(self, message: str = "Could not extract any timed segments") -> None:
        super().__init__(message)


@dataclass
class ConversionResult:
    segments: List[Segment]
    srt: str
    raw_text: str


def guess_mime_type(path: Path) -> Optional[str]:
    mime_type, _encoding = mimetypes.guess_type(path.name)
    return mime_type


def convert_audio(
    audio_bytes: bytes,
    mime_type: str,
    *,
    provider: TranscriptionProvider,
    prompt: str = TRANSCRIPTION_PROMPT,
    clamp_overlaps: bool = False,
) -> ConversionResult:
    """Transcribe audio with ``provider`` and render the result as SRT.

    Provider failures propagate unchanged. ``NoSegmentsFound`` is raised when
    the response holds no usable ``start-end: text`` line, so callers never
    receive an empty subtitle document.
    """

    if not audio_bytes:
        raise ValueError("Audio file is empty")
    if not mime_type or not mime_type.startswith("audio/"):
        raise ValueError(f"Unsupported media type: {mime_type or 'unknown'}")

    raw_text = provider.transcribe(audio_bytes, mime_type, prompt)

    segments = parse_segments(raw_text)
    if not segments:
        LOGGER.warning("Provider response contained no timed segments")
        raise NoSegmentsFound()

    if clamp_overlaps:
        segments = resolve_overlaps(segments)

    LOGGER.info("Extracted %d segments", len(segments))
    return ConversionResult(segments=segments, srt=segments_to_srt(segments), raw_text=raw_text)


def convert_file(
    input_path: Path,
    *,
    provider: TranscriptionProvider,
    output_path: Optional[Path] = None,
    mime_type: Optional[str] = None,
    clamp_overlaps: bool = False,
) -> tuple[Path, int]:
    if not input_path.exists():
        raise FileNotFoundError(f"Input file not found: {input_path}")

    resolved_mime_type = mime_type or guess_mime_type(input_path)
    if not resolved_mime_type:
        raise ValueError(f"Cannot determine media type of {input_path.name}; pass --mime-type")

    result = convert_audio(
        input_path.read_bytes(),
        resolved_mime_type,
        provider=provider,
        clamp_overlaps=clamp_overlaps,
    )

    subtitle_path = output_path or input_path.with_suffix(".srt")
    subtitle_path.write_text(result.srt, encoding="utf-8")
    return subtitle_path, len(result.segments)


__all__ = [
    "ConversionResult",
    "NoSegmentsFound",
    "convert_audio",
    "convert_file",
    "guess_mime_type",
]
