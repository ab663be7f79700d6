"""Command-line interface for converting audio files to SRT subtitles."""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from typing import Callable, Optional

from .config import CLAMP_OVERLAPS, GEMINI_MODEL
from .engine import convert_file
from .provider import GeminiProvider, TranscriptionProvider


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Convert an audio file to SRT subtitles using Gemini transcription."
    )
    parser.add_argument("input", type=pathlib.Path, help="Path to the input audio file")
    parser.add_argument(
        "--output",
        type=pathlib.Path,
        help="Optional path for the subtitle file (defaults next to input with .srt)",
    )
    parser.add_argument(
        "--model",
        default=GEMINI_MODEL,
        help=f"Gemini model to transcribe with (default: {GEMINI_MODEL})",
    )
    parser.add_argument(
        "--mime-type",
        help="Audio MIME type, e.g. audio/mpeg (default: guessed from the file name)",
    )
    parser.add_argument(
        "--clamp-overlaps",
        action="store_true",
        default=CLAMP_OVERLAPS,
        help="Trim segments that overlap the following segment",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log the raw transcription and skipped lines",
    )
    return parser.parse_args(argv)


def gemini_provider(model: str) -> TranscriptionProvider:
    return GeminiProvider(model=model)


def convert_from_args(
    args: argparse.Namespace,
    provider_factory: Callable[[str], TranscriptionProvider] = gemini_provider,
) -> tuple[pathlib.Path, int]:
    return convert_file(
        args.input,
        provider=provider_factory(args.model),
        output_path=args.output,
        mime_type=args.mime_type,
        clamp_overlaps=args.clamp_overlaps,
    )


def main(
    argv: Optional[list[str]] = None,
    provider_factory: Callable[[str], TranscriptionProvider] = gemini_provider,
) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        subtitle_path, segment_count = convert_from_args(args, provider_factory)
    except Exception as exc:  # noqa: BLE001 - surface all errors to CLI
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Subtitle saved to {subtitle_path} ({segment_count} segments)")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
