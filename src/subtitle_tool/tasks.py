"""Celery tasks for audio to subtitle conversion."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

from celery import states
from celery.utils.log import get_task_logger

from .celery_app import celery_app
from .config import WORK_DIR
from .engine import NoSegmentsFound, convert_audio
from .provider import GeminiProvider, ProviderError, TranscriptionProvider

LOGGER = get_task_logger(__name__)

WORK_ROOT = WORK_DIR
UPLOAD_ROOT = WORK_ROOT / "uploads"
OUTPUT_ROOT = WORK_ROOT / "outputs"
SUBTITLE_ROOT = OUTPUT_ROOT / "subtitles"

for directory in (UPLOAD_ROOT, OUTPUT_ROOT, SUBTITLE_ROOT):
    directory.mkdir(parents=True, exist_ok=True)

GENERIC_FAILURE_MESSAGE = "Failed to process audio. Please try again."
NO_SEGMENTS_MESSAGE = "Could not extract any timed segments."

# Replaced in tests to avoid talking to Gemini.
PROVIDER_FACTORY: Callable[[], TranscriptionProvider] = GeminiProvider


def load_metadata(metadata_path: Path) -> dict:
    if metadata_path.exists():
        return json.loads(metadata_path.read_text(encoding="utf-8"))
    return {}


def write_metadata(metadata_path: Path, data: dict) -> None:
    metadata_path.parent.mkdir(parents=True, exist_ok=True)
    metadata_path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def user_message(exc: Exception) -> str:
    """Flatten a conversion failure into the text shown to end users."""

    if isinstance(exc, NoSegmentsFound):
        return NO_SEGMENTS_MESSAGE
    if isinstance(exc, ValueError):
        return str(exc)
    return GENERIC_FAILURE_MESSAGE


@celery_app.task(bind=True)
def transcribe_job(self, payload: dict) -> dict:
    """Transcribe an uploaded audio file and store the resulting SRT."""

    job_id: str = payload["task_id"]
    metadata_path = Path(payload["metadata_path"])
    meta = load_metadata(metadata_path)

    def update_progress(progress: int, message: str) -> None:
        meta.update({"status": "processing", "progress": progress, "message": message})
        write_metadata(metadata_path, meta)
        self.update_state(
            state="PROGRESS",
            meta={"progress": progress, "message": message, "subtitle_ready": False},
        )

    input_path = Path(payload["input_path"])
    subtitle_path = Path(payload["subtitle_path"])

    try:
        update_progress(10, "Reading audio")
        audio_bytes = input_path.read_bytes()

        update_progress(30, "Transcribing audio")
        result = convert_audio(
            audio_bytes,
            payload["mime_type"],
            provider=PROVIDER_FACTORY(),
            clamp_overlaps=payload.get("clamp_overlaps", False),
        )

        update_progress(90, "Writing subtitles")
        subtitle_path.parent.mkdir(parents=True, exist_ok=True)
        subtitle_path.write_text(result.srt, encoding="utf-8")

        meta.update(
            {
                "status": "completed",
                "progress": 100,
                "message": "Conversion complete",
                "subtitle_ready": True,
                "subtitle_filename": subtitle_path.name,
                "subtitle_path": str(subtitle_path),
                "segment_count": len(result.segments),
            }
        )
        write_metadata(metadata_path, meta)
        LOGGER.info("Job %s produced %d segments", job_id, len(result.segments))
        return meta
    except Exception as exc:  # noqa: BLE001 - capture any failure for Celery
        if isinstance(exc, ProviderError):
            LOGGER.exception("Transcription provider failed for job %s", job_id)
        elif isinstance(exc, NoSegmentsFound):
            LOGGER.warning("Provider response for job %s held no timed segments", job_id)
        else:
            LOGGER.exception("Conversion failed for job %s", job_id)
        meta.update(
            {
                "status": "error",
                "progress": 100,
                "message": user_message(exc),
                "subtitle_ready": False,
                "subtitle_path": None,
                "subtitle_filename": None,
            }
        )
        write_metadata(metadata_path, meta)
        self.update_state(state=states.FAILURE, meta=meta)
        raise


__all__ = [
    "transcribe_job",
    "UPLOAD_ROOT",
    "SUBTITLE_ROOT",
    "WORK_ROOT",
    "load_metadata",
    "user_message",
    "write_metadata",
]
