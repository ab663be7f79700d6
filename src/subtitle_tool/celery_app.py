"""Celery application factory for subtitle tool."""

from __future__ import annotations

from celery import Celery

from .config import BROKER_URL, RESULT_BACKEND, TASK_ALWAYS_EAGER

celery_app = Celery("subtitle_tool", broker=BROKER_URL, backend=RESULT_BACKEND)
celery_app.conf.update(
    task_track_started=True,
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_always_eager=TASK_ALWAYS_EAGER,
    imports=("subtitle_tool.tasks",),
)

celery_app.autodiscover_tasks(packages=["subtitle_tool"])

# Lets `celery -A subtitle_tool.celery_app worker` find the app.
celery = celery_app

__all__ = ["celery_app"]
