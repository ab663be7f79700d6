"""Environment-driven settings for the subtitle tool."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


BROKER_URL = os.getenv("SUBTITLE_TOOL_BROKER_URL", "redis://localhost:6379/0")
RESULT_BACKEND = os.getenv("SUBTITLE_TOOL_RESULT_BACKEND", BROKER_URL)
TASK_ALWAYS_EAGER = _env_flag("SUBTITLE_TOOL_TASK_ALWAYS_EAGER")

WORK_DIR = Path(os.getenv("SUBTITLE_TOOL_WORK_DIR", "work")).resolve()

# Clamp overlapping segments before rendering instead of passing them through.
CLAMP_OVERLAPS = _env_flag("SUBTITLE_TOOL_CLAMP_OVERLAPS")

GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")


def get_gemini_key() -> Optional[str]:
    """Read the Gemini API key, preferring GEMINI_API_KEY over GEMINI_KEY."""
    return os.getenv("GEMINI_API_KEY") or os.getenv("GEMINI_KEY")


__all__ = [
    "BROKER_URL",
    "CLAMP_OVERLAPS",
    "GEMINI_MODEL",
    "RESULT_BACKEND",
    "TASK_ALWAYS_EAGER",
    "WORK_DIR",
    "get_gemini_key",
]
