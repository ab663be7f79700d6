"""Transcription providers that turn audio into timestamped text."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import httpx
from google import genai
from google.genai import errors, types

from .config import GEMINI_MODEL, get_gemini_key

LOGGER = logging.getLogger(__name__)

TRANSCRIPTION_PROMPT = """Please transcribe this audio and segment it into natural phrases or sentences. For each segment:
1. Provide the start time and end time in seconds
2. Keep segments between 2-4 seconds long
3. Format each segment as: "[start_seconds]-[end_seconds]: [text]"
4. Make sure segments don't overlap
5. Start from the beginning of the audio (0 seconds)"""


class ProviderError(RuntimeError):
    """Base class for failures of the transcription provider."""


class ProviderConfigError(ProviderError):
    """The provider cannot be used with the current configuration."""


class ProviderUnavailableError(ProviderError):
    """The provider could not be reached or refused the request."""


class ProviderResponseError(ProviderError):
    """The provider answered without any usable text."""


class TranscriptionProvider(Protocol):
    def transcribe(self, audio_bytes: bytes, mime_type: str, prompt: str) -> str:
        ...


class GeminiProvider:
    """Transcribe audio with a Gemini model through the google-genai SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[Any] = None,
    ) -> None:
        self.model = model or GEMINI_MODEL
        if client is None:
            api_key = api_key or get_gemini_key()
            if not api_key:
                raise ProviderConfigError("Gemini API key not found. Set GEMINI_API_KEY.")
            client = genai.Client(api_key=api_key)
        self._client = client

    def transcribe(self, audio_bytes: bytes, mime_type: str, prompt: str) -> str:
        LOGGER.info(
            "Requesting transcription from %s (%d bytes, %s)",
            self.model,
            len(audio_bytes),
            mime_type,
        )
        try:
            response = self._client.models.generate_content(
                model=self.model,
                contents=[
                    types.Part.from_bytes(data=audio_bytes, mime_type=mime_type),
                    prompt,
                ],
            )
        except errors.APIError as exc:
            LOGGER.warning("Gemini rejected the request: %s", exc)
            raise ProviderUnavailableError(f"Gemini request failed: {exc}") from exc
        except httpx.HTTPError as exc:
            LOGGER.warning("Could not reach Gemini: %s", exc)
            raise ProviderUnavailableError(f"Could not reach Gemini: {exc}") from exc

        text = getattr(response, "text", None)
        if not text or not text.strip():
            raise ProviderResponseError("Gemini returned an empty transcription")
        LOGGER.debug("Gemini response:\n%s", text)
        return text


__all__ = [
    "GeminiProvider",
    "ProviderConfigError",
    "ProviderError",
    "ProviderResponseError",
    "ProviderUnavailableError",
    "TRANSCRIPTION_PROMPT",
    "TranscriptionProvider",
]
