"""
voicenote.transcribe.submitter - Speech-to-text submission.

Posts a recording as multipart form data to a Whisper-compatible
transcription endpoint and normalizes the response, plain or segmented,
into a single flat string.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from voicenote.client import TRANSCRIPTION_TIMEOUT, bearer_headers, client_session
from voicenote.config import TranscriptionConfig
from voicenote.exceptions import ConfigurationError, PersistenceError, TranscriptionError
from voicenote.host import NoteStorage
from voicenote.models import AudioPayload, ResponseShape, TranscriptionResult
from voicenote.utils import audio_storage_path, format_size

logger = logging.getLogger(__name__)


def build_form(
    audio: AudioPayload, config: TranscriptionConfig
) -> tuple[dict[str, str], dict[str, tuple[str, bytes]]]:
    """Build the multipart data and file fields for a transcription request.

    Returns:
        (data fields, file fields) as accepted by httpx
    """
    data = {
        "model": config.model,
        "language": config.language,
    }
    if config.prompt:
        data["prompt"] = config.prompt
    files = {"file": (audio.name, audio.data)}
    return data, files


def normalize_response(payload: Any, shape: ResponseShape) -> str:
    """Flatten a transcription response body into text.

    Segmented responses are joined with newlines in the order received.

    Raises:
        TranscriptionError: If the field the shape expects is missing
    """
    if not isinstance(payload, dict):
        raise TranscriptionError(f"Unexpected transcription response: {payload!r}")

    if shape is ResponseShape.SEGMENTED:
        segments = payload.get("segments")
        if not isinstance(segments, list):
            raise TranscriptionError("Transcription response has no segments")
        texts = []
        for i, segment in enumerate(segments):
            if not isinstance(segment, dict) or not isinstance(segment.get("text"), str):
                raise TranscriptionError(f"Segment {i} has no text")
            texts.append(segment["text"])
        return "\n".join(texts)

    text = payload.get("text")
    if not isinstance(text, str):
        raise TranscriptionError("Transcription response has no text")
    return text


class TranscriptionSubmitter:
    """Sends recordings to a transcription endpoint.

    Args:
        client: Optional shared AsyncClient; one is opened per call if None
        storage: Where recordings are persisted when saving is enabled
        timeout: Request timeout
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        storage: NoteStorage | None = None,
        timeout: httpx.Timeout = TRANSCRIPTION_TIMEOUT,
    ) -> None:
        self.client = client
        self.storage = storage
        self.timeout = timeout

    async def submit(self, audio: AudioPayload, config: TranscriptionConfig) -> TranscriptionResult:
        """Transcribe a recording.

        Args:
            audio: The recording
            config: Endpoint, credentials and interpretation settings

        Returns:
            Normalized transcription result

        Raises:
            ConfigurationError: If no API key is configured
            TranscriptionError: If the request or response is unusable
        """
        if not config.api_key:
            raise ConfigurationError(
                "API key is missing. Please add your API key in the settings."
            )

        logger.debug("Sending audio data size: %s (%s)", format_size(audio.size), audio.name)

        audio_path, warnings = await self._persist(audio, config)
        shape = ResponseShape.from_flag(config.use_segments)
        data, files = build_form(audio, config)

        try:
            async with client_session(self.client, self.timeout) as session:
                response = await session.post(
                    config.api_url,
                    data=data,
                    files=files,
                    headers=bearer_headers(config.api_key),
                    timeout=self.timeout,
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            raise TranscriptionError(
                f"Transcription failed with status {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise TranscriptionError(f"Transcription request failed: {e}") from e
        except ValueError as e:
            raise TranscriptionError(f"Transcription response is not JSON: {e}") from e

        text = normalize_response(payload, shape)
        logger.debug("Transcribed %s (%s response, %d chars)", audio.name, shape.value, len(text))

        return TranscriptionResult(
            text=text,
            shape=shape,
            audio_path=audio_path,
            warnings=warnings,
        )

    async def _persist(
        self, audio: AudioPayload, config: TranscriptionConfig
    ) -> tuple[str | None, tuple[str, ...]]:
        """Save the raw recording. Failures are reported, never raised."""
        if not config.save_audio:
            return None, ()
        if self.storage is None:
            logger.debug("Audio saving enabled but no storage attached; skipping")
            return None, ()

        path = audio_storage_path(config.audio_dir, audio.name)
        try:
            await self.storage.write_binary(path, audio.data)
        except Exception as e:
            error = PersistenceError(path, str(e))
            logger.warning("Error saving audio file: %s", error)
            return None, (f"Error saving audio file: {error}",)

        logger.debug("Audio saved to %s", path)
        return path, ()
