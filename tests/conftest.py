"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
import yaml

from voicenote.config import PostProcessingConfig, TranscriptionConfig
from voicenote.models import AudioPayload

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture
def mock_http() -> Callable[[Handler], tuple[httpx.AsyncClient, RecordingTransport]]:
    """Factory for an AsyncClient backed by a recording mock transport."""

    def factory(handler: Handler) -> tuple[httpx.AsyncClient, RecordingTransport]:
        transport = RecordingTransport(handler)
        return httpx.AsyncClient(transport=transport), transport

    return factory


@pytest.fixture
def audio() -> AudioPayload:
    """A 4 KB fake webm recording."""
    return AudioPayload(data=b"\x1a\x45\xdf\xa3" + b"\x00" * 4092, name="rec.webm")


@pytest.fixture
def transcription_config() -> TranscriptionConfig:
    return TranscriptionConfig(
        api_url="https://stt.example.com/v1/audio/transcriptions",
        api_key="sk-test-1234",
        model="whisper-1",
        language="en",
        save_audio=False,
    )


@pytest.fixture
def post_processing_config() -> PostProcessingConfig:
    return PostProcessingConfig(
        enabled=True,
        api_base="https://llm.example.com",
        api_key="sk-llm-5678",
        model="gpt-4",
        custom_prompt="Fix punctuation.",
    )


@pytest.fixture
def sample_config_dict() -> dict:
    """Return a sample settings dictionary."""
    return {
        "api_key": "sk-test-1234",
        "api_url": "https://stt.example.com/v1/audio/transcriptions",
        "model": "whisper-1",
        "language": "en",
        "save_audio_file": True,
        "save_audio_file_path": "recordings",
        "create_new_file_after_recording": True,
        "create_new_file_after_recording_path": "notes",
        "use_segments_from_transcription": True,
        "post_processing_enabled": False,
    }


@pytest.fixture
def tmp_vault(tmp_path: Path, sample_config_dict: dict) -> Path:
    """Create a vault directory with a voicenote.yaml."""
    vault_dir = tmp_path / "vault"
    vault_dir.mkdir()
    with open(vault_dir / "voicenote.yaml", "w") as f:
        yaml.dump(sample_config_dict, f)
    return vault_dir
