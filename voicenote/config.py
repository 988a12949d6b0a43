"""
voicenote.config - YAML settings loading, validation, per-stage splitting.

Handles loading voicenote.yaml from a vault directory, applying defaults
for every option, and handing each pipeline stage only the settings it
needs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

CONFIG_FILENAME = "voicenote.yaml"

DEFAULT_API_URL = "https://api.openai.com/v1/audio/transcriptions"
DEFAULT_POST_PROCESSING_BASE = "https://api.openai.com"


def _validate_http_url(v: str) -> str:
    if not v.startswith(("http://", "https://")):
        raise ValueError("URL must start with http:// or https://")
    return v.rstrip("/")


class TranscriptionConfig(BaseModel):
    """Settings for a single transcription request."""

    model_config = ConfigDict(frozen=True)

    api_url: str = DEFAULT_API_URL
    api_key: str = ""
    model: str = "whisper-1"
    language: str = "en"
    prompt: str = ""
    use_segments: bool = False
    save_audio: bool = True
    audio_dir: str = ""

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        return _validate_http_url(v)


class PostProcessingConfig(BaseModel):
    """Settings for the optional rewrite pass."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    api_base: str = DEFAULT_POST_PROCESSING_BASE
    api_key: str = ""
    model: str = "gpt-3.5-turbo"
    custom_prompt: str = ""

    @field_validator("api_base")
    @classmethod
    def validate_api_base(cls, v: str) -> str:
        return _validate_http_url(v)


class RoutingConfig(BaseModel):
    """Where the final text goes."""

    model_config = ConfigDict(frozen=True)

    always_create_new: bool = True
    note_dir: str = ""


class VoicenoteConfig(BaseModel):
    """Resolved settings for a vault. Only ``api_key`` has no usable default."""

    model_config = ConfigDict(extra="ignore")

    api_key: str = ""
    api_url: str = DEFAULT_API_URL
    model: str = "whisper-1"
    prompt: str = ""
    language: str = "en"
    save_audio_file: bool = True
    save_audio_file_path: str = ""
    debug_mode: bool = False
    create_new_file_after_recording: bool = True
    create_new_file_after_recording_path: str = ""
    use_segments_from_transcription: bool = False
    post_processing_enabled: bool = False
    post_processing_api_key: str = ""
    post_processing_api_base_address: str = DEFAULT_POST_PROCESSING_BASE
    post_processing_model_name: str = "gpt-3.5-turbo"
    post_processing_custom_prompt: str = ""

    @field_validator("api_url", "post_processing_api_base_address")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _validate_http_url(v)

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("language must not be empty")
        return v.strip()

    def transcription(self) -> TranscriptionConfig:
        return TranscriptionConfig(
            api_url=self.api_url,
            api_key=self.api_key,
            model=self.model,
            language=self.language,
            prompt=self.prompt,
            use_segments=self.use_segments_from_transcription,
            save_audio=self.save_audio_file,
            audio_dir=self.save_audio_file_path,
        )

    def post_processing(self) -> PostProcessingConfig:
        return PostProcessingConfig(
            enabled=self.post_processing_enabled,
            api_base=self.post_processing_api_base_address,
            api_key=self.post_processing_api_key,
            model=self.post_processing_model_name,
            custom_prompt=self.post_processing_custom_prompt,
        )

    def routing(self) -> RoutingConfig:
        return RoutingConfig(
            always_create_new=self.create_new_file_after_recording,
            note_dir=self.create_new_file_after_recording_path,
        )


def load_config(vault_dir: Path) -> VoicenoteConfig:
    """Load and validate settings from a vault directory.

    Missing keys take their defaults; unknown keys are ignored.

    Raises:
        FileNotFoundError: If the vault has no voicenote.yaml
    """
    config_file = vault_dir / CONFIG_FILENAME
    if not config_file.exists():
        raise FileNotFoundError(f"No {CONFIG_FILENAME} found in {vault_dir}")

    with open(config_file) as f:
        raw_config = yaml.safe_load(f) or {}

    merged = {key: value for key, value in raw_config.items() if value is not None}
    return VoicenoteConfig(**merged)


def create_default_config() -> dict[str, Any]:
    """Create the default settings dict for a new vault."""
    return VoicenoteConfig().model_dump()


def write_config(config: dict[str, Any], path: Path) -> None:
    """Write settings to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def find_config_dir(start: Path | None = None) -> Path | None:
    """Find the vault directory by looking for voicenote.yaml upwards."""
    current = (start or Path.cwd()).resolve()
    while True:
        if (current / CONFIG_FILENAME).exists():
            return current
        if current == current.parent:
            return None
        current = current.parent
