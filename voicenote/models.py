"""
voicenote.models - Value objects passed between pipeline stages.

Every model is frozen: a stage receives its inputs by value and returns
new values, so concurrent runs never share mutable state.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from voicenote.utils import get_base_file_name

CHAT_MODEL_PREFIXES: tuple[str, ...] = ("gpt-3.5-", "gpt-4", "gpt-5", "chatgpt-")


class ResponseShape(str, Enum):
    """How a transcription response body is interpreted."""

    PLAIN = "plain"
    SEGMENTED = "segmented"

    @classmethod
    def from_flag(cls, use_segments: bool) -> ResponseShape:
        return cls.SEGMENTED if use_segments else cls.PLAIN


class RequestShape(str, Enum):
    """Request body and endpoint family used for post-processing."""

    COMPLETION = "completion"
    CHAT = "chat"

    @classmethod
    def for_model(cls, model_name: str) -> RequestShape:
        """Chat-family model names get the chat shape, everything else completion."""
        if model_name.startswith(CHAT_MODEL_PREFIXES):
            return cls.CHAT
        return cls.COMPLETION

    @property
    def endpoint_path(self) -> str:
        if self is RequestShape.CHAT:
            return "/v1/chat/completions"
        return "/v1/completions"


class AudioPayload(BaseModel):
    """A captured recording: raw bytes plus the file name it was saved under."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    name: str = Field(min_length=1)

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def base_name(self) -> str:
        return get_base_file_name(self.name)

    @classmethod
    def from_path(cls, path: Path) -> AudioPayload:
        """Read a recording from disk, keeping its file name."""
        return cls(data=path.read_bytes(), name=path.name)


class TranscriptionResult(BaseModel):
    """Normalized transcription text.

    ``text`` is always a flat string, whichever response shape produced it.
    ``audio_path`` is the vault path the recording was saved to, or None
    when it was not persisted. ``warnings`` collects absorbed failures.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    shape: ResponseShape = ResponseShape.PLAIN
    audio_path: str | None = None
    warnings: tuple[str, ...] = ()


class CursorPosition(BaseModel):
    """Zero-based line and column in an editor."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(default=0, ge=0)
    ch: int = Field(default=0, ge=0)


class RoutingDecision(BaseModel):
    """Create-new-note vs insert-at-cursor, with paths when creating."""

    model_config = ConfigDict(frozen=True)

    create_new: bool
    note_path: str | None = None
    audio_path: str | None = None


class RoutingOutcome(BaseModel):
    """What the router actually did with the final text."""

    model_config = ConfigDict(frozen=True)

    decision: RoutingDecision
    created: bool = False
    opened: bool = False
    inserted: bool = False
    cursor: CursorPosition | None = None
    error: str | None = None
