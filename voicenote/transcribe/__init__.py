"""
voicenote.transcribe - Remote speech-to-text.

Pipeline Stage 1: submit the recording to a Whisper-compatible endpoint
and normalize plain or segmented responses into flat text.
"""

from __future__ import annotations

from voicenote.transcribe.submitter import TranscriptionSubmitter, normalize_response

__all__ = ["TranscriptionSubmitter", "normalize_response"]
