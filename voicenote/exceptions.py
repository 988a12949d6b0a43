"""
voicenote.exceptions - Custom exception classes.

All Voicenote-specific exceptions inherit from VoicenoteError. Only
ConfigurationError and TranscriptionError abort a pipeline run; the
others are absorbed by the stage that raises them.
"""


class VoicenoteError(Exception):
    """Base exception for all Voicenote errors."""

    pass


class ConfigurationError(VoicenoteError):
    """Configuration loading or validation error, e.g. a missing API key."""

    pass


class TranscriptionError(VoicenoteError):
    """Transcription request failed or returned an unexpected response."""

    pass


class PostProcessingError(VoicenoteError):
    """Post-processing request failed or returned no usable text."""

    pass


class PersistenceError(VoicenoteError):
    """Saving the raw audio to storage failed."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class RoutingError(VoicenoteError):
    """Placing the final text into a note failed."""

    pass
