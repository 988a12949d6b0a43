"""
voicenote.pipeline - End-to-end run for one recording.

submit → post-process → route. Only a missing API key or a failed
transcription stops the run; every later failure degrades to a safe
fallback and is reported on the result.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel, ConfigDict

from voicenote.config import VoicenoteConfig
from voicenote.host import EditingContext, NoteStorage, Workspace
from voicenote.llm.postprocess import PostProcessor
from voicenote.models import AudioPayload, RoutingOutcome, TranscriptionResult
from voicenote.route.router import OutputRouter
from voicenote.transcribe.submitter import TranscriptionSubmitter
from voicenote.utils import audio_storage_path

logger = logging.getLogger(__name__)


class PipelineResult(BaseModel):
    """Everything a caller needs to tell the user what happened."""

    model_config = ConfigDict(frozen=True)

    transcription: TranscriptionResult
    text: str
    outcome: RoutingOutcome

    @property
    def raw_text(self) -> str:
        return self.transcription.text

    @property
    def post_processed(self) -> bool:
        return self.text != self.transcription.text

    @property
    def warnings(self) -> list[str]:
        warnings = list(self.transcription.warnings)
        if self.outcome.error:
            warnings.append(self.outcome.error)
        return warnings


class NotePipeline:
    """Wires the three stages to one set of host capabilities.

    Args:
        storage: Note and recording storage
        workspace: Opens created notes
        client: Optional shared AsyncClient for both remote stages
    """

    def __init__(
        self,
        storage: NoteStorage,
        workspace: Workspace,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.submitter = TranscriptionSubmitter(client=client, storage=storage)
        self.post_processor = PostProcessor(client=client)
        self.router = OutputRouter(storage, workspace)

    async def run(
        self,
        audio: AudioPayload,
        config: VoicenoteConfig,
        context: EditingContext | None = None,
    ) -> PipelineResult:
        """Turn a recording into placed note text.

        Raises:
            ConfigurationError: If no API key is configured
            TranscriptionError: If transcription fails
        """
        transcription = await self.submitter.submit(audio, config.transcription())
        text = await self.post_processor.process(transcription.text, config.post_processing())

        audio_path = transcription.audio_path or audio_storage_path(
            config.save_audio_file_path, audio.name
        )
        outcome = await self.router.route(text, audio_path, context, config.routing())
        logger.debug(
            "Routed %s: created=%s inserted=%s", audio.name, outcome.created, outcome.inserted
        )

        return PipelineResult(transcription=transcription, text=text, outcome=outcome)
