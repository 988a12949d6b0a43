"""
voicenote.route.router - Output placement.

Decides whether the final text becomes a new note (embedding the saved
recording) or is inserted at the cursor of the active document, then
carries the decision out through the host capabilities.
"""

from __future__ import annotations

import logging

from voicenote.config import RoutingConfig
from voicenote.exceptions import RoutingError
from voicenote.host import EditingContext, NoteStorage, Workspace
from voicenote.models import CursorPosition, RoutingDecision, RoutingOutcome
from voicenote.utils import note_path_for

logger = logging.getLogger(__name__)


def note_content(text: str, audio_path: str) -> str:
    """Note body: an embed of the recording followed by the text."""
    return f"![[{audio_path}]]\n{text}"


class OutputRouter:
    """Places transcribed text into the vault."""

    def __init__(self, storage: NoteStorage, workspace: Workspace) -> None:
        self.storage = storage
        self.workspace = workspace

    def decide(
        self,
        audio_path: str,
        context: EditingContext | None,
        config: RoutingConfig,
    ) -> RoutingDecision:
        """Create a new note if always requested or nothing is open."""
        if config.always_create_new or context is None:
            return RoutingDecision(
                create_new=True,
                note_path=note_path_for(config.note_dir, audio_path),
                audio_path=audio_path,
            )
        return RoutingDecision(create_new=False)

    async def route(
        self,
        result: str,
        audio_path: str,
        context: EditingContext | None,
        config: RoutingConfig,
    ) -> RoutingOutcome:
        """Place text per the routing decision.

        Storage failures and missing cursors are reported on the outcome,
        never raised.
        """
        decision = self.decide(audio_path, context, config)
        if decision.create_new:
            return await self._create_note(result, decision)
        return self._insert_at_cursor(result, decision, context)

    async def _create_note(self, text: str, decision: RoutingDecision) -> RoutingOutcome:
        note_path = decision.note_path
        try:
            await self.storage.create(note_path, note_content(text, decision.audio_path))
        except Exception as e:
            error = RoutingError(f"Could not create note {note_path}: {e}")
            logger.warning("%s", error)
            return RoutingOutcome(decision=decision, error=str(error))

        try:
            await self.workspace.open_note(note_path)
        except Exception as e:
            error = RoutingError(f"Created {note_path} but could not open it: {e}")
            logger.warning("%s", error)
            return RoutingOutcome(decision=decision, created=True, error=str(error))

        return RoutingOutcome(decision=decision, created=True, opened=True)

    def _insert_at_cursor(
        self,
        text: str,
        decision: RoutingDecision,
        context: EditingContext,
    ) -> RoutingOutcome:
        editor = context.editor
        if editor is None:
            logger.info("Active document has no editor; skipping insert")
            return RoutingOutcome(decision=decision)

        try:
            cursor = editor.get_cursor()
            editor.replace_range(text, cursor)
        except RoutingError as e:
            logger.info("Skipping insert: %s", e)
            return RoutingOutcome(decision=decision)

        new_cursor = CursorPosition(line=cursor.line, ch=cursor.ch + len(text))
        editor.set_cursor(new_cursor)
        return RoutingOutcome(decision=decision, inserted=True, cursor=new_cursor)
