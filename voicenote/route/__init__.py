"""
voicenote.route - Output placement.

Pipeline Stage 3: new note with an embedded recording, or insertion at
the cursor of the open document.
"""

from __future__ import annotations

from voicenote.route.router import OutputRouter, note_content

__all__ = ["OutputRouter", "note_content"]
