"""
voicenote.llm - LLM post-processing.

Pipeline Stage 2: optional rewrite of the transcription through a
completion or chat endpoint, falling back to the original text.
"""

from __future__ import annotations

from voicenote.llm.postprocess import PostProcessor, build_request, extract_text

__all__ = ["PostProcessor", "build_request", "extract_text"]
