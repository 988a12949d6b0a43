"""
Voicenote - recorded audio to Markdown notes.

Turns a recording into note text through a two-stage remote pipeline:
speech-to-text transcription → optional LLM post-processing → placement
into a new note or at the cursor of an open one.
"""

__version__ = "0.1.0"
