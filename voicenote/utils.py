"""
voicenote.utils - Shared utility functions.

Path helpers for vault-relative note and audio locations.
"""

from __future__ import annotations

import posixpath


def get_base_file_name(file_name: str) -> str:
    """Strip directories and the final extension from a file name.

    Args:
        file_name: File name or vault path, e.g. "audio/rec.webm"

    Returns:
        Base name without extension, e.g. "rec"
    """
    name = posixpath.basename(file_name)
    stem, _ = posixpath.splitext(name)
    return stem or name


def join_vault_path(directory: str, name: str) -> str:
    """Join an optional vault directory prefix and a file name.

    An empty directory yields the bare name, matching how notes and
    recordings land in the vault root when no folder is configured.
    """
    directory = directory.strip().strip("/")
    if not directory:
        return name
    return f"{directory}/{name}"


def audio_storage_path(audio_dir: str, file_name: str) -> str:
    """Vault path where a recording is persisted."""
    return join_vault_path(audio_dir, file_name)


def note_path_for(note_dir: str, audio_name: str) -> str:
    """Vault path of the note created for a recording."""
    return join_vault_path(note_dir, f"{get_base_file_name(audio_name)}.md")


def format_size(num_bytes: int) -> str:
    """Format a byte count as kilobytes, e.g. 4096 -> "4.1 KB"."""
    return f"{num_bytes / 1000:.1f} KB"


def mask_secret(value: str) -> str:
    """Mask an API key for display, keeping the last four characters."""
    if not value:
        return "(not set)"
    if len(value) <= 4:
        return "****"
    return f"****{value[-4:]}"
