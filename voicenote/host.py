"""
voicenote.host - Host storage and editor capabilities.

The pipeline never touches files or editors directly; it calls into the
protocols below. LocalVault and FileEditor implement them on a plain
directory of Markdown notes.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Protocol, runtime_checkable

from voicenote.exceptions import RoutingError
from voicenote.io import read_text, write_bytes, write_text
from voicenote.models import CursorPosition

logger = logging.getLogger(__name__)


@runtime_checkable
class NoteStorage(Protocol):
    """Binary and note writes addressed by vault-relative path."""

    async def write_binary(self, path: str, data: bytes) -> None: ...

    async def create(self, path: str, content: str) -> None: ...


@runtime_checkable
class Workspace(Protocol):
    """Opens notes for the user."""

    async def open_note(self, path: str) -> None: ...


@runtime_checkable
class Editor(Protocol):
    """Cursor access on an open document."""

    def get_cursor(self) -> CursorPosition: ...

    def replace_range(self, text: str, position: CursorPosition) -> None: ...

    def set_cursor(self, position: CursorPosition) -> None: ...


@runtime_checkable
class EditingContext(Protocol):
    """The active document view; ``editor`` is None when it is not editable."""

    @property
    def editor(self) -> Editor | None: ...


class LocalVault:
    """A directory of notes acting as storage and workspace.

    Paths are vault-relative POSIX strings. Existing notes are never
    overwritten; recordings are.
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self.opened: list[str] = []

    def resolve(self, path: str) -> Path:
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Path escapes the vault: {path}")
        return self.root.joinpath(*relative.parts)

    async def write_binary(self, path: str, data: bytes) -> None:
        target = self.resolve(path)
        write_bytes(target, data)
        logger.debug("Wrote %d bytes to %s", len(data), target)

    async def create(self, path: str, content: str) -> None:
        target = self.resolve(path)
        if target.exists():
            raise FileExistsError(f"Note already exists: {path}")
        write_text(target, content)
        logger.debug("Created note %s", target)

    async def open_note(self, path: str) -> None:
        self.opened.append(path)
        logger.debug("Opened note %s", path)


class FileEditor:
    """An existing Markdown file loaded into memory with a cursor."""

    def __init__(self, path: Path, cursor: CursorPosition | None = None) -> None:
        self.path = path
        self.lines = read_text(path).split("\n")
        self._cursor = cursor or CursorPosition()
        self._check(self._cursor)

    def _check(self, position: CursorPosition) -> None:
        if position.line >= len(self.lines):
            raise RoutingError(
                f"Cursor line {position.line} is past the end of {self.path.name} "
                f"({len(self.lines)} lines)"
            )
        if position.ch > len(self.lines[position.line]):
            raise RoutingError(
                f"Cursor column {position.ch} is past the end of line {position.line}"
            )

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def get_cursor(self) -> CursorPosition:
        return self._cursor

    def replace_range(self, text: str, position: CursorPosition) -> None:
        self._check(position)
        line = self.lines[position.line]
        updated = line[: position.ch] + text + line[position.ch :]
        self.lines[position.line : position.line + 1] = updated.split("\n")

    def set_cursor(self, position: CursorPosition) -> None:
        self._cursor = position

    def save(self) -> None:
        write_text(self.path, self.text)


class FileEditingContext:
    """Editing context over a single file, or a non-editable one."""

    def __init__(self, editor: Editor | None) -> None:
        self._editor = editor

    @property
    def editor(self) -> Editor | None:
        return self._editor
