"""Resolution of note files to note IDs."""

import re
from pathlib import Path
from typing import Literal, Union

from loguru import logger
from pydantic import BaseModel

from zettelkit.domain.note import NoteID
from zettelkit.exceptions import MissingNoteFileError, NoteFileReadError

NOTE_EXTENSION = ".md"

_NOTE_ID_PATTERN = re.compile(r"^[\w\-.,;()@' ]+$")


class AvailableRef(BaseModel):
    """Exactly one file maps to the ID; its content has been read."""

    type: Literal["available"] = "available"
    path: str
    content: str


class AmbiguousRef(BaseModel):
    """Two or more files map to the same ID."""

    type: Literal["ambiguous"] = "ambiguous"
    paths: list[str]


NoteRef = Union[AvailableRef, AmbiguousRef]


def note_id_from_path(path: Path | str) -> NoteID | None:
    """Derive a note ID from a file path.

    The ID is the filename without its extension; folders are not part of it.

    Args:
        path: Path of the note file, absolute or relative

    Returns:
        The note ID, or None if the file is not a note or its name is not a valid ID
    """
    path = Path(path)
    if path.suffix != NOTE_EXTENSION:
        return None
    stem = path.stem
    if not stem or stem != stem.strip() or not _NOTE_ID_PATTERN.match(stem):
        return None
    return stem


def read_note_file(path: Path) -> str:
    """Read a note, replacing invalid UTF-8 sequences instead of failing."""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
    except FileNotFoundError as e:
        raise MissingNoteFileError(path) from e
    except OSError as e:
        raise NoteFileReadError(path, e.strerror or str(e)) from e


class NoteIdResolver:
    """Maps note files to IDs and detects ID collisions."""

    def __init__(self, base_path: Path):
        """
        Initialize NoteIdResolver.

        Args:
            base_path: Notes directory the file paths are relative to
        """
        self.base_path = Path(base_path)

    def resolve(self, files: list[Path]) -> dict[NoteID, NoteRef]:
        """Resolve each file to a note ID in a single pass over ``files``.

        The first file seen for an ID is read eagerly. A later file with the same
        ID turns the entry into an AmbiguousRef listing every colliding path.

        Args:
            files: Note files, in the order they should be considered

        Returns:
            Mapping of note ID to what the ID refers to

        Raises:
            MissingNoteFileError: If a file vanished before it could be read
            NoteFileReadError: If a file could not be read for another reason
        """
        refs: dict[NoteID, NoteRef] = {}

        for file in files:
            relative_path = self._relative_path(file)
            note_id = note_id_from_path(relative_path)
            if note_id is None:
                logger.warning(f"Skipping file without a valid note ID: {relative_path}")
                continue

            existing = refs.get(note_id)
            if existing is None:
                logger.debug(f"Reading {relative_path}")
                content = read_note_file(self.base_path / relative_path)
                refs[note_id] = AvailableRef(path=relative_path, content=content)
            elif isinstance(existing, AvailableRef):
                logger.debug(f"Duplicate note ID {note_id}: {existing.path}, {relative_path}")
                refs[note_id] = AmbiguousRef(paths=[existing.path, relative_path])
            else:
                refs[note_id] = AmbiguousRef(paths=[*existing.paths, relative_path])

        return refs

    def _relative_path(self, file: Path) -> str:
        file = Path(file)
        if file.is_relative_to(self.base_path):
            file = file.relative_to(self.base_path)
        return file.as_posix()
