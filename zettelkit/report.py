"""Plain-text report of per-note errors."""

from zettelkit.domain.errors import ZettelError
from zettelkit.domain.note import NoteID

BULLET = "  - "


def indent_all_but_first_line(text: str, n: int) -> str:
    lines = text.splitlines() or [""]
    return "\n".join([lines[0], *(" " * n + line for line in lines[1:])])


def format_note_errors(note_id: NoteID, messages: list[str]) -> str:
    """Format the errors of one note.

    The first line is ``E <id>``; each message follows as a bullet, with the
    continuation lines of multi-line messages aligned under the bullet text.
    """
    lines = [f"E {note_id}"]
    for message in messages:
        lines.append(BULLET + indent_all_but_first_line(message, len(BULLET)))
    return "\n".join(lines) + "\n"


def format_error_report(errors: dict[NoteID, ZettelError]) -> str:
    """Format every erroring note, ordered by note ID."""
    return "".join(
        format_note_errors(note_id, error.messages()) for note_id, error in sorted(errors.items())
    )
