"""Exceptions that abort a whole build.

Per-note problems are never raised; they are collected as ``ZettelError`` values.
"""

from pathlib import Path


class ZettelkitError(Exception):
    """Base exception for build-aborting failures."""

    pass


class MissingNoteFileError(ZettelkitError):
    """Raised when a discovered note file cannot be read."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Note file disappeared during the build: {path}")


class VersionMismatchError(ZettelkitError):
    """Raised when a tool or cache version is older than the configured minimum."""

    def __init__(self, min_version: str, found_version: str, subject: str = "zettelkit"):
        self.min_version = min_version
        self.found_version = found_version
        self.subject = subject
        super().__init__(
            f"Require {subject} minimum version {min_version}, but found version {found_version}"
        )


class NoteFileReadError(ZettelkitError):
    """Raised when a note file exists but cannot be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read note file {path}: {reason}")
