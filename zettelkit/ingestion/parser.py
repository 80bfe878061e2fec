"""Parsing of note files into Note values."""

import re
from concurrent.futures import ThreadPoolExecutor

import yaml
from loguru import logger
from pydantic import ValidationError

from zettelkit.domain.errors import ParseError
from zettelkit.domain.note import Frontmatter, Note, NoteID, Slug

from .content_extractor import ContentExtractor, FrontmatterError


def default_slug(note_id: NoteID) -> Slug:
    """Derive a URL-safe slug from a note ID."""
    slug = re.sub(r"\s+", "_", note_id.strip())
    slug = re.sub(r"[^\w\-.]", "", slug)
    return slug or note_id


class NoteParser:
    """Turns raw note content into Note values, one note at a time.

    Parsing a note never looks at other notes, so ``parse_all`` may spread the
    work over a thread pool; results always come back in input order.
    """

    def __init__(self, *, context_chars: int = 100, workers: int = 1):
        """Initialize the parser.

        Args:
            context_chars: Characters of surrounding text kept for each link
            workers: Number of parsing threads; 1 parses inline
        """
        self.context_chars = context_chars
        self.workers = max(1, workers)
        self.content_extractor = ContentExtractor()

    def parse(self, note_id: NoteID, path: str, content: str) -> Note | ParseError:
        """Parse a single note.

        Args:
            note_id: ID resolved for the file
            path: File path relative to the notes directory
            content: Raw file content

        Returns:
            The parsed Note, or a ParseError describing why it could not be parsed
        """
        logger.debug(f"Parsing {path}")

        try:
            data, body = self.content_extractor.split_frontmatter(content)
            frontmatter = Frontmatter.model_validate(data)
        except yaml.YAMLError as e:
            return ParseError(slug=default_slug(note_id), detail=f"Invalid YAML frontmatter: {e}")
        except FrontmatterError as e:
            return ParseError(slug=default_slug(note_id), detail=str(e))
        except ValidationError as e:
            return ParseError(slug=default_slug(note_id), detail=f"Invalid frontmatter: {e}")

        title = frontmatter.title or self.content_extractor.extract_title(body) or note_id
        slug = (frontmatter.slug or "").strip() or default_slug(note_id)

        return Note(
            id=note_id,
            slug=slug,
            title=title,
            path=path,
            content=content,
            tags=frontmatter.tags,
            date=frontmatter.date,
            outgoing_links=self.content_extractor.extract_links(body, self.context_chars),
        )

    def parse_all(
        self, files: list[tuple[NoteID, str, str]]
    ) -> list[tuple[NoteID, Note | ParseError]]:
        """Parse many notes, preserving input order.

        Args:
            files: List of (note ID, relative path, content)

        Returns:
            List of (note ID, parse result) in the same order as ``files``
        """
        if self.workers == 1 or len(files) < 2:
            results = [self.parse(*file) for file in files]
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                results = list(executor.map(lambda file: self.parse(*file), files))

        return [(note_id, result) for (note_id, _, _), result in zip(files, results)]
