"""Reference resolution for converting link targets to note IDs."""

from loguru import logger

from zettelkit.domain.errors import QueryResultError, ResolutionFailure
from zettelkit.domain.note import Link, NoteID, Slug

NOTE_EXTENSION = ".md"


class ReferenceResolver:
    """Handles resolution of link targets to note IDs."""

    def __init__(
        self,
        note_ids: set[NoteID],
        slugs: dict[Slug, NoteID],
        excluded_ids: set[NoteID] | None = None,
    ):
        """Initialize resolver with the finalized vertex and slug tables.

        Args:
            note_ids: IDs of every note that will be a vertex
            slugs: Mapping of registered slug to the note ID owning it
            excluded_ids: IDs that exist but were dropped (ambiguous ID or slug,
                parse error)
        """
        self.note_ids = note_ids
        self.slugs = slugs
        self.excluded_ids = excluded_ids or set()

    def resolve_links(
        self, links: list[Link]
    ) -> tuple[list[tuple[NoteID, Link]], list[QueryResultError]]:
        """Resolve each link of a note.

        Args:
            links: Outgoing links of a single note

        Returns:
            Tuple of (resolved (target ID, link) pairs, failures for unresolved links)
        """
        resolved = []
        failures = []
        for link in links:
            target_id = self._resolve_single_reference(link.target)
            if target_id is not None:
                resolved.append((target_id, link))
                continue

            reason = (
                ResolutionFailure.EXCLUDED
                if self._strip_extension(link.target) in self.excluded_ids
                else ResolutionFailure.NOT_FOUND
            )
            logger.warning(f"Could not resolve link: {link.target}")
            failures.append(QueryResultError(target=link.target, kind=link.kind, reason=reason))
        return resolved, failures

    def _resolve_single_reference(self, target: str) -> NoteID | None:
        """Resolve a single link target to a note ID.

        Args:
            target: Raw target text from the link

        Returns:
            Resolved note ID or None if not found
        """
        # Try exact ID first
        if target in self.note_ids:
            return target

        # An excluded ID stays reserved even if another note uses it as a slug
        if target in self.excluded_ids:
            return None

        # Then the slug table
        if target in self.slugs:
            return self.slugs[target]

        # Try without .md extension
        stem = self._strip_extension(target)
        if stem != target and stem in self.note_ids:
            return stem

        return None

    @staticmethod
    def _strip_extension(target: str) -> str:
        if target.endswith(NOTE_EXTENSION):
            return target[: -len(NOTE_EXTENSION)]
        return target
