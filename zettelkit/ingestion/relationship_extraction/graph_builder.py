"""Building the note graph from parsed notes."""

from loguru import logger

from zettelkit.domain.errors import (
    AmbiguousID,
    AmbiguousSlug,
    ParseError,
    QueryResultErrors,
    ZettelError,
)
from zettelkit.domain.graph import Edge, ZettelGraph
from zettelkit.domain.note import Note, NoteID, Slug

from .resolver import ReferenceResolver


class ZettelGraphBuilder:
    """Builds the note graph and collects per-note errors."""

    def build(
        self,
        notes: list[Note],
        ambiguous_ids: dict[NoteID, list[str]] | None = None,
        parse_errors: dict[NoteID, ParseError] | None = None,
    ) -> tuple[ZettelGraph, dict[NoteID, ZettelError]]:
        """Build the graph from successfully parsed notes.

        Notes excluded for an ambiguous slug keep their ID reserved: links to them
        are reported as excluded targets rather than missing ones.

        Args:
            notes: Successfully parsed notes
            ambiguous_ids: Note IDs claimed by more than one file, with their paths
            parse_errors: Notes that failed to parse

        Returns:
            Tuple of (graph, errors keyed by note ID)
        """
        errors: dict[NoteID, ZettelError] = {}
        for note_id, paths in (ambiguous_ids or {}).items():
            errors[note_id] = AmbiguousID(paths=list(paths))
        errors.update(parse_errors or {})

        ordered_notes = sorted(notes, key=lambda note: note.id)
        registered, slugs, slug_errors = self._register_slugs(ordered_notes)
        errors.update(slug_errors)

        resolver = ReferenceResolver(
            note_ids={note.id for note in registered},
            slugs=slugs,
            excluded_ids=set(errors),
        )

        edges = []
        for note in registered:
            note_edges, query_errors = self._build_note_edges(note, resolver)
            edges.extend(note_edges)
            if query_errors is not None:
                errors[note.id] = query_errors

        graph = ZettelGraph(registered, edges)
        logger.info(
            f"Built graph with {len(graph)} notes, {graph.edge_count()} links "
            f"and {len(errors)} erroring notes"
        )
        return graph, dict(sorted(errors.items()))

    @staticmethod
    def _register_slugs(
        notes: list[Note],
    ) -> tuple[list[Note], dict[Slug, NoteID], dict[NoteID, AmbiguousSlug]]:
        """Register slugs in order; the first note to claim a slug keeps it.

        Args:
            notes: Notes in registration order

        Returns:
            Tuple of (notes kept, slug to note ID table, errors for excluded notes)
        """
        registered = []
        slugs: dict[Slug, NoteID] = {}
        errors: dict[NoteID, AmbiguousSlug] = {}

        for note in notes:
            if note.slug in slugs:
                logger.warning(
                    f"Slug '{note.slug}' of {note.id} is already used by {slugs[note.slug]}"
                )
                errors[note.id] = AmbiguousSlug(slug=note.slug)
                continue
            slugs[note.slug] = note.id
            registered.append(note)

        return registered, slugs, errors

    @staticmethod
    def _build_note_edges(
        note: Note, resolver: ReferenceResolver
    ) -> tuple[list[Edge], QueryResultErrors | None]:
        """Resolve a note's links into edges.

        Args:
            note: Note whose outgoing links are resolved
            resolver: Resolver over the finalized vertex and slug tables

        Returns:
            Tuple of (edges, query errors or None when every link resolved)
        """
        resolved, failures = resolver.resolve_links(note.outgoing_links)

        edges = []
        for target_id, link in resolved:
            if target_id == note.id:
                logger.debug(f"Ignoring self-link in {note.id}")
                continue
            edges.append(
                Edge(source=note.id, target=target_id, kind=link.kind, context=link.context)
            )

        if not failures:
            return edges, None
        return edges, QueryResultErrors(slug=note.slug, failures=failures)
