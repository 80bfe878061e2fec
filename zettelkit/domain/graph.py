"""Directed graph of notes with typed edges."""

from typing import Iterable, Iterator

from pydantic import BaseModel

from zettelkit.domain.note import ConnectionKind, Note, NoteID


class Edge(BaseModel):
    """A resolved link between two notes in the graph."""

    source: NoteID
    target: NoteID
    kind: ConnectionKind
    context: str = ""  # surrounding text where the link appears


class GraphSnapshot(BaseModel):
    """Serializable form of a ZettelGraph."""

    notes: list[Note] = []
    edges: list[Edge] = []


class ZettelGraph:
    """Directed multigraph over note IDs, with edges labelled by ConnectionKind.

    Vertices live in an arena sorted by note ID; a vertex's handle is its index
    in that order. Edges are stored once and referenced by index from per-vertex
    outgoing/incoming lists. The graph is not mutated after construction.
    """

    def __init__(self, notes: Iterable[Note] = (), edges: Iterable[Edge] = ()) -> None:
        self._notes: list[Note] = sorted(notes, key=lambda note: note.id)
        self._handles: dict[NoteID, int] = {}
        for handle, note in enumerate(self._notes):
            if note.id in self._handles:
                raise ValueError(f"Duplicate note ID in graph: {note.id}")
            self._handles[note.id] = handle

        unique_edges: dict[tuple[int, int, ConnectionKind], Edge] = {}
        for edge in edges:
            if edge.source not in self._handles or edge.target not in self._handles:
                raise ValueError(f"Dangling edge: {edge.source} -> {edge.target}")
            key = (self._handles[edge.source], self._handles[edge.target], edge.kind)
            # Repeated links keep the first context seen
            unique_edges.setdefault(key, edge)

        self._edges: list[Edge] = [
            unique_edges[key]
            for key in sorted(unique_edges, key=lambda k: (k[0], k[1], k[2].value))
        ]
        self._outgoing: list[list[int]] = [[] for _ in self._notes]
        self._incoming: list[list[int]] = [[] for _ in self._notes]
        for index, edge in enumerate(self._edges):
            self._outgoing[self._handles[edge.source]].append(index)
            self._incoming[self._handles[edge.target]].append(index)

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._handles

    def __iter__(self) -> Iterator[Note]:
        return iter(self._notes)

    def get_note(self, note_id: NoteID) -> Note | None:
        """Get a note by its ID."""
        handle = self._handles.get(note_id)
        return self._notes[handle] if handle is not None else None

    def get_notes(self) -> list[Note]:
        """Get all notes, ordered by ID."""
        return list(self._notes)

    def handle(self, note_id: NoteID) -> int:
        """Get the arena index of a note. Raises KeyError for unknown IDs."""
        return self._handles[note_id]

    def edges(self, kind: ConnectionKind | None = None) -> list[Edge]:
        """Get all edges, optionally only those of the given kind."""
        return [edge for edge in self._edges if kind is None or edge.kind == kind]

    def edge_count(self) -> int:
        return len(self._edges)

    def outgoing(self, note_id: NoteID, kind: ConnectionKind | None = None) -> list[Edge]:
        """Get edges leaving the given note."""
        handle = self._handles.get(note_id)
        if handle is None:
            return []
        edges = (self._edges[i] for i in self._outgoing[handle])
        return [edge for edge in edges if kind is None or edge.kind == kind]

    def incoming(self, note_id: NoteID, kind: ConnectionKind | None = None) -> list[Edge]:
        """Get edges pointing at the given note."""
        handle = self._handles.get(note_id)
        if handle is None:
            return []
        edges = (self._edges[i] for i in self._incoming[handle])
        return [edge for edge in edges if kind is None or edge.kind == kind]

    def successors(self, note_id: NoteID, kind: ConnectionKind | None = None) -> list[NoteID]:
        return _unique(edge.target for edge in self.outgoing(note_id, kind))

    def predecessors(self, note_id: NoteID, kind: ConnectionKind | None = None) -> list[NoteID]:
        return _unique(edge.source for edge in self.incoming(note_id, kind))

    def subgraph(self, kind: ConnectionKind) -> "ZettelGraph":
        """Same vertices, restricted to edges of one kind."""
        return ZettelGraph(self._notes, self.edges(kind))

    def strip_surrounding_context(self) -> "ZettelGraph":
        """Drop link contexts from edges and note payloads.

        Context is only needed while rendering; the persisted graph does not keep it.
        """
        notes = [
            note.model_copy(
                update={
                    "outgoing_links": [
                        link.model_copy(update={"context": ""}) for link in note.outgoing_links
                    ]
                }
            )
            for note in self._notes
        ]
        edges = [edge.model_copy(update={"context": ""}) for edge in self._edges]
        return ZettelGraph(notes, edges)

    def sans_content(self) -> "ZettelGraph":
        """Same graph with raw note content dropped from the vertices."""
        return ZettelGraph([note.sans_content() for note in self._notes], self._edges)

    def to_snapshot(self) -> GraphSnapshot:
        return GraphSnapshot(notes=list(self._notes), edges=list(self._edges))

    @classmethod
    def from_snapshot(cls, snapshot: GraphSnapshot) -> "ZettelGraph":
        return cls(snapshot.notes, snapshot.edges)


def _unique(note_ids: Iterable[NoteID]) -> list[NoteID]:
    seen: dict[NoteID, None] = {}
    for note_id in note_ids:
        seen.setdefault(note_id, None)
    return list(seen)
