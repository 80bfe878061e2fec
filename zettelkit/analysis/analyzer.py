"""Pure queries over a built ZettelGraph: clusters, backlinks and display order."""

from collections import deque
from typing import Iterator

from pydantic import BaseModel

from zettelkit.domain.graph import ZettelGraph
from zettelkit.domain.note import ConnectionKind, Note, NoteID


class ZettelTree(BaseModel):
    """A note in a cluster forest, with the notes linking up to it."""

    note: Note
    uplinks: list[Note] = []
    children: list["ZettelTree"] = []

    def note_ids(self) -> Iterator[NoteID]:
        yield self.note.id
        for child in self.children:
            yield from child.note_ids()

    def max_id(self) -> NoteID:
        return max(self.note_ids())


Forest = list[ZettelTree]


class ClusterPartition(BaseModel):
    """Clusters of the folgezettel graph, and the notes outside any cluster."""

    clusters: list[Forest] = []
    orphans: list[Note] = []


def connection_count(graph: ZettelGraph) -> int:
    """Total number of edges, across all connection kinds."""
    return graph.edge_count()


def category_clusters(graph: ZettelGraph) -> ClusterPartition:
    """Group notes into clusters connected by hierarchical edges.

    Each weakly connected component of the hierarchical subgraph becomes a
    forest rooted at the notes with no incoming hierarchical edge. A note with
    several parents appears under each of them, but its own subtree is expanded
    only under the first parent reached (depth-first, in note ID order).
    Components with no root (pure cycles) are rooted at their lowest uncovered
    note ID. Single-note components are orphans.

    Args:
        graph: The note graph

    Returns:
        ClusterPartition with clusters in order of their lowest note ID. This is
        not the display order: ``build_impulse`` re-sorts clusters by their
        highest note ID, descending.
    """
    folgezettel = graph.subgraph(ConnectionKind.HIERARCHICAL)
    partition = ClusterPartition()

    for component in _weakly_connected_components(folgezettel):
        if len(component) == 1:
            partition.orphans.append(folgezettel.get_note(component[0]))
            continue

        roots = [
            note_id
            for note_id in component
            if not folgezettel.predecessors(note_id, ConnectionKind.HIERARCHICAL)
        ]
        expanded: set[NoteID] = set()
        forest = [_unfold(folgezettel, root, (), expanded) for root in roots]

        for note_id in component:
            if note_id not in expanded:
                forest.append(_unfold(folgezettel, note_id, (), expanded))

        partition.clusters.append(forest)

    return partition


def orphans(graph: ZettelGraph) -> list[Note]:
    """Notes without any hierarchical edge."""
    return category_clusters(graph).orphans


def backlinks_multi(kind: ConnectionKind, forest: Forest, graph: ZettelGraph) -> Forest:
    """Annotate every note of a forest with its backlinks of the given kind.

    Only backlinks from notes that are themselves part of the forest are kept.

    Args:
        kind: Connection kind of the backlinks
        forest: Cluster forest to annotate
        graph: Graph the forest was computed from

    Returns:
        A new forest with ``uplinks`` set on every node
    """
    members = {note_id for tree in forest for note_id in tree.note_ids()}

    def annotate(tree: ZettelTree) -> ZettelTree:
        uplinks = [
            graph.get_note(source_id)
            for source_id in sorted(graph.predecessors(tree.note.id, kind))
            if source_id in members and source_id != tree.note.id
        ]
        return ZettelTree(
            note=tree.note,
            uplinks=uplinks,
            children=[annotate(child) for child in tree.children],
        )

    return [annotate(tree) for tree in forest]


def sort_forest(forest: Forest) -> Forest:
    """Order sibling trees so that those holding the most recent note come first.

    Children are sorted before their parents; siblings are ordered by the highest
    note ID in their subtree, descending.
    """
    trees = [tree.model_copy(update={"children": sort_forest(tree.children)}) for tree in forest]
    return sorted(trees, key=lambda tree: (tree.max_id(), tree.note.id), reverse=True)


def _weakly_connected_components(graph: ZettelGraph) -> list[list[NoteID]]:
    """Components of the graph with edge direction ignored, each sorted by ID."""
    visited: set[NoteID] = set()
    components = []

    for note in graph:
        if note.id in visited:
            continue

        component = []
        queue = deque([note.id])
        visited.add(note.id)
        while queue:
            current_id = queue.popleft()
            component.append(current_id)
            for neighbour_id in graph.successors(current_id) + graph.predecessors(current_id):
                if neighbour_id not in visited:
                    visited.add(neighbour_id)
                    queue.append(neighbour_id)

        components.append(sorted(component))

    return components


def _unfold(
    graph: ZettelGraph, note_id: NoteID, path: tuple[NoteID, ...], expanded: set[NoteID]
) -> ZettelTree:
    """Expand the tree under a note.

    Each note's subtree is expanded only once per component. A note reached again
    through another parent is listed there as a leaf, and notes on the current
    path are skipped.
    """
    expanded.add(note_id)
    path = (*path, note_id)
    children = []
    for child_id in graph.successors(note_id, ConnectionKind.HIERARCHICAL):
        if child_id in path:
            continue
        if child_id in expanded:
            children.append(ZettelTree(note=graph.get_note(child_id)))
        else:
            children.append(_unfold(graph, child_id, path, expanded))
    return ZettelTree(note=graph.get_note(note_id), children=children)
