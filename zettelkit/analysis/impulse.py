"""The index value consumed by renderers.

All heavy graph computations happen here, producing a value that a renderer can
display without touching the graph again.
"""

from enum import Enum
from typing import Callable

from pydantic import BaseModel

from zettelkit.domain.errors import ZettelError
from zettelkit.domain.graph import ZettelGraph
from zettelkit.domain.note import ConnectionKind, Note, NoteID

from .analyzer import (
    Forest,
    ZettelTree,
    backlinks_multi,
    category_clusters,
    connection_count,
    sort_forest,
)

PINNED_TAG = "pinned"


class Stats(BaseModel):
    zettel_count: int
    connection_count: int


class Impulse(BaseModel):
    """Clusters, orphans, errors and stats of a Zettelkasten."""

    # Clusters on the folgezettel graph, with uplinks
    clusters: list[Forest] = []
    orphans: list[Note] = []
    errors: dict[NoteID, ZettelError] = {}
    stats: Stats
    pinned: list[Note] = []


class TreeMatch(str, Enum):
    ROOT = "root"  # the node itself matches; subtrees may or may not
    UNDER = "under"  # the node does not match, but a descendant does


class MatchedTree(BaseModel):
    match: TreeMatch | None = None
    note: Note
    uplinks: list[Note] = []
    children: list["MatchedTree"] = []


class ImpulseSearch(BaseModel):
    """Parts of an Impulse matching a search query."""

    query: str | None = None
    pinned: list[Note] = []
    orphans: list[Note] = []
    clusters: list[list[MatchedTree]] = []


def build_impulse(graph: ZettelGraph, errors: dict[NoteID, ZettelError]) -> Impulse:
    """Compute the index value for a graph and its errors."""
    partition = category_clusters(graph)
    clusters = [
        sort_forest(backlinks_multi(ConnectionKind.HIERARCHICAL, forest, graph))
        for forest in partition.clusters
    ]
    # Clusters containing the most recent note come first
    clusters.sort(key=lambda forest: max(tree.max_id() for tree in forest), reverse=True)

    return Impulse(
        clusters=clusters,
        orphans=partition.orphans,
        errors=errors,
        stats=Stats(zettel_count=len(graph), connection_count=connection_count(graph)),
        pinned=notes_by_tag(graph.get_notes(), PINNED_TAG),
    )


def notes_by_tag(notes: list[Note], tag: str) -> list[Note]:
    return [note for note in notes if tag in note.tags]


def match_note(query: str | None, note: Note) -> bool:
    """Whether a note matches a search query.

    ``tag:<name>`` matches notes carrying that tag; any other query is a
    case-insensitive title substring. No query matches every note.
    """
    if not query:
        return True
    if query.startswith("tag:"):
        return query[len("tag:") :] in note.tags
    return query.lower() in note.title.lower()


def search_tree(predicate: Callable[[Note], bool], tree: ZettelTree) -> MatchedTree:
    """Mark each node of a tree by whether it or one of its descendants matches."""
    children = [search_tree(predicate, child) for child in tree.children]
    if predicate(tree.note):
        match = TreeMatch.ROOT
    elif any(tree_matches(child) for child in children):
        match = TreeMatch.UNDER
    else:
        match = None
    return MatchedTree(match=match, note=tree.note, uplinks=tree.uplinks, children=children)


def tree_matches(tree: MatchedTree) -> bool:
    return tree.match is not None


def search_impulse(impulse: Impulse, query: str | None) -> ImpulseSearch:
    """Filter an Impulse down to what matches ``query``.

    Clusters in which no tree matches are left out.
    """

    def predicate(note: Note) -> bool:
        return match_note(query, note)

    clusters = []
    for forest in impulse.clusters:
        matched = [search_tree(predicate, tree) for tree in forest]
        if any(tree_matches(tree) for tree in matched):
            clusters.append(matched)

    return ImpulseSearch(
        query=query,
        pinned=[note for note in impulse.pinned if predicate(note)],
        orphans=[note for note in impulse.orphans if predicate(note)],
        clusters=clusters,
    )
