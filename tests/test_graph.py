"""Tests for the ZettelGraph data structure."""

import pytest

from zettelkit.domain.graph import Edge, ZettelGraph
from zettelkit.domain.note import ConnectionKind, Link
from tests.fakes import make_graph, make_note

H = ConnectionKind.HIERARCHICAL
O = ConnectionKind.ORDINARY


def test_vertices_sorted_by_id() -> None:
    graph = make_graph(["c", "a", "b"], [])

    assert [note.id for note in graph] == ["a", "b", "c"]
    assert graph.handle("a") == 0
    assert graph.handle("c") == 2
    assert "b" in graph
    assert "z" not in graph
    assert graph.get_note("z") is None
    assert len(graph) == 3


def test_outgoing_and_incoming() -> None:
    graph = make_graph(["a", "b", "c"], [("a", "b", H), ("a", "c", O), ("c", "b", O)])

    assert [edge.target for edge in graph.outgoing("a")] == ["b", "c"]
    assert [edge.target for edge in graph.outgoing("a", H)] == ["b"]
    assert graph.predecessors("b") == ["a", "c"]
    assert graph.predecessors("b", O) == ["c"]
    assert graph.successors("b") == []
    assert graph.incoming("missing") == []


def test_multigraph_over_kinds() -> None:
    """The same pair may be linked once per kind; repeated links collapse."""
    graph = ZettelGraph(
        [make_note("a"), make_note("b")],
        [
            Edge(source="a", target="b", kind=O, context="first"),
            Edge(source="a", target="b", kind=O, context="second"),
            Edge(source="a", target="b", kind=H),
        ],
    )

    assert graph.edge_count() == 2
    assert graph.successors("a") == ["b"]
    assert graph.outgoing("a", O)[0].context == "first"


def test_dangling_edge_rejected() -> None:
    with pytest.raises(ValueError, match="Dangling"):
        make_graph(["a"], [("a", "b", O)])


def test_duplicate_vertex_rejected() -> None:
    with pytest.raises(ValueError, match="Duplicate"):
        ZettelGraph([make_note("a"), make_note("a")])


def test_subgraph_keeps_vertices() -> None:
    graph = make_graph(["a", "b", "c"], [("a", "b", H), ("b", "c", O)])

    folgezettel = graph.subgraph(H)

    assert len(folgezettel) == 3
    assert folgezettel.edges() == graph.edges(H)
    assert folgezettel.edge_count() == 1


def test_strip_surrounding_context() -> None:
    note = make_note("a", content="see [[b]]", outgoing_links=[Link(target="b", context="see")])
    graph = ZettelGraph(
        [note, make_note("b")], [Edge(source="a", target="b", kind=O, context="see [[b]]")]
    )

    stripped = graph.strip_surrounding_context().sans_content()

    assert [edge.context for edge in stripped.edges()] == [""]
    assert stripped.get_note("a").outgoing_links[0].context == ""
    assert stripped.get_note("a").content == ""
    # the original graph is untouched
    assert graph.edges()[0].context == "see [[b]]"
    assert graph.get_note("a").content == "see [[b]]"


def test_snapshot_round_trip() -> None:
    graph = make_graph(["a", "b", "c"], [("a", "b", H), ("c", "a", O)])

    restored = ZettelGraph.from_snapshot(graph.to_snapshot())

    assert restored.get_notes() == graph.get_notes()
    assert restored.edges() == graph.edges()
