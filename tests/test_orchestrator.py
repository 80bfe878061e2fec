"""End-to-end build tests using a fake cache store and temporary note folders."""

from pathlib import Path
from typing import Callable

import pytest

from scripts.build import main
from zettelkit.cache.local import LocalCacheStore
from zettelkit.cache.schemas import ZettelCache
from zettelkit.config import Settings
from zettelkit.domain.errors import AmbiguousID, ParseError, QueryResultError, QueryResultErrors
from zettelkit.domain.note import ConnectionKind
from zettelkit.exceptions import MissingNoteFileError, NoteFileReadError, VersionMismatchError
from zettelkit.ingestion.orchestrator import ZettelkastenOrchestrator
from tests.fakes import FakeCacheStore

H = ConnectionKind.HIERARCHICAL
O = ConnectionKind.ORDINARY


@pytest.fixture
def small_zettelkasten(write_note: Callable[[str, str], Path]) -> None:
    write_note("A.md", "# Topic A\n\nSee [[[B]]] and [[[C]]].")
    write_note("B.md", "# Topic B\n\nBack to [[A]].")
    write_note("C.md", "---\ntags: [pinned]\n---\n# Topic C\n")
    write_note("D.md", "# Topic D\n\nBroken [[Z]].")
    write_note("sub/E.md", "# Only found recursively")


def test_generate(
    orchestrator: ZettelkastenOrchestrator,
    fake_cache_store: FakeCacheStore,
    small_zettelkasten: None,
) -> None:
    result = orchestrator.generate()

    assert [note.id for note in result.graph] == ["A", "B", "C", "D"]
    assert [(e.source, e.target, e.kind) for e in result.graph.edges()] == [
        ("A", "B", H),
        ("A", "C", H),
        ("B", "A", O),
    ]
    assert result.errors == {
        "D": QueryResultErrors(slug="D", failures=[QueryResultError(target="Z", kind=O)])
    }
    assert result.graph.get_note("A").title == "Topic A"
    assert "See [[[B]]]" in result.graph.get_note("A").content
    assert result.graph.outgoing("A")[0].context != ""
    assert [note.id for note in result.notes] == ["A", "B", "C", "D"]

    impulse = result.impulse()
    assert [[tree.note.id for tree in forest] for forest in impulse.clusters] == [["A"]]
    assert [child.note.id for child in impulse.clusters[0][0].children] == ["C", "B"]
    assert [note.id for note in impulse.orphans] == ["D"]
    assert [note.id for note in impulse.pinned] == ["C"]
    assert impulse.stats.connection_count == 3

    assert result.error_report() == "E D\n  - Zettel 'Z' (in link) does not exist\n"
    assert result.page_paths() == ["A.html", "B.html", "C.html", "D.html", "impulse.html"]

    saved = fake_cache_store.saved[-1]
    assert saved.version == orchestrator.version
    assert saved.config["notes_dir"] == str(orchestrator.settings.notes_dir)
    assert len(saved.graph.notes) == 4
    assert len(saved.graph.edges) == 3
    assert all(edge.context == "" for edge in saved.graph.edges)


def test_recursive_discovery(
    test_settings: Settings, fake_cache_store: FakeCacheStore, small_zettelkasten: None
) -> None:
    settings = test_settings.model_copy(update={"recurse_dir": True})
    orchestrator = ZettelkastenOrchestrator(settings=settings, cache_store=fake_cache_store)

    result = orchestrator.generate()

    assert "E" in result.graph
    assert result.graph.get_note("E").path == "sub/E.md"


def test_ambiguous_ids(
    test_settings: Settings,
    fake_cache_store: FakeCacheStore,
    write_note: Callable[[str, str], Path],
) -> None:
    write_note("one/X.md", "# First X")
    write_note("two/X.md", "# Second X")
    write_note("Y.md", "# Y")
    settings = test_settings.model_copy(update={"recurse_dir": True})
    orchestrator = ZettelkastenOrchestrator(settings=settings, cache_store=fake_cache_store)

    result = orchestrator.generate()

    assert "X" not in result.graph
    assert [note.id for note in result.graph] == ["Y"]
    assert result.errors == {"X": AmbiguousID(paths=["one/X.md", "two/X.md"])}


def test_parse_error_does_not_stop_build(
    orchestrator: ZettelkastenOrchestrator, write_note: Callable[[str, str], Path]
) -> None:
    write_note("good.md", "# Good\n[[bad]]")
    write_note("bad.md", "---\ntitle: [broken\n---\n")

    result = orchestrator.generate()

    assert [note.id for note in result.graph] == ["good"]
    assert isinstance(result.errors["bad"], ParseError)
    assert isinstance(result.errors["good"], QueryResultErrors)


def test_prior_cache_too_old(
    test_settings: Settings,
    small_zettelkasten: None,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """An outdated cache aborts the build before any note is read."""
    store = FakeCacheStore(ZettelCache(version="0.0.1"))
    orchestrator = ZettelkastenOrchestrator(settings=test_settings, cache_store=store)

    def fail_read(path: Path) -> str:
        raise AssertionError(f"Unexpected read of {path}")

    monkeypatch.setattr("zettelkit.ingestion.id_resolver.read_note_file", fail_read)

    with pytest.raises(VersionMismatchError) as exc_info:
        orchestrator.generate()

    assert exc_info.value.found_version == "0.0.1"
    assert store.saved == []


def test_running_tool_too_old(
    test_settings: Settings, fake_cache_store: FakeCacheStore, small_zettelkasten: None
) -> None:
    orchestrator = ZettelkastenOrchestrator(
        settings=test_settings, cache_store=fake_cache_store, version="0.0.9"
    )

    with pytest.raises(VersionMismatchError, match="minimum version 0.1.0"):
        orchestrator.generate()


def test_missing_file_is_fatal(orchestrator: ZettelkastenOrchestrator) -> None:
    with pytest.raises(MissingNoteFileError):
        orchestrator.load_zettelkasten_from([Path("ghost.md")])


def test_build_is_deterministic(
    orchestrator: ZettelkastenOrchestrator,
    write_note: Callable[[str, str], Path],
    small_zettelkasten: None,
) -> None:
    write_note("one/X.md", "# First X")
    write_note("two/X.md", "# Second X")
    files = [
        Path("A.md"),
        Path("B.md"),
        Path("C.md"),
        Path("D.md"),
        Path("one/X.md"),
        Path("two/X.md"),
    ]

    graph1, notes1, errors1 = orchestrator.load_zettelkasten_from(files)
    graph2, notes2, errors2 = orchestrator.load_zettelkasten_from(list(reversed(files)))

    assert graph1.get_notes() == graph2.get_notes()
    assert graph1.edges() == graph2.edges()
    assert notes1 == notes2
    assert errors1 == errors2
    assert errors1["X"] == AmbiguousID(paths=["one/X.md", "two/X.md"])


def test_parallel_parsing_matches_sequential(
    test_settings: Settings, small_zettelkasten: None
) -> None:
    sequential = ZettelkastenOrchestrator(settings=test_settings, cache_store=FakeCacheStore())
    parallel = ZettelkastenOrchestrator(
        settings=test_settings.model_copy(update={"workers": 4}), cache_store=FakeCacheStore()
    )

    result1 = sequential.generate()
    result2 = parallel.generate()

    assert result1.graph.edges() == result2.graph.edges()
    assert result1.errors == result2.errors


def test_local_cache_round_trip(test_settings: Settings, small_zettelkasten: None) -> None:
    store = LocalCacheStore(filepath=test_settings.cache_path)
    orchestrator = ZettelkastenOrchestrator(settings=test_settings, cache_store=store)

    cache = orchestrator.load_zettelkasten_graph()
    loaded = store.load()

    assert loaded is not None
    assert len(loaded.get_graph()) == len(cache.get_graph())
    assert loaded.get_graph().edge_count() == cache.get_graph().edge_count()
    assert loaded.errors == cache.errors

    # a second build reuses the cache file for its version check
    orchestrator.generate()


def test_corrupt_cache_is_ignored(test_settings: Settings, small_zettelkasten: None) -> None:
    test_settings.cache_path.parent.mkdir(parents=True)
    test_settings.cache_path.write_text("{ not json")
    orchestrator = ZettelkastenOrchestrator(
        settings=test_settings, cache_store=LocalCacheStore(filepath=test_settings.cache_path)
    )

    result = orchestrator.generate()

    assert len(result.graph) == 4


def test_build_script(
    notes_directory: Path,
    temp_notes_base: Path,
    small_zettelkasten: None,
    capsys: pytest.CaptureFixture[str],
) -> None:
    exit_code = main(
        in_folder=str(notes_directory),
        cache_file=str(temp_notes_base / "out" / "cache.json"),
        recurse_dir=False,
    )

    assert exit_code == 0
    assert capsys.readouterr().out == "E D\n  - Zettel 'Z' (in link) does not exist\n"
    assert (temp_notes_base / "out" / "cache.json").exists()


def test_build_script_unreadable_note(
    notes_directory: Path,
    temp_notes_base: Path,
    small_zettelkasten: None,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def deny_read(path: Path) -> str:
        raise NoteFileReadError(path, "Permission denied")

    monkeypatch.setattr("zettelkit.ingestion.id_resolver.read_note_file", deny_read)

    exit_code = main(
        in_folder=str(notes_directory),
        cache_file=str(temp_notes_base / "out" / "cache.json"),
        recurse_dir=False,
    )

    assert exit_code == 1
    assert not (temp_notes_base / "out" / "cache.json").exists()
