import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from zettelkit.config import Settings
from zettelkit.ingestion.orchestrator import ZettelkastenOrchestrator
from tests.fakes import FakeCacheStore


@pytest.fixture
def temp_notes_base() -> Generator[Path, None, None]:
    """Create a temporary directory used when testing the loading and parsing of notes."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def notes_directory(temp_notes_base: Path) -> Path:
    """Create notes subdirectory."""
    notes_dir = temp_notes_base / "notes"
    notes_dir.mkdir()
    return notes_dir


@pytest.fixture
def write_note(notes_directory: Path) -> Callable[[str, str], Path]:
    """Write a note file relative to the notes directory."""

    def write(relative_path: str, content: str) -> Path:
        path = notes_directory / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return write


@pytest.fixture
def test_settings(notes_directory: Path, temp_notes_base: Path) -> Settings:
    return Settings(
        notes_dir=notes_directory,
        cache_path=temp_notes_base / "cache" / "cache.json",
        min_version="0.1.0",
    )


@pytest.fixture
def fake_cache_store() -> FakeCacheStore:
    return FakeCacheStore()


@pytest.fixture
def orchestrator(
    test_settings: Settings, fake_cache_store: FakeCacheStore
) -> ZettelkastenOrchestrator:
    return ZettelkastenOrchestrator(settings=test_settings, cache_store=fake_cache_store)
