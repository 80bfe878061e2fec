"""Orchestration of a complete Zettelkasten build."""

from pathlib import Path

from loguru import logger
from pydantic import BaseModel

from zettelkit.analysis.impulse import Impulse, build_impulse
from zettelkit.cache.base import CacheStore
from zettelkit.cache.schemas import ZettelCache
from zettelkit.config import Settings
from zettelkit.domain.errors import ParseError, ZettelError
from zettelkit.domain.graph import ZettelGraph
from zettelkit.domain.note import Note, NoteID
from zettelkit.exceptions import VersionMismatchError
from zettelkit.report import format_error_report
from zettelkit.routes import ImpulseRoute, ZettelRoute, route_html_path
from zettelkit.version import __version__, older_than

from .id_resolver import AmbiguousRef, NoteIdResolver
from .parser import NoteParser
from .relationship_extraction import ZettelGraphBuilder


class BuildResult(BaseModel):
    """Everything a build produces.

    Attributes:
        graph: The note graph, vertices with content and edges with link context
        notes: Every successfully parsed note, in note ID order
        errors: Per-note errors keyed by note ID
        cache: The cache value persisted for this build
    """

    graph: ZettelGraph
    notes: list[Note]
    errors: dict[NoteID, ZettelError]
    cache: ZettelCache

    model_config = {"arbitrary_types_allowed": True}

    def impulse(self) -> Impulse:
        return build_impulse(self.graph, self.errors)

    def error_report(self) -> str:
        return format_error_report(self.errors)

    def page_paths(self) -> list[str]:
        """Output paths of every page of the site: one per note, plus the index."""
        paths = [route_html_path(ZettelRoute(slug=note.slug)) for note in self.graph]
        paths.append(route_html_path(ImpulseRoute()))
        return paths


class ZettelkastenOrchestrator:
    """Orchestrates a build from note files to graph, errors and cache."""

    def __init__(
        self,
        *,
        settings: Settings,
        cache_store: CacheStore,
        version: str = __version__,
    ):
        """Initialize the orchestrator.

        Args:
            settings: Build settings (notes folder, discovery, minimum version)
            cache_store: Store persisting the build cache
            version: Version of the running tool
        """
        self.settings = settings
        self.cache_store = cache_store
        self.version = version

        self.parser = NoteParser(context_chars=settings.context_chars, workers=settings.workers)
        self.graph_builder = ZettelGraphBuilder()

    def generate(self) -> BuildResult:
        """Run a full build after checking version compatibility.

        Raises:
            VersionMismatchError: If the running tool or the existing cache is older
                than the configured minimum version
            MissingNoteFileError: If a note file vanished during the build
        """
        min_version = self.settings.min_version
        if older_than(self.version, min_version):
            raise VersionMismatchError(min_version, self.version)

        prior_cache = self.cache_store.load()
        if prior_cache is not None:
            prior_cache.check_version(min_version)

        result = self.load_zettelkasten()

        if result.errors:
            logger.warning(f"{len(result.errors)} notes have errors")
        logger.info("Build complete:")
        logger.info(f"  - Notes: {len(result.graph)}")
        logger.info(f"  - Links: {result.graph.edge_count()}")
        logger.info(f"  - Errors: {len(result.errors)}")
        return result

    def load_zettelkasten(self) -> BuildResult:
        """Load every note, build the graph and persist the cache."""
        files = self._get_all_note_files(self.settings.notes_dir)
        logger.info(f"Found {len(files)} note files in {self.settings.notes_dir}")

        graph, notes, errors = self.load_zettelkasten_from(files)
        cache = ZettelCache.from_build(
            graph,
            errors,
            config=self.settings.model_dump(mode="json"),
            version=self.version,
        )
        self.cache_store.save(cache)

        return BuildResult(graph=graph, notes=notes, errors=errors, cache=cache)

    def load_zettelkasten_graph(self) -> ZettelCache:
        """Like ``load_zettelkasten`` but only returns the cache value."""
        return self.load_zettelkasten().cache

    def load_zettelkasten_from(
        self, files: list[Path]
    ) -> tuple[ZettelGraph, list[Note], dict[NoteID, ZettelError]]:
        """Build the graph from the given note files.

        Args:
            files: Note files relative to the notes folder, in any order

        Returns:
            Tuple of (graph, parsed notes, errors)
        """
        # Ambiguous paths are reported in lexical order
        ordered_files = sorted(files, key=lambda f: Path(f).as_posix())
        refs = NoteIdResolver(self.settings.notes_dir).resolve(ordered_files)

        ambiguous_ids = {
            note_id: ref.paths for note_id, ref in refs.items() if isinstance(ref, AmbiguousRef)
        }
        available = [
            (note_id, ref.path, ref.content)
            for note_id, ref in sorted(refs.items())
            if not isinstance(ref, AmbiguousRef)
        ]

        notes = []
        parse_errors: dict[NoteID, ParseError] = {}
        for note_id, parsed in self.parser.parse_all(available):
            if isinstance(parsed, ParseError):
                logger.warning(f"Failed to parse {note_id}: {parsed.detail}")
                parse_errors[note_id] = parsed
            else:
                notes.append(parsed)

        graph, errors = self.graph_builder.build(notes, ambiguous_ids, parse_errors)
        return graph, notes, errors

    def _get_all_note_files(self, folder: Path) -> list[Path]:
        """Get all note files, relative to ``folder`` and sorted by path.

        Args:
            folder: Notes folder

        Returns:
            List of relative note file paths
        """
        pattern = "**/*.md" if self.settings.recurse_dir else "*.md"
        files = [f.relative_to(folder) for f in folder.glob(pattern) if f.is_file()]
        return sorted(files, key=lambda f: f.as_posix())
