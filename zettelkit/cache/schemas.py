"""Persisted cache models."""

from typing import Any

from pydantic import BaseModel, Field

from zettelkit.domain.errors import ZettelError
from zettelkit.domain.graph import GraphSnapshot, ZettelGraph
from zettelkit.domain.note import NoteID
from zettelkit.exceptions import VersionMismatchError
from zettelkit.version import CACHE_SCHEMA_VERSION, older_than


class ZettelCache(BaseModel):
    """Result of a build, in the form persisted between runs.

    Attributes:
        graph: The graph, without link contexts or raw note content
        errors: Per-note errors of the build
        config: Settings the build ran with
        version: Version of the tool that produced the cache
        schema_version: Layout version of this model
    """

    graph: GraphSnapshot = Field(default_factory=GraphSnapshot)
    errors: dict[NoteID, ZettelError] = {}
    config: dict[str, Any] = {}
    version: str
    schema_version: int = CACHE_SCHEMA_VERSION

    @classmethod
    def from_build(
        cls,
        graph: ZettelGraph,
        errors: dict[NoteID, ZettelError],
        config: dict[str, Any],
        version: str,
    ) -> "ZettelCache":
        return cls(
            graph=graph.to_snapshot(),
            errors=errors,
            config=config,
            version=version,
        )

    def get_graph(self) -> ZettelGraph:
        return ZettelGraph.from_snapshot(self.graph)

    def reduced(self) -> "ZettelCache":
        """Copy with link contexts and raw note content stripped from the graph."""
        graph = self.get_graph().strip_surrounding_context().sans_content()
        return self.model_copy(update={"graph": graph.to_snapshot()})

    def check_version(self, min_version: str) -> None:
        """Fail if the cache was written by a tool older than ``min_version``.

        Raises:
            VersionMismatchError: If the recorded version is below the minimum
        """
        if older_than(self.version, min_version):
            raise VersionMismatchError(min_version, self.version, subject="cache")
