"""Relationship extraction module for resolving note links and building the note graph."""

from zettelkit.ingestion.relationship_extraction.graph_builder import ZettelGraphBuilder
from zettelkit.ingestion.relationship_extraction.resolver import ReferenceResolver

__all__ = [
    "ReferenceResolver",
    "ZettelGraphBuilder",
]
