"""Per-note error models.

A note has at most one ``ZettelError``. These are values collected during a
build, not exceptions.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from zettelkit.domain.note import ConnectionKind, Slug


class ResolutionFailure(str, Enum):
    NOT_FOUND = "not_found"
    EXCLUDED = "excluded"  # target file exists but is not a vertex (see its own error)


class QueryResultError(BaseModel):
    """A single link whose target could not be resolved."""

    target: str
    kind: ConnectionKind = ConnectionKind.ORDINARY
    reason: ResolutionFailure = ResolutionFailure.NOT_FOUND

    def message(self) -> str:
        link_name = "folgezettel link" if self.kind == ConnectionKind.HIERARCHICAL else "link"
        if self.reason == ResolutionFailure.EXCLUDED:
            return (
                f"Zettel '{self.target}' (in {link_name}) was excluded from the graph\n"
                "because of its own error"
            )
        return f"Zettel '{self.target}' (in {link_name}) does not exist"


class ParseError(BaseModel):
    type: Literal["parse_error"] = "parse_error"
    slug: Slug | None = None
    detail: str

    @property
    def severity(self) -> str:
        return "negative"

    def messages(self) -> list[str]:
        return [self.detail]


class QueryResultErrors(BaseModel):
    type: Literal["query_result_errors"] = "query_result_errors"
    slug: Slug | None = None
    failures: list[QueryResultError]

    @property
    def severity(self) -> str:
        return "warning"

    def messages(self) -> list[str]:
        return [failure.message() for failure in self.failures]


class AmbiguousID(BaseModel):
    type: Literal["ambiguous_id"] = "ambiguous_id"
    paths: list[str]

    @property
    def severity(self) -> str:
        return "negative"

    def messages(self) -> list[str]:
        return [f"Multiple zettels have the same ID: {', '.join(self.paths)}"]


class AmbiguousSlug(BaseModel):
    type: Literal["ambiguous_slug"] = "ambiguous_slug"
    slug: Slug

    @property
    def severity(self) -> str:
        return "negative"

    def messages(self) -> list[str]:
        return [f"Slug '{self.slug}' is already used by another zettel"]


ZettelError = Annotated[
    Union[ParseError, QueryResultErrors, AmbiguousID, AmbiguousSlug],
    Field(discriminator="type"),
]
