"""Note domain models."""

import datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator

NoteID = str
Slug = str


class ConnectionKind(str, Enum):
    """Kind of a link between two notes.

    Hierarchical (folgezettel) links express a parent -> child relationship and
    drive clustering. Ordinary links are only used for backlinks.
    """

    HIERARCHICAL = "hierarchical"
    ORDINARY = "ordinary"


class Link(BaseModel):
    """An outgoing link as written in a note, before resolution.

    Attributes:
        target: Raw target text (a note ID or slug)
        kind: Connection kind, explicit or inferred from the link syntax
        context: Text surrounding the link, only needed for rendering
    """

    target: str
    kind: ConnectionKind = ConnectionKind.ORDINARY
    context: str = ""


def scalar_to_text(x: Any) -> Any:
    # YAML loads bare dates and numbers as non-string scalars
    if isinstance(x, (datetime.date, int, float)) and not isinstance(x, bool):
        return x.isoformat() if isinstance(x, datetime.date) else str(x)
    return x


YamlText = Annotated[str, BeforeValidator(scalar_to_text)]


class Frontmatter(BaseModel):
    """Known keys of a note's YAML frontmatter. Unknown keys are ignored."""

    title: YamlText | None = None
    slug: YamlText | None = None
    tags: list[YamlText] = []
    date: YamlText | None = None


class Note(BaseModel):
    """Represents a parsed note.

    Attributes:
        id: Identifier derived from the filename
        slug: Unique URL path segment
        title: Frontmatter title, first heading, or the ID
        path: File path relative to the notes directory
        content: Raw file content
        tags: Tags from frontmatter
        date: Optional date from frontmatter
        outgoing_links: Links found in the content, unresolved
    """

    id: NoteID
    slug: Slug
    title: str
    path: str
    content: str = ""
    tags: list[str] = []
    date: str | None = None
    outgoing_links: list[Link] = []

    def sans_content(self) -> "Note":
        """Return a copy without the raw content."""
        return self.model_copy(update={"content": ""})
