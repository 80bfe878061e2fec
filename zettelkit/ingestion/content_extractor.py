"""Content extraction for markdown notes."""

import re
from typing import Any

import yaml

from zettelkit.domain.note import ConnectionKind, Link

from .relationship_extraction.analyzer import extract_link_context

FRONTMATTER_PATTERN = re.compile(r"\A---\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL)

# [[[target]]] is a folgezettel link, [[target]] or [[target|alias]] an ordinary one
LINK_PATTERN = re.compile(
    r"\[\[\[([^\[\]|]+)(?:\|[^\[\]]*)?\]\]\]|"  # [[[target]]]
    r"\[\[([^\[\]|]+)(?:\|[^\[\]]*)?\]\]"  # [[target]]
)

TITLE_PATTERN = re.compile(r"^#[ \t]+(.+?)[ \t#]*$", re.MULTILINE)

KIND_OVERRIDES = {
    "cf": ConnectionKind.ORDINARY,
    "folge": ConnectionKind.HIERARCHICAL,
}


class FrontmatterError(ValueError):
    """Raised when a frontmatter block exists but is not a YAML mapping."""


class ContentExtractor:
    """Service for extracting links, titles and metadata from markdown text."""

    @staticmethod
    def split_frontmatter(content: str) -> tuple[dict[str, Any], str]:
        """Split a note into its frontmatter mapping and body.

        Args:
            content: Raw note content

        Returns:
            Tuple of (frontmatter mapping, body). The mapping is empty when the note
            has no frontmatter block.

        Raises:
            yaml.YAMLError: If the frontmatter block is not valid YAML
            FrontmatterError: If the frontmatter block is not a mapping
        """
        match = FRONTMATTER_PATTERN.match(content)
        if not match:
            return {}, content

        data = yaml.safe_load(match.group(1) or "")
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise FrontmatterError(
                f"Frontmatter must be a mapping, got {type(data).__name__}"
            )
        return data, content[match.end() :]

    @staticmethod
    def extract_title(body: str) -> str | None:
        """Extract the first level-one heading of the body, if any."""
        match = TITLE_PATTERN.search(body)
        if not match:
            return None
        return match.group(1).strip() or None

    @staticmethod
    def extract_links(content: str, context_chars: int = 100) -> list[Link]:
        """Extract typed links from markdown content.

        Triple-bracket links are hierarchical, double-bracket links ordinary. A
        ``?cf`` or ``?folge`` suffix on the target overrides the inferred kind.

        Args:
            content: Markdown content to extract links from
            context_chars: Characters of surrounding text to keep on each side

        Returns:
            Links in order of appearance
        """
        links = []

        for match in LINK_PATTERN.finditer(content):
            if match.group(1) is not None:
                raw_target = match.group(1)
                kind = ConnectionKind.HIERARCHICAL
            else:
                raw_target = match.group(2)
                kind = ConnectionKind.ORDINARY

            target, _, modifier = raw_target.partition("?")
            target = target.strip()
            if not target:
                continue
            kind = KIND_OVERRIDES.get(modifier.strip().lower(), kind)

            links.append(
                Link(
                    target=target,
                    kind=kind,
                    context=extract_link_context(
                        content, match.start(), match.end(), context_chars
                    ),
                )
            )

        return links
