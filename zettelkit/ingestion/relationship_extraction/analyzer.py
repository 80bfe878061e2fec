"""Context extraction around links."""

import re


def extract_link_context(content: str, start: int, end: int, context_chars: int = 100) -> str:
    """Extract the text surrounding a link occurrence.

    Args:
        content: Full content of the note
        start: Offset where the link starts
        end: Offset just past the link
        context_chars: Number of characters before/after to include

    Returns:
        Context string with whitespace collapsed
    """
    if context_chars <= 0:
        return ""

    context_start = max(0, start - context_chars)
    context_end = min(len(content), end + context_chars)

    context = content[context_start:context_end].strip()

    # Clean up context - remove newlines, extra spaces
    context = re.sub(r"\s+", " ", context)

    return context
