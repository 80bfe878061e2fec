"""Tool and cache format versions."""

import re

__version__ = "0.1.0"

# Bumped whenever the persisted cache layout changes, independently of __version__.
CACHE_SCHEMA_VERSION = 1


def parse_version(version: str) -> tuple[int, ...]:
    """Parse a dotted version string into a comparable tuple.

    Non-numeric suffixes of a component are ignored ("1.2rc1" -> (1, 2)) and
    trailing zero components are dropped so that "1.0" == "1.0.0".

    Args:
        version: Version string such as "0.5" or "1.2.3"

    Returns:
        Tuple of integer components
    """
    parts = []
    for component in version.strip().lstrip("v").split("."):
        match = re.match(r"\d+", component)
        if not match:
            break
        parts.append(int(match.group()))
    while parts and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def older_than(version: str, min_version: str) -> bool:
    """Return True if ``version`` is strictly older than ``min_version``."""
    return parse_version(version) < parse_version(min_version)
