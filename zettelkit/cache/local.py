import json
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from zettelkit.cache.base import CacheStore
from zettelkit.cache.schemas import ZettelCache
from zettelkit.version import CACHE_SCHEMA_VERSION


class LocalCacheStore(CacheStore):
    """Cache store that keeps the build cache in a JSON file.

    A single build is assumed to write the file at a time; there is no locking.
    """

    def __init__(self, filepath: str | Path) -> None:
        """Initialize LocalCacheStore.

        Args:
            filepath: Path to the cache file. It need not exist yet.
        """
        self._filepath = Path(filepath)

    def load(self) -> ZettelCache | None:
        """Load the cache file.

        Returns:
            The cache, or None if the file is missing, unreadable, malformed or
            written with a different cache schema
        """
        if not self._filepath.exists():
            logger.debug(f"No cache at {self._filepath}")
            return None

        try:
            with open(self._filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable cache {self._filepath}: {e}")
            return None

        if not isinstance(data, dict) or data.get("schema_version") != CACHE_SCHEMA_VERSION:
            logger.warning(f"Ignoring cache {self._filepath} written with another schema")
            return None

        try:
            return ZettelCache.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid cache {self._filepath}: {e}")
            return None

    def save(self, cache: ZettelCache) -> None:
        """Save the reduced cache to the JSON file, creating parent folders."""
        self._filepath.parent.mkdir(parents=True, exist_ok=True)
        data = cache.reduced().model_dump(mode="json")
        with open(self._filepath, "w", encoding="utf-8") as f:
            json.dump(data, f)
        logger.debug(f"Saved cache to {self._filepath}")
