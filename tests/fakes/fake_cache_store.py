from zettelkit.cache.base import CacheStore
from zettelkit.cache.schemas import ZettelCache


class FakeCacheStore(CacheStore):
    """In-memory cache store for testing."""

    def __init__(self, cache: ZettelCache | None = None) -> None:
        self._cache = cache
        self.saved: list[ZettelCache] = []

    def load(self) -> ZettelCache | None:
        """Load the cache, or None if there is no usable cache."""
        return self._cache

    def save(self, cache: ZettelCache) -> None:
        """Keep the reduced cache in memory."""
        self._cache = cache.reduced()
        self.saved.append(self._cache)
