from typing import Protocol

from zettelkit.cache.schemas import ZettelCache


class CacheStore(Protocol):
    def load(self) -> ZettelCache | None:
        """Load the cache, or None if there is no usable cache."""
        ...

    def save(self, cache: ZettelCache) -> None:
        """Persist the reduced form of the cache."""
        ...
