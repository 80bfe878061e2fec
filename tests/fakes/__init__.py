from tests.fakes.fake_cache_store import FakeCacheStore
from tests.fakes.notes import make_graph, make_note

__all__ = ["FakeCacheStore", "make_graph", "make_note"]
