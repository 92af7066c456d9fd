import json

from pdptw.persistence.filesystem import MemoryStore
from pdptw.services.geometry.cache import GeometryCache, edge_key, full_route_key


class FailingStore(MemoryStore):
    def set_item(self, key, value):
        raise OSError("disk full")


def test_edge_keys_are_directional():
    a, b = (42.0, 2.0), (42.01, 2.01)

    assert edge_key(a, b) == "42.000000,2.000000-42.010000,2.010000"
    assert edge_key(a, b) != edge_key(b, a)


def test_full_route_key_uses_lon_lat_order():
    assert full_route_key([(42.0, 2.5), (43.0, 3.5)]) == "full:2.5,42.0;3.5,43.0"


def test_get_counts_hits_and_misses():
    cache = GeometryCache(MemoryStore(), storage_key="test")
    cache.set("k", [(1.0, 2.0), (3.0, 4.0)])

    assert cache.get("k") == [(1.0, 2.0), (3.0, 4.0)]
    assert cache.get("other") is None
    stats = cache.stats()
    assert (stats.hits, stats.misses) == (1, 1)
    assert stats.hit_rate == 0.5


def test_get_returns_a_copy():
    cache = GeometryCache(MemoryStore(), storage_key="test")
    cache.set("k", [(1.0, 2.0)])
    cache.get("k").append((9.0, 9.0))

    assert cache.get("k") == [(1.0, 2.0)]


def test_save_then_load_restores_entries():
    store = MemoryStore()
    cache = GeometryCache(store, storage_key="test")
    cache.set("a", [(1.0, 2.0), (3.0, 4.0)])
    cache.set("b", [(5.0, 6.0)])

    assert cache.save()
    assert json.loads(store.get_item("test")) == [["a", [[1.0, 2.0], [3.0, 4.0]]], ["b", [[5.0, 6.0]]]]

    restored = GeometryCache(store, storage_key="test")
    assert restored.load() == 2
    assert restored.get("a") == [(1.0, 2.0), (3.0, 4.0)]


def test_corrupt_payload_loads_as_empty():
    store = MemoryStore({"test": "{not json"})
    cache = GeometryCache(store, storage_key="test")
    cache.set("stale", [(0.0, 0.0)])

    assert cache.load() == 0
    assert len(cache) == 0


def test_wrong_shape_payload_loads_as_empty():
    store = MemoryStore({"test": json.dumps([[1, [[0, 0]]]])})

    assert GeometryCache(store, storage_key="test").load() == 0


def test_save_failure_is_reported_not_raised():
    cache = GeometryCache(FailingStore(), storage_key="test")
    cache.set("a", [(1.0, 2.0)])

    assert cache.save() is False
    assert "a" in cache


def test_stats_estimates_size():
    cache = GeometryCache(MemoryStore(), storage_key="test")
    assert cache.stats().size_kb == 0.0

    cache.set("a", [(float(i), float(i)) for i in range(200)])
    stats = cache.stats()
    assert stats.entries == 1
    assert stats.size_kb == round(len(cache.serialize()) * 2 / 1024, 1)


def test_clear_removes_persisted_entry():
    store = MemoryStore()
    cache = GeometryCache(store, storage_key="test")
    cache.set("a", [(1.0, 2.0)])
    cache.save()
    cache.get("a")

    cache.clear()

    assert len(cache) == 0
    assert store.get_item("test") is None
    assert cache.stats().hits == 0
