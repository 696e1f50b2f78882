"""Tests for hilfsmittel/catalog/cache.py"""

import asyncio
import json

import pytest

from hilfsmittel.catalog.cache import CatalogCache, JsonFileStore, MetadataCache, open_caches


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(tmp_path / "store")


@pytest.fixture
def catalog_cache(store, clock):
    return CatalogCache(store, ttl_seconds=3600, schema_version="v1", clock=clock)


class TestJsonFileStore:
    def test_read_missing(self, store):
        assert store.read("nope") is None

    def test_write_read_delete(self, store):
        store.write("k", "text")
        assert store.read("k") == "text"
        store.delete("k")
        assert store.read("k") is None

    def test_delete_missing_is_noop(self, store):
        store.delete("nope")

    def test_unsafe_key_characters(self, store):
        store.write("details:10/46", "x")
        assert store.read("details:10/46") == "x"
        assert all("/" not in key for key in store.keys())

    def test_no_temp_files_left(self, store):
        store.write("k", "text")
        assert [p.name for p in store.directory.iterdir()] == ["k.json"]

    def test_clear(self, store):
        store.write("a", "1")
        store.write("b", "2")
        store.clear()
        assert store.keys() == []


class TestCatalogCache:
    def test_miss_when_empty(self, catalog_cache):
        assert asyncio.run(catalog_cache.get()) is None

    def test_set_then_get(self, catalog_cache):
        asyncio.run(catalog_cache.set([{"id": "1"}]))
        assert asyncio.run(catalog_cache.get()) == [{"id": "1"}]

    def test_stored_envelope(self, catalog_cache, store, clock):
        asyncio.run(catalog_cache.set([]))
        data = json.loads(store.read(CatalogCache.KEY))
        assert data == {"payload": [], "fetchedAtTimestamp": clock.now, "schemaVersion": "v1"}

    def test_expired_is_miss_but_stale_available(self, catalog_cache, clock):
        asyncio.run(catalog_cache.set([1]))
        clock.advance(3600)
        assert asyncio.run(catalog_cache.get()) is None
        assert asyncio.run(catalog_cache.get_stale()) == [1]

    def test_version_mismatch_never_returned(self, store, clock):
        old = CatalogCache(store, ttl_seconds=3600, schema_version="v1", clock=clock)
        asyncio.run(old.set([1]))

        new = CatalogCache(store, ttl_seconds=3600, schema_version="v2", clock=clock)
        assert asyncio.run(new.get()) is None
        assert asyncio.run(new.get_stale()) is None
        # Discarded, not just skipped
        assert store.read(CatalogCache.KEY) is None

    def test_corrupt_json_is_miss(self, catalog_cache, store):
        store.write(CatalogCache.KEY, "{not json")
        assert asyncio.run(catalog_cache.get()) is None

    def test_wrong_shape_is_miss(self, catalog_cache, store, clock):
        store.write(CatalogCache.KEY, json.dumps({"payload": {"a": 1}, "fetchedAtTimestamp": clock.now,
                                                  "schemaVersion": "v1"}))
        assert asyncio.run(catalog_cache.get()) is None
        store.write(CatalogCache.KEY, json.dumps([1, 2]))
        assert asyncio.run(catalog_cache.get()) is None

    def test_set_overwrites_and_restamps(self, catalog_cache, clock):
        asyncio.run(catalog_cache.set([1]))
        clock.advance(3000)
        asyncio.run(catalog_cache.set([2]))
        clock.advance(3000)
        assert asyncio.run(catalog_cache.get()) == [2]

    def test_invalidate(self, catalog_cache):
        asyncio.run(catalog_cache.set([1]))
        asyncio.run(catalog_cache.invalidate())
        assert asyncio.run(catalog_cache.get_stale()) is None

    def test_write_failure_is_logged_not_raised(self, catalog_cache, monkeypatch, caplog):
        def fail(key, text):
            raise OSError("disk full")

        monkeypatch.setattr(catalog_cache.store, "write", fail)
        asyncio.run(catalog_cache.set([1]))
        assert "disk full" in caplog.text


class TestMetadataCache:
    def test_set_get(self, store, clock):
        cache = MetadataCache(store, ttl_seconds=60, schema_version="v1", clock=clock)
        cache.set("category_index_1", {"10.46": "1"})
        assert cache.get("category_index_1") == {"10.46": "1"}

    def test_expiry(self, store, clock):
        cache = MetadataCache(store, ttl_seconds=60, schema_version="v1", clock=clock)
        cache.set("k", 1)
        clock.advance(61)
        assert cache.get("k") is None
        assert cache.get_stale("k") == 1

    def test_version_change_wipes_everything(self, store, clock):
        cache = MetadataCache(store, ttl_seconds=60, schema_version="v1", clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)

        MetadataCache(store, ttl_seconds=60, schema_version="v2", clock=clock)

        assert store.keys() == [MetadataCache.VERSION_KEY]
        assert store.read(MetadataCache.VERSION_KEY) == "v2"

    def test_same_version_keeps_entries(self, store, clock):
        MetadataCache(store, ttl_seconds=60, schema_version="v1", clock=clock).set("a", 1)
        assert MetadataCache(store, ttl_seconds=60, schema_version="v1", clock=clock).get("a") == 1

    def test_reserved_key(self, store, clock):
        cache = MetadataCache(store, ttl_seconds=60, schema_version="v1", clock=clock)
        with pytest.raises(ValueError):
            cache.set(MetadataCache.VERSION_KEY, "x")

    def test_corrupt_entry_is_miss(self, store, clock):
        cache = MetadataCache(store, ttl_seconds=60, schema_version="v1", clock=clock)
        store.write("a", "garbage")
        assert cache.get("a") is None
        assert cache.get_stale("a") is None

    def test_invalidate_one_and_all(self, store, clock):
        cache = MetadataCache(store, ttl_seconds=60, schema_version="v1", clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.invalidate("a")
        assert cache.get("a") is None
        assert cache.get("b") == 2
        cache.invalidate()
        assert cache.get("b") is None
        assert store.read(MetadataCache.VERSION_KEY) == "v1"


class TestOpenCaches:
    def test_separate_directories(self, tmp_path, clock):
        catalog, metadata = open_caches(tmp_path, 10, 20, schema_version="v9", clock=clock)
        assert catalog.store.directory != metadata.store.directory
        assert catalog.ttl_seconds == 10
        assert metadata.ttl_seconds == 20
        assert catalog.schema_version == metadata.schema_version == "v9"
