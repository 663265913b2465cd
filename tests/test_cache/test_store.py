"""Tests for the process-wide document stores."""

from __future__ import annotations

import threading

import pytest

from openapi_linker.cache import DiskStore, MemoryStore, NullStore, create_store
from openapi_linker.models import CacheBackend, CacheConfig

KEY = "https://schemas.example.com/schema.json"


def _document() -> dict:
    return {"definitions": {"Widget": {"type": "object", "properties": {}}}}


@pytest.fixture()
def disk_store(tmp_path):
    store = DiskStore(tmp_path)
    yield store
    store.close()


# ------------------------------------------------------------------ #
# Copy-in / copy-out semantics
# ------------------------------------------------------------------ #


class TestMemoryStore:
    def test_miss_returns_none(self) -> None:
        assert MemoryStore().get(KEY) is None

    def test_set_and_get(self) -> None:
        store = MemoryStore()
        store.set(KEY, _document())
        assert store.get(KEY) == _document()

    def test_get_returns_independent_copies(self) -> None:
        store = MemoryStore()
        store.set(KEY, _document())
        first = store.get(KEY)
        second = store.get(KEY)
        assert first is not second
        first["definitions"]["Widget"]["type"] = "string"
        assert store.get(KEY)["definitions"]["Widget"]["type"] == "object"

    def test_set_keeps_its_own_copy(self) -> None:
        store = MemoryStore()
        doc = _document()
        store.set(KEY, doc)
        doc["definitions"].clear()
        assert "Widget" in store.get(KEY)["definitions"]

    def test_last_writer_wins(self) -> None:
        store = MemoryStore()
        store.set(KEY, {"v": 1})
        store.set(KEY, {"v": 2})
        assert store.get(KEY) == {"v": 2}

    def test_clear_and_stats(self) -> None:
        store = MemoryStore()
        store.set(KEY, _document())
        assert store.stats() == {"backend": "memory", "size": 1}
        store.clear()
        assert store.stats()["size"] == 0

    def test_concurrent_writers(self) -> None:
        store = MemoryStore()

        def writer(n: int) -> None:
            for i in range(50):
                store.set(f"https://host/{n}/{i}.json", {"n": n, "i": i})
                assert store.get(f"https://host/{n}/{i}.json") == {"n": n, "i": i}

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert store.stats()["size"] == 400


class TestDiskStore:
    def test_set_and_get(self, disk_store: DiskStore) -> None:
        disk_store.set(KEY, _document())
        assert disk_store.get(KEY) == _document()

    def test_get_returns_independent_copies(self, disk_store: DiskStore) -> None:
        disk_store.set(KEY, _document())
        first = disk_store.get(KEY)
        first["definitions"].clear()
        assert "Widget" in disk_store.get(KEY)["definitions"]

    def test_persists_across_instances(self, tmp_path) -> None:
        store = DiskStore(tmp_path)
        store.set(KEY, _document())
        store.close()
        reopened = DiskStore(tmp_path)
        try:
            assert reopened.get(KEY) == _document()
        finally:
            reopened.close()

    def test_stats(self, tmp_path) -> None:
        store = DiskStore(tmp_path, ttl_seconds=60)
        try:
            store.set(KEY, _document())
            stats = store.stats()
        finally:
            store.close()
        assert stats["backend"] == "disk"
        assert stats["size"] == 1
        assert stats["ttl_seconds"] == 60
        assert stats["directory"] == str(tmp_path / "documents")

    def test_clear(self, disk_store: DiskStore) -> None:
        disk_store.set(KEY, _document())
        disk_store.clear()
        assert disk_store.get(KEY) is None


class TestNullStore:
    def test_never_stores(self) -> None:
        store = NullStore()
        store.set(KEY, _document())
        assert store.get(KEY) is None
        assert store.stats()["size"] == 0


class TestCreateStore:
    def test_default_is_memory(self) -> None:
        assert isinstance(create_store(CacheConfig()), MemoryStore)

    def test_disabled_is_null(self) -> None:
        assert isinstance(create_store(CacheConfig(enabled=False)), NullStore)

    def test_disk_uses_given_directory(self, tmp_path) -> None:
        store = create_store(CacheConfig(backend=CacheBackend.DISK), cache_dir=tmp_path)
        try:
            assert isinstance(store, DiskStore)
            assert store.stats()["directory"] == str(tmp_path / "documents")
        finally:
            store.close()

    def test_disk_defaults_to_cache_dir(self, isolated_config) -> None:
        store = create_store(CacheConfig(backend=CacheBackend.DISK))
        try:
            assert store.stats()["directory"].startswith(str(isolated_config / "cache"))
        finally:
            store.close()
