"""Process-wide document stores.

A store maps a cache key (``scheme://host/path``, see
:func:`~openapi_linker.parser.loader.cache_key`) to a parsed JSON document.
Every implementation guarantees copy-in/copy-out semantics: :meth:`set`
keeps its own copy and :meth:`get` returns a structurally independent one.
Callers may therefore mutate whatever they receive.

Stores are shared between concurrently handled requests and must be safe
for concurrent use. Writers for the same key are expected to carry
identical documents, so last-writer-wins is acceptable.
"""

from __future__ import annotations

import copy
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import diskcache

from openapi_linker.models import CacheBackend, CacheConfig


class DocumentStore(ABC):
    """Abstract process-wide document store."""

    @abstractmethod
    def get(self, key: str) -> Optional[dict[str, Any]]:
        """Return a private copy of the document under *key*, or ``None``."""

    @abstractmethod
    def set(self, key: str, document: dict[str, Any]) -> None:
        """Store a copy of *document* under *key*, replacing any previous entry."""

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries."""

    @abstractmethod
    def stats(self) -> dict[str, Any]:
        """Return a small dict describing the store (backend, size, ...)."""

    def close(self) -> None:
        """Release resources held by the store."""


class MemoryStore(DocumentStore):
    """In-memory store living as long as the process.

    Example::

        store = MemoryStore()
        store.set("https://host/schema.json", {"definitions": {}})
        doc = store.get("https://host/schema.json")
        doc["definitions"]["X"] = {}   # does not affect the stored entry
    """

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[dict[str, Any]]:
        with self._lock:
            document = self._documents.get(key)
        if document is None:
            return None
        # Stored entries are never mutated, so copying outside the lock is safe.
        return copy.deepcopy(document)

    def set(self, key: str, document: dict[str, Any]) -> None:
        snapshot = copy.deepcopy(document)
        with self._lock:
            self._documents[key] = snapshot

    def clear(self) -> None:
        with self._lock:
            self._documents.clear()

    def stats(self) -> dict[str, Any]:
        with self._lock:
            size = len(self._documents)
        return {"backend": CacheBackend.MEMORY.value, "size": size}


class DiskStore(DocumentStore):
    """Store backed by a :class:`diskcache.Cache` directory.

    Entries are pickled, so every read already yields an independent copy.
    :mod:`diskcache` is thread- and process-safe, which lets several server
    workers share one directory.

    Args:
        cache_dir: Root directory. A ``documents/`` subdirectory is created
            inside it.
        ttl_seconds: Optional expiry applied to every entry.
    """

    def __init__(self, cache_dir: str | Path, ttl_seconds: Optional[int] = None) -> None:
        self._directory = Path(cache_dir) / "documents"
        self._ttl = ttl_seconds
        self._cache = diskcache.Cache(str(self._directory))

    def get(self, key: str) -> Optional[dict[str, Any]]:
        return self._cache.get(key)

    def set(self, key: str, document: dict[str, Any]) -> None:
        self._cache.set(key, document, expire=self._ttl)

    def clear(self) -> None:
        self._cache.clear()

    def stats(self) -> dict[str, Any]:
        return {
            "backend": CacheBackend.DISK.value,
            "size": len(self._cache),
            "directory": str(self._directory),
            "ttl_seconds": self._ttl,
        }

    def close(self) -> None:
        self._cache.close()


class NullStore(DocumentStore):
    """Store that keeps nothing; used when caching is disabled."""

    def get(self, key: str) -> Optional[dict[str, Any]]:
        return None

    def set(self, key: str, document: dict[str, Any]) -> None:
        return None

    def clear(self) -> None:
        return None

    def stats(self) -> dict[str, Any]:
        return {"backend": None, "size": 0}


def create_store(config: CacheConfig, cache_dir: Optional[str | Path] = None) -> DocumentStore:
    """Build the process-wide store described by *config*.

    Args:
        config: Cache settings.
        cache_dir: Directory for the disk backend. Defaults to
            :func:`~openapi_linker.config.get_cache_dir`.
    """
    if not config.enabled:
        return NullStore()
    if config.backend == CacheBackend.DISK:
        if cache_dir is None:
            from openapi_linker.config import get_cache_dir

            cache_dir = get_cache_dir()
        return DiskStore(cache_dir, config.ttl_seconds)
    return MemoryStore()
