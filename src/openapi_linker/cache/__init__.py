"""Two-tier document cache for openapi_linker.

* :class:`DocumentStore` -- the process-wide tier. Shared by every request,
  it only ever hands out copies so that no caller can observe or cause
  mutation of a cached document. Implementations: :class:`MemoryStore`,
  :class:`DiskStore` (backed by :mod:`diskcache`), and :class:`NullStore`.
* :class:`DocumentFetcher` -- the per-request tier. One instance per
  linking operation; repeated fetches of the same document return the very
  same object.

:func:`create_store` builds the configured process-wide tier from a
:class:`~openapi_linker.models.CacheConfig`.
"""

from openapi_linker.cache.fetcher import DocumentFetcher
from openapi_linker.cache.store import (
    DiskStore,
    DocumentStore,
    MemoryStore,
    NullStore,
    create_store,
)

__all__ = [
    "DocumentFetcher",
    "DocumentStore",
    "MemoryStore",
    "DiskStore",
    "NullStore",
    "create_store",
]
