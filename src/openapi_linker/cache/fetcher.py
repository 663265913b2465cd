"""Per-request document fetcher layered over a process-wide store.

:class:`DocumentFetcher` implements ``get-or-fetch`` for one linking
operation:

1. A document already fetched during this request is returned as the same
   object, so a schema file referenced many times is downloaded and copied
   once and every definition taken from it shares one tree.
2. Otherwise a copy from the process-wide
   :class:`~openapi_linker.cache.store.DocumentStore` is used (cache hit).
3. Otherwise the document is loaded over HTTP, handed to the store, and
   remembered for the rest of the request (cache miss).

The fetcher is not thread safe and must not be shared between requests.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Optional

import httpx

from openapi_linker.cache.store import DocumentStore, MemoryStore
from openapi_linker.parser.loader import cache_key, load_document

logger = logging.getLogger(__name__)

Loader = Callable[[str], dict[str, Any]]


class DocumentFetcher:
    """Fetch JSON documents for a single linking operation.

    Args:
        store: Process-wide tier. Defaults to a private
            :class:`~openapi_linker.cache.store.MemoryStore`.
        client: HTTP client used by the default loader.
        loader: Callable ``uri -> document`` performing the actual network
            I/O. Overrides *client* when given.
    """

    def __init__(
        self,
        store: Optional[DocumentStore] = None,
        client: Optional[httpx.Client] = None,
        loader: Optional[Loader] = None,
    ) -> None:
        self._store = store if store is not None else MemoryStore()
        self._load = loader if loader is not None else partial(load_document, client=client)
        self._documents: dict[str, dict[str, Any]] = {}

    def fetch(self, uri: str) -> dict[str, Any]:
        """Return the document at *uri*, fetching it at most once per request.

        Raises:
            FetchError: If the document has to be loaded and loading fails.
        """
        key = cache_key(uri)

        document = self._documents.get(key)
        if document is not None:
            return document

        document = self._store.get(key)
        if document is not None:
            logger.info("Cache hit %s", key)
        else:
            logger.info("Cache miss %s", key)
            document = self._load(uri)
            # The store keeps its own copy, so this request owns *document*.
            self._store.set(key, document)

        self._documents[key] = document
        return document

    def __contains__(self, uri: str) -> bool:
        return cache_key(uri) in self._documents
