"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from fastapi import FastAPI

from openapi_linker import __version__
from openapi_linker.cache import DocumentStore, create_store
from openapi_linker.models import GlobalConfig
from openapi_linker.server.routes import build_router

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[GlobalConfig] = None,
    store: Optional[DocumentStore] = None,
    client: Optional[httpx.Client] = None,
) -> FastAPI:
    """Build the linker application.

    The process-wide document store and the HTTP client are created once
    here and shared by every request through ``app.state``.

    Args:
        config: Effective configuration. Defaults to :class:`GlobalConfig`.
        store: Process-wide document store. Built from ``config.cache``
            when omitted.
        client: HTTP client for fetches. Built from ``config.request`` when
            omitted; a client passed in is not closed on shutdown.
    """
    config = config or GlobalConfig()
    owns_client = client is None
    if client is None:
        client = httpx.Client(
            timeout=config.request.timeout,
            verify=config.request.verify_ssl,
            follow_redirects=config.request.follow_redirects,
        )
    if store is None:
        store = create_store(config.cache)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Serving linker at %s (cache: %s)", config.server.route, store.stats())
        yield
        if owns_client:
            client.close()
        store.close()

    app = FastAPI(
        title="openapi-linker",
        version=__version__,
        description="Inline external JSON-Schema references into OpenAPI documents.",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.store = store
    app.state.http_client = client
    app.include_router(build_router(config.server.route))
    return app
