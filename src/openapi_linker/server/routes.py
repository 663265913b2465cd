"""The linker route.

``GET <route>?openApiUrl=<url>`` responds with:

* ``200`` and the linked document as indented JSON,
* ``400`` and a plain-text message when ``openApiUrl`` is missing, blank,
  or not an absolute URL,
* ``500`` and the exception message as plain text for every other failure.

The handler is a plain ``def`` so FastAPI runs it in its thread pool; the
blocking fetches inside a request therefore never stall the event loop.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import PlainTextResponse, Response

from openapi_linker.cache import DocumentFetcher
from openapi_linker.exceptions import LinkerError
from openapi_linker.linker import link_openapi

logger = logging.getLogger(__name__)


def build_router(route: str) -> APIRouter:
    """Return a router serving the linker at *route*."""
    router = APIRouter()

    @router.get(route, response_class=Response)
    def link(
        request: Request,
        open_api_url: Optional[str] = Query(
            default=None,
            alias="openApiUrl",
            description="Absolute URL of the OpenAPI document to link.",
        ),
    ) -> Response:
        state = request.app.state
        fetcher = DocumentFetcher(state.store, client=state.http_client)
        try:
            document = link_openapi(open_api_url, fetcher)
        except LinkerError as exc:
            logger.error("Linking %s failed: %s", open_api_url, exc)
            return PlainTextResponse(str(exc), status_code=exc.status_code)
        except Exception as exc:
            logger.exception("Unexpected error linking %s", open_api_url)
            return PlainTextResponse(str(exc), status_code=500)

        return Response(
            content=json.dumps(document, indent=2, ensure_ascii=False),
            media_type="application/json",
        )

    return router
