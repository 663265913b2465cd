"""Load JSON documents over HTTP.

Every document the linker touches -- the source OpenAPI document and each
externally hosted JSON-Schema file -- comes through :func:`load_document`.
Upstream hosts must serve a UTF-8 JSON object; anything else is reported
as a :class:`~openapi_linker.exceptions.FetchError`.

:func:`cache_key` computes the identity used by both cache tiers in
:mod:`openapi_linker.cache`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional
from urllib.parse import urldefrag, urlsplit

import httpx

from openapi_linker.exceptions import DocumentParseError, FetchError

logger = logging.getLogger(__name__)


def cache_key(uri: str) -> str:
    """Return ``scheme://host/path`` for *uri*, dropping query and fragment.

    Two references into the same hosted file (``schema.json#/definitions/A``
    and ``schema.json#/definitions/B``) share one key and therefore one
    fetch.
    """
    parts = urlsplit(uri)
    return f"{parts.scheme}://{parts.hostname or ''}{parts.path}"


def load_document(uri: str, client: Optional[httpx.Client] = None) -> dict[str, Any]:
    """Fetch *uri* and parse the response body as a JSON object.

    The fragment is never sent. When *client* is ``None`` a one-off
    :func:`httpx.get` is used.

    Args:
        uri: Absolute ``http``/``https`` URL.
        client: Optional shared client carrying timeout and TLS settings.

    Returns:
        The parsed document.

    Raises:
        FetchError: On network errors or a non-2xx status.
        DocumentParseError: If the body is not valid JSON or not an object.
    """
    url, _ = urldefrag(uri)
    logger.debug("GET %s", url)
    try:
        if client is None:
            response = httpx.get(url, timeout=30.0, follow_redirects=True)
        else:
            response = client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(
            f"HTTP {exc.response.status_code} fetching {url}", uri=url
        ) from exc
    except httpx.RequestError as exc:
        raise FetchError(f"Failed to fetch {url}: {exc}", uri=url) from exc

    return _parse_json(response.content, url)


def _parse_json(content: bytes, url: str) -> dict[str, Any]:
    """Decode *content* as UTF-8 JSON and require an object at the top level."""
    try:
        result = json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DocumentParseError(f"Invalid JSON from {url}: {exc}", uri=url) from exc

    if not isinstance(result, dict):
        raise DocumentParseError(
            f"Document at {url} must be a JSON object (got {type(result).__name__})",
            uri=url,
        )
    return result
