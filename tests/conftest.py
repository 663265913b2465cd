"""Shared test fixtures for openapi_linker.

Provides JSON fixtures, a counting fake loader for the document fetcher,
an :class:`httpx.MockTransport` factory serving canned documents, and an
isolated configuration environment.
"""

from __future__ import annotations

import copy
import json
from collections import Counter
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from openapi_linker.exceptions import FetchError
from openapi_linker.output import reset_output
from openapi_linker.parser.loader import cache_key

FIXTURES_DIR = Path(__file__).parent / "fixtures"

OPENAPI_URL = "https://api.example.com/openapi.json"
SCHEMA_URL = "https://schemas.example.com/schema.json"


def load_fixture(name: str) -> dict[str, Any]:
    with open(FIXTURES_DIR / name, encoding="utf-8") as f:
        return json.load(f)


def openapi_doc(*schema_refs: str, components: Any = None) -> dict[str, Any]:
    """Build a minimal OpenAPI document with one GET operation per ref."""
    paths = {}
    for index, ref in enumerate(schema_refs):
        paths[f"/p{index}"] = {
            "get": {
                "responses": {
                    "200": {
                        "description": "ok",
                        "content": {"application/json": {"schema": {"$ref": ref}}},
                    }
                }
            }
        }
    doc: dict[str, Any] = {
        "openapi": "3.0.3",
        "info": {"title": "Test", "version": "1.0"},
        "paths": paths,
    }
    if components is not None:
        doc["components"] = components
    return doc


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Drop the global OutputManager, whose consoles bind to the current streams."""
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@pytest.fixture
def make_openapi() -> Callable[..., dict[str, Any]]:
    return openapi_doc


@pytest.fixture
def widget_openapi() -> dict[str, Any]:
    return load_fixture("openapi_widget.json")


@pytest.fixture
def widget_schema() -> dict[str, Any]:
    return load_fixture("widget_schema.json")


@pytest.fixture
def widget_documents(widget_openapi, widget_schema) -> dict[str, dict[str, Any]]:
    """The widget scenario keyed by URL."""
    return {OPENAPI_URL: widget_openapi, SCHEMA_URL: widget_schema}


# ---------------------------------------------------------------------------
# Fake network
# ---------------------------------------------------------------------------


class FakeLoader:
    """Loader returning copies of canned documents and counting calls per cache key."""

    def __init__(self, documents: dict[str, dict[str, Any]]) -> None:
        self.documents = {cache_key(uri): doc for uri, doc in documents.items()}
        self.calls: Counter[str] = Counter()

    def __call__(self, uri: str) -> dict[str, Any]:
        key = cache_key(uri)
        self.calls[key] += 1
        if key not in self.documents:
            raise FetchError(f"HTTP 404 fetching {uri}", uri=uri)
        return copy.deepcopy(self.documents[key])


@pytest.fixture
def fake_loader() -> Callable[[dict[str, dict[str, Any]]], FakeLoader]:
    return FakeLoader


class CountingTransport(httpx.MockTransport):
    """MockTransport serving JSON documents by URL and counting requests."""

    def __init__(self, documents: dict[str, Any]) -> None:
        self.documents = documents
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        if url not in self.documents:
            return httpx.Response(404, text="not found")
        body = self.documents[url]
        if isinstance(body, (str, bytes)):
            return httpx.Response(200, content=body)
        return httpx.Response(200, json=body)


@pytest.fixture
def make_transport() -> Callable[[dict[str, Any]], CountingTransport]:
    return CountingTransport


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG directories at tmp_path and clear OPENAPI_LINKER_* variables."""
    monkeypatch.setattr("openapi_linker.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    for var in [
        "OPENAPI_LINKER_CONFIG",
        "OPENAPI_LINKER_CACHE_BACKEND",
        "OPENAPI_LINKER_LOG_LEVEL",
        "OPENAPI_LINKER_HOST",
        "OPENAPI_LINKER_PORT",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
