"""HTTP surface for openapi_linker.

:func:`create_app` builds a FastAPI application exposing a single ``GET``
route (``/api/linker`` by default) that takes an ``openApiUrl`` query
parameter and returns the linked document.
"""

from openapi_linker.server.app import create_app

__all__ = ["create_app"]
