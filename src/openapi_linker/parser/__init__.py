"""Document loading and JSON-Schema reference helpers.

Sub-modules:

* :mod:`~openapi_linker.parser.loader` -- HTTP I/O layer: fetch a URL with
  :mod:`httpx` and parse the body as a JSON object.
* :mod:`~openapi_linker.parser.resolver` -- Pure helpers for classifying
  ``$ref`` values and looking up definitions in a schema document.
"""

from openapi_linker.parser.loader import cache_key, load_document
from openapi_linker.parser.resolver import (
    is_absolute_url,
    name_from_fragment,
    resolve_definition,
)

__all__ = [
    "cache_key",
    "load_document",
    "is_absolute_url",
    "name_from_fragment",
    "resolve_definition",
]
