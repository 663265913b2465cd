"""Classify ``$ref`` values and resolve named definitions.

Schema documents handled here follow the draft-04/07 layout::

    {"definitions": {"Widget": {...}, "Color": {...}}}

References into them come in two forms:

* **external** -- an absolute URL, optionally with a fragment:
  ``https://host/schema.json#/definitions/Widget``
* **internal** -- a bare fragment, meaningful only relative to the schema
  document currently being walked: ``#/definitions/Color``

Everything in this module is a pure in-memory operation.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urlsplit

COMPONENT_PREFIX = "#/components/schemas/"


def is_absolute_url(value: str) -> bool:
    """Return ``True`` if *value* is an ``http``/``https`` URL with a host.

    Values :func:`urllib.parse.urlsplit` rejects, such as an unbalanced IPv6
    host, are not absolute URLs.
    """
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def name_from_fragment(fragment: str) -> str:
    """Return the last path segment of *fragment*.

    Works on bare fragments and full URLs alike::

        >>> name_from_fragment("#/definitions/Widget")
        'Widget'
        >>> name_from_fragment("https://host/schema.json#/definitions/Widget")
        'Widget'
    """
    return fragment.rsplit("/", 1)[-1]


def component_ref(name: str) -> str:
    """Return the local OpenAPI pointer for component schema *name*."""
    return f"{COMPONENT_PREFIX}{name}"


def resolve_definition(document: dict[str, Any], name: str) -> Optional[Any]:
    """Look up ``document["definitions"][name]``.

    Returns:
        The definition, or ``None`` when the document has no
        ``definitions`` object or no entry called *name*. A missing
        definition is not an error here; callers record it as a diagnostic.
    """
    definitions = document.get("definitions")
    if not isinstance(definitions, dict):
        return None
    return definitions.get(name)
