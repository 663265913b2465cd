"""Remove ``const`` keywords that OpenAPI 3.x schema objects cannot express."""

from __future__ import annotations

from typing import Any, Iterator


def strip_consts(definition: Any) -> int:
    """Delete ``const`` from every property schema under any ``properties`` object.

    *definition* is modified in place. Scans repeat until one finds nothing
    left to remove, so ``const`` keywords only reachable after an earlier
    removal are handled too.

    Args:
        definition: A JSON-Schema definition. Non-container values are
            accepted and left alone.

    Returns:
        The number of ``const`` keywords removed.
    """
    total = 0
    while True:
        removed = _strip_pass(definition)
        if not removed:
            return total
        total += removed


def _strip_pass(node: Any) -> int:
    removed = 0
    for properties in list(_iter_properties(node)):
        for schema in properties.values():
            if isinstance(schema, dict) and "const" in schema:
                del schema["const"]
                removed += 1
    return removed


def _iter_properties(node: Any) -> Iterator[dict[str, Any]]:
    """Yield every ``properties`` object below *node*, outermost first."""
    if isinstance(node, dict):
        properties = node.get("properties")
        if isinstance(properties, dict):
            yield properties
        for value in node.values():
            yield from _iter_properties(value)
    elif isinstance(node, list):
        for item in node:
            yield from _iter_properties(item)
