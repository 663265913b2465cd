"""Inline externally referenced JSON-Schema definitions into an OpenAPI document.

The entry point is :func:`link_openapi`. It fetches the source document,
runs a :class:`SchemaLinker` over it, and attaches the diagnostics.

Linking happens in two passes:

* **Top-level pass** -- every ``$ref`` directly under a ``schema`` object
  whose value is an absolute URL is resolved against the schema document it
  names, rewritten to ``#/components/schemas/<Name>``, and the definition is
  added to the component map.
* **Recursive pass** -- each newly added definition is walked for further
  ``$ref`` pointers. These are internal fragments into the *same* schema
  document and are resolved, rewritten, and added the same way, depth
  first. An absolute URL at this level raises
  :class:`~openapi_linker.exceptions.UnsupportedReferenceError`.

A name is added at most once per operation. The component map is also the
visited set: a name already present is rewritten but neither re-added nor
walked again, which is what terminates cyclic references.

Example::

    fetcher = DocumentFetcher(store)
    document = link_openapi("https://example.com/openapi.json", fetcher)
    document["components"]["schemas"]["Widget"]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Optional
from urllib.parse import urlsplit

from openapi_linker.cache.fetcher import DocumentFetcher
from openapi_linker.exceptions import (
    FetchError,
    InvalidUsageError,
    MissingComponentsError,
    UnsupportedReferenceError,
)
from openapi_linker.linker.consts import strip_consts
from openapi_linker.linker.diagnostics import INFO_EXTENSION, Diagnostics
from openapi_linker.parser.loader import cache_key
from openapi_linker.parser.resolver import (
    COMPONENT_PREFIX,
    component_ref,
    is_absolute_url,
    name_from_fragment,
    resolve_definition,
)

logger = logging.getLogger(__name__)

MISSING_URL_MESSAGE = "Query parameter openApiUrl is required."

JsonPath = tuple[Any, ...]


@dataclass
class Reference:
    """A JSON object carrying a string ``$ref``.

    Attributes:
        holder: The object that owns the ``$ref`` key. Rewriting mutates it.
        path: Keys and indexes leading from the walk root to *holder*.
    """

    holder: dict[str, Any]
    path: JsonPath

    @property
    def value(self) -> str:
        return self.holder["$ref"]

    def rewrite(self, target: str) -> None:
        self.holder["$ref"] = target

    def __str__(self) -> str:
        return "/".join(str(p) for p in self.path) or "<root>"


def iter_references(
    node: Any, schema_only: bool = False, path: JsonPath = ()
) -> Iterator[Reference]:
    """Yield every :class:`Reference` below *node* in document order.

    Objects are reported before their descendants.

    Args:
        node: Root of the walk.
        schema_only: Only report objects that are the value of a ``schema``
            key, which is where OpenAPI media types and parameters keep
            their schema.
        path: Path of *node*, used to build reference paths.
    """
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str) and (not schema_only or (path and path[-1] == "schema")):
            yield Reference(node, path)
        for key, value in node.items():
            if isinstance(value, (dict, list)):
                yield from iter_references(value, schema_only, path + (key,))
    elif isinstance(node, list):
        for index, item in enumerate(node):
            if isinstance(item, (dict, list)):
                yield from iter_references(item, schema_only, path + (index,))


class SchemaLinker:
    """Link the external schema references of one OpenAPI document.

    Args:
        fetcher: Per-request fetcher used for every schema document.
        diagnostics: Collector receiving user-visible progress and errors.

    Attributes:
        schemas: The component map built so far, in insertion order.
    """

    def __init__(self, fetcher: DocumentFetcher, diagnostics: Diagnostics) -> None:
        self._fetcher = fetcher
        self.diagnostics = diagnostics
        self.schemas: dict[str, Any] = {}

    def link(self, document: dict[str, Any]) -> dict[str, Any]:
        """Link *document* in place and merge the result into ``components/schemas``.

        Returns:
            *document*, for chaining.

        Raises:
            UnsupportedReferenceError: A fetched schema document references
                another external document.
            MissingComponentsError: *document* has no ``components`` object.
        """
        references = list(iter_references(document, schema_only=True))
        logger.debug("Found %d schema references", len(references))
        for reference in references:
            if is_absolute_url(reference.value):
                self._link_external(reference)
        merge_components(document, self.schemas, self.diagnostics)
        return document

    def _link_external(self, reference: Reference) -> None:
        uri = reference.value
        logger.debug("Linking %s at %s", uri, reference)

        name = name_from_fragment(urlsplit(uri).fragment)
        if not name:
            self.diagnostics.error(f"Reference {uri} does not name a definition.")
            return

        try:
            schema_document = self._fetcher.fetch(uri)
        except FetchError as exc:
            self.diagnostics.error(f"JSON Schema {uri} could not be loaded: {exc}")
            return

        definition = resolve_definition(schema_document, name)
        if definition is None:
            self.diagnostics.error(f"Schema {name} was not found in JSON Schema {uri}.")
            return

        reference.rewrite(component_ref(name))
        self._include(name, definition, schema_document, cache_key(uri))

    def _include(
        self, name: str, definition: Any, schema_document: dict[str, Any], source: str
    ) -> None:
        """Add *definition* under *name* unless present, then walk what it references.

        The walk is depth first and visits references in document order.
        Pending references live on an explicit stack holding
        one iterator per inserted definition.
        """
        if name in self.schemas:
            return
        pending = [self._insert(name, definition)]
        while pending:
            reference = next(pending[-1], None)
            if reference is None:
                pending.pop()
                continue

            value = reference.value
            if is_absolute_url(value):
                raise UnsupportedReferenceError(
                    f"JSON Schema {source} references external document {value} "
                    f"at {reference}; nested external references are not supported."
                )
            if value.startswith(COMPONENT_PREFIX):
                continue

            target = name_from_fragment(value)
            target_definition = resolve_definition(schema_document, target)
            if target_definition is None:
                self.diagnostics.error(f"Definition {target} was not found in JSON Schema {source}.")
                continue

            reference.rewrite(component_ref(target))
            if target not in self.schemas:
                pending.append(self._insert(target, target_definition))

    def _insert(self, name: str, definition: Any) -> Iterator[Reference]:
        """Strip and record *definition*; return an iterator over its references."""
        strip_consts(definition)
        self.schemas[name] = definition
        self.diagnostics.info(f"Adding schema {name} to schemas")
        return iter(list(iter_references(definition)))


def merge_components(
    document: dict[str, Any], schemas: dict[str, Any], diagnostics: Diagnostics
) -> None:
    """Append *schemas* to ``document["components"]["schemas"]``.

    Names already present in the document are kept as they are and reported
    with a warning.

    Raises:
        MissingComponentsError: If *document* has no ``components`` object.
    """
    components = document.get("components")
    if not isinstance(components, dict):
        raise MissingComponentsError("No components found in OpenAPI document.")

    existing = components.get("schemas")
    if existing is None:
        components["schemas"] = dict(schemas)
        return
    if not isinstance(existing, dict):
        raise MissingComponentsError("components/schemas in OpenAPI document is not an object.")

    for name, definition in schemas.items():
        if name in existing:
            diagnostics.warning(
                f"Schema {name} already exists in components/schemas and was not replaced."
            )
        else:
            existing[name] = definition


def attach_diagnostics(document: dict[str, Any], diagnostics: Diagnostics) -> None:
    """Write the diagnostics array into ``document["info"]``.

    ``info`` is created when missing. An existing ``x-openapilinker-info``
    property is never overwritten; a warning goes to the operator log instead.
    """
    info = document.get("info")
    if info is None:
        document["info"] = diagnostics.to_extension()
        return
    if not isinstance(info, dict):
        logger.warning("info is not an object; diagnostics were not written")
        return
    if INFO_EXTENSION in info:
        logger.warning("%s already exists on info; diagnostics were not written", INFO_EXTENSION)
        return
    info.update(diagnostics.to_extension())


def link_openapi(
    open_api_url: Optional[str],
    fetcher: DocumentFetcher,
    diagnostics: Optional[Diagnostics] = None,
) -> dict[str, Any]:
    """Fetch the OpenAPI document at *open_api_url* and return it self-contained.

    Args:
        open_api_url: Absolute URL of the source document.
        fetcher: Per-request fetcher; the source document is fetched through
            it as well.
        diagnostics: Optional collector. A fresh one with the provenance
            banner is created when omitted.

    Returns:
        The linked document, including merged ``components/schemas`` and the
        diagnostics under ``info``.

    Raises:
        InvalidUsageError: *open_api_url* is missing, blank, or not absolute.
        FetchError: The source document cannot be loaded.
        UnsupportedReferenceError: See :meth:`SchemaLinker.link`.
        MissingComponentsError: See :meth:`SchemaLinker.link`.
    """
    if open_api_url is None or not open_api_url.strip():
        raise InvalidUsageError(MISSING_URL_MESSAGE)
    url = open_api_url.strip()
    if not is_absolute_url(url):
        raise InvalidUsageError(f"Query parameter openApiUrl must be an absolute http(s) URL, got '{url}'.")

    if diagnostics is None:
        diagnostics = Diagnostics.for_request(url)

    document = fetcher.fetch(url)
    SchemaLinker(fetcher, diagnostics).link(document)
    attach_diagnostics(document, diagnostics)
    return document
