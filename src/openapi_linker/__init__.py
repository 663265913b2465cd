"""openapi_linker -- Inline externally hosted JSON-Schema definitions into OpenAPI documents.

Many API specifications keep their data model in separately hosted
JSON-Schema files and point at them with absolute-URL ``$ref`` pointers.
Most OpenAPI consumers expect a single self-contained document instead.
This package fetches the referenced schema documents, copies every
reachable definition into ``components/schemas``, and rewrites the
references to local pointers.

Typical usage::

    openapi-linker link https://example.com/openapi.json -o linked.json
    openapi-linker serve --port 7071

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic configuration models.
    config: XDG-aware configuration loading and precedence resolution.
    exceptions: Exception hierarchy with exit-code and HTTP status mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
