"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~openapi_linker.exceptions.LinkerError` subclass.

Example::

    $ openapi-linker link https://example.com/openapi.json
    $ echo $?
    3   # EXIT_FETCH_FAILURE -- the document could not be downloaded
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_FETCH_FAILURE = 3
"""A document could not be fetched (timeout, DNS failure, HTTP error status)."""

EXIT_DOCUMENT_ERROR = 4
"""A fetched document was not valid JSON or lacks a required section."""

EXIT_UNSUPPORTED_REFERENCE = 5
"""A schema document referenced another external document."""
