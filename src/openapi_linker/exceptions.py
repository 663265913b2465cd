"""Exception hierarchy for openapi_linker.

All exceptions inherit from :class:`LinkerError`, which carries an
``exit_code`` attribute (used by the CLI) and a ``status_code`` attribute
(used by the HTTP route). The CLI entry point catches ``LinkerError`` and
exits with its code; the route turns it into a plain-text response with
its status.

Subclass hierarchy::

    LinkerError                    (exit 1, HTTP 500)
    +-- InvalidUsageError          (exit 2, HTTP 400)
    +-- FetchError                 (exit 3, HTTP 500)
    |   +-- DocumentParseError     (exit 4, HTTP 500)
    +-- UnsupportedReferenceError  (exit 5, HTTP 500)
    +-- MissingComponentsError     (exit 4, HTTP 500)
    +-- ConfigError                (exit 1, HTTP 500)
"""

from openapi_linker.exit_codes import (
    EXIT_DOCUMENT_ERROR,
    EXIT_FETCH_FAILURE,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_UNSUPPORTED_REFERENCE,
)


class LinkerError(Exception):
    """Base exception for all openapi_linker errors.

    Args:
        message: Human-readable error description. Returned verbatim as the
            body of an HTTP error response.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE
    status_code: int = 500

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(LinkerError):
    """Raised for missing or malformed request parameters."""

    exit_code = EXIT_INVALID_USAGE
    status_code = 400


class FetchError(LinkerError):
    """Raised when a document cannot be downloaded.

    Args:
        message: Human-readable error description.
        uri: The URI that failed, when known.
    """

    exit_code = EXIT_FETCH_FAILURE

    def __init__(self, message: str, uri: str | None = None):
        super().__init__(message)
        self.uri = uri


class DocumentParseError(FetchError):
    """Raised when a fetched body is not a JSON object."""

    exit_code = EXIT_DOCUMENT_ERROR


class UnsupportedReferenceError(LinkerError):
    """Raised when a fetched schema document references another external document.

    Only one hop of external indirection is followed. Continuing past such a
    reference would leave a dangling pointer in the output, so the whole
    operation fails instead.
    """

    exit_code = EXIT_UNSUPPORTED_REFERENCE


class MissingComponentsError(LinkerError):
    """Raised when the OpenAPI document has no ``components`` object to merge into."""

    exit_code = EXIT_DOCUMENT_ERROR


class ConfigError(LinkerError):
    """Raised for configuration problems (invalid JSON, failed validation, bad env values)."""

    exit_code = EXIT_GENERIC_FAILURE
