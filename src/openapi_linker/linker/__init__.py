"""Schema linking engine.

* :mod:`~openapi_linker.linker.linker` -- :class:`SchemaLinker` and the
  :func:`link_openapi` entry point.
* :mod:`~openapi_linker.linker.consts` -- :func:`strip_consts`.
* :mod:`~openapi_linker.linker.diagnostics` -- :class:`Diagnostics`.
"""

from openapi_linker.linker.consts import strip_consts
from openapi_linker.linker.diagnostics import INFO_EXTENSION, Diagnostics
from openapi_linker.linker.linker import (
    MISSING_URL_MESSAGE,
    SchemaLinker,
    attach_diagnostics,
    iter_references,
    link_openapi,
    merge_components,
)

__all__ = [
    "Diagnostics",
    "INFO_EXTENSION",
    "MISSING_URL_MESSAGE",
    "SchemaLinker",
    "attach_diagnostics",
    "iter_references",
    "link_openapi",
    "merge_components",
    "strip_consts",
]
