"""User-visible diagnostics shipped inside the linked document.

A :class:`Diagnostics` instance lives for one linking operation. Lines are
appended in the order events happen and end up as a JSON array under
``info["x-openapilinker-info"]`` in the output. Each line is mirrored to the
operator log so that the two views never disagree.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

INFO_EXTENSION = "x-openapilinker-info"
"""Vendor extension key under ``info`` holding the diagnostics array."""

LICENSE_NOTICE = "License: MIT (https://opensource.org/licenses/MIT)"

LICENSE_DISCLAIMER = (
    'THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR '
    "IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY, "
    "FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE "
    "AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER "
    "LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, "
    "OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE "
    "SOFTWARE."
)


class Diagnostics:
    """Ordered, append-only list of diagnostic lines.

    Example::

        diagnostics = Diagnostics.for_request("https://example.com/openapi.json")
        diagnostics.info("Adding schema Widget to schemas")
        diagnostics.error("Schema Gadget was not found in JSON Schema ...")
        document["info"].update(diagnostics.to_extension())
    """

    def __init__(self) -> None:
        self._lines: list[str] = []

    @classmethod
    def for_request(cls, open_api_url: str, now: Optional[datetime] = None) -> Diagnostics:
        """Create a collector pre-filled with the provenance banner.

        Args:
            open_api_url: The source document URL, echoed into the log.
            now: Timestamp for the banner. Defaults to the current UTC time.
        """
        from openapi_linker import __version__

        stamp = (now or datetime.now(timezone.utc)).isoformat()
        diagnostics = cls()
        diagnostics.info(f"This spec linked by openapi-linker {__version__} {stamp}")
        diagnostics.info(LICENSE_NOTICE)
        diagnostics.info(LICENSE_DISCLAIMER)
        diagnostics.info(f"Original spec URL (openApiUrl) = {open_api_url}")
        return diagnostics

    def info(self, message: str) -> None:
        self._lines.append(message)
        logger.info(message)

    def warning(self, message: str) -> None:
        self._lines.append(f"WARNING: {message}")
        logger.warning(message)

    def error(self, message: str) -> None:
        """Record a recoverable failure; the operation carries on."""
        self._lines.append(f"ERROR: {message}")
        logger.warning(message)

    @property
    def lines(self) -> list[str]:
        """A copy of the recorded lines."""
        return list(self._lines)

    def to_extension(self) -> dict[str, list[str]]:
        """Return ``{"x-openapilinker-info": [...]}`` ready to merge into ``info``."""
        return {INFO_EXTENSION: self.lines}

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self._lines)
