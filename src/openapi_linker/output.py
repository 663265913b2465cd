"""Output formatting with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- the linked document only, so it can be piped into other
  tools or redirected to a file.
* **stderr** -- everything else: status, diagnostics, warnings, errors.
* **TTY detection** -- JSON is syntax highlighted when stdout is an
  interactive terminal and printed raw otherwise.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag.

:class:`OutputManager` holds the Rich consoles and flags; the module-level
functions (:func:`info`, :func:`error`, ...) delegate to a global instance
installed with :func:`set_output`.
"""

from __future__ import annotations

import json
import os
import sys
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table


class OutputManager:
    """Central manager for CLI output.

    Args:
        no_color: Disable all colour and Rich markup.
        quiet: Suppress informational messages on stderr.
        verbose: Echo linking diagnostics on stderr.
        output_file: If set, write the document to this path instead of
            stdout.
    """

    def __init__(
        self,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file
        self._rich = _is_tty() and not self._no_color

        self._stdout = Console(file=sys.stdout, no_color=self._no_color)
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def write_document(self, document: Any, compact: bool = False) -> None:
        """Write a JSON document to stdout or the configured output file.

        Args:
            document: The JSON-serialisable document.
            compact: Emit a single line instead of indenting by two spaces.
        """
        indent = None if compact else 2
        text = json.dumps(document, indent=indent, ensure_ascii=False)

        if self._output_file:
            with open(self._output_file, "w", encoding="utf-8") as f:
                f.write(text)
                f.write("\n")
        elif self._rich and not compact:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            print(text, file=sys.stdout, flush=True)

    def print_table(self, headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
        """Print a table to stdout; tab-separated when not on a colour TTY."""
        if not self._rich:
            print("\t".join(headers), file=sys.stdout, flush=True)
            for row in rows:
                print("\t".join(row), file=sys.stdout, flush=True)
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for h in headers:
            table.add_column(h)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Informational message. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._err(message, None)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._err(message, "green")

    def error(self, message: str) -> None:
        """Error message. Never suppressed."""
        self._err(f"Error: {message}", "bold red")

    def diagnostic(self, line: str) -> None:
        """Echo one linking diagnostic line, coloured by its prefix.

        Only shown with ``--verbose``; the lines are part of the document
        in any case.
        """
        if not self._verbose:
            return
        if line.startswith("ERROR:"):
            self._err(line, "red")
        elif line.startswith("WARNING:"):
            self._err(line, "yellow")
        else:
            self._err(line, "dim")

    def _err(self, message: str, style: Optional[str]) -> None:
        if self._no_color or style is None:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(message, style=style, markup=False, highlight=False)


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    """Check if stdout is a TTY."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """Return True when NO_COLOR is set (any value) or TERM=dumb."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    return os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager`."""
    global _output
    _output = output


def reset_output() -> None:
    """Drop the global :class:`OutputManager`; used between tests."""
    global _output
    _output = None


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def diagnostic(line: str) -> None:
    get_output().diagnostic(line)
