"""Typer application and CLI entry point for openapi_linker.

Commands:

* ``link URL`` -- link a document once and print it (or write it with
  ``-o``).
* ``serve`` -- run the HTTP route under uvicorn.
* ``cache stats`` / ``cache clear`` -- inspect or empty the on-disk document
  store used by the ``disk`` cache backend.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import TYPE_CHECKING, Any, Optional

import httpx
import typer

from openapi_linker import __version__
from openapi_linker.exceptions import LinkerError
from openapi_linker.exit_codes import EXIT_GENERIC_FAILURE
from openapi_linker.models import GlobalConfig

if TYPE_CHECKING:
    from openapi_linker.cache import DiskStore

app = typer.Typer(
    name="openapi-linker",
    help="Inline external JSON-Schema references into OpenAPI documents.",
    no_args_is_help=True,
    add_completion=False,
)

cache_app = typer.Typer(no_args_is_help=True)
app.add_typer(cache_app, name="cache", help="Inspect or clear the on-disk document cache.")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"openapi-linker {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug output and linking diagnostics."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Operator log level (DEBUG, INFO, WARNING, ...)."
    ),
) -> None:
    """Install the global output manager and remember shared options."""
    from openapi_linker.output import OutputManager, set_output

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["no_color"] = no_color
    ctx.obj["log_level"] = "DEBUG" if verbose and log_level is None else log_level


def _load_config(ctx: typer.Context, **overrides: Any) -> GlobalConfig:
    """Resolve the effective config and configure logging from it.

    Raises:
        typer.Exit: With the error's exit code when the config is invalid.
    """
    from openapi_linker.config import resolve_config
    from openapi_linker.output import error

    try:
        config = resolve_config(cli_log_level=ctx.obj.get("log_level"), **overrides)
    except LinkerError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    logging.basicConfig(level=config.log_level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("openapi_linker").setLevel(config.log_level)
    return config


def _make_client(config: GlobalConfig) -> httpx.Client:
    """Build the HTTP client used for document fetches."""
    return httpx.Client(
        timeout=config.request.timeout,
        verify=config.request.verify_ssl,
        follow_redirects=config.request.follow_redirects,
    )


@app.command("link")
def link_command(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Absolute URL of the OpenAPI document."),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Write the linked document to this file."
    ),
    compact: bool = typer.Option(False, "--compact", help="Emit single-line JSON."),
    cache_backend: Optional[str] = typer.Option(
        None, "--cache-backend", help="Document cache backend: memory or disk."
    ),
) -> None:
    """Link an OpenAPI document and print it.

    Every external ``schema.$ref`` is resolved, its definitions are copied
    into ``components/schemas``, and the references are rewritten to local
    pointers. Linking diagnostics are included in the document under
    ``info.x-openapilinker-info`` and echoed to stderr with ``--verbose``.
    """
    from openapi_linker.cache import DocumentFetcher, create_store
    from openapi_linker.linker import Diagnostics, link_openapi
    from openapi_linker.output import OutputManager, diagnostic, error, get_output, set_output, success

    config = _load_config(ctx, cli_cache_backend=cache_backend)

    if output_file:
        set_output(
            OutputManager(
                no_color=ctx.obj["no_color"],
                quiet=ctx.obj["quiet"],
                verbose=ctx.obj["verbose"],
                output_file=output_file,
            )
        )

    store = create_store(config.cache)
    diagnostics = Diagnostics.for_request(url)
    try:
        with _make_client(config) as client:
            fetcher = DocumentFetcher(store, client=client)
            document = link_openapi(url, fetcher, diagnostics)
    except LinkerError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    finally:
        store.close()

    for line in diagnostics:
        diagnostic(line)
    get_output().write_document(document, compact=compact)
    if output_file:
        success(f"Linked document written to {output_file}")


@app.command("serve")
def serve_command(
    ctx: typer.Context,
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind."),
    port: Optional[int] = typer.Option(None, "--port", help="Port to listen on."),
    cache_backend: Optional[str] = typer.Option(
        None, "--cache-backend", help="Document cache backend: memory or disk."
    ),
) -> None:
    """Serve the linker over HTTP.

    Example::

        openapi-linker serve --port 7071
        curl 'http://127.0.0.1:7071/api/linker?openApiUrl=https://example.com/openapi.json'
    """
    import uvicorn

    from openapi_linker.output import info
    from openapi_linker.server import create_app

    config = _load_config(
        ctx, cli_host=host, cli_port=port, cli_cache_backend=cache_backend
    )
    info(
        f"Listening on http://{config.server.host}:{config.server.port}{config.server.route}"
    )
    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_level=config.log_level.lower(),
    )


def _disk_store(ctx: typer.Context) -> DiskStore:
    from openapi_linker.cache import DiskStore
    from openapi_linker.config import get_cache_dir

    config = _load_config(ctx)
    return DiskStore(get_cache_dir(), config.cache.ttl_seconds)


@cache_app.command("stats")
def cache_stats(ctx: typer.Context) -> None:
    """Show the size and location of the on-disk document cache."""
    from openapi_linker.output import print_table

    store = _disk_store(ctx)
    try:
        stats = store.stats()
    finally:
        store.close()
    print_table(
        ["Setting", "Value"],
        [[key, "" if value is None else str(value)] for key, value in stats.items()],
        title="Document cache",
    )


@cache_app.command("clear")
def cache_clear(ctx: typer.Context) -> None:
    """Remove every document from the on-disk cache."""
    from openapi_linker.output import success

    store = _disk_store(ctx)
    try:
        size = store.stats()["size"]
        store.clear()
    finally:
        store.close()
    success(f"Removed {size} cached document(s).")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``openapi-linker`` console script.

    :class:`~openapi_linker.exceptions.LinkerError` exits with the error's
    ``exit_code``; any other exception exits with
    :data:`~openapi_linker.exit_codes.EXIT_GENERIC_FAILURE`.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from openapi_linker.output import error

        error(str(exc))
        if isinstance(exc, LinkerError):
            sys.exit(exc.exit_code)
        sys.exit(EXIT_GENERIC_FAILURE)
