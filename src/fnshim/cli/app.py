"""
Root Typer application for the fnshim CLI.

Commands:
    fnshim invoke [NAME]     run one invocation through LocalHost
    fnshim serve [NAME]      run the stdio host until EOF / Ctrl-C
    fnshim functions         list registered functions
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

import typer
from typer import Typer

from fnshim.cli.utils import (
    console,
    err_console,
    load_registry,
    output_envelope,
    parse_event,
    print_table,
    resolve_function,
    setup_logging,
)
from fnshim.core.errors import ConfigError
from fnshim.core.settings import FunctionSettings, get_settings
from fnshim.runtime.hosts import LocalHost, StdioHost

app = Typer(
    name="fnshim",
    help="fnshim — run serverless-style handlers locally.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _settings() -> FunctionSettings:
    try:
        return get_settings()
    except ConfigError as exc:
        err_console.print(f"[bold red]Error[/bold red] (ConfigError): {exc.message}")
        raise typer.Exit(code=2) from exc


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        try:
            v = pkg_version("fnshim")
        except PackageNotFoundError:
            v = "0.1.0"
        typer.echo(f"fnshim {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """fnshim CLI — invoke and serve registered functions."""


def _positive_timeout(value: float | None) -> float | None:  # noqa: UP007
    if value is not None and value <= 0:
        raise typer.BadParameter("must be greater than 0")
    return value


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("invoke")
def invoke_cmd(
    name: str | None = typer.Argument(None, help="Function name (default: FNSHIM_FUNCTION)."),  # noqa: UP007
    event: str | None = typer.Option(None, "--event", "-e", help="Event payload as JSON."),  # noqa: UP007
    timeout: float | None = typer.Option(  # noqa: UP007
        None, "--timeout", "-t", min=0.0, help="Invocation deadline in seconds."
    ),
    cancelled: bool = typer.Option(False, "--cancelled", help="Deliver an already-cancelled context."),
    module: list[str] = typer.Option([], "--module", "-m", help="Import a module that registers functions."),
    json_out: bool = typer.Option(False, "--json", help="Print the full wire envelope."),
) -> None:
    """Invoke a function once and print its result.

    Exit code 0 on success, 1 when the function fails, 2 for unknown functions.

    Example::

        fnshim invoke hello
        fnshim invoke hello --timeout 3 --cancelled --json
    """
    settings = _settings()
    setup_logging(settings)
    registry = load_registry(module)
    function = name or settings.function
    handler = resolve_function(registry, function)

    host = LocalHost(default_timeout=settings.default_timeout)
    host.submit(parse_event(event), timeout=timeout, cancelled=cancelled)
    record = host.run_pending(function, handler)[0]
    output_envelope(record.envelope, as_json=json_out)


@app.command("serve")
def serve_cmd(
    name: str | None = typer.Argument(None, help="Function name (default: FNSHIM_FUNCTION)."),  # noqa: UP007
    timeout: float | None = typer.Option(  # noqa: UP007
        None,
        "--timeout",
        "-t",
        callback=_positive_timeout,
        help="Default deadline in seconds per invocation.",
    ),
    module: list[str] = typer.Option([], "--module", "-m", help="Import a module that registers functions."),
) -> None:
    """Serve a function over stdin/stdout, one JSON invocation per line.

    Example::

        echo '{"requestId": "r1"}' | fnshim serve hello
    """
    settings = _settings()
    setup_logging(settings)
    registry = load_registry(module)
    function = name or settings.function
    handler = resolve_function(registry, function)

    host = StdioHost(default_timeout=timeout if timeout is not None else settings.default_timeout)
    host.serve(function, handler)


@app.command("functions")
def functions_cmd(
    module: list[str] = typer.Option([], "--module", "-m", help="Import a module that registers functions."),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List registered functions."""
    registry = load_registry(module)
    rows = [
        {"name": meta["name"], "handler": meta["handler"], "description": meta["description"] or ""}
        for meta in registry.list_with_metadata()
    ]
    if json_out:
        console.print_json(data=rows)
        return
    print_table(rows, title="Functions")
