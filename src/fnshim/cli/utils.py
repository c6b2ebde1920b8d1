"""
CLI utility helpers — function lookup and output formatting.
"""

from __future__ import annotations

import importlib
import json
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from fnshim.core.errors import HandlerNotFoundError
from fnshim.core.logging import configure_logging
from fnshim.core.settings import FunctionSettings
from fnshim.functions import register_builtin_functions
from fnshim.runtime.invoke import Handler
from fnshim.runtime.registry import HandlerRegistry

console = Console()
err_console = Console(stderr=True)

EXIT_FAILED = 1
EXIT_USAGE = 2


def setup_logging(settings: FunctionSettings) -> None:
    configure_logging(
        level=settings.log_level,
        json_format=settings.json_logs,
        service=settings.service_name,
    )


def load_registry(modules: list[str] | None = None) -> HandlerRegistry:
    """Default registry with bundled functions plus anything *modules* register on import."""
    registry = register_builtin_functions()
    for module in modules or []:
        try:
            importlib.import_module(module)
        except ImportError as exc:
            err_console.print(f"[bold red]Error[/bold red]: cannot import {module!r}: {exc}")
            raise typer.Exit(code=EXIT_USAGE) from exc
    return registry


def resolve_function(registry: HandlerRegistry, name: str) -> Handler:
    """Look a function up, exiting with code 2 when it is unknown."""
    try:
        return registry.get(name)
    except HandlerNotFoundError as exc:
        err_console.print(f"[bold red]Error[/bold red] (HandlerNotFoundError): {exc.message}")
        raise typer.Exit(code=EXIT_USAGE) from exc


def parse_event(raw: str | None) -> Any:
    """Parse the ``--event`` option; exits with code 2 on invalid JSON."""
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        err_console.print(f"[bold red]Error[/bold red]: --event is not valid JSON: {exc}")
        raise typer.Exit(code=EXIT_USAGE) from exc


def output_envelope(envelope: dict[str, Any], *, as_json: bool = False) -> None:
    """Render an invocation envelope; exits 1 when it carries a failure."""
    if as_json:
        console.print_json(json.dumps(envelope, default=str))
    elif envelope["ok"]:
        payload = envelope["payload"]
        if isinstance(payload, str):
            console.print(payload, markup=False, highlight=False)
        else:
            console.print_json(json.dumps(payload, default=str))
    else:
        error = envelope["error"]
        err_console.print(f"[bold red]Error[/bold red] ({error['errorType']}): {error['errorMessage']}")

    if not envelope["ok"]:
        raise typer.Exit(code=EXIT_FAILED)


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Print a list of dicts as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False)
    columns = list(rows[0].keys())
    for col in columns:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(str(row.get(c, "")) for c in columns))
    console.print(table)
