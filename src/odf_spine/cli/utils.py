"""Shared pieces for the command modules: the store context and output."""

from __future__ import annotations

import json
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from odf_spine.core.settings import OdfSettings
from odf_spine.ops.context import OperationContext
from odf_spine.ops.result import OperationResult
from odf_spine.storage import create_store

console = Console()
err_console = Console(stderr=True)


def settings_from(ctx: typer.Context) -> OdfSettings:
    """Settings built by the root callback, or fresh ones from the environment."""
    found = ctx.obj.get("settings") if isinstance(ctx.obj, dict) else None
    return found if isinstance(found, OdfSettings) else OdfSettings()


@contextmanager
def operation_context(ctx: typer.Context) -> Iterator[OperationContext]:
    settings = settings_from(ctx)
    store = create_store(settings)
    try:
        yield OperationContext(store=store, settings=settings, caller="cli")
    finally:
        store.close()


def fail_on_error(result: OperationResult[Any]) -> Any:
    """Return the result's data, or report the error on stderr and exit 1."""
    if result.success:
        return result.data
    code = result.code or "ERROR"
    message = result.error.message if result.error else "Unknown error"
    err_console.print(f"[bold red]Error[/bold red] ({code}): {message}")
    raise typer.Exit(code=1)


def print_json(payload: Any) -> None:
    # no rich markup so piped output stays valid JSON
    typer.echo(json.dumps(payload, indent=2, default=str, ensure_ascii=False))


def print_dict(data: dict[str, Any], *, title: str = "") -> None:
    if title:
        console.print(f"[bold]{title}[/bold]")
    for key, value in data.items():
        console.print(f"  [cyan]{key}[/cyan]: {value}")


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def print_table(rows: Sequence[dict[str, Any]], columns: Sequence[str], *, title: str = "") -> None:
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, pad_edge=False)
    for col in columns:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(_cell(row.get(col)) for col in columns))
    console.print(table)
