"""
CLI: ``odf-spine subregions``: read and replace a region's roster.
"""

from __future__ import annotations

import typer

from odf_spine.cli.utils import console, fail_on_error, operation_context, print_json
from odf_spine.ops import subregions as roster_ops

app = typer.Typer(no_args_is_help=True)


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    region: str = typer.Argument(..., help="Region name"),
    as_json: bool = typer.Option(False, "--json", help="Print {items} as JSON"),
) -> None:
    """List a region's subregions in display order."""
    with operation_context(ctx) as op_ctx:
        data = fail_on_error(roster_ops.list_subregions(op_ctx, region))

    if as_json:
        print_json(data)
        return
    if not data["items"]:
        console.print("[dim]No items.[/dim]")
        return
    for sub in data["items"]:
        console.print(f"  {sub}")


@app.command("set")
def set_cmd(
    ctx: typer.Context,
    region: str = typer.Argument(..., help="Region name"),
    items: list[str] = typer.Argument(None, help="Subregion names, in display order"),
    as_json: bool = typer.Option(False, "--json", help="Print the reconciliation result as JSON"),
) -> None:
    """Replace a region's roster.

    Subregions left out lose their frame entry and ports; new ones get a
    default frame. The cascade runs without a confirmation prompt.
    """
    with operation_context(ctx) as op_ctx:
        data = fail_on_error(roster_ops.update_subregions(op_ctx, region, list(items or [])))

    if as_json:
        print_json(data)
        return
    console.print(f"[bold]{region}[/bold]: {', '.join(data['items']) or '-'}")
    console.print(f"  [green]added[/green]:   {', '.join(data['added']) or '-'}")
    console.print(f"  [red]removed[/red]: {', '.join(data['removed']) or '-'}")
    console.print(f"  [cyan]created[/cyan]: {data['created']} default frame(s)")
