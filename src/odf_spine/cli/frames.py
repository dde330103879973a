"""
CLI: ``odf-spine frames``: inspect and delete frame entries.
"""

from __future__ import annotations

import typer

from odf_spine.cli.utils import console, fail_on_error, operation_context, print_dict, print_json, print_table
from odf_spine.ops import frames as frame_ops

app = typer.Typer(no_args_is_help=True)

PORT_COLUMNS = ("id", "label", "status", "fiberType", "connectorType", "destination", "lastMaintained", "notes")


@app.command("show")
def show(
    ctx: typer.Context,
    region: str = typer.Argument(..., help="Region name"),
    sub: str = typer.Argument(..., help="Subregion name"),
    as_json: bool = typer.Option(False, "--json", help="Print the canonical entry as JSON"),
) -> None:
    """Show a frame entry (normalized; repaired in storage if needed)."""
    with operation_context(ctx) as op_ctx:
        entry = fail_on_error(frame_ops.get_frame(op_ctx, region, sub))

    if as_json:
        print_json(entry)
        return

    print_dict(
        {
            "region": entry["region"],
            "sub": entry["sub"],
            "displayCount": entry["displayCount"],
            "extraFieldDefs": ", ".join(entry["extraFieldDefs"]) or "-",
            "lastSave": entry.get("lastSave") or "-",
        },
        title=f"{region} / {sub}",
    )
    print_table(entry["ports"], PORT_COLUMNS)


@app.command("delete")
def delete(
    ctx: typer.Context,
    region: str = typer.Argument(..., help="Region name"),
    sub: str = typer.Argument(..., help="Subregion name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a frame entry and all of its ports."""
    if not yes:
        typer.confirm(f"Delete frame {region} / {sub} and all of its ports?", abort=True)
    with operation_context(ctx) as op_ctx:
        data = fail_on_error(frame_ops.delete_frame(op_ctx, region, sub))

    if data["deleted"]:
        console.print(f"[green]Deleted[/green] {region} / {sub}")
    else:
        console.print(f"[dim]No frame stored for {region} / {sub}[/dim]")
