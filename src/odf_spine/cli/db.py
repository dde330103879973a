"""
CLI: ``odf-spine db``: storage maintenance.
"""

from __future__ import annotations

import typer

from odf_spine.cli.utils import console, fail_on_error, operation_context, print_json
from odf_spine.ops.maintenance import normalize_all

app = typer.Typer(no_args_is_help=True)


@app.command("normalize")
def normalize(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="Report what would change without writing"),
    as_json: bool = typer.Option(False, "--json", help="Print counts as JSON"),
) -> None:
    """Rewrite every stored frame in canonical shape where it has drifted."""
    with operation_context(ctx) as op_ctx:
        data = fail_on_error(normalize_all(op_ctx, dry_run=dry_run))

    if as_json:
        print_json(data)
        return
    verb = "would update" if dry_run else "updated"
    console.print(
        f"Scanned {data['scanned']} frame(s): {verb} {data['updated']}, "
        f"{data['invalid']} without a port list"
    )
