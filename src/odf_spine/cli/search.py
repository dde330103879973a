"""
CLI: ``odf-spine search KEYWORD``: keyword search across all frames.
"""

from __future__ import annotations

import typer

from odf_spine.cli.utils import console, fail_on_error, operation_context, print_json, print_table
from odf_spine.ops.frames import search_frames

RESULT_COLUMNS = ("region", "sub", "portNumber", "fieldPath", "matchedPreview", "link")


def search(
    ctx: typer.Context,
    keyword: str = typer.Argument(..., help="Case-insensitive text to look for"),
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Maximum matches"),
    as_json: bool = typer.Option(False, "--json", help="Print {keyword, total, items} as JSON"),
) -> None:
    """Search every frame entry for a keyword."""
    with operation_context(ctx) as op_ctx:
        data = fail_on_error(search_frames(op_ctx, keyword, limit))

    if as_json:
        print_json(data)
        return

    print_table(data["items"], RESULT_COLUMNS, title=f"Matches for {data['keyword']!r}")
    console.print(f"\n[dim]{data['total']} match(es)[/dim]")
