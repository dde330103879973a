"""
Root Typer application for the odf-spine CLI.

Global options pick the storage backend and data location; every command
then works through the same operations the HTTP API uses::

    odf-spine --backend sqlite --database-url sqlite:///odf.db frames show North A
    odf-spine --data-dir /srv/odf search faulty --json
    odf-spine subregions set North B C
    odf-spine db normalize --dry-run
    odf-spine serve --port 5500
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError as SettingsValidationError
from typer import Typer

from odf_spine import __version__
from odf_spine.cli.utils import err_console
from odf_spine.core.logging import configure_logging
from odf_spine.core.settings import OdfSettings

app = Typer(
    name="odf-spine",
    help="odf-spine: optical distribution frame records.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"odf-spine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    backend: str | None = typer.Option(None, "--backend", "-b", help="Storage backend: memory, json or sqlite"),
    data_dir: Path | None = typer.Option(None, "--data-dir", "-d", help="Directory holding data.json"),
    database_url: str | None = typer.Option(None, "--database-url", help="SQLite URL for the sqlite backend"),
    log_level: str | None = typer.Option(None, "--log-level", help="Log level (default: settings.log_level)"),
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Frames, search, subregion rosters and storage maintenance."""
    given: dict[str, Any] = {"backend": backend, "data_dir": data_dir, "database_url": database_url, "log_level": log_level}
    overrides = {key: value for key, value in given.items() if value is not None}

    try:
        settings = OdfSettings(**overrides)
    except SettingsValidationError as exc:
        err_console.print(f"[bold red]Invalid settings[/bold red]: {exc}")
        raise typer.Exit(code=2) from exc

    configure_logging(level=settings.log_level, json_format=settings.json_logs, stream=sys.stderr)
    ctx.obj = {"settings": settings}


# ── Sub-command registration ─────────────────────────────────────────────

from odf_spine.cli.db import app as db_app  # noqa: E402
from odf_spine.cli.frames import app as frames_app  # noqa: E402
from odf_spine.cli.search import search  # noqa: E402
from odf_spine.cli.serve import serve  # noqa: E402
from odf_spine.cli.subregions import app as subregions_app  # noqa: E402

app.command("serve")(serve)
app.command("search")(search)
app.add_typer(frames_app, name="frames", help="Show and delete frame entries.")
app.add_typer(subregions_app, name="subregions", help="Subregion rosters.")
app.add_typer(db_app, name="db", help="Storage maintenance.")
