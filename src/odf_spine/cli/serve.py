"""
CLI: ``odf-spine serve``: start the API server.
"""

from __future__ import annotations

import typer
import uvicorn

from odf_spine.cli.utils import console, settings_from


def serve(
    ctx: typer.Context,
    host: str | None = typer.Option(None, "--host", "-h", help="Bind address (default: settings.host)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (default: settings.port)"),
) -> None:
    """Start the odf-spine REST API server."""
    from odf_spine.api import create_app

    settings = settings_from(ctx)
    bind_host = host or settings.host
    bind_port = port or settings.port

    console.print(f"[bold green]Starting odf-spine API[/bold green] on {bind_host}:{bind_port}")
    console.print(f"[dim]backend={settings.backend} data={settings.data_path}[/dim]")
    uvicorn.run(
        create_app(settings),
        host=bind_host,
        port=bind_port,
        log_level=settings.log_level.lower(),
    )
