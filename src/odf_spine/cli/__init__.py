"""odf-spine command line (typer + rich)."""
