"""Command line (typer + rich)."""
