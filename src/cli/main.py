"""CLI de dockerlink.

Cada comando abre un `EngineClient` con negociación automática: la primera
petición hace ping al daemon y fija una versión que ambos lados hablan
(salvo que `--api-version` o `DOCKER_API_VERSION` fijen una).
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import httpx
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from adapters.engine_client import EngineClient
from cli import doctor
from cli.ui_components import (
    build_changes_table,
    build_info_table,
    build_ping_panel,
    build_version_table,
)
from core.errors import EngineError

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="Docker Engine API client with version negotiation.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


@dataclass
class CLIOptions:
    host: str | None = None
    api_version: str | None = None


def build_client(options: CLIOptions) -> EngineClient:
    return EngineClient(options.host, version=options.api_version, negotiate=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _run(ctx: typer.Context, action: Callable[[EngineClient], Awaitable[T]]) -> T:
    async def _session() -> T:
        async with build_client(ctx.obj) as client:
            return await action(client)

    try:
        return asyncio.run(_session())
    except (EngineError, httpx.HTTPError, ValidationError) as exc:
        _console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


@app.callback()
def main(
    ctx: typer.Context,
    host: str = typer.Option(None, "--host", "-H", help="Daemon host (overrides DOCKER_HOST)."),
    api_version: str = typer.Option(None, "--api-version", help="Pin the API version (disables negotiation)."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    _configure_logging(verbose)
    ctx.obj = CLIOptions(host=host, api_version=api_version)


@app.command()
def version(ctx: typer.Context) -> None:
    """Show the API version this client will use against the daemon."""

    async def _action(client: EngineClient) -> tuple[str, str, str]:
        await client.negotiate_api_version()
        return client.daemon_host(), client.client_version(), client.negotiator.state.status.value

    host, client_version, status = _run(ctx, _action)
    _console.print(build_version_table(host, client_version, status))


@app.command()
def ping(ctx: typer.Context) -> None:
    """Ping the daemon."""

    async def _action(client: EngineClient):
        return await client.ping()

    _console.print(build_ping_panel(_run(ctx, _action)))


@app.command()
def info(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON payload."),
) -> None:
    """Show daemon-wide information."""

    async def _action(client: EngineClient):
        return await client.info()

    payload = _run(ctx, _action)
    if as_json:
        _console.print_json(json.dumps(payload))
    else:
        _console.print(build_info_table(payload))


@app.command()
def diff(ctx: typer.Context, container: str = typer.Argument(..., help="Container name or ID.")) -> None:
    """Inspect changes to files on a container's filesystem."""

    async def _action(client: EngineClient):
        return await client.container_changes(container)

    changes = _run(ctx, _action)
    if not changes:
        _console.print("[dim]No changes.[/dim]")
        return
    _console.print(build_changes_table(changes))


def run() -> None:
    app()
