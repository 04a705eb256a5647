"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from adapters.engine_client import EngineClient
from adapters.http_client import tls_enabled
from core.config import EngineSettings, write_user_env_vars
from core.domain.hosts import DEFAULT_DOCKER_HOST, parse_host_url
from core.errors import EngineError, HostParseError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_daemon(client: EngineClient) -> tuple[bool, str]:
    try:
        async with client:
            ping = await client.ping()
            client.negotiate_api_version_ping(ping)
        return True, f"daemon API {ping.api_version or 'not reported'} ({ping.os_type or 'unknown OS'})"
    except (EngineError, httpx.HTTPError) as exc:
        return False, str(exc) or type(exc).__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = EngineSettings()

    table = Table(title="dockerlink doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    host = settings.host or DEFAULT_DOCKER_HOST
    try:
        client = EngineClient(settings=settings, negotiate=True)
    except EngineError as exc:
        bad_host = isinstance(exc, HostParseError)
        table.add_row("Daemon host" if bad_host else "TLS", "FAIL", escape(str(exc)))
        _console.print(table)
        if bad_host:
            _console.print("\n[yellow]Hint:[/yellow] hosts look like `unix:///var/run/docker.sock` or `tcp://host:2376`.")
        else:
            _console.print("\n[yellow]Hint:[/yellow] DOCKER_CERT_PATH must hold ca.pem, cert.pem and key.pem.")
        raise typer.Exit(code=1) from exc
    table.add_row("Daemon host", "OK", host if settings.host else f"{host} (default)")

    if settings.api_version:
        table.add_row("API version", "PINNED", f"{client.client_version()} (DOCKER_API_VERSION)")
    else:
        table.add_row("API version", "AUTO", "negotiated with the daemon")

    if tls_enabled(settings):
        verify = "verify" if settings.tls_verify else "no verify"
        table.add_row("TLS", "ON", f"{verify}, certs: {settings.cert_path or '-'}")
    else:
        table.add_row("TLS", "OFF", "plain transport")

    ok_daemon, detail_daemon = asyncio.run(_check_daemon(client))
    table.add_row("Daemon ping", "OK" if ok_daemon else "FAIL", escape(detail_daemon))
    if ok_daemon:
        table.add_row("Effective version", "OK", client.client_version())

    _console.print(table)

    if not ok_daemon:
        _console.print(
            "\n[yellow]Note:[/yellow] requests will use API "
            f"{client.client_version()} until the daemon becomes reachable."
        )


@app.command(name="use-host")
def use_host(
    host: str = typer.Argument(None, help="Daemon host to store, e.g. tcp://10.0.0.5:2376."),
    clear: bool = typer.Option(False, "--clear", help="Remove the stored host instead."),
) -> None:
    """Store DOCKER_HOST in the user config .env (no shell profile editing)."""

    if clear:
        env_path = write_user_env_vars({"DOCKER_HOST": None})
        _console.print(f"[green]Removed DOCKER_HOST from:[/green] {env_path}")
        return

    if not host:
        raise typer.BadParameter("a host is required unless --clear is given")
    try:
        parse_host_url(host)
    except EngineError as exc:
        raise typer.BadParameter(str(exc)) from exc

    env_path = write_user_env_vars({"DOCKER_HOST": host})
    _console.print(f"[green]Saved DOCKER_HOST to:[/green] {env_path}")
