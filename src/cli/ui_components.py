"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos (main, doctor).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import ChangeKind, ContainerChange, PingResult

_KIND_STYLES = {
    ChangeKind.MODIFIED: "yellow",
    ChangeKind.ADDED: "green",
    ChangeKind.DELETED: "red",
}


def build_changes_table(changes: Iterable[ContainerChange]) -> Table:
    """Table in the spirit of `docker diff`."""

    table = Table(title="Container changes")
    table.add_column("Kind", no_wrap=True)
    table.add_column("Path", style="white")
    for change in changes:
        table.add_row(Text(change.kind.symbol(), style=_KIND_STYLES[change.kind]), change.path)
    return table


def build_version_table(host: str, client_version: str, status: str) -> Table:
    table = Table(title="Engine API")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_row("Daemon host", host)
    table.add_row("API version", client_version)
    table.add_row("Negotiation", status)
    return table


def build_ping_panel(ping: PingResult) -> Panel:
    body = Text()
    body.append("API version: ", style="bold")
    body.append(f"{ping.api_version or 'not reported'}\n")
    body.append("OS type: ", style="bold")
    body.append(f"{ping.os_type or 'unknown'}\n")
    body.append("Experimental: ", style="bold")
    body.append("yes" if ping.experimental else "no")
    if ping.builder_version:
        body.append(f"\nBuilder: {ping.builder_version}", style="dim")
    return Panel(body, title=Text("Ping", style="bold green"), border_style="green")


def build_info_table(info: Mapping[str, Any]) -> Table:
    """Short summary of `GET /info` (the full payload is available with --json)."""

    table = Table(title="Daemon info")
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for key in ("Name", "ServerVersion", "OperatingSystem", "Architecture", "Containers", "Images"):
        if key in info:
            table.add_row(key, str(info[key]))
    return table
