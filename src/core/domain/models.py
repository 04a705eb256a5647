"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (`Field`) sin acoplar
  el Core a librerías de I/O.
- La CLI renderiza y los tests verifican los mismos modelos.

Nota:
- Estos modelos describen *qué* nos dijo el daemon, no *cómo* se obtuvo.
"""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.errors import RedirectRefusedError


class HostAddress(BaseModel):
    """Structured daemon address parsed from a host string.

    `host` is a filesystem or pipe path for socket transports
    (`/var/run/docker.sock`) and `host[:port]` for network ones.
    """

    model_config = ConfigDict(frozen=True)

    scheme: str = Field(
        ...,
        min_length=1,
        description="Transport scheme (unix, npipe, tcp, ...).",
    )
    host: str = Field(
        ...,
        description="Socket path, pipe name or network authority.",
    )
    path: str = Field(
        default="",
        description="Base path prefixed to every request (network schemes only).",
    )

    def __str__(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}"


class PingResult(BaseModel):
    """Headers reported by the daemon's `/_ping` endpoint."""

    model_config = ConfigDict(frozen=True)

    api_version: str | None = Field(
        default=None,
        description="Newest API version the daemon supports (`Api-Version`).",
    )
    os_type: str | None = Field(
        default=None,
        description="Daemon operating system (`OSType`).",
    )
    experimental: bool = Field(
        default=False,
        description="Whether experimental features are enabled (`Docker-Experimental`).",
    )
    builder_version: str | None = Field(
        default=None,
        description="Default builder backend (`Builder-Version`).",
    )


class RedirectDecision(BaseModel):
    """Verdict for a single redirect hop; never persisted."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    follow: bool
    error: RedirectRefusedError | None = None


class ChangeKind(IntEnum):
    """Kind of filesystem change reported for a container."""

    MODIFIED = 0
    ADDED = 1
    DELETED = 2

    def symbol(self) -> str:
        """Single-letter marker, as printed by `docker diff`."""

        return {ChangeKind.MODIFIED: "C", ChangeKind.ADDED: "A", ChangeKind.DELETED: "D"}[self]


class ContainerChange(BaseModel):
    """One entry of `GET /containers/{id}/changes`."""

    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(..., alias="Path", min_length=1)
    kind: ChangeKind = Field(..., alias="Kind")
