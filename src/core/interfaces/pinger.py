"""Contrato de ping que consume la negociación de versión.

Por qué Protocol:
- La negociación solo necesita "preguntar al daemon qué versión de API habla";
  no debe depender del cliente HTTP ni del payload de otros endpoints.
- Los tests sustituyen un pinger en memoria sin tocar la red.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import PingResult


@runtime_checkable
class DaemonPinger(Protocol):
    """Minimal handshake contract supplied by the transport layer.

    Rules:
    - `ping` is asynchronous because it performs network I/O.
    - Transport failures are raised, not encoded in the result.
    """

    async def ping(self) -> PingResult:
        """Query the daemon and return the headers it reported."""

        ...
