"""API version negotiation.

The negotiator owns the only piece of client state that outlives a request:
the effective API version. It is modeled as a small state machine:

- `FIXED`: the caller pinned a version; negotiation never runs.
- `UNNEGOTIATED`: auto-negotiation is enabled but has not succeeded yet.
- `NEGOTIATED`: a handshake succeeded; the result is kept for the lifetime
  of the client, whatever later pings report.

The state is an immutable snapshot. Readers take the reference without
locking; writers swap it under a lock that is never held across the
network round-trip, so the first successful handshake wins.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass
from enum import Enum

import httpx

from core.domain.models import PingResult
from core.domain.version import (
    DEFAULT_API_VERSION,
    LEGACY_FLOOR_VERSION,
    APIVersion,
    normalize_version,
)
from core.errors import EngineError
from core.interfaces.pinger import DaemonPinger

logger = logging.getLogger(__name__)


class NegotiationStatus(str, Enum):
    UNNEGOTIATED = "unnegotiated"
    NEGOTIATED = "negotiated"
    FIXED = "fixed"


@dataclass(frozen=True)
class NegotiationState:
    status: NegotiationStatus
    version: str


def resolve_negotiated_version(reported: str | None) -> str:
    """Pick the version to use given what the daemon reported.

    No report means a daemon older than negotiation itself, so fall back to
    the legacy floor. Otherwise never go above either side's newest version.
    """

    normalized = normalize_version(reported)
    if not normalized:
        return LEGACY_FLOOR_VERSION
    return str(min(APIVersion(DEFAULT_API_VERSION), APIVersion(normalized)))


class VersionNegotiator:
    """Tracks the effective API version of one client."""

    def __init__(self, configured_version: str | None = None, *, auto_negotiate: bool = False) -> None:
        pinned = normalize_version(configured_version)
        if pinned:
            state = NegotiationState(NegotiationStatus.FIXED, pinned)
        elif auto_negotiate:
            state = NegotiationState(NegotiationStatus.UNNEGOTIATED, DEFAULT_API_VERSION)
        else:
            state = NegotiationState(NegotiationStatus.FIXED, DEFAULT_API_VERSION)
        self._state = state
        self._lock = threading.Lock()

    @property
    def state(self) -> NegotiationState:
        return self._state

    @property
    def pending(self) -> bool:
        """True while auto-negotiation still has to succeed."""

        return self._state.status is NegotiationStatus.UNNEGOTIATED

    def effective_version(self) -> str:
        return self._state.version

    def apply_ping(self, result: PingResult) -> bool:
        """Apply a ping result; return True if this call made the transition."""

        if not self.pending:
            return False
        resolved = resolve_negotiated_version(result.api_version)
        with self._lock:
            if self._state.status is not NegotiationStatus.UNNEGOTIATED:
                return False
            self._state = NegotiationState(NegotiationStatus.NEGOTIATED, resolved)
        logger.debug("negotiated API version %s (daemon reported %r)", resolved, result.api_version)
        return True

    async def negotiate(self, pinger: DaemonPinger, *, timeout: float | None = None) -> bool:
        """Ping the daemon once and lock in the resolved version.

        Failures leave the state untouched and are only logged: the request
        that triggered negotiation proceeds with the current version and
        fails or succeeds on its own. Cancellation propagates.
        """

        if not self.pending:
            return False
        try:
            result = await asyncio.wait_for(pinger.ping(), timeout=timeout)
        except (asyncio.TimeoutError, httpx.HTTPError, EngineError) as exc:
            logger.warning(
                "API version negotiation failed, keeping %s: %s",
                self.effective_version(),
                str(exc) or type(exc).__name__,
            )
            return False
        return self.apply_ping(result)

    async def ensure_negotiated(self, pinger: DaemonPinger, *, timeout: float | None = None) -> str:
        """Request-pipeline step: negotiate if still pending, then return the version."""

        if self.pending:
            await self.negotiate(pinger, timeout=timeout)
        return self.effective_version()
