"""Async client for the Docker Engine API.

Composes the core pieces into a request pipeline:

1. resolve the effective API version (negotiating once if enabled),
2. address the request with a versioned wire path,
3. send it, applying the redirect policy hop by hop,
4. map error statuses onto `core.errors`.

The client is safe to share between concurrent tasks; the negotiated version
is the only state that outlives a request.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from adapters.http_client import base_url_for, build_async_client, build_ssl_context, tls_enabled
from core.config import EngineSettings
from core.domain.hosts import DEFAULT_DOCKER_HOST, parse_host_url
from core.domain.models import ContainerChange, HostAddress, PingResult
from core.domain.paths import build_api_path
from core.errors import APIError, NotFoundError
from core.services.negotiation import VersionNegotiator
from core.services.redirects import decide_redirect

logger = logging.getLogger(__name__)


def _encode_query(params: Mapping[str, Any]) -> dict[str, str | list[str]]:
    """Stringify query values the way the daemon expects them."""

    encoded: dict[str, str | list[str]] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        elif isinstance(value, dict):
            encoded[key] = json.dumps(value)
        elif isinstance(value, (list, tuple)):
            encoded[key] = [str(item) for item in value]
        else:
            encoded[key] = str(value)
    return encoded


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return response.text.strip()


def _raise_for_status(response: httpx.Response) -> None:
    if response.status_code < 400:
        return
    message = f"Error response from daemon: {_error_message(response)}"
    if response.status_code == 404:
        raise NotFoundError(message, status_code=response.status_code)
    raise APIError(message, status_code=response.status_code)


def _ping_from_headers(headers: httpx.Headers) -> PingResult:
    return PingResult(
        api_version=headers.get("Api-Version") or None,
        os_type=headers.get("OSType") or None,
        experimental=headers.get("Docker-Experimental", "").lower() == "true",
        builder_version=headers.get("Builder-Version") or None,
    )


class EngineClient:
    """Engine API client.

    Host precedence: `host` argument, then `DOCKER_HOST`, then the local
    Unix socket. Version precedence: `version` argument, then
    `DOCKER_API_VERSION`, then negotiation (when `negotiate=True`), then
    the client's default version.
    """

    def __init__(
        self,
        host: str | None = None,
        *,
        version: str | None = None,
        negotiate: bool = False,
        settings: EngineSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or EngineSettings()
        self._address = parse_host_url(host or self._settings.host or DEFAULT_DOCKER_HOST)
        self._negotiator = VersionNegotiator(
            version or self._settings.api_version,
            auto_negotiate=negotiate,
        )
        # Bad base URLs and TLS material fail at construction, not mid-request.
        tls = tls_enabled(self._settings)
        self._base_url = base_url_for(self._address, tls=tls)
        self._ssl_context = build_ssl_context(self._settings) if tls else None
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    @classmethod
    def from_env(cls, *, negotiate: bool = False, **kwargs: Any) -> "EngineClient":
        """Build a client purely from `DOCKER_*` environment variables."""

        return cls(settings=EngineSettings(), negotiate=negotiate, **kwargs)

    @property
    def address(self) -> HostAddress:
        return self._address

    @property
    def negotiator(self) -> VersionNegotiator:
        return self._negotiator

    def daemon_host(self) -> str:
        return str(self._address)

    def client_version(self) -> str:
        """API version the next request will use."""

        return self._negotiator.effective_version()

    async def negotiate_api_version(self) -> bool:
        """Ping the daemon and downgrade to a version both sides support."""

        return await self._negotiator.negotiate(
            self, timeout=self._settings.negotiation_timeout_seconds
        )

    def negotiate_api_version_ping(self, ping: PingResult) -> bool:
        """Negotiate from a ping result obtained elsewhere."""

        return self._negotiator.apply_ping(ping)

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = build_async_client(
                self._base_url,
                self._address,
                self._settings,
                ssl_context=self._ssl_context,
                transport=self._transport,
            )
        return self._http

    async def _send(
        self,
        method: str,
        target: str,
        *,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        http = self._client()
        request = http.build_request(method, target, json=json_body, headers=headers)
        logger.debug("%s %s", method, target)
        response = await http.send(request)

        hops = 0
        while response.next_request is not None:
            next_request = response.next_request
            decision = decide_redirect(method, str(next_request.url))
            await response.aclose()
            if not decision.follow:
                raise decision.error
            if hops >= self._settings.max_redirects:
                raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=next_request)
            hops += 1
            logger.debug("following redirect to %s", next_request.url)
            response = await http.send(next_request)
        return response

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Send a versioned request and return the (successful) response."""

        version = await self._negotiator.ensure_negotiated(
            self, timeout=self._settings.negotiation_timeout_seconds
        )
        target = build_api_path(
            version,
            path,
            _encode_query(params) if params else None,
            base_path=self._address.path,
        )
        response = await self._send(method, target, json_body=json_body, headers=headers)
        _raise_for_status(response)
        return response

    async def ping(self) -> PingResult:
        """`GET /_ping`; unversioned, never triggers negotiation."""

        response = await self._send("GET", build_api_path("", "/_ping", base_path=self._address.path))
        result = _ping_from_headers(response.headers)
        if result.api_version is None:
            _raise_for_status(response)
        return result

    async def info(self) -> dict[str, Any]:
        response = await self.request("GET", "/info")
        return response.json()

    async def container_changes(self, container: str) -> list[ContainerChange]:
        """Filesystem changes of `container` relative to its image."""

        response = await self.request("GET", f"/containers/{container}/changes")
        payload = response.json() if response.content else None
        if not payload:
            return []
        return [ContainerChange.model_validate(item) for item in payload]

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> "EngineClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
