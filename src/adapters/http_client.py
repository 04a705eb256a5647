"""Wiring de httpx para los transportes del daemon.

Por qué un builder:
- Traduce un `HostAddress` a un transporte httpx (socket Unix, TCP, TLS) en un
  solo lugar, así el cliente del engine nunca ramifica por esquema.
- Facilita testeo: los tests inyectan `httpx.MockTransport` en vez de un socket.

Nota: httpx nunca sigue redirecciones por su cuenta; el cliente del engine
aplica su propia política en cada salto.
"""

from __future__ import annotations

import ssl

import httpx

from core.config import EngineSettings
from core.domain.models import HostAddress
from core.errors import HostParseError, TLSConfigError, TransportNotSupportedError

# Host header used for socket and pipe transports.
LOCAL_BASE_URL = "http://api.moby.localhost"


def tls_enabled(settings: EngineSettings) -> bool:
    return settings.tls_verify or settings.cert_path is not None


def build_ssl_context(settings: EngineSettings) -> ssl.SSLContext:
    """SSL context from `DOCKER_CERT_PATH`/`DOCKER_TLS_VERIFY`.

    Client certificates are loaded when a cert path is configured; without
    `tls_verify` the daemon certificate is not checked.
    """

    context = ssl.create_default_context()
    if settings.cert_path is not None:
        ca_file = settings.cert_path / "ca.pem"
        try:
            if ca_file.exists():
                context.load_verify_locations(cafile=str(ca_file))
            context.load_cert_chain(
                certfile=str(settings.cert_path / "cert.pem"),
                keyfile=str(settings.cert_path / "key.pem"),
            )
        except (OSError, ssl.SSLError) as exc:
            raise TLSConfigError(f"could not load X509 key pair: {exc}") from exc
    if not settings.tls_verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def base_url_for(address: HostAddress, *, tls: bool = False) -> httpx.URL:
    """Base URL requests are resolved against.

    Raises `HostParseError` when the authority is not a valid URL
    (`tcp://localhost:notaport`).
    """

    if address.scheme in ("tcp", "http", "https"):
        scheme = "https" if tls or address.scheme == "https" else "http"
        try:
            return httpx.URL(f"{scheme}://{address.host}")
        except httpx.InvalidURL as exc:
            raise HostParseError(str(address)) from exc
    return httpx.URL(LOCAL_BASE_URL)


def build_transport(
    address: HostAddress,
    ssl_context: ssl.SSLContext | None = None,
) -> httpx.AsyncBaseTransport:
    if address.scheme == "unix":
        return httpx.AsyncHTTPTransport(uds=address.host)
    if address.scheme in ("tcp", "http", "https"):
        if ssl_context is not None:
            return httpx.AsyncHTTPTransport(verify=ssl_context)
        return httpx.AsyncHTTPTransport()
    raise TransportNotSupportedError(address.scheme)


def build_async_client(
    base_url: httpx.URL,
    address: HostAddress,
    settings: EngineSettings | None = None,
    *,
    ssl_context: ssl.SSLContext | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` bound to the daemon at `address`.

    `transport` overrides the scheme-derived one (named pipes, tests).
    """

    settings = settings or EngineSettings()
    if transport is None:
        transport = build_transport(address, ssl_context)
    return httpx.AsyncClient(
        base_url=base_url,
        transport=transport,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=False,
        headers={"User-Agent": settings.user_agent},
    )
