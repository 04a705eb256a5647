"""Shared fixtures: an isolated environment and an in-memory daemon."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from adapters.engine_client import EngineClient
from core.config import EngineSettings

_DOCKER_VARS = ("DOCKER_HOST", "DOCKER_API_VERSION", "DOCKER_TLS_VERIFY", "DOCKER_CERT_PATH")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the developer's DOCKER_* variables and .env files out of tests."""

    for name in _DOCKER_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings(_env_file=None)


class FakeDaemon:
    """Minimal Engine API served through `httpx.MockTransport`."""

    def __init__(self, api_version: str | None = "1.45") -> None:
        self.api_version = api_version
        self.requests: list[httpx.Request] = []
        # A list is served as JSON, None as a JSON `null`, bytes verbatim.
        self.changes: list[dict[str, object]] | bytes | None = [
            {"Path": "/etc", "Kind": 0},
            {"Path": "/etc/hosts.new", "Kind": 1},
            {"Path": "/tmp/cache", "Kind": 2},
        ]
        self.fail_pings = False

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("/_ping"):
            if self.fail_pings:
                raise httpx.ConnectError("connection refused", request=request)
            headers = {"OSType": "linux", "Docker-Experimental": "false"}
            if self.api_version is not None:
                headers["Api-Version"] = self.api_version
            return httpx.Response(200, headers=headers, text="OK")
        if path.endswith("/info"):
            return httpx.Response(200, json={"Name": "test-host", "ServerVersion": "27.0.0", "Containers": 3})
        if path.endswith("/containers/web/changes"):
            if isinstance(self.changes, bytes):
                return httpx.Response(200, content=self.changes)
            if self.changes is None:
                return httpx.Response(200, content=b"null", headers={"Content-Type": "application/json"})
            return httpx.Response(200, json=self.changes)
        if path.endswith("/redirectme"):
            return httpx.Response(301, headers={"Location": "/bla"})
        if path == "/bla":
            return httpx.Response(200, text="final")
        if path.endswith("/loop"):
            return httpx.Response(302, headers={"Location": path})
        if path.endswith("/boom"):
            return httpx.Response(500, json={"message": "something broke"})
        return httpx.Response(404, json={"message": f"page not found: {path}"})


@pytest.fixture
def daemon() -> FakeDaemon:
    return FakeDaemon()


@pytest.fixture
def make_client(daemon, settings) -> Callable[..., EngineClient]:
    def _make(host: str = "tcp://localhost:2375", **kwargs) -> EngineClient:
        kwargs.setdefault("settings", settings)
        kwargs.setdefault("transport", httpx.MockTransport(daemon))
        return EngineClient(host, **kwargs)

    return _make
