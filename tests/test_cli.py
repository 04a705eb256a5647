import httpx
import pytest
from typer.testing import CliRunner

from adapters.engine_client import EngineClient
from cli import main as cli_main
from core.config import get_user_env_file

runner = CliRunner()


@pytest.fixture
def fake_client(monkeypatch, daemon, settings):
    def _build(options):
        return EngineClient(
            options.host or "tcp://localhost:2375",
            version=options.api_version,
            negotiate=True,
            settings=settings,
            transport=httpx.MockTransport(daemon),
        )

    monkeypatch.setattr(cli_main, "build_client", _build)


def test_version_shows_negotiated_version(fake_client, daemon):
    daemon.api_version = "1.41"
    result = runner.invoke(cli_main.app, ["version"])
    assert result.exit_code == 0, result.output
    assert "1.41" in result.output
    assert "negotiated" in result.output


def test_pinned_version_is_reported_as_fixed(fake_client, daemon):
    result = runner.invoke(cli_main.app, ["--api-version", "1.30", "version"])
    assert result.exit_code == 0, result.output
    assert "1.30" in result.output
    assert "fixed" in result.output
    assert daemon.requests == []


def test_ping(fake_client):
    result = runner.invoke(cli_main.app, ["ping"])
    assert result.exit_code == 0, result.output
    assert "1.45" in result.output
    assert "linux" in result.output


def test_info_json(fake_client):
    result = runner.invoke(cli_main.app, ["info", "--json"])
    assert result.exit_code == 0, result.output
    assert "test-host" in result.output


def test_diff(fake_client, daemon):
    result = runner.invoke(cli_main.app, ["diff", "web"])
    assert result.exit_code == 0, result.output
    assert "/etc/hosts.new" in result.output
    assert daemon.paths == ["/_ping", "/v1.45/containers/web/changes"]


def test_daemon_error_exits_non_zero(fake_client):
    result = runner.invoke(cli_main.app, ["diff", "ghost"])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_bad_host_exits_non_zero():
    result = runner.invoke(cli_main.app, ["--host", "foobar", "ping"])
    assert result.exit_code == 1
    assert "unable to parse docker host" in result.output


def test_unparseable_port_exits_non_zero():
    result = runner.invoke(cli_main.app, ["--host", "tcp://localhost:notaport", "version"])
    assert result.exit_code == 1
    assert "Error" in result.output
    assert "unable to parse docker host" in result.output


def test_doctor_use_host_stores_value():
    result = runner.invoke(cli_main.app, ["doctor", "use-host", "tcp://10.0.0.5:2376"])
    assert result.exit_code == 0, result.output
    assert "DOCKER_HOST=tcp://10.0.0.5:2376" in get_user_env_file().read_text(encoding="utf-8")


def test_doctor_use_host_rejects_invalid_host():
    result = runner.invoke(cli_main.app, ["doctor", "use-host", "localhost"])
    assert result.exit_code == 2
    assert not get_user_env_file().exists()


def test_doctor_reports_bad_host(monkeypatch):
    monkeypatch.setenv("DOCKER_HOST", "nope")
    result = runner.invoke(cli_main.app, ["doctor", "run"])
    assert result.exit_code == 1
    assert "FAIL" in result.output


def test_doctor_reports_bad_tls_material(monkeypatch, tmp_path):
    monkeypatch.setenv("DOCKER_HOST", "tcp://localhost:2376")
    monkeypatch.setenv("DOCKER_CERT_PATH", str(tmp_path / "missing"))
    result = runner.invoke(cli_main.app, ["doctor", "run"])
    assert result.exit_code == 1
    assert "TLS" in result.output
    assert "FAIL" in result.output
