from pathlib import Path

import pytest
from pydantic import ValidationError

from core.config import EngineSettings, get_user_env_file, write_user_env_vars


def test_docker_variables_are_read(monkeypatch):
    monkeypatch.setenv("DOCKER_HOST", "tcp://10.0.0.5:2376")
    monkeypatch.setenv("DOCKER_API_VERSION", "1.41")
    monkeypatch.setenv("DOCKER_TLS_VERIFY", "1")
    monkeypatch.setenv("DOCKER_CERT_PATH", "/certs")

    settings = EngineSettings(_env_file=None)

    assert settings.host == "tcp://10.0.0.5:2376"
    assert settings.api_version == "1.41"
    assert settings.tls_verify is True
    assert settings.cert_path == Path("/certs")


def test_empty_variables_count_as_unset(monkeypatch):
    for name in ("DOCKER_HOST", "DOCKER_API_VERSION", "DOCKER_TLS_VERIFY", "DOCKER_CERT_PATH"):
        monkeypatch.setenv(name, "")

    settings = EngineSettings(_env_file=None)

    assert settings.host is None
    assert settings.api_version is None
    assert settings.tls_verify is False
    assert settings.cert_path is None


def test_project_env_file_is_read(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("DOCKER_HOST=unix:///run/user/1000/docker.sock\n", encoding="utf-8")
    assert EngineSettings(_env_file=env_file).host == "unix:///run/user/1000/docker.sock"


def test_limits_are_validated():
    with pytest.raises(ValidationError):
        EngineSettings(_env_file=None, max_redirects=-1)
    with pytest.raises(ValidationError):
        EngineSettings(_env_file=None, negotiation_timeout_seconds=0)


def test_write_user_env_vars_updates_and_removes():
    path = write_user_env_vars({"DOCKER_HOST": "tcp://a:2375", "DOCKER_API_VERSION": "1.41"})
    assert path == get_user_env_file()
    assert "DOCKER_HOST=tcp://a:2375" in path.read_text(encoding="utf-8")

    write_user_env_vars({"DOCKER_HOST": None})
    text = path.read_text(encoding="utf-8")
    assert "DOCKER_HOST" not in text
    assert "DOCKER_API_VERSION=1.41" in text


@pytest.mark.parametrize("raw", ["1", "0", "false", "enabled"])
def test_tls_verify_is_enabled_by_any_value(monkeypatch, raw):
    monkeypatch.setenv("DOCKER_TLS_VERIFY", raw)
    assert EngineSettings(_env_file=None).tls_verify is True


def test_tls_verify_keeps_booleans():
    assert EngineSettings(_env_file=None, tls_verify=False).tls_verify is False
    assert EngineSettings(_env_file=None, tls_verify=True).tls_verify is True
