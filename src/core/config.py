"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que los adaptadores (transporte HTTP, cliente del engine) lean la
  config de forma consistente.

Los nombres de variables son los que respeta la CLI de Docker (`DOCKER_HOST`,
`DOCKER_API_VERSION`, `DOCKER_TLS_VERIFY`, `DOCKER_CERT_PATH`).
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "dockerlink"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "dockerlink"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "dockerlink"
    return Path.home() / ".config" / "dockerlink"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Write/update variables in the user's global .env file.

    A `None` value removes the variable.
    """

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    for key, value in values.items():
        if value is None:
            existing.pop(key, None)
        else:
            existing[key] = value

    lines = ["# dockerlink user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class EngineSettings(BaseSettings):
    """Configuración central del cliente.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars); el Core solo ve valores.
    - Un único contrato de configuración para CLI/adapters.

    Las variables vacías (`DOCKER_API_VERSION=`) cuentan como no definidas.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCKER_",
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    host: str | None = Field(
        default=None,
        description="Daemon host (`unix:///var/run/docker.sock`, `tcp://host:2376`, ...).",
    )
    api_version: str | None = Field(
        default=None,
        description="Pinned API version; disables negotiation when set.",
    )
    tls_verify: bool = Field(
        default=False,
        description="Use TLS and verify the daemon certificate (any non-empty value).",
    )
    cert_path: Path | None = Field(
        default=None,
        description="Directory holding ca.pem, cert.pem and key.pem.",
    )

    http_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout per request (seconds).",
    )
    negotiation_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Deadline for the version negotiation ping (seconds).",
    )
    max_redirects: int = Field(
        default=10,
        ge=0,
        le=50,
        description="Maximum redirects followed for GET/HEAD requests.",
    )
    user_agent: str = Field(
        default="dockerlink/0.1",
        min_length=1,
        description="User-Agent sent to the daemon.",
    )

    @field_validator("tls_verify", mode="before")
    @classmethod
    def tls_verify_is_presence(cls, value: object) -> object:
        # Like the Docker CLI, only presence matters: "0" and "false" enable it too.
        if isinstance(value, str):
            return bool(value.strip())
        return value
