"""Daemon host strings.

Turns `DOCKER_HOST`-style strings into a structured `HostAddress`.

Rules:
- A scheme separator (`://`) is mandatory.
- Socket and pipe transports keep the whole remainder as `host`: splitting
  `unix:///var/run/docker.sock` on `/` would corrupt the filesystem path.
- Network transports split `host[:port][/path]` at the first `/`.
"""

from __future__ import annotations

from core.domain.models import HostAddress
from core.errors import HostParseError

DEFAULT_DOCKER_HOST = "unix:///var/run/docker.sock"

NETWORK_SCHEMES = frozenset({"tcp", "http", "https"})


def parse_host_url(host: str) -> HostAddress:
    scheme, sep, remainder = host.partition("://")
    if not sep or not scheme or not remainder:
        raise HostParseError(host)

    if scheme not in NETWORK_SCHEMES:
        return HostAddress(scheme=scheme, host=remainder)

    authority, slash, path = remainder.partition("/")
    if not authority:
        raise HostParseError(host)
    return HostAddress(scheme=scheme, host=authority, path=slash + path if slash else "")
