"""Versioned wire paths.

`build_api_path("1.22", "/containers/json", {"all": "1"})`
-> `/v1.22/containers/json?all=1`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from urllib.parse import quote, urlencode

# Characters a URL path may carry unescaped besides unreserved ones.
_PATH_SAFE = "/$&+,:;=@"

QueryValue = str | Sequence[str]


def _query_pairs(query: Mapping[str, QueryValue]) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for key in sorted(query):
        value = query[key]
        if isinstance(value, str):
            pairs.append((key, value))
        else:
            pairs.extend((key, item) for item in value)
    return pairs


def build_api_path(
    version: str,
    path: str,
    query: Mapping[str, QueryValue] | None = None,
    *,
    base_path: str = "",
) -> str:
    """Compose the request target for `path` under API `version`.

    An empty `version` produces an unversioned path (`/_ping`). `base_path`
    is the path component of a `tcp://host/prefix` daemon host.
    """

    prefix = base_path.rstrip("/")
    if version:
        prefix += f"/v{version}"

    wire_path = prefix + quote(path, safe=_PATH_SAFE)
    if query:
        encoded = urlencode(_query_pairs(query))
        if encoded:
            wire_path += f"?{encoded}"
    return wire_path
