"""Engine API versions.

Why a value type:
- Versions travel as strings (`"1.22"`, `"v1.22"`), but must be ordered
  numerically: `"1.9"` is older than `"1.10"`.
- Normalization (stripping the leading `v`) happens once, at the edge.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_API_VERSION = "1.51"
"""Newest API version this client speaks natively."""

LEGACY_FLOOR_VERSION = "1.24"
"""Last API version before daemons started reporting `Api-Version` on ping."""


def normalize_version(value: str | None) -> str:
    """Strip surrounding blanks and a leading `v`; `None`/`"v"` become `""`."""

    if not value:
        return ""
    return value.strip().removeprefix("v")


def _component(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        return 0


@dataclass(frozen=True, order=True)
class APIVersion:
    """A normalized API version; equality, hashing and order all use `(major, minor)`."""

    value: str = field(compare=False)
    key: tuple[int, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        parts = self.value.split(".")
        major = _component(parts[0]) if parts else 0
        minor = _component(parts[1]) if len(parts) > 1 else 0
        object.__setattr__(self, "key", (major, minor))

    @classmethod
    def parse(cls, value: str) -> "APIVersion":
        normalized = normalize_version(value)
        if not normalized:
            raise ValueError(f"empty API version: {value!r}")
        return cls(normalized)

    def __str__(self) -> str:
        return self.value
