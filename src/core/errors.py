"""Engine client exceptions."""

from __future__ import annotations


class EngineError(Exception):
    """Base error for everything raised by the engine client."""


class HostParseError(EngineError, ValueError):
    """The daemon host string is malformed."""

    def __init__(self, host: str) -> None:
        super().__init__(f"unable to parse docker host `{host}`")
        self.host = host


class TransportNotSupportedError(EngineError):
    """No HTTP transport exists for the host's scheme."""

    def __init__(self, scheme: str) -> None:
        super().__init__(f"no transport available for scheme {scheme!r}; pass a custom transport")
        self.scheme = scheme


class TLSConfigError(EngineError):
    """TLS material referenced by the configuration cannot be loaded."""


class RedirectRefusedError(EngineError):
    """A redirect was returned for a request that must not be replayed."""

    def __init__(self, method: str, url: str) -> None:
        super().__init__(f"{method.title()} {url!r}: unexpected redirect in response")
        self.method = method
        self.url = url


class APIError(EngineError):
    """The daemon answered with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(APIError):
    """The requested object does not exist on the daemon."""
