"""Error taxonomy shared by the registry, transports and scaffolds."""

from __future__ import annotations

from typing import Any


class ScaffoldError(Exception):
    """Base class for every error raised by ur_scaffold."""


class ConfigurationError(ScaffoldError):
    """A model or scaffold is unknown or was registered with invalid options."""


class ModelNotFoundError(ConfigurationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown model: {name!r}")
        self.name = name


class ScaffoldNotFoundError(ConfigurationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown scaffold: {name!r}")
        self.name = name


class TransportError(ScaffoldError):
    """A GET or POST failed.

    ``status`` is the HTTP status code, or ``0`` when no response was
    received at all (connection refused, timeout, ...).
    """

    def __init__(
        self,
        status: int,
        message: str,
        *,
        url: str = "",
        method: str = "",
        body: Any = None,
    ) -> None:
        detail = f"{method} {url}".strip()
        super().__init__(f"{detail}: {status} {message}" if detail else f"{status} {message}")
        self.status = status
        self.message = message
        self.url = url
        self.method = method
        self.body = body


class CreateStateError(ScaffoldError):
    """An operation was attempted on a create handle in the wrong state."""


class CreateCancelledError(ScaffoldError):
    """The create handle was rejected before anything was submitted."""

    def __init__(self, reason: Any = None) -> None:
        super().__init__(f"Create cancelled: {reason!r}" if reason is not None else "Create cancelled")
        self.reason = reason
