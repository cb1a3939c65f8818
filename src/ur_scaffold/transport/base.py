"""HTTP transport protocol -- the seam between scaffolds and the network.

Defines the contract every transport (httpx, mock) must satisfy, plus a
factory function for instantiation by name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass
class HttpResponse:
    """Successful response delivered by a transport.

    ``headers`` keys are lower-cased so pagination metadata can be read
    without caring how the server spelled them.
    """

    status: int
    body: Any
    headers: dict[str, str] = field(default_factory=dict)
    latency_ms: float = 0.0


@runtime_checkable
class HttpTransport(Protocol):
    """Abstract interface for the two requests a scaffold issues.

    Implementations raise ``TransportError`` for non-2xx responses and for
    network failures; they never return an error response.
    """

    async def get(self, url: str) -> HttpResponse: ...

    async def post(self, url: str, body: Any) -> HttpResponse: ...


def normalize_headers(headers: Any) -> dict[str, str]:
    if not headers:
        return {}
    return {str(key).lower(): str(value) for key, value in dict(headers).items()}


def create_transport(transport_name: str, **kwargs: Any) -> HttpTransport:
    """Factory function to create a transport by name.

    Args:
        transport_name: "httpx" or "mock".
        **kwargs: Passed through to the transport constructor.

    Raises:
        ValueError: If *transport_name* is not recognised.
    """
    if transport_name == "httpx":
        from ur_scaffold.transport.httpx import HttpxTransport

        return HttpxTransport(**kwargs)
    elif transport_name == "mock":
        from ur_scaffold.transport.mock import MockTransport

        return MockTransport(**kwargs)
    else:
        raise ValueError(f"Unknown transport: {transport_name}")
