"""Wraps ``httpx.AsyncClient`` behind the HttpTransport protocol."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from ur_scaffold.errors import TransportError
from ur_scaffold.transport.base import HttpResponse, normalize_headers

logger = logging.getLogger(__name__)


class HttpxTransport:
    def __init__(
        self,
        *,
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json", **(headers or {})},
            follow_redirects=True,
        )

    async def get(self, url: str) -> HttpResponse:
        return await self._send("GET", url)

    async def post(self, url: str, body: Any) -> HttpResponse:
        return await self._send("POST", url, body)

    async def _send(self, method: str, url: str, body: Any = None) -> HttpResponse:
        start = time.perf_counter()
        try:
            if method == "POST":
                response = await self.client.post(url, json=body)
            else:
                response = await self.client.get(url)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(
                0, str(exc) or type(exc).__name__, url=url, method=method
            ) from exc
        latency_ms = (time.perf_counter() - start) * 1000

        payload = _decode(response)
        if response.is_error:
            raise TransportError(
                response.status_code,
                response.reason_phrase,
                url=url,
                method=method,
                body=payload,
            )
        return HttpResponse(
            status=response.status_code,
            body=payload,
            headers=normalize_headers(response.headers),
            latency_ms=latency_ms,
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
