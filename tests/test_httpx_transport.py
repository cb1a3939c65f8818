"""Tests for HttpxTransport using httpx's in-process MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from ur_scaffold.errors import TransportError
from ur_scaffold.transport.base import HttpTransport, create_transport
from ur_scaffold.transport.httpx import HttpxTransport
from ur_scaffold.transport.mock import MockTransport

URL = "http://api/dogs"


def _transport(handler) -> HttpxTransport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpxTransport(client=client)


class TestHttpxTransport:
    @pytest.mark.asyncio
    async def test_get_decodes_json_and_headers(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json=[{"id": 1}], headers={"X-Total-Pages": "3"})

        async with _transport(handler) as transport:
            response = await transport.get(URL + "?breed=boxer&page=1")

        assert seen == ["http://api/dogs?breed=boxer&page=1"]
        assert response.status == 200
        assert response.body == [{"id": 1}]
        assert response.headers["x-total-pages"] == "3"
        assert response.latency_ms >= 0

    @pytest.mark.asyncio
    async def test_post_sends_json_body(self):
        received: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            received.append(json.loads(request.content))
            return httpx.Response(201, json={"id": 7, "name": "Rex"})

        async with _transport(handler) as transport:
            response = await transport.post(URL, {"name": "Rex"})

        assert received == [{"name": "Rex"}]
        assert response.status == 201
        assert response.body == {"id": 7, "name": "Rex"}

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"detail": "missing"})

        async with _transport(handler) as transport:
            with pytest.raises(TransportError) as info:
                await transport.get(URL)

        assert info.value.status == 404
        assert info.value.body == {"detail": "missing"}
        assert info.value.url == URL
        assert info.value.method == "GET"

    @pytest.mark.asyncio
    async def test_network_failure_has_status_zero(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _transport(handler) as transport:
            with pytest.raises(TransportError) as info:
                await transport.post(URL, {"name": "Rex"})

        assert info.value.status == 0
        assert "connection refused" in info.value.message

    @pytest.mark.asyncio
    async def test_empty_and_text_bodies(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/empty":
                return httpx.Response(204)
            return httpx.Response(200, text="plain")

        async with _transport(handler) as transport:
            assert (await transport.get("http://api/empty")).body is None
            assert (await transport.get("http://api/text")).body == "plain"


class TestCreateTransport:
    def test_mock(self):
        transport = create_transport("mock", auto_respond=False)
        assert isinstance(transport, MockTransport)
        assert transport.auto_respond is False

    @pytest.mark.asyncio
    async def test_httpx(self):
        transport = create_transport("httpx", timeout=2.0)
        assert isinstance(transport, HttpxTransport)
        assert isinstance(transport, HttpTransport)
        await transport.aclose()

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown transport"):
            create_transport("carrier-pigeon")
