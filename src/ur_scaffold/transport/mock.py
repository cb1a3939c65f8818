"""Scripted in-memory backend for tests, demos and offline development.

Requests are matched against ordered one-shot expectations first, then
against reusable definitions::

    transport = MockTransport()
    transport.when_get("http://api/dogs").respond([{"id": 1}])
    transport.expect_post("http://api/dogs", {"name": "Rex"}).respond({"id": 2})

With ``auto_respond=False`` requests are held until ``flush()`` so tests can
observe in-flight state and control the order in which responses land.
"""

from __future__ import annotations

import asyncio
import copy
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any

from ur_scaffold.errors import TransportError
from ur_scaffold.transport.base import HttpResponse, normalize_headers

ANY = object()


class UnexpectedRequestError(AssertionError):
    pass


@dataclass
class RecordedRequest:
    method: str
    url: str
    body: Any = None


@dataclass
class _MockResponse:
    status: int
    body: Any
    headers: dict[str, str] = field(default_factory=dict)


class RequestDefinition:
    def __init__(self, method: str, url: str, body: Any = ANY) -> None:
        self.method = method
        self.url = url
        self.body = body
        self.response: _MockResponse | None = None

    def respond(
        self,
        body: Any = None,
        status: int = 200,
        headers: dict[str, Any] | None = None,
    ) -> RequestDefinition:
        self.response = _MockResponse(status, body, normalize_headers(headers))
        return self

    def matches(self, method: str, url: str, body: Any) -> bool:
        if method != self.method or url != self.url:
            return False
        return self.body is ANY or self.body == body

    def __repr__(self) -> str:
        return f"{self.method} {self.url}"


@dataclass
class _PendingRequest:
    request: RecordedRequest
    future: asyncio.Future


async def _drain(rounds: int = 5) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


class MockTransport:
    def __init__(self, *, auto_respond: bool = True) -> None:
        self.auto_respond = auto_respond
        self.requests: list[RecordedRequest] = []
        self.pending: list[_PendingRequest] = []
        self._expectations: list[RequestDefinition] = []
        self._definitions: list[RequestDefinition] = []

    # ── definitions ────────────────────────────────────────────────

    def when_get(self, url: str) -> RequestDefinition:
        return self._define(RequestDefinition("GET", url))

    def when_post(self, url: str, body: Any = ANY) -> RequestDefinition:
        return self._define(RequestDefinition("POST", url, body))

    def expect_get(self, url: str) -> RequestDefinition:
        return self._expect(RequestDefinition("GET", url))

    def expect_post(self, url: str, body: Any = ANY) -> RequestDefinition:
        return self._expect(RequestDefinition("POST", url, body))

    def _define(self, definition: RequestDefinition) -> RequestDefinition:
        self._definitions.append(definition)
        return definition

    def _expect(self, definition: RequestDefinition) -> RequestDefinition:
        self._expectations.append(definition)
        return definition

    # ── HttpTransport ─────────────────────────────────────────────

    async def get(self, url: str) -> HttpResponse:
        return await self._handle(RecordedRequest("GET", url))

    async def post(self, url: str, body: Any) -> HttpResponse:
        return await self._handle(RecordedRequest("POST", url, copy.deepcopy(body)))

    async def _handle(self, request: RecordedRequest) -> HttpResponse:
        self.requests.append(request)
        if self.auto_respond:
            response = self._match(request)
            await asyncio.sleep(0)
            return _deliver(request, response)

        future = asyncio.get_running_loop().create_future()
        self.pending.append(_PendingRequest(request, future))
        return await future

    def _match(self, request: RecordedRequest) -> _MockResponse:
        definition: RequestDefinition | None = None
        if self._expectations and self._expectations[0].matches(
            request.method, request.url, request.body
        ):
            definition = self._expectations.pop(0)
        else:
            definition = next(
                (
                    d
                    for d in self._definitions
                    if d.matches(request.method, request.url, request.body)
                ),
                None,
            )
        if definition is None:
            expected = f", expected {self._expectations[0]!r}" if self._expectations else ""
            raise UnexpectedRequestError(
                f"Unexpected request: {request.method} {request.url}{expected}"
            )
        if definition.response is None:
            raise UnexpectedRequestError(f"No response defined for {definition!r}")
        return definition.response

    # ── test controls ─────────────────────────────────────────────

    async def flush(self, count: int | None = None, *, newest_first: bool = False) -> int:
        """Deliver held responses and let their callers run to completion.

        Returns the number of requests flushed.  Raises AssertionError when
        nothing is pending and no explicit *count* was given.
        """
        await _drain()
        if not self.pending:
            if count is None and not self.auto_respond:
                raise AssertionError("No pending request to flush")
            return 0

        limit = len(self.pending) if count is None else min(count, len(self.pending))
        unexpected: list[UnexpectedRequestError] = []
        for _ in range(limit):
            item = self.pending.pop(-1 if newest_first else 0)
            try:
                response = self._match(item.request)
                item.future.set_result(_deliver(item.request, response))
            except (TransportError, UnexpectedRequestError) as exc:
                item.future.set_exception(exc)
                if isinstance(exc, UnexpectedRequestError):
                    unexpected.append(exc)
            await _drain()
        if unexpected:
            raise unexpected[0]
        return limit

    def verify_no_outstanding_expectation(self) -> None:
        if self._expectations:
            listed = ", ".join(repr(e) for e in self._expectations)
            raise AssertionError(f"Unsatisfied requests: {listed}")

    def verify_no_outstanding_request(self) -> None:
        if self.pending:
            listed = ", ".join(f"{p.request.method} {p.request.url}" for p in self.pending)
            raise AssertionError(f"Unflushed requests: {listed}")

    def reset(self) -> None:
        self.requests.clear()
        self.pending.clear()
        self._expectations.clear()
        self._definitions.clear()


def _deliver(request: RecordedRequest, response: _MockResponse) -> HttpResponse:
    body = copy.deepcopy(response.body)
    if response.status >= 400:
        try:
            phrase = HTTPStatus(response.status).phrase
        except ValueError:
            phrase = "Error"
        raise TransportError(
            response.status, phrase, url=request.url, method=request.method, body=body
        )
    return HttpResponse(
        status=response.status, body=body, headers=dict(response.headers)
    )
