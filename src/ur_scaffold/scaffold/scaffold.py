"""Scaffold -- stateful fetch/create coordinator bound to one model.

A scaffold owns the state a view binds to: ``items``, the mutable ``query``,
``ui.loading``/``ui.saving`` and, for paginated scaffolds, the pagination
state.  Network work runs as asyncio tasks; all state changes happen in the
completion step of those tasks, one assignment at a time.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Coroutine
from typing import Any

from ur_scaffold.errors import CreateStateError, TransportError
from ur_scaffold.model.models import Model, QueryMapping
from ur_scaffold.query import ComposedRequest, PageParams, compose
from ur_scaffold.scaffold.deferred import CreateHandle
from ur_scaffold.scaffold.state import LOADING, SAVING, UIState
from ur_scaffold.telemetry import (
    CreateOutcome,
    FetchOutcome,
    NoOpTelemetrySink,
    TelemetrySink,
    create_event,
    fetch_event,
)
from ur_scaffold.transport.base import HttpResponse, HttpTransport

logger = logging.getLogger(__name__)


class Scaffold:
    def __init__(
        self,
        name: str,
        model: Model,
        transport: HttpTransport,
        *,
        query: QueryMapping | None = None,
        telemetry_sink: TelemetrySink | None = None,
        fetch: bool = True,
    ) -> None:
        self.name = name
        self._model = model
        self._transport = transport
        self.telemetry = telemetry_sink or NoOpTelemetrySink()
        self.query: QueryMapping = dict(query or {})
        self.items: list[Any] = []
        self.ui = UIState()
        self.last_error: BaseException | None = None
        self._sequence = itertools.count(1)
        self._applied_sequence = 0
        self._tasks: set[asyncio.Task] = set()
        if fetch:
            self.refresh()

    @property
    def model(self) -> Model:
        return self._model

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, model={self._model.name!r})"

    # ── fetch ─────────────────────────────────────────────────────

    def page_params(self) -> PageParams | None:
        return None

    def compose(self) -> ComposedRequest:
        """Compose the GET for the current query and paging state."""
        return compose(
            self._model.url, self._model.defaults, self.query, self.page_params()
        )

    def refresh(self) -> asyncio.Task:
        """Issue a GET for the current state; ``ui.loading`` is set immediately.

        Returns the task performing the fetch.  Awaiting it yields the
        fetched records or raises ``TransportError``.
        """
        loop = asyncio.get_running_loop()
        request = self.compose()
        sequence = next(self._sequence)
        token = self.ui.acquire(LOADING)
        return self._spawn(loop, self._fetch(request, sequence, token))

    async def _fetch(self, request: ComposedRequest, sequence: int, token: int) -> list[Any]:
        logger.debug("GET %s (scaffold=%s, seq=%d)", request.url, self.name, sequence)
        try:
            response = await self._transport.get(request.url)
            records = _records(response, request.url)
        except TransportError as exc:
            if sequence > self._applied_sequence:
                self._applied_sequence = sequence
                self.last_error = exc
            logger.warning("Fetch for scaffold %s failed: %s", self.name, exc)
            self._emit_fetch(request, sequence, FetchOutcome.ERROR)
            raise
        else:
            if sequence > self._applied_sequence:
                self._applied_sequence = sequence
                self.last_error = None
                self._apply(records, response)
                self._emit_fetch(request, sequence, FetchOutcome.OK, len(records))
            else:
                logger.warning(
                    "Discarding stale response for scaffold %s (seq=%d, applied=%d)",
                    self.name,
                    sequence,
                    self._applied_sequence,
                )
                self._emit_fetch(request, sequence, FetchOutcome.STALE, len(records))
            return records
        finally:
            self.ui.release(LOADING, token)

    def _apply(self, records: list[Any], response: HttpResponse) -> None:
        self.items = records

    def _emit_fetch(
        self, request: ComposedRequest, sequence: int, outcome: FetchOutcome, count: int = 0
    ) -> None:
        self.telemetry.emit(fetch_event(self.name, request.url, sequence, outcome, count))

    # ── create ────────────────────────────────────────────────────

    def prepare(self) -> CreateHandle:
        """Start a create attempt without issuing any request."""
        return CreateHandle(self)

    def create(self) -> CreateHandle:
        return self.prepare()

    def commit(self, handle: CreateHandle, payload: Any) -> asyncio.Task:
        """POST *payload* for a pending handle; ``ui.saving`` is set immediately."""
        loop = asyncio.get_running_loop()
        self._check_owner(handle)
        handle._begin_commit(payload)
        token = self.ui.acquire(SAVING)
        return self._spawn(loop, self._submit(handle, payload, token))

    def cancel(self, handle: CreateHandle, reason: Any = None) -> None:
        self._check_owner(handle)
        handle._cancel(reason)
        self._emit_create(CreateOutcome.CANCELLED)

    async def _submit(self, handle: CreateHandle, payload: Any, token: int) -> Any:
        url = self._model.url
        logger.debug("POST %s (scaffold=%s)", url, self.name)
        try:
            response = await self._transport.post(url, payload)
        except TransportError as exc:
            logger.warning("Create for scaffold %s failed: %s", self.name, exc)
            handle._fail(exc)
            self._emit_create(CreateOutcome.ERROR)
            return None
        except Exception as exc:
            handle._fail(exc)
            raise
        else:
            self.items.append(response.body)
            handle._settle(response.body)
            self._emit_create(CreateOutcome.OK)
            return response.body
        finally:
            self.ui.release(SAVING, token)

    def _check_owner(self, handle: CreateHandle) -> None:
        if handle.scaffold is not self:
            raise CreateStateError(
                f"Create handle belongs to scaffold {handle.scaffold.name!r}, not {self.name!r}"
            )

    def _emit_create(self, outcome: CreateOutcome) -> None:
        self.telemetry.emit(create_event(self.name, self._model.url, outcome))

    # ── task bookkeeping ──────────────────────────────────────────

    def _spawn(
        self, loop: asyncio.AbstractEventLoop, coro: Coroutine[Any, Any, Any]
    ) -> asyncio.Task:
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait until no fetch or create task of this scaffold is in flight.

        Failures are not raised here; they surface through each task and
        create handle.
        """
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


def _records(response: HttpResponse, url: str) -> list[Any]:
    body = response.body
    if body is None:
        return []
    if isinstance(body, list):
        return body
    raise TransportError(
        response.status,
        f"Expected a list body, got {type(body).__name__}",
        url=url,
        method="GET",
        body=body,
    )
