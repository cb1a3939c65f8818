"""Two-phase create handles.

``Scaffold.prepare()`` (alias ``create()``) hands out a ``CreateHandle`` in
the ``pending`` state without touching the network.  The caller later
commits it with a payload, which issues the POST, or cancels it.

    pending --commit--> committing --ok--> committed
       |                    '--error--> failed
       '--cancel--> cancelled

The handle also speaks the deferred dialect (``resolve``/``reject``/
``notify``) and is awaitable: awaiting it yields the created record.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Generator
from enum import Enum
from typing import TYPE_CHECKING, Any

from ur_scaffold.errors import CreateCancelledError, CreateStateError

if TYPE_CHECKING:
    from ur_scaffold.scaffold.scaffold import Scaffold

ProgressCallback = Callable[[Any], None]


class CreateState(str, Enum):
    PENDING = "pending"
    COMMITTING = "committing"
    COMMITTED = "committed"
    CANCELLED = "cancelled"
    FAILED = "failed"


_TERMINAL = frozenset({CreateState.COMMITTED, CreateState.CANCELLED, CreateState.FAILED})


class CreateHandle:
    def __init__(self, scaffold: Scaffold) -> None:
        self._scaffold = scaffold
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._progress_callbacks: list[ProgressCallback] = []
        self.state = CreateState.PENDING
        self.progress: list[Any] = []
        self.payload: Any = None

    @property
    def scaffold(self) -> Scaffold:
        return self._scaffold

    # ── deferred channels ─────────────────────────────────────────

    def resolve(self, payload: Any) -> asyncio.Task:
        """Submit *payload*; returns the task performing the POST."""
        return self._scaffold.commit(self, payload)

    def reject(self, reason: Any = None) -> None:
        self._scaffold.cancel(self, reason)

    def notify(self, progress: Any) -> None:
        if self.done():
            raise CreateStateError(f"Cannot notify a {self.state.value} create")
        self.progress.append(progress)
        for callback in list(self._progress_callbacks):
            callback(progress)

    def on_progress(self, callback: ProgressCallback) -> CreateHandle:
        self._progress_callbacks.append(callback)
        return self

    # ── observation ───────────────────────────────────────────────

    def done(self) -> bool:
        return self.state in _TERMINAL

    def result(self) -> Any:
        """Return the created record, or raise the failure.

        Raises CreateStateError while the handle is still unsettled.
        """
        if not self._future.done():
            raise CreateStateError(f"Create is still {self.state.value}")
        return self._future.result()

    def __await__(self) -> Generator[Any, None, Any]:
        return self._future.__await__()

    def __repr__(self) -> str:
        return f"CreateHandle(scaffold={self._scaffold.name!r}, state={self.state.value})"

    # ── transitions (driven by the owning scaffold) ───────────────

    def _require(self, expected: CreateState, action: str) -> None:
        if self.state is not expected:
            raise CreateStateError(f"Cannot {action} a {self.state.value} create")

    def _begin_commit(self, payload: Any) -> None:
        self._require(CreateState.PENDING, "commit")
        self.payload = payload
        self.state = CreateState.COMMITTING

    def _cancel(self, reason: Any) -> None:
        self._require(CreateState.PENDING, "cancel")
        self.state = CreateState.CANCELLED
        self._future.set_exception(CreateCancelledError(reason))

    def _settle(self, record: Any) -> None:
        self._require(CreateState.COMMITTING, "settle")
        self.state = CreateState.COMMITTED
        self._future.set_result(record)

    def _fail(self, exc: BaseException) -> None:
        self._require(CreateState.COMMITTING, "fail")
        self.state = CreateState.FAILED
        self._future.set_exception(exc)
