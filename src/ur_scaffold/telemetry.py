"""Telemetry for scaffold activity.

Scaffolds report two kinds of events through a ``TelemetrySink``:

- ``scaffold.fetch`` -- one per GET, with the request sequence number and
  an outcome of ``ok``, ``stale`` or ``error``.
- ``scaffold.create`` -- one per create attempt that reaches a terminal
  state, with an outcome of ``ok``, ``error`` or ``cancelled``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable

FETCH_EVENT = "scaffold.fetch"
CREATE_EVENT = "scaffold.create"


class FetchOutcome(str, Enum):
    OK = "ok"
    STALE = "stale"
    ERROR = "error"


class CreateOutcome(str, Enum):
    OK = "ok"
    ERROR = "error"
    CANCELLED = "cancelled"


@dataclass
class TelemetryEvent:
    name: str
    attributes: dict[str, Any] = field(default_factory=dict)
    timestamp_ms: float = field(default_factory=lambda: time.time() * 1000)


def fetch_event(
    scaffold: str, url: str, sequence: int, outcome: FetchOutcome, count: int = 0
) -> TelemetryEvent:
    return TelemetryEvent(
        name=FETCH_EVENT,
        attributes={
            "scaffold": scaffold,
            "url": url,
            "sequence": sequence,
            "outcome": FetchOutcome(outcome).value,
            "count": count,
        },
    )


def create_event(scaffold: str, url: str, outcome: CreateOutcome) -> TelemetryEvent:
    return TelemetryEvent(
        name=CREATE_EVENT,
        attributes={"scaffold": scaffold, "url": url, "outcome": CreateOutcome(outcome).value},
    )


@runtime_checkable
class TelemetrySink(Protocol):
    def emit(self, event: TelemetryEvent) -> None:
        raise NotImplementedError


class NoOpTelemetrySink:
    """Default sink; scaffolds built without a sink report nowhere."""

    def emit(self, event: TelemetryEvent) -> None:
        _ = event


class InMemoryTelemetrySink:
    """Collects events so tests can assert on fetch and create outcomes."""

    def __init__(self) -> None:
        self.events: list[TelemetryEvent] = []

    def emit(self, event: TelemetryEvent) -> None:
        self.events.append(event)

    def named(self, name: str) -> list[TelemetryEvent]:
        return [event for event in self.events if event.name == name]

    def outcomes(self, name: str, scaffold: str | None = None) -> list[str]:
        """Outcomes of *name* events in emission order, optionally for one scaffold."""
        return [
            event.attributes["outcome"]
            for event in self.named(name)
            if scaffold is None or event.attributes.get("scaffold") == scaffold
        ]


class LoggerTelemetrySink:
    """Writes each event as an INFO record on the ``ur_scaffold.telemetry`` logger."""

    def __init__(self, logger_name: str = "ur_scaffold.telemetry") -> None:
        self.logger = logging.getLogger(logger_name)

    def emit(self, event: TelemetryEvent) -> None:
        self.logger.info(
            "%s %s",
            event.name,
            event.attributes.get("outcome", "-"),
            extra={
                "event_name": event.name,
                "event_timestamp_ms": event.timestamp_ms,
                "event_attributes": event.attributes,
            },
        )
