"""Pagination for scaffolds configured with ``paginate``.

The list of known pages is derived from response headers:

- ``X-Total-Pages: N``  -- the last page, used as is.
- ``X-Total-Count: T``  -- total records; divided by the page size, which is
  the configured ``limit`` or else the ``X-Per-Page`` header.

Without either signal the previous ``pages`` value is kept.
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ur_scaffold.model.models import Model, QueryMapping
from ur_scaffold.query import PageParams
from ur_scaffold.scaffold.scaffold import Scaffold
from ur_scaffold.telemetry import TelemetrySink
from ur_scaffold.transport.base import HttpResponse, HttpTransport

logger = logging.getLogger(__name__)

TOTAL_PAGES_HEADER = "x-total-pages"
TOTAL_COUNT_HEADER = "x-total-count"
PER_PAGE_HEADER = "x-per-page"


@dataclass
class PaginationState:
    limit: int | None = None
    current: int = 1
    pages: list[int] = field(default_factory=list)


def _header_int(headers: Mapping[str, str], name: str) -> int | None:
    raw = headers.get(name)
    if raw is None:
        return None
    try:
        value = int(str(raw).strip())
    except ValueError:
        value = -1
    if value < 0:
        logger.warning("Ignoring malformed %s header: %r", name, raw)
        return None
    return value


def derive_last_page(headers: Mapping[str, str], limit: int | None = None) -> int | None:
    """Return the last known page number, or None if the response has no signal."""
    total_pages = _header_int(headers, TOTAL_PAGES_HEADER)
    if total_pages is not None:
        return max(total_pages, 1)

    total = _header_int(headers, TOTAL_COUNT_HEADER)
    size = limit or _header_int(headers, PER_PAGE_HEADER)
    if total is None or not size:
        return None
    return max(math.ceil(total / size), 1)


def page_range(last_page: int) -> list[int]:
    return list(range(1, last_page + 1))


def _validate_page(number: Any) -> int:
    if isinstance(number, bool) or not isinstance(number, int) or number < 1:
        raise ValueError(f"Page must be a positive integer, got {number!r}")
    return number


class PaginatedScaffold(Scaffold):
    """Scaffold that sends ``limit``/``page`` and tracks the known pages."""

    def __init__(
        self,
        name: str,
        model: Model,
        transport: HttpTransport,
        *,
        query: QueryMapping | None = None,
        limit: int | None = None,
        page: int = 1,
        telemetry_sink: TelemetrySink | None = None,
        fetch: bool = True,
    ) -> None:
        self.pagination = PaginationState(limit=limit, current=_validate_page(page))
        super().__init__(
            name,
            model,
            transport,
            query=query,
            telemetry_sink=telemetry_sink,
            fetch=fetch,
        )

    @property
    def pages(self) -> list[int]:
        return self.pagination.pages

    @property
    def current(self) -> int:
        return self.pagination.current

    def page_params(self) -> PageParams:
        return PageParams(page=self.pagination.current, limit=self.pagination.limit)

    def page(self, number: int) -> asyncio.Task:
        """Move to page *number* and fetch it."""
        previous = self.pagination.current
        self.pagination.current = _validate_page(number)
        try:
            return self.refresh()
        except Exception:
            self.pagination.current = previous
            raise

    def _apply(self, records: list[Any], response: HttpResponse) -> None:
        last_page = derive_last_page(response.headers, self.pagination.limit)
        self.items = records
        if last_page is not None:
            self.pagination.pages = page_range(last_page)
