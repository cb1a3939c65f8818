"""Query composition -- merge base, explicit and paging parameters into a URL.

Parameter order is part of the wire contract: base keys that the explicit
query does not override come first, then the explicit keys, then ``limit``
and finally ``page``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from urllib.parse import quote

from ur_scaffold.model.models import Scalar

QueryParams = list[tuple[str, str]]

_PAGING_KEYS = ("limit", "page")


@dataclass(frozen=True)
class PageParams:
    """Paging parameters for one request; ``limit=None`` lets the server decide."""

    page: int = 1
    limit: int | None = None


@dataclass(frozen=True)
class ComposedRequest:
    url: str
    params: QueryParams = field(default_factory=list)


def serialize_value(value: Scalar) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"Query values must be scalars, got {type(value).__name__}")


def merge_query(
    base_query: Mapping[str, Scalar] | None,
    explicit_query: Mapping[str, Scalar] | None,
) -> list[tuple[str, Scalar]]:
    """Merge two queries; explicit keys win and move after the base keys."""
    base_query = base_query or {}
    explicit_query = explicit_query or {}
    merged = [(k, v) for k, v in base_query.items() if k not in explicit_query]
    merged.extend(explicit_query.items())
    return merged


def compose(
    url: str,
    base_query: Mapping[str, Scalar] | None,
    explicit_query: Mapping[str, Scalar] | None,
    pagination: PageParams | None = None,
) -> ComposedRequest:
    """Build the request URL and its ordered parameter list.

    ``None`` values are skipped.  With *pagination*, ``limit``/``page`` keys
    found in either query are dropped in favour of the paging values.
    """
    params: QueryParams = []
    for key, value in merge_query(base_query, explicit_query):
        if value is None:
            continue
        if pagination is not None and key in _PAGING_KEYS:
            continue
        params.append((key, serialize_value(value)))

    if pagination is not None:
        if pagination.limit is not None:
            params.append(("limit", str(pagination.limit)))
        params.append(("page", str(pagination.page)))

    return ComposedRequest(url=build_url(url, params), params=params)


def build_url(url: str, params: QueryParams) -> str:
    if not params:
        return url
    query = "&".join(f"{quote(k, safe='')}={quote(v, safe='')}" for k, v in params)
    if url.endswith(("?", "&")):
        separator = ""
    else:
        separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"
