"""CLI handler for ``ur-scaffold fetch``."""

from __future__ import annotations

import asyncio
import json
import sys
from argparse import Namespace
from typing import Any

import yaml

from ur_scaffold.errors import ConfigurationError, ScaffoldError
from ur_scaffold.loader import load_config_file
from ur_scaffold.model.registry import ModelRegistry
from ur_scaffold.scaffold.pagination import PaginatedScaffold
from ur_scaffold.scaffold.provider import ScaffoldProvider
from ur_scaffold.transport.httpx import HttpxTransport


def parse_query_args(pairs: list[str]) -> dict[str, Any]:
    """Parse repeated ``KEY=VALUE`` arguments; values are read as YAML scalars."""
    query: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Expected KEY=VALUE, got {pair!r}")
        value = yaml.safe_load(raw) if raw else ""
        if isinstance(value, (list, dict)):
            value = raw
        query[key.strip()] = value
    return query


async def _fetch(args: Namespace, query: dict[str, Any]) -> dict[str, Any]:
    models = ModelRegistry()
    async with HttpxTransport(timeout=args.timeout) as transport:
        provider = ScaffoldProvider(models, transport)
        load_config_file(args.config, models, provider)

        options = provider.options(args.name)
        if options is None:
            raise ConfigurationError(f"Unknown scaffold: {args.name!r}")
        if query:
            options = options.model_copy(update={"query": {**options.query, **query}})
        if args.page is not None:
            if options.paginate is None:
                raise ConfigurationError(f"Scaffold {args.name!r} is not paginated")
            paginate = options.paginate.model_copy(update={"page": args.page})
            options = options.model_copy(update={"paginate": paginate})
        provider.register(args.name, options)

        scaffold = provider.resolve(args.name)
        await scaffold.wait_idle()
        if scaffold.last_error is not None:
            raise scaffold.last_error

        result: dict[str, Any] = {"items": scaffold.items}
        if isinstance(scaffold, PaginatedScaffold):
            result["page"] = scaffold.current
            result["pages"] = scaffold.pages
        return result


def run_fetch(args: Namespace) -> None:
    try:
        query = parse_query_args(args.query)
        result = asyncio.run(_fetch(args, query))
    except (ScaffoldError, ValueError, OSError, yaml.YAMLError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(result, indent=2, default=str))
        return
    for item in result["items"]:
        print(json.dumps(item, default=str))
    if "pages" in result:
        known = ", ".join(str(p) for p in result["pages"]) or "unknown"
        print(f"Page {result['page']} (pages: {known})", file=sys.stderr)
