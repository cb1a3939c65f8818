"""CLI handler for ``ur-scaffold create``."""

from __future__ import annotations

import asyncio
import json
import sys
from argparse import Namespace
from typing import Any

import yaml

from ur_scaffold.errors import ScaffoldError
from ur_scaffold.loader import load_config_file
from ur_scaffold.model.registry import ModelRegistry
from ur_scaffold.scaffold.provider import ScaffoldProvider
from ur_scaffold.transport.httpx import HttpxTransport


async def _create(args: Namespace, payload: Any) -> Any:
    models = ModelRegistry()
    async with HttpxTransport(timeout=args.timeout) as transport:
        provider = ScaffoldProvider(models, transport)
        load_config_file(args.config, models, provider)
        scaffold = provider.resolve(args.name)

        handle = scaffold.prepare()
        scaffold.commit(handle, payload)
        record = await handle
        await scaffold.wait_idle()
        return record


def run_create(args: Namespace) -> None:
    try:
        payload = json.loads(args.data)
    except ValueError as exc:
        print(f"Error: --data is not valid JSON: {exc}", file=sys.stderr)
        sys.exit(1)

    try:
        record = asyncio.run(_create(args, payload))
    except (ScaffoldError, OSError, yaml.YAMLError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(record, indent=2, default=str))
