"""CLI entry point: python -m ur_scaffold <command>."""

from __future__ import annotations

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="ur-scaffold",
        description="Fetch and create REST resources through configured scaffolds",
    )
    sub = parser.add_subparsers(dest="command")

    fe = sub.add_parser("fetch", help="Fetch a scaffold's collection")
    fe.add_argument("--config", required=True, help="Path to a YAML config file")
    fe.add_argument("name", help="Scaffold name")
    fe.add_argument("--page", type=int, default=None, help="Page to fetch (paginated scaffolds)")
    fe.add_argument(
        "--query",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter; may be repeated",
    )
    fe.add_argument("--timeout", type=float, default=10.0, help="Request timeout in seconds")
    fe.add_argument("--json", action="store_true", default=False, help="Output as JSON")

    cr = sub.add_parser("create", help="Create a record through a scaffold")
    cr.add_argument("--config", required=True, help="Path to a YAML config file")
    cr.add_argument("name", help="Scaffold name")
    cr.add_argument("--data", required=True, help="Record to create, as JSON")
    cr.add_argument("--timeout", type=float, default=10.0, help="Request timeout in seconds")

    args = parser.parse_args(argv)

    if args.command == "fetch":
        from ur_scaffold.cli.fetch import run_fetch
        run_fetch(args)
    elif args.command == "create":
        from ur_scaffold.cli.create import run_create
        run_create(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
