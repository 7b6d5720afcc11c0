"""Entry point for the ``tracegraph`` command.

Each subcommand registers its own arguments and handler, so adding one
means adding a module with a ``register`` function.
"""

from __future__ import annotations

import argparse
import logging

from . import inspect_cmd

COMMANDS = (inspect_cmd,)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tracegraph", description="Inspect exported execution traces.")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level for tracegraph's own messages",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    for command in COMMANDS:
        command.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    return args.handler(args, parser)


if __name__ == "__main__":
    raise SystemExit(main())
