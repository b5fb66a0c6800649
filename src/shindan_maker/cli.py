# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""shindan CLI: title, segments, html commands.

Usage:
    shindan [--domain DOMAIN] title ID [--description]
    shindan [--domain DOMAIN] segments ID NAME [--json]
    shindan [--domain DOMAIN] html ID NAME [--output FILE]
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import os
import sys
from pathlib import Path

from shindan_maker.client import ShindanClient
from shindan_maker.config import ClientConfig
from shindan_maker.errors import ShindanError
from shindan_maker.logging_config import configure

logger = logging.getLogger(__name__)


def _make_client(args: argparse.Namespace) -> ShindanClient:
    config = ClientConfig.from_env()
    if args.timeout is not None:
        config = dataclasses.replace(config, timeout=args.timeout)
    return ShindanClient(args.domain, config=config)


def cmd_title(args: argparse.Namespace) -> None:
    """Print the shindan title (and description)."""
    client = _make_client(args)
    if args.description:
        result = asyncio.run(client.get_title_with_description(args.id))
        print(result.title)
        print()
        print(result.description)
    else:
        print(asyncio.run(client.get_title(args.id)))


def cmd_segments(args: argparse.Namespace) -> None:
    """Submit NAME and print the result as text or segment JSON."""
    client = _make_client(args)
    result = asyncio.run(client.get_segments_with_title(args.id, args.name))
    if args.json:
        print(result.segments.to_json(indent=2))
        return
    print(f"Result title: {result.title}")
    print(f"Result text: {result.segments}")


def cmd_html(args: argparse.Namespace) -> None:
    """Submit NAME and write the standalone HTML snapshot."""
    client = _make_client(args)
    result = asyncio.run(client.get_html_str_with_title(args.id, args.name))
    if not args.output:
        sys.stdout.write(result.html)
        return
    out = Path(args.output)
    if out.exists():
        print(f"Warning: {out} already exists, will be overwritten", file=sys.stderr)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(result.html, encoding="utf-8")
    print(f"Result title: {result.title}")
    print(f"Content saved to {out}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shindan", description="ShindanMaker client")
    parser.add_argument(
        "--domain",
        default=os.environ.get("SHINDAN_DOMAIN", "en"),
        help="Region: jp, en, cn, kr, th (default: en or $SHINDAN_DOMAIN)",
    )
    parser.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_title = subparsers.add_parser("title", help="Fetch the shindan title")
    p_title.add_argument("id", help="Shindan id, e.g. 1222992")
    p_title.add_argument("--description", action="store_true", help="Also print the description")
    p_title.set_defaults(func=cmd_title)

    p_segments = subparsers.add_parser("segments", help="Submit a name and print result segments")
    p_segments.add_argument("id")
    p_segments.add_argument("name")
    p_segments.add_argument("--json", action="store_true", help="Print segments as JSON")
    p_segments.set_defaults(func=cmd_segments)

    p_html = subparsers.add_parser("html", help="Submit a name and build a standalone HTML snapshot")
    p_html.add_argument("id")
    p_html.add_argument("name")
    p_html.add_argument("-o", "--output", type=str, metavar="FILE", help="Write to FILE instead of stdout")
    p_html.set_defaults(func=cmd_html)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure(json_output=args.json_logs, level="DEBUG" if args.verbose else "WARNING")

    try:
        args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    except ShindanError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            logger.debug("Command %s failed", args.command, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
