#!/usr/bin/env python3
"""sqlscope - schema-aware SQL completion."""

from __future__ import annotations

import argparse
import os
import sys


def _add_schema_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--schema",
        metavar="PATH",
        help="JSON schema file, or a directory of <connection>.json files",
    )
    source.add_argument("--sqlite", metavar="PATH", help="SQLite database file to introspect")
    parser.add_argument(
        "--connection",
        "-c",
        default=None,
        help="Connection id to load the schema for (default: default)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqlscope",
        description="Schema-aware SQL completion",
        epilog='Example: sqlscope complete --sqlite app.db --query "SELECT * FROM "',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--settings",
        metavar="PATH",
        help="Path to settings JSON file (overrides ~/.sqlscope/settings.json)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    complete_parser = subparsers.add_parser("complete", help="Show completions at a cursor position")
    _add_schema_arguments(complete_parser)
    complete_parser.add_argument("--query", "-q", help="SQL text (reads stdin if omitted)")
    complete_parser.add_argument("--file", "-f", help="Read SQL text from a file")
    complete_parser.add_argument(
        "--cursor",
        type=int,
        default=None,
        metavar="OFFSET",
        help="Cursor offset in characters (default: end of text)",
    )
    complete_parser.add_argument(
        "--filter",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Filter candidates by the word at the cursor (default: on)",
    )
    complete_parser.add_argument(
        "--limit",
        type=int,
        default=0,
        metavar="COUNT",
        help="Maximum candidates to show (default: autocomplete_max_results setting)",
    )
    complete_parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )

    schema_parser = subparsers.add_parser("schema", help="Show the schema used for completion")
    _add_schema_arguments(schema_parser)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    if args.settings:
        os.environ["SQLSCOPE_SETTINGS_PATH"] = str(args.settings)

    if args.command == "complete":
        from sqlscope.domains.query.cli.commands import cmd_complete

        return cmd_complete(args)

    if args.command == "schema":
        from sqlscope.domains.query.cli.commands import cmd_schema

        return cmd_schema(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
