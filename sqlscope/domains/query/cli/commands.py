"""CLI completion command handlers."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

from rich.console import Console
from rich.markup import escape as escape_markup
from rich.table import Table as RichTable

from sqlscope.domains.query.app.exceptions import SchemaServiceError
from sqlscope.domains.query.app.schema_service import (
    JSONSchemaService,
    SchemaService,
    SQLiteSchemaService,
    StaticSchemaService,
)
from sqlscope.domains.query.completion import (
    Candidate,
    CompletionEngine,
    Schema,
    filter_candidates,
    get_current_word,
    load_schema,
)
from sqlscope.domains.shell.store.settings import CompletionSettings, load_completion_settings

DEFAULT_CONNECTION_ID = "default"


def _error(message: str) -> None:
    Console(stderr=True, soft_wrap=True).print(f"[red]Error:[/red] {escape_markup(message)}")


def _build_schema_service(args: Any) -> SchemaService:
    if getattr(args, "sqlite", None):
        return SQLiteSchemaService(args.sqlite)
    if getattr(args, "schema", None):
        return JSONSchemaService(args.schema)
    return StaticSchemaService()


def _load_schema(args: Any, schema_service: SchemaService | None) -> Schema | None:
    service = schema_service or _build_schema_service(args)
    connection_id = getattr(args, "connection", None) or DEFAULT_CONNECTION_ID
    try:
        raw_schema = asyncio.run(service.fetch_schema(connection_id))
    except SchemaServiceError as e:
        _error(str(e))
        return None
    return load_schema(raw_schema)


def _read_sql(args: Any) -> str | None:
    if args.query is not None:
        return args.query
    if args.file:
        try:
            with open(args.file, encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            _error(f"File '{args.file}' not found.")
            return None
        except OSError as e:
            _error(f"Error reading file: {e}")
            return None
    if not sys.stdin.isatty():
        return sys.stdin.read()
    _error("Either --query or --file must be provided.")
    return None


def _candidate_to_dict(candidate: Candidate) -> dict[str, Any]:
    return {
        "label": candidate.label,
        "insert_text": candidate.insert_text,
        "kind": candidate.kind.name.lower(),
        "detail": candidate.detail,
        "sort_key": candidate.sort_key,
        "range": list(candidate.range) if candidate.range is not None else None,
    }


def _output_table(candidates: list[Candidate], console: Console) -> None:
    table = RichTable(show_header=True, header_style="bold")
    table.add_column("Label")
    table.add_column("Kind")
    table.add_column("Detail")
    table.add_column("Insert", overflow="fold")
    for candidate in candidates:
        insert = "" if candidate.insert_text == candidate.label else candidate.insert_text
        table.add_row(
            escape_markup(candidate.label),
            candidate.kind.name.lower(),
            escape_markup(candidate.detail or ""),
            escape_markup(insert),
        )
    console.print(table)


def cmd_complete(
    args: Any,
    *,
    schema_service: SchemaService | None = None,
    settings: CompletionSettings | None = None,
    console: Console | None = None,
) -> int:
    """Print completions for a SQL text and cursor position."""
    sql = _read_sql(args)
    if sql is None:
        return 1

    cursor_pos = len(sql) if args.cursor is None else args.cursor
    if cursor_pos < 0 or cursor_pos > len(sql):
        _error(f"Cursor {cursor_pos} is outside the text (0-{len(sql)}).")
        return 1

    schema = _load_schema(args, schema_service)
    if schema is None:
        return 1

    settings = settings or load_completion_settings()
    limit = args.limit if args.limit and args.limit > 0 else settings.max_results

    engine = CompletionEngine(schema, preview_columns=settings.preview_columns)
    result = engine.complete(sql, cursor_pos)
    candidates = result.candidates
    if args.filter:
        candidates = filter_candidates(candidates, get_current_word(sql, cursor_pos), limit)
    else:
        candidates = candidates[:limit]

    if args.format == "json":
        payload = {
            "range": list(result.range),
            "candidates": [_candidate_to_dict(c) for c in candidates],
        }
        print(json.dumps(payload, indent=2))
        return 0

    _output_table(candidates, console or Console())
    return 0


def cmd_schema(
    args: Any,
    *,
    schema_service: SchemaService | None = None,
    console: Console | None = None,
) -> int:
    """Print the tables and columns completion would use."""
    schema = _load_schema(args, schema_service)
    if schema is None:
        return 1

    console = console or Console()
    if schema.is_empty:
        console.print("No tables found.")
        return 0

    table = RichTable(show_header=True, header_style="bold")
    table.add_column("Table")
    table.add_column("Columns", overflow="fold")
    for schema_table in schema.tables:
        columns = ", ".join(
            f"{column.name} {column.type}".strip() for column in schema_table.columns
        )
        table.add_row(escape_markup(schema_table.name), escape_markup(columns))
    console.print(table)
    return 0
