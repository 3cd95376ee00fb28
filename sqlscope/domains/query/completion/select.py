"""SELECT-side candidate generators: new-query templates, tables, columns."""

from __future__ import annotations

from .context import MatchedContext
from .core import (
    PRIORITY_ELEVATED,
    PRIORITY_GENERIC,
    PRIORITY_STRUCTURAL,
    Candidate,
    CandidateKind,
)
from .schema import Schema

# Columns shown in the label of a "SELECT col1, col2... FROM table" template
DEFAULT_PREVIEW_COLUMNS = 3


def get_new_query_completions(
    context: MatchedContext,
    schema: Schema,
    preview_columns: int = DEFAULT_PREVIEW_COLUMNS,
) -> list[Candidate]:
    """Offer whole-statement templates when starting a query.

    For blank text, ``select`` or ``select *`` every table gets a
    ``SELECT * FROM <table>`` statement that replaces what was typed. When the
    text is ``SELECT`` followed by whitespace, each table also gets
    ``* FROM <table>`` and a column-list form inserted at the cursor.
    """
    results: list[Candidate] = []

    for table in schema.tables:
        statement = f"SELECT * FROM {table.name}"
        results.append(
            Candidate(
                label=statement,
                insert_text=statement,
                kind=CandidateKind.STATEMENT,
                detail=f"Query all data from {table.name}",
                priority=PRIORITY_STRUCTURAL,
                range=context.replace_range,
            )
        )

    if "select" not in context.groups:
        return results

    for table in schema.tables:
        results.append(
            Candidate(
                label=f"* FROM {table.name}",
                insert_text=f"* FROM {table.name}",
                kind=CandidateKind.STATEMENT,
                detail=f"Select all columns from {table.name}",
                priority=PRIORITY_STRUCTURAL,
            )
        )
        if not table.columns:
            continue
        preview = ", ".join(table.column_names[: max(preview_columns, 1)])
        results.append(
            Candidate(
                label=f"{preview}... FROM {table.name}",
                insert_text=f"{', '.join(table.column_names)} FROM {table.name}",
                kind=CandidateKind.STATEMENT,
                detail=f"Select columns from {table.name}",
                priority=PRIORITY_STRUCTURAL,
            )
        )

    return results


def get_table_completions(context: MatchedContext, schema: Schema) -> list[Candidate]:
    """Table names after FROM/JOIN/UPDATE/INTO/TABLE, ranked above keywords."""
    return [
        Candidate(
            label=table.name,
            insert_text=table.name,
            kind=CandidateKind.TABLE,
            detail=f"Table with {len(table.columns)} columns",
            priority=PRIORITY_ELEVATED,
        )
        for table in schema.tables
    ]


def get_plain_table_completions(schema: Schema) -> list[Candidate]:
    """Table names at generic priority, offered everywhere."""
    return [
        Candidate(
            label=table.name,
            insert_text=table.name,
            kind=CandidateKind.TABLE,
            detail=f"Table with {len(table.columns)} columns",
            priority=PRIORITY_GENERIC,
        )
        for table in schema.tables
    ]


def get_dot_column_completions(context: MatchedContext, schema: Schema) -> list[Candidate]:
    """Columns of the table (or alias) before the dot, as bare names."""
    name = context.groups[0] if context.groups else ""
    table = schema.resolve(name, context.aliases)
    if table is None:
        return []

    return [
        Candidate(
            label=column.name,
            insert_text=column.name,
            kind=CandidateKind.COLUMN,
            detail=column.type or None,
            priority=PRIORITY_GENERIC,
        )
        for column in table.columns
    ]


def get_clause_column_completions(context: MatchedContext, schema: Schema) -> list[Candidate]:
    """Every column of every table, both bare and ``table.column``."""
    results: list[Candidate] = []

    for table in schema.tables:
        for column in table.columns:
            results.append(
                Candidate(
                    label=column.name,
                    insert_text=column.name,
                    kind=CandidateKind.COLUMN,
                    detail=f"{column.type} ({table.name})",
                    priority=PRIORITY_GENERIC,
                )
            )
            results.append(
                Candidate(
                    label=column.qualified_name,
                    insert_text=column.qualified_name,
                    kind=CandidateKind.COLUMN,
                    detail=column.type or None,
                    priority=PRIORITY_GENERIC,
                )
            )

    return results
