"""INSERT statement synthesis."""

from __future__ import annotations

from .context import MatchedContext
from .core import PRIORITY_ELEVATED, PRIORITY_STRUCTURAL, Candidate, CandidateKind
from .schema import Schema, Table


def _column_and_value_lists(table: Table) -> tuple[str, str]:
    columns = ", ".join(table.column_names)
    values = ", ".join("?" for _ in table.columns)
    return columns, values


def get_insert_values_completions(context: MatchedContext, schema: Schema) -> list[Candidate]:
    """After ``INSERT INTO``: ``<table> (cols) VALUES (?, ...)`` per table."""
    results: list[Candidate] = []
    for table in schema.tables:
        columns, values = _column_and_value_lists(table)
        text = f"{table.name} ({columns}) VALUES ({values})"
        results.append(
            Candidate(
                label=text,
                insert_text=text,
                kind=CandidateKind.STATEMENT,
                detail=f"Complete INSERT for {table.name}",
                priority=PRIORITY_STRUCTURAL,
            )
        )
    return results


def get_insert_statement_completions(context: MatchedContext, schema: Schema) -> list[Candidate]:
    """After a bare ``INSERT [INTO]``: the complete statement per table.

    The candidate replaces the typed ``INSERT [INTO]`` so the keywords are not
    duplicated.
    """
    results: list[Candidate] = []
    for table in schema.tables:
        columns, values = _column_and_value_lists(table)
        results.append(
            Candidate(
                label=f"INSERT INTO {table.name}",
                insert_text=f"INSERT INTO {table.name} ({columns}) VALUES ({values})",
                kind=CandidateKind.STATEMENT,
                detail=f"Insert into {table.name} table",
                priority=PRIORITY_ELEVATED,
                range=context.replace_range,
            )
        )
    return results
