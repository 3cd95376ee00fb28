"""WHERE clause condition generator."""

from __future__ import annotations

from .context import MatchedContext
from .core import PRIORITY_ELEVATED, PRIORITY_SECONDARY, Candidate, CandidateKind
from .schema import Schema, is_key_column


def get_condition_completions(context: MatchedContext, schema: Schema) -> list[Candidate]:
    """Offer ``<table>.<column> = `` conditions for the FROM table.

    Key-looking columns (``id``, ``*_id``, ``*key*``) rank first. The prefix
    is the alias when the FROM table has one, otherwise the table name as
    typed.

    Args:
        context: WHERE_CONDITION context with (table, alias) groups
        schema: Current schema

    Returns:
        Condition candidates, empty if the table does not resolve
    """
    if not context.groups:
        return []
    table_name = context.groups[0]
    alias = context.groups[1] if len(context.groups) > 1 else ""

    table = schema.resolve(table_name, context.aliases)
    if table is None:
        return []

    prefix = alias or table_name
    results: list[Candidate] = []
    for column in table.columns:
        condition = f"{prefix}.{column.name} = "
        results.append(
            Candidate(
                label=condition,
                insert_text=condition,
                kind=CandidateKind.SNIPPET,
                detail=f"Filter by {column.name}",
                priority=PRIORITY_ELEVATED if is_key_column(column.name) else PRIORITY_SECONDARY,
                range=context.replace_range,
            )
        )
    return results
