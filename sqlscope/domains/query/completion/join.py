"""JOIN ... ON condition generator."""

from __future__ import annotations

from .context import MatchedContext
from .core import (
    PRIORITY_ELEVATED,
    PRIORITY_SECONDARY,
    PRIORITY_STRUCTURAL,
    Candidate,
    CandidateKind,
)
from .schema import Column, Schema, Table, is_join_key


def _paired_columns(schema: Schema, left: Table, column: Column, joined: Table) -> list[Column]:
    """Columns of the joined table that plausibly pair with ``column``.

    Pairs are same-named columns, ``id`` with ``<left>_id`` and
    ``<joined>_id`` with ``id``.
    """
    column_lower = column.name.lower()
    referencing: set[str] = set()
    if column_lower == "id":
        referencing = {
            ref.name.lower()
            for ref in schema.find_referencing_columns(left.name)
            if ref.table.lower() == joined.name.lower()
        }

    pairs: list[Column] = []
    for joined_column in joined.columns:
        joined_lower = joined_column.name.lower()
        if (
            joined_lower == column_lower
            or joined_lower in referencing
            or (joined_lower == "id" and column_lower == f"{joined.name.lower()}_id")
        ):
            pairs.append(joined_column)
    return pairs


def get_join_completions(context: MatchedContext, schema: Schema) -> list[Candidate]:
    """Suggest left-side columns and complete join predicates.

    Groups are (joined table, joined alias, left table or alias, partial).
    Nothing is suggested until the left-side table has been typed.
    """
    if len(context.groups) < 3:
        return []
    joined_name, joined_alias, left_name = context.groups[:3]
    if not left_name:
        return []

    left = schema.resolve(left_name, context.aliases)
    if left is None:
        return []
    joined = schema.resolve(joined_name, context.aliases)
    joined_prefix = joined_alias or joined_name

    results: list[Candidate] = []
    for column in left.columns:
        is_key = is_join_key(column.name)
        qualified = f"{left_name}.{column.name}"
        results.append(
            Candidate(
                label=qualified,
                insert_text=qualified,
                kind=CandidateKind.COLUMN,
                detail=f"{column.type} (Potential join key)" if is_key else column.type or None,
                priority=PRIORITY_ELEVATED if is_key else PRIORITY_SECONDARY,
                range=context.replace_range,
            )
        )

        if not is_key or joined is None:
            continue

        for joined_column in _paired_columns(schema, left, column, joined):
            predicate = f"{qualified} = {joined_prefix}.{joined_column.name}"
            results.append(
                Candidate(
                    label=predicate,
                    insert_text=predicate,
                    kind=CandidateKind.SNIPPET,
                    detail="Complete JOIN condition",
                    priority=PRIORITY_STRUCTURAL,
                    range=context.replace_range,
                )
            )

    return results
