"""Main SQL completion engine.

Orchestrates context detection, candidate generation and ranking.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial

from .context import ContextTag, MatchedContext, classify
from .core import (
    Candidate,
    build_alias_map,
    extract_table_refs,
    get_current_word_range,
    keyword_candidates,
    snippet_candidates,
)
from .insert import get_insert_statement_completions, get_insert_values_completions
from .join import get_join_completions
from .ranking import CompletionResult, merge_candidates
from .schema import EMPTY_SCHEMA, Schema
from .select import (
    DEFAULT_PREVIEW_COLUMNS,
    get_clause_column_completions,
    get_dot_column_completions,
    get_new_query_completions,
    get_plain_table_completions,
    get_table_completions,
)
from .where import get_condition_completions

Generator = Callable[[MatchedContext, Schema], list[Candidate]]


def get_fallback_completions(context: MatchedContext, schema: Schema) -> list[Candidate]:
    """Keywords, snippets and plain table names, offered at every position."""
    results = keyword_candidates()
    results.extend(snippet_candidates())
    results.extend(get_plain_table_completions(schema))
    return results


def build_generators(preview_columns: int = DEFAULT_PREVIEW_COLUMNS) -> dict[ContextTag, Generator]:
    """Map every context tag to the generator it fires."""
    return {
        ContextTag.NEW_QUERY: partial(get_new_query_completions, preview_columns=preview_columns),
        ContextTag.TABLE_DOT: get_dot_column_completions,
        ContextTag.TABLE_KEYWORD: get_table_completions,
        ContextTag.INSERT_INTO: get_insert_values_completions,
        ContextTag.INSERT_BARE: get_insert_statement_completions,
        ContextTag.WHERE_CONDITION: get_condition_completions,
        ContextTag.JOIN_ON: get_join_completions,
        ContextTag.CLAUSE: get_clause_column_completions,
        ContextTag.FALLBACK: get_fallback_completions,
    }


def get_context(sql: str, cursor_pos: int, schema: Schema | None = None) -> list[MatchedContext]:
    """Determine which contexts apply at the cursor.

    Aliases declared anywhere in the document (``FROM users u``) are
    attached to the contexts when a schema is given.

    Args:
        sql: The full SQL text
        cursor_pos: Position of cursor in the text

    Returns:
        Matched contexts in matcher order, always ending with FALLBACK
    """
    cursor_pos = max(0, min(cursor_pos, len(sql)))
    aliases: dict[str, str] = {}
    if schema is not None and not schema.is_empty:
        aliases = build_alias_map(extract_table_refs(sql), schema.table_names())
    return classify(sql[:cursor_pos], aliases)


class CompletionEngine:
    """Completion engine bound to a schema.

    The engine keeps no state between requests besides the schema
    reference, which ``set_schema`` replaces in one assignment.
    """

    def __init__(
        self,
        schema: Schema | None = None,
        *,
        preview_columns: int = DEFAULT_PREVIEW_COLUMNS,
    ) -> None:
        self._schema = schema or EMPTY_SCHEMA
        self._generators = build_generators(preview_columns)

    @property
    def schema(self) -> Schema:
        return self._schema

    def set_schema(self, schema: Schema | None) -> None:
        self._schema = schema or EMPTY_SCHEMA

    def complete(self, sql: str, cursor_pos: int) -> CompletionResult:
        """Compute ranked completions for the cursor position.

        Args:
            sql: The full SQL text
            cursor_pos: Position of cursor in the text

        Returns:
            CompletionResult with ordered candidates and the replacement
            range of the word at the cursor
        """
        schema = self._schema
        cursor_pos = max(0, min(cursor_pos, len(sql)))
        word_range = get_current_word_range(sql, cursor_pos)

        batches = [
            self._generators[context.tag](context, schema)
            for context in get_context(sql, cursor_pos, schema)
        ]
        return merge_candidates(batches, word_range, cursor_pos)


def get_completions(
    sql: str,
    cursor_pos: int,
    schema: Schema | None = None,
    preview_columns: int = DEFAULT_PREVIEW_COLUMNS,
) -> CompletionResult:
    """Get completion suggestions for the given SQL and cursor position.

    Args:
        sql: The full SQL text
        cursor_pos: Position of cursor in the text
        schema: Schema to draw table and column names from
        preview_columns: Columns shown in SELECT template labels

    Returns:
        CompletionResult with ordered candidates and replacement range
    """
    return CompletionEngine(schema, preview_columns=preview_columns).complete(sql, cursor_pos)
