"""SQL completion engine.

Provides schema-aware SQL autocompletion with:
- Context classification from the text before the cursor (FROM, JOIN ... ON,
  WHERE, dot-access, INSERT INTO, new query)
- Table and column candidates from a live schema, with alias recognition
- Synthesized statements: SELECT templates, INSERT skeletons, join predicates
- Keywords and snippets at every position
- Deterministic ranking and deduplication
"""

from .completion import (
    CompletionEngine,
    build_generators,
    get_completions,
    get_context,
    get_fallback_completions,
)
from .context import MATCHERS, ContextTag, MatchedContext, classify, get_context_tags
from .core import (
    PRIORITY_ELEVATED,
    PRIORITY_GENERIC,
    PRIORITY_KEYWORD,
    PRIORITY_SECONDARY,
    PRIORITY_SNIPPET,
    PRIORITY_STRUCTURAL,
    RESERVED_WORDS,
    SQL_KEYWORDS,
    SQL_SNIPPETS,
    Candidate,
    CandidateKind,
    Snippet,
    TableRef,
    TextRange,
    build_alias_map,
    extract_table_refs,
    get_all_keywords,
    get_current_word,
    get_current_word_range,
    is_inside_comment,
    is_inside_string,
    keyword_candidates,
    snippet_candidates,
)
from .insert import get_insert_statement_completions, get_insert_values_completions
from .join import get_join_completions
from .provider import TRIGGER_CHARACTERS, SchemaCompletionProvider, index_to_utf16, utf16_to_index
from .ranking import CompletionResult, filter_candidates, merge_candidates
from .schema import EMPTY_SCHEMA, Column, Schema, Table, is_join_key, is_key_column, load_schema
from .select import (
    DEFAULT_PREVIEW_COLUMNS,
    get_clause_column_completions,
    get_dot_column_completions,
    get_new_query_completions,
    get_plain_table_completions,
    get_table_completions,
)
from .where import get_condition_completions

__all__ = [
    # Main API
    "CompletionEngine",
    "CompletionResult",
    "SchemaCompletionProvider",
    "get_completions",
    "get_context",
    "classify",
    "get_context_tags",
    "TRIGGER_CHARACTERS",
    # Types
    "Candidate",
    "CandidateKind",
    "Column",
    "ContextTag",
    "MatchedContext",
    "Schema",
    "Snippet",
    "Table",
    "TableRef",
    "TextRange",
    "EMPTY_SCHEMA",
    # Constants
    "DEFAULT_PREVIEW_COLUMNS",
    "MATCHERS",
    "PRIORITY_ELEVATED",
    "PRIORITY_GENERIC",
    "PRIORITY_KEYWORD",
    "PRIORITY_SECONDARY",
    "PRIORITY_SNIPPET",
    "PRIORITY_STRUCTURAL",
    "RESERVED_WORDS",
    "SQL_KEYWORDS",
    "SQL_SNIPPETS",
    # Schema
    "load_schema",
    "is_key_column",
    "is_join_key",
    # Generators
    "build_generators",
    "get_clause_column_completions",
    "get_condition_completions",
    "get_dot_column_completions",
    "get_fallback_completions",
    "get_insert_statement_completions",
    "get_insert_values_completions",
    "get_join_completions",
    "get_new_query_completions",
    "get_plain_table_completions",
    "get_table_completions",
    "keyword_candidates",
    "snippet_candidates",
    # Ranking
    "merge_candidates",
    "filter_candidates",
    # Helper functions
    "build_alias_map",
    "extract_table_refs",
    "get_all_keywords",
    "get_current_word",
    "get_current_word_range",
    "index_to_utf16",
    "is_inside_comment",
    "is_inside_string",
    "utf16_to_index",
]
