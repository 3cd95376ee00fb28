"""Cursor context classification.

Each matcher looks at a window at the end of the text before the cursor and
independently reports whether its context applies. All matchers run; none
short-circuits the others. Overlaps are resolved later by ranking.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum, auto

from .core import RESERVED_WORDS, TextRange, is_inside_comment, is_inside_string


class ContextTag(Enum):
    """Contexts the cursor can be in, in matcher order."""

    NEW_QUERY = auto()
    TABLE_DOT = auto()
    TABLE_KEYWORD = auto()
    INSERT_INTO = auto()
    INSERT_BARE = auto()
    WHERE_CONDITION = auto()
    JOIN_ON = auto()
    CLAUSE = auto()
    FALLBACK = auto()


@dataclass(frozen=True)
class MatchedContext:
    """A context that applies at the cursor.

    ``groups`` holds the matcher's captures (empty strings for groups that
    did not participate). ``replace_range`` is set when candidates for this
    context should replace more than the current word. ``aliases`` maps
    lowercased aliases declared in the document to table names.
    """

    tag: ContextTag
    groups: tuple[str, ...] = ()
    replace_range: TextRange | None = None
    aliases: Mapping[str, str] = field(default_factory=dict)


_SELECT_SPACE = re.compile(r"\s*SELECT\s+", re.IGNORECASE)
_TABLE_DOT = re.compile(r"(\w+)\.\s*(\w*)$")
_TABLE_KEYWORD = re.compile(r"\b(FROM|JOIN|UPDATE|INTO|TABLE)\s+(\w*)$", re.IGNORECASE)
_INSERT_INTO = re.compile(r"INSERT\s+INTO\s+(\w*)$", re.IGNORECASE)
_INSERT_BARE = re.compile(r"^\s*(INSERT\s+(?:INTO)?\s*)$", re.IGNORECASE)
_FROM_WHERE = re.compile(
    r"\bFROM\s+(\w+)(?:\s+(?:AS\s+)?(?!WHERE\b)(\w+))?(?:\s+WHERE\s+)?([\w.]*)$",
    re.IGNORECASE,
)
_JOIN_ON = re.compile(
    r"\bJOIN\s+(\w+)(?:\s+(?:AS\s+)?(?!ON\b)(\w+))?\s+ON\s+(\w+)?\.?(\w*)?$",
    re.IGNORECASE,
)
_WHERE_WORD = re.compile(r"\swhere\s", re.IGNORECASE)
_CLAUSE = re.compile(
    r"\b(SELECT|WHERE|GROUP\s+BY|ORDER\s+BY|ON|AND|OR|HAVING)\s+[^;]*$",
    re.IGNORECASE,
)


def _match_new_query(text: str) -> MatchedContext | None:
    stripped = text.strip().lower()
    if stripped not in ("", "select", "select *"):
        return None
    # Templates replace whatever part of the statement was already typed
    start = len(text) - len(text.lstrip())
    groups = ("select",) if _SELECT_SPACE.fullmatch(text) else ()
    return MatchedContext(
        ContextTag.NEW_QUERY,
        groups=groups,
        replace_range=TextRange(start, len(text)),
    )


def _dot_accessor(text: str) -> re.Match[str] | None:
    match = _TABLE_DOT.search(text)
    # Numeric literals such as 1.5 are not accessors
    if match is None or match.group(1).isdigit():
        return None
    return match


def _match_table_dot(text: str) -> MatchedContext | None:
    match = _dot_accessor(text)
    if not match:
        return None
    return MatchedContext(ContextTag.TABLE_DOT, groups=(match.group(1), match.group(2)))


def _match_table_keyword(text: str) -> MatchedContext | None:
    match = _TABLE_KEYWORD.search(text)
    if not match:
        return None
    return MatchedContext(
        ContextTag.TABLE_KEYWORD,
        groups=(match.group(1).upper(), match.group(2) or ""),
    )


def _match_insert_into(text: str) -> MatchedContext | None:
    match = _INSERT_INTO.search(text)
    if not match:
        return None
    return MatchedContext(ContextTag.INSERT_INTO, groups=(match.group(1),))


def _match_insert_bare(text: str) -> MatchedContext | None:
    match = _INSERT_BARE.match(text)
    if not match:
        return None
    return MatchedContext(
        ContextTag.INSERT_BARE,
        replace_range=TextRange(match.start(1), len(text)),
    )


def _match_where_condition(text: str) -> MatchedContext | None:
    if not _WHERE_WORD.search(text):
        return None
    match = _FROM_WHERE.search(text)
    if not match:
        return None
    alias = match.group(2) or ""
    if alias.lower() in RESERVED_WORDS:
        alias = ""
    # A typed qualifier (`users.` or `users.i`) is replaced along with the column
    replace_range = TextRange(match.start(3), len(text)) if match.group(3) else None
    return MatchedContext(
        ContextTag.WHERE_CONDITION,
        groups=(match.group(1), alias),
        replace_range=replace_range,
    )


def _match_join_on(text: str) -> MatchedContext | None:
    match = _JOIN_ON.search(text)
    if not match:
        return None
    joined_alias = match.group(2) or ""
    if joined_alias.lower() in RESERVED_WORDS:
        joined_alias = ""
    # Qualified join candidates replace the typed qualifier as well
    left_start = match.start(3) if match.group(3) else match.start(4)
    return MatchedContext(
        ContextTag.JOIN_ON,
        groups=(match.group(1), joined_alias, match.group(3) or "", match.group(4) or ""),
        replace_range=TextRange(left_start, len(text)),
    )


def _match_clause(text: str) -> MatchedContext | None:
    # Inside a dot-accessor only that table's columns apply
    if _dot_accessor(text):
        return None
    match = _CLAUSE.search(text)
    if not match:
        return None
    return MatchedContext(ContextTag.CLAUSE, groups=(re.sub(r"\s+", " ", match.group(1).upper()),))


MATCHERS: list[Callable[[str], MatchedContext | None]] = [
    _match_new_query,
    _match_table_dot,
    _match_table_keyword,
    _match_insert_into,
    _match_insert_bare,
    _match_where_condition,
    _match_join_on,
    _match_clause,
]


def classify(before_cursor: str, aliases: Mapping[str, str] | None = None) -> list[MatchedContext]:
    """Classify the cursor context from the text before the cursor.

    Args:
        before_cursor: Document text up to the cursor
        aliases: Optional map of lowercased alias -> table name, attached to
            every matched context for name resolution

    Returns:
        Matched contexts in matcher order. ``FALLBACK`` is always last.
    """
    alias_map = dict(aliases or {})
    fallback = MatchedContext(ContextTag.FALLBACK, aliases=alias_map)

    if is_inside_string(before_cursor) or is_inside_comment(before_cursor):
        return [fallback]

    contexts: list[MatchedContext] = []
    for matcher in MATCHERS:
        matched = matcher(before_cursor)
        if matched is not None:
            contexts.append(
                MatchedContext(
                    matched.tag,
                    groups=matched.groups,
                    replace_range=matched.replace_range,
                    aliases=alias_map,
                )
            )
    contexts.append(fallback)
    return contexts


def get_context_tags(before_cursor: str) -> list[ContextTag]:
    """Return just the tags that fire for the text before the cursor."""
    return [context.tag for context in classify(before_cursor)]
