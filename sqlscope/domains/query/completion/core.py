"""Core SQL completion utilities.

Shared types, the static keyword/snippet vocabulary, table reference
extraction, and the text helpers used by the classifier and generators.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import NamedTuple

from sqlparse import lexer
from sqlparse.tokens import Comment, Error, Operator


class CandidateKind(Enum):
    """Kinds of completion candidates."""

    KEYWORD = auto()
    SNIPPET = auto()
    TABLE = auto()
    COLUMN = auto()
    STATEMENT = auto()


class TextRange(NamedTuple):
    """Half-open ``[start, end)`` character range in the document."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


# Ranking tiers, lower sorts first. The final sort key is tier + label.
PRIORITY_STRUCTURAL = "00"  # Complete statements and join predicates
PRIORITY_ELEVATED = "0"  # Key-column conditions, tables after FROM/JOIN
PRIORITY_SECONDARY = "1"  # Non-key conditions and join columns
PRIORITY_GENERIC = "2"  # Plain table and column names
PRIORITY_SNIPPET = "3"
PRIORITY_KEYWORD = "4"


@dataclass(frozen=True)
class Candidate:
    """A completion suggestion.

    ``insert_text`` may contain ``${n:placeholder}`` tab-stop markers. ``range``
    is left as ``None`` by generators that replace the current word; the
    merge step fills it in.
    """

    label: str
    insert_text: str
    kind: CandidateKind
    detail: str | None = None
    priority: str = PRIORITY_GENERIC
    sort_key: str = ""
    range: TextRange | None = None

    @property
    def dedupe_key(self) -> tuple[str, str]:
        return (self.label, self.insert_text)

    @property
    def is_snippet(self) -> bool:
        return "${" in self.insert_text


@dataclass
class TableRef:
    """A table reference with optional alias."""

    name: str
    alias: str | None = None


class Snippet(NamedTuple):
    """A canned multi-placeholder template."""

    label: str
    detail: str
    insert_text: str


# SQL Keywords grouped by category
SQL_KEYWORDS = {
    "dml": [
        "SELECT",
        "FROM",
        "WHERE",
        "GROUP BY",
        "ORDER BY",
        "HAVING",
        "LIMIT",
        "INSERT",
        "UPDATE",
        "DELETE",
    ],
    "ddl": [
        "CREATE",
        "ALTER",
        "DROP",
        "TRUNCATE",
    ],
    "join": [
        "JOIN",
        "INNER JOIN",
        "LEFT JOIN",
        "RIGHT JOIN",
        "FULL JOIN",
        "UNION",
        "AS",
        "ON",
    ],
    "operators": [
        "AND",
        "OR",
        "NOT",
        "IN",
        "BETWEEN",
        "LIKE",
        "IS NULL",
        "IS NOT NULL",
    ],
    "aggregate": [
        "COUNT",
        "SUM",
        "AVG",
        "MIN",
        "MAX",
        "DISTINCT",
        "ALL",
    ],
    "constraints": [
        "TABLE",
        "INDEX",
        "PRIMARY KEY",
        "FOREIGN KEY",
        "REFERENCES",
        "CONSTRAINT",
        "DEFAULT",
        "NULL",
        "NOT NULL",
        "AUTO_INCREMENT",
    ],
    "types": [
        "INT",
        "VARCHAR",
        "TEXT",
        "DATE",
        "DATETIME",
        "TIMESTAMP",
        "BOOLEAN",
    ],
}

SQL_SNIPPETS = [
    Snippet(
        label="sel-all",
        detail="SELECT all columns from a table",
        insert_text="SELECT * FROM ${1:table_name}",
    ),
    Snippet(
        label="sel-where",
        detail="SELECT with WHERE condition",
        insert_text="SELECT * FROM ${1:table_name} WHERE ${2:condition}",
    ),
    Snippet(
        label="join",
        detail="INNER JOIN statement",
        insert_text="SELECT * FROM ${1:table1} INNER JOIN ${2:table2} ON ${1:table1}.${3:id} = ${2:table2}.${4:foreign_key}",
    ),
    Snippet(
        label="group",
        detail="SELECT with GROUP BY",
        insert_text="SELECT ${1:column}, COUNT(*) FROM ${2:table_name} GROUP BY ${1:column}",
    ),
    Snippet(
        label="order",
        detail="SELECT with ORDER BY",
        insert_text="SELECT * FROM ${1:table_name} ORDER BY ${2:column} ${3:ASC|DESC}",
    ),
]

# Reserved words that cannot be aliases
RESERVED_WORDS = {
    "select",
    "from",
    "where",
    "join",
    "inner",
    "outer",
    "left",
    "right",
    "cross",
    "full",
    "on",
    "and",
    "or",
    "not",
    "in",
    "as",
    "order",
    "by",
    "group",
    "having",
    "union",
    "intersect",
    "except",
    "limit",
    "offset",
    "insert",
    "into",
    "values",
    "update",
    "set",
    "delete",
    "create",
    "alter",
    "drop",
    "table",
    "index",
    "view",
    "case",
    "when",
    "then",
    "else",
    "end",
    "null",
    "is",
    "like",
    "between",
    "exists",
    "distinct",
    "all",
    "top",
    "with",
    "asc",
    "desc",
    "natural",
    "using",
}

_WORD_CHAR = re.compile(r"\w")


def get_all_keywords() -> list[str]:
    """Get all SQL keywords as a flat list in vocabulary order."""
    keywords: list[str] = []
    for category in SQL_KEYWORDS.values():
        keywords.extend(category)
    return list(dict.fromkeys(keywords))


def keyword_candidates() -> list[Candidate]:
    """Emit the full keyword vocabulary at the lowest priority."""
    return [
        Candidate(
            label=keyword,
            insert_text=keyword,
            kind=CandidateKind.KEYWORD,
            priority=PRIORITY_KEYWORD,
        )
        for keyword in get_all_keywords()
    ]


def snippet_candidates() -> list[Candidate]:
    """Emit the canned snippet templates."""
    return [
        Candidate(
            label=snippet.label,
            insert_text=snippet.insert_text,
            kind=CandidateKind.SNIPPET,
            detail=snippet.detail,
            priority=PRIORITY_SNIPPET,
        )
        for snippet in SQL_SNIPPETS
    ]


def extract_table_refs(sql: str) -> list[TableRef]:
    """Extract table references and aliases from SQL.

    Handles patterns like:
    - FROM users
    - FROM users u
    - FROM users AS u
    - JOIN orders o ON ...
    - FROM schema.users u
    - FROM "quoted_table" / [bracketed_table] / `backtick_table`
    - UPDATE users u SET ...

    Args:
        sql: The SQL text to parse

    Returns:
        List of TableRef objects with name and alias. A schema qualifier
        (`public.users`) is skipped.
    """
    refs: list[TableRef] = []

    # Quoted identifiers: "name", `name`, [name], or unquoted name
    ident = r'(?:"([^"]+)"|`([^`]+)`|\[([^\]]+)\]|(\w+))'

    from_join_pattern = (
        r"(?:FROM|JOIN)\s+"
        + r"(?:" + ident + r"\.)?"  # optional schema qualifier
        + ident
        + r"(?:\s+(?:AS\s+)?(\w+))?"  # optional alias
    )
    update_pattern = (
        r"\bUPDATE\s+"
        + r"(?:" + ident + r"\.)?"
        + ident
        + r"(?:\s+(?:AS\s+)?(\w+))?"
        + r"(?=\s+SET\b)"
    )

    for pattern in (from_join_pattern, update_pattern):
        for match in re.finditer(pattern, sql, re.IGNORECASE):
            groups = match.groups()
            table = next((g for g in groups[4:8] if g is not None), None)
            alias = groups[8]

            if alias and alias.lower() in RESERVED_WORDS:
                alias = None

            if table:
                refs.append(TableRef(name=table, alias=alias))

    return refs


def build_alias_map(refs: list[TableRef], known_tables: list[str]) -> dict[str, str]:
    """Build a map of alias -> table name.

    Only includes aliases for tables that exist in known_tables.
    """
    known_lower = {t.lower() for t in known_tables}
    alias_map: dict[str, str] = {}

    for ref in refs:
        if ref.alias and ref.name.lower() in known_lower:
            alias_map.setdefault(ref.alias.lower(), ref.name)

    return alias_map


def _open_region(sql: str) -> str | None:
    """Report the literal or comment the end of ``sql`` is still inside.

    The sqlparse lexer only yields a lone quote as an ``Error`` token when no
    closing quote follows it, and only splits ``/*`` into ``/`` and ``*`` when
    no ``*/`` follows. Quotes and comment markers inside a closed comment or
    literal are consumed by that token, so the first such opener wins.

    Returns:
        "string", "comment", or None when the text ends in plain SQL
    """
    tokens = list(lexer.tokenize(sql))
    for index, (ttype, value) in enumerate(tokens):
        if ttype in Error and value in ("'", '"'):
            return "string"
        if (
            ttype in Operator
            and value.endswith("/")
            and index + 1 < len(tokens)
            and tokens[index + 1][1].startswith("*")
        ):
            return "comment"

    if tokens:
        ttype, value = tokens[-1]
        if ttype in Comment.Single and not value.endswith(("\n", "\r")):
            return "comment"
    return None


def is_inside_string(sql: str) -> bool:
    """Check whether the text ends inside an unclosed string literal."""
    return _open_region(sql) == "string"


def is_inside_comment(sql: str) -> bool:
    """Check whether the text ends inside an unterminated line or block comment."""
    return _open_region(sql) == "comment"


def get_current_word_range(sql: str, cursor_pos: int) -> TextRange:
    """Get the range of the word at the cursor.

    The word is the maximal run of alphanumeric/underscore characters that
    ends at or contains the cursor. An empty range at the cursor means there
    is nothing to replace.
    """
    cursor_pos = max(0, min(cursor_pos, len(sql)))

    start = cursor_pos
    while start > 0 and _WORD_CHAR.match(sql[start - 1]):
        start -= 1

    end = cursor_pos
    while end < len(sql) and _WORD_CHAR.match(sql[end]):
        end += 1

    return TextRange(start, end)


def get_current_word(sql: str, cursor_pos: int) -> str:
    """Get the part of the current word typed before the cursor."""
    word_range = get_current_word_range(sql, cursor_pos)
    return sql[word_range.start : min(cursor_pos, word_range.end)]
