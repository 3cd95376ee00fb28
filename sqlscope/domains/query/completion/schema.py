"""Schema model used by the completion engine.

A ``Schema`` is immutable. Reloading builds a new instance that callers swap
in with a single assignment, so a completion request never sees a partially
loaded schema.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Column:
    """A table column. ``table`` is the owning table name."""

    name: str
    type: str = ""
    table: str = ""

    @property
    def qualified_name(self) -> str:
        return f"{self.table}.{self.name}" if self.table else self.name


@dataclass(frozen=True)
class Table:
    """A table and its ordered columns."""

    name: str
    columns: tuple[Column, ...] = ()

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def find_column(self, name: str) -> Column | None:
        """Case-insensitive exact lookup of a column."""
        name_lower = name.lower()
        for column in self.columns:
            if column.name.lower() == name_lower:
                return column
        return None


@dataclass(frozen=True)
class Schema:
    """Tables for one connection, in display order."""

    tables: tuple[Table, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.tables

    def table_names(self) -> list[str]:
        return [table.name for table in self.tables]

    def find_table(self, name: str) -> Table | None:
        """Case-insensitive exact lookup of a table."""
        name_lower = name.lower()
        for table in self.tables:
            if table.name.lower() == name_lower:
                return table
        return None

    def find_column(self, table_name: str, column_name: str) -> Column | None:
        table = self.find_table(table_name)
        if table is None:
            return None
        return table.find_column(column_name)

    def resolve(self, name: str | None, aliases: Mapping[str, str] | None = None) -> Table | None:
        """Resolve a table name or alias as typed by the user.

        Direct table names win over aliases.

        Args:
            name: Table name or alias
            aliases: Map of lowercased alias -> table name

        Returns:
            The matching table, or None if the name does not resolve
        """
        if not name:
            return None
        table = self.find_table(name)
        if table is not None:
            return table
        if aliases:
            target = aliases.get(name.lower())
            if target:
                return self.find_table(target)
        return None

    def find_referencing_columns(self, table_name: str) -> list[Column]:
        """Reverse lookup: columns in other tables named ``<table_name>_id``.

        This is the name-based foreign key heuristic; no catalog constraints
        are consulted.
        """
        target = f"{table_name.lower()}_id"
        return [
            column
            for table in self.tables
            if table.name.lower() != table_name.lower()
            for column in table.columns
            if column.name.lower() == target
        ]


EMPTY_SCHEMA = Schema()


def is_key_column(name: str) -> bool:
    """Guess whether a column is a primary or foreign key from its name."""
    name_lower = name.lower()
    return name_lower == "id" or name_lower.endswith("_id") or "key" in name_lower


def is_join_key(name: str) -> bool:
    """Guess whether a column is usable on either side of a join predicate."""
    name_lower = name.lower()
    return name_lower == "id" or name_lower.endswith("_id")


def _column_from_raw(raw: Any, table_name: str) -> Column | None:
    if isinstance(raw, Column):
        return Column(name=raw.name, type=raw.type, table=table_name)
    if isinstance(raw, str):
        return Column(name=raw, table=table_name) if raw else None
    if isinstance(raw, Mapping):
        name = raw.get("name")
        if not isinstance(name, str) or not name:
            return None
        column_type = raw.get("type")
        if column_type is None:
            column_type = raw.get("data_type")
        return Column(
            name=name,
            type=str(column_type) if column_type is not None else "",
            table=table_name,
        )
    # Adapter-style objects exposing name/data_type attributes
    name = getattr(raw, "name", None)
    if isinstance(name, str) and name:
        column_type = getattr(raw, "type", None) or getattr(raw, "data_type", None)
        return Column(name=name, type=str(column_type) if column_type else "", table=table_name)
    return None


def _table_from_raw(raw: Any) -> Table | None:
    if isinstance(raw, Table):
        name = raw.name
        raw_columns: Any = raw.columns
    elif isinstance(raw, Mapping):
        name = raw.get("name")
        raw_columns = raw.get("columns") or ()
    else:
        return None

    if not isinstance(name, str) or not name:
        return None
    if isinstance(raw_columns, (str, bytes)) or not isinstance(raw_columns, Iterable):
        raw_columns = ()

    columns: list[Column] = []
    seen: set[str] = set()
    for raw_column in raw_columns:
        column = _column_from_raw(raw_column, name)
        if column is None or column.name.lower() in seen:
            continue
        seen.add(column.name.lower())
        columns.append(column)

    return Table(name=name, columns=tuple(columns))


def load_schema(raw: Any) -> Schema:
    """Normalize a raw schema payload into a ``Schema``.

    Accepts ``None``, a single table mapping, a list of table mappings, a
    ``Schema``, or ``Table`` objects. Malformed entries are skipped; this
    function never raises for bad input.

    Args:
        raw: Payload as returned by a schema service

    Returns:
        The normalized schema (possibly empty)
    """
    if raw is None:
        return EMPTY_SCHEMA
    if isinstance(raw, Schema):
        return raw
    if isinstance(raw, Mapping) and "name" not in raw and "tables" in raw:
        # {"tables": [...]} envelope
        return load_schema(raw["tables"])
    if isinstance(raw, (Mapping, Table)):
        raw_tables: Iterable[Any] = [raw]
    elif isinstance(raw, (str, bytes)) or not isinstance(raw, Iterable):
        return EMPTY_SCHEMA
    else:
        raw_tables = raw

    tables: list[Table] = []
    seen: set[str] = set()
    for raw_table in raw_tables:
        table = _table_from_raw(raw_table)
        if table is None or table.name.lower() in seen:
            continue
        seen.add(table.name.lower())
        tables.append(table)

    if not tables:
        return EMPTY_SCHEMA
    return Schema(tables=tuple(tables))
