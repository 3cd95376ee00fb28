"""Tests for the completion schema model."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from sqlscope.domains.query.completion import (
    EMPTY_SCHEMA,
    Column,
    Schema,
    Table,
    is_join_key,
    is_key_column,
    load_schema,
)


class TestLoadSchema:
    """Tests for normalizing raw schema payloads."""

    def test_single_table_object(self):
        """A single table mapping becomes a one-table schema."""
        schema = load_schema({"name": "users", "columns": [{"name": "id", "type": "INTEGER"}]})
        assert schema.table_names() == ["users"]
        assert schema.tables[0].columns == (Column(name="id", type="INTEGER", table="users"),)

    def test_list_of_tables_keeps_order(self, schema):
        """Tables keep the order they were delivered in."""
        assert schema.table_names() == ["users", "orders", "posts"]

    def test_columns_know_their_table(self, schema):
        """Each column records its owning table for qualified rendering."""
        orders = schema.find_table("orders")
        assert orders is not None
        assert all(column.table == "orders" for column in orders.columns)
        assert orders.columns[1].qualified_name == "orders.customer_id"

    def test_missing_type_defaults_to_empty(self):
        """Unknown or missing column types become an empty string."""
        schema = load_schema({"name": "t", "columns": [{"name": "a"}, {"name": "b", "type": None}]})
        assert [c.type for c in schema.tables[0].columns] == ["", ""]

    def test_data_type_key_is_accepted(self):
        """Adapter-style ``data_type`` keys are read as the column type."""
        schema = load_schema([{"name": "t", "columns": [{"name": "a", "data_type": "TEXT"}]}])
        assert schema.find_column("t", "a").type == "TEXT"

    def test_bare_string_columns(self):
        """Columns may be given as plain names."""
        schema = load_schema({"name": "t", "columns": ["a", "b"]})
        assert schema.tables[0].column_names == ["a", "b"]

    def test_tables_envelope(self):
        """A {"tables": [...]} envelope is unwrapped."""
        schema = load_schema({"tables": [{"name": "t", "columns": []}]})
        assert schema.table_names() == ["t"]

    @pytest.mark.parametrize("raw", [None, [], "users", 42, [None, 1, "x"], {"columns": []}])
    def test_garbage_never_raises(self, raw):
        """Malformed payloads produce an empty schema instead of an error."""
        assert load_schema(raw).is_empty

    def test_entries_without_names_are_skipped(self):
        """Tables and columns lacking a name are dropped."""
        schema = load_schema(
            [
                {"columns": [{"name": "a"}]},
                {"name": "t", "columns": [{"type": "TEXT"}, {"name": "b"}]},
            ]
        )
        assert schema.table_names() == ["t"]
        assert schema.tables[0].column_names == ["b"]

    def test_duplicates_keep_first(self):
        """Duplicate table and column names keep the first occurrence."""
        schema = load_schema(
            [
                {"name": "t", "columns": [{"name": "a", "type": "INT"}, {"name": "A", "type": "TEXT"}]},
                {"name": "T", "columns": []},
            ]
        )
        assert schema.table_names() == ["t"]
        assert schema.tables[0].columns == (Column(name="a", type="INT", table="t"),)

    def test_schema_passthrough(self, schema):
        """An existing Schema is returned unchanged."""
        assert load_schema(schema) is schema

    def test_columns_without_list(self):
        """A table whose columns value is not a list has no columns."""
        schema = load_schema({"name": "t", "columns": "oops"})
        assert schema.tables[0].columns == ()


class TestLookups:
    """Tests for case-insensitive lookups."""

    def test_find_table_case_insensitive(self, schema):
        """Lookup ignores case but the table keeps its original name."""
        table = schema.find_table("USERS")
        assert table is not None
        assert table.name == "users"

    def test_find_table_missing(self, schema):
        """Unknown tables return None."""
        assert schema.find_table("nope") is None

    def test_find_column(self, schema):
        """Columns are found by table and column name."""
        column = schema.find_column("Orders", "TOTAL")
        assert column is not None
        assert column.name == "total"
        assert column.type == "DECIMAL(10,2)"

    def test_find_column_unknown_table(self, schema):
        """Column lookup on an unknown table returns None."""
        assert schema.find_column("nope", "id") is None

    def test_resolve_prefers_table_over_alias(self, schema):
        """A real table name wins over an alias of the same spelling."""
        table = schema.resolve("posts", {"posts": "users"})
        assert table is not None
        assert table.name == "posts"

    def test_resolve_alias(self, schema):
        """Aliases resolve through the alias map."""
        table = schema.resolve("U", {"u": "users"})
        assert table is not None
        assert table.name == "users"

    def test_resolve_empty_name(self, schema):
        """An empty name never resolves."""
        assert schema.resolve("", {"": "users"}) is None

    def test_find_referencing_columns(self):
        """Reverse lookup finds <table>_id columns in other tables."""
        schema = load_schema(
            [
                {"name": "user", "columns": ["id"]},
                {"name": "post", "columns": ["id", "USER_ID"]},
                {"name": "comment", "columns": ["id", "user_id", "post_id"]},
            ]
        )
        refs = schema.find_referencing_columns("User")
        assert [(c.table, c.name) for c in refs] == [("post", "USER_ID"), ("comment", "user_id")]

    def test_referencing_columns_match_table_name_exactly(self, schema):
        """The heuristic does not singularize table names."""
        assert schema.find_referencing_columns("users") == []


class TestImmutability:
    """The schema is replaced wholesale, never mutated."""

    def test_schema_is_frozen(self, schema):
        with pytest.raises(FrozenInstanceError):
            schema.tables = ()

    def test_table_is_frozen(self):
        table = Table(name="t")
        with pytest.raises(FrozenInstanceError):
            table.name = "u"

    def test_empty_schema(self):
        assert EMPTY_SCHEMA.is_empty
        assert Schema().table_names() == []


class TestKeyHeuristics:
    """Tests for the name-based key heuristics."""

    @pytest.mark.parametrize("name", ["id", "ID", "user_id", "api_key", "keyword", "Customer_ID"])
    def test_key_columns(self, name):
        assert is_key_column(name)

    @pytest.mark.parametrize("name", ["total", "title", "identity_name"])
    def test_non_key_columns(self, name):
        assert not is_key_column(name)

    @pytest.mark.parametrize("name,expected", [("id", True), ("user_id", True), ("api_key", False), ("ids", False)])
    def test_join_keys(self, name, expected):
        assert is_join_key(name) is expected
