"""Tests for the sqlscope CLI."""

from __future__ import annotations

import io
import json

import pytest
from rich.console import Console

from sqlscope.cli import build_parser, main
from sqlscope.domains.query.app.schema_service import StaticSchemaService
from sqlscope.domains.query.cli.commands import cmd_complete, cmd_schema
from sqlscope.domains.shell.store.settings import CompletionSettings

SCHEMA = [
    {
        "name": "users",
        "columns": [
            {"name": "id", "type": "INTEGER"},
            {"name": "username", "type": "TEXT"},
        ],
    },
    {"name": "orders", "columns": [{"name": "id", "type": "INTEGER"}, {"name": "total", "type": "REAL"}]},
]


@pytest.fixture
def service():
    return StaticSchemaService({"default": SCHEMA})


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200)


def _args(*argv):
    return build_parser().parse_args(list(argv))


class TestParser:
    """Tests for argument parsing."""

    def test_complete_defaults(self):
        args = _args("complete", "-q", "SELECT ")
        assert args.command == "complete"
        assert args.cursor is None
        assert args.filter is True
        assert args.format == "table"

    def test_schema_sources_exclusive(self):
        with pytest.raises(SystemExit):
            _args("complete", "--schema", "a.json", "--sqlite", "a.db")

    def test_no_filter(self):
        assert _args("complete", "--no-filter").filter is False


class TestCompleteCommand:
    """Tests for the complete command."""

    def test_json_output(self, service, capsys):
        args = _args("complete", "-q", "SELECT * FROM us", "--format", "json")
        assert cmd_complete(args, schema_service=service, settings=CompletionSettings()) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["range"] == [14, 16]
        first = payload["candidates"][0]
        assert first["label"] == "users"
        assert first["kind"] == "table"
        assert first["sort_key"] == "0|users"
        assert first["range"] == [14, 16]

    def test_cursor_and_limit(self, service, capsys):
        args = _args("complete", "-q", "SELECT * FROM orders WHERE ", "--cursor", "27", "--limit", "2", "--format", "json")
        assert cmd_complete(args, schema_service=service, settings=CompletionSettings()) == 0
        labels = [c["label"] for c in json.loads(capsys.readouterr().out)["candidates"]]
        assert labels == ["orders.id = ", "orders.total = "]

    def test_max_results_setting(self, service, capsys):
        args = _args("complete", "-q", "SELECT ", "--no-filter", "--format", "json")
        cmd_complete(args, schema_service=service, settings=CompletionSettings(max_results=4))
        assert len(json.loads(capsys.readouterr().out)["candidates"]) == 4

    def test_table_output(self, service, console):
        args = _args("complete", "-q", "INSERT INTO ")
        assert cmd_complete(args, schema_service=service, settings=CompletionSettings(), console=console) == 0
        output = console.file.getvalue()
        assert "users (id, username) VALUES (?, ?)" in output
        assert "statement" in output

    def test_read_from_file(self, service, tmp_path, capsys):
        sql_file = tmp_path / "query.sql"
        sql_file.write_text("SELECT * FROM users WHERE users.", encoding="utf-8")
        args = _args("complete", "-f", str(sql_file), "--format", "json")
        assert cmd_complete(args, schema_service=service, settings=CompletionSettings()) == 0
        kinds = {c["label"]: c["kind"] for c in json.loads(capsys.readouterr().out)["candidates"]}
        assert kinds["username"] == "column"

    def test_missing_file(self, service, tmp_path, capsys):
        args = _args("complete", "-f", str(tmp_path / "nope.sql"))
        assert cmd_complete(args, schema_service=service) == 1
        assert "not found" in capsys.readouterr().err

    def test_cursor_out_of_range(self, service, capsys):
        args = _args("complete", "-q", "SELECT", "--cursor", "99")
        assert cmd_complete(args, schema_service=service) == 1
        assert "outside the text" in capsys.readouterr().err

    def test_schema_load_error(self, tmp_path, capsys):
        args = _args("complete", "--schema", str(tmp_path / "missing.json"), "-q", "SELECT ")
        assert cmd_complete(args, settings=CompletionSettings()) == 1
        assert "Could not load schema" in capsys.readouterr().err

    def test_empty_schema_still_completes(self, capsys):
        args = _args("complete", "-q", "SEL", "--format", "json")
        assert cmd_complete(args, schema_service=StaticSchemaService(), settings=CompletionSettings()) == 0
        labels = [c["label"] for c in json.loads(capsys.readouterr().out)["candidates"]]
        assert "SELECT" in labels


class TestSchemaCommand:
    """Tests for the schema command."""

    def test_lists_tables(self, service, console):
        assert cmd_schema(_args("schema"), schema_service=service, console=console) == 0
        output = console.file.getvalue()
        assert "users" in output
        assert "total REAL" in output

    def test_empty(self, console):
        assert cmd_schema(_args("schema"), schema_service=StaticSchemaService(), console=console) == 0
        assert "No tables found." in console.file.getvalue()


class TestMain:
    """Tests for the entry point."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_complete_with_json_schema(self, tmp_path, monkeypatch, capsys):
        settings_path = tmp_path / "settings.json"
        settings_path.write_text(json.dumps({"autocomplete_max_results": 3}), encoding="utf-8")
        monkeypatch.setenv("SQLSCOPE_SETTINGS_PATH", str(settings_path))

        schema_path = tmp_path / "schema.json"
        schema_path.write_text(json.dumps(SCHEMA), encoding="utf-8")

        argv = ["--settings", str(settings_path), "complete", "--schema", str(schema_path)]
        argv += ["-q", "SELECT * FROM ", "--format", "json"]
        assert main(argv) == 0

        labels = [c["label"] for c in json.loads(capsys.readouterr().out)["candidates"]]
        assert labels == ["orders", "users", "id"]

    def test_schema_from_sqlite(self, tmp_path, capsys):
        import sqlite3

        db_path = tmp_path / "app.db"
        conn = sqlite3.connect(db_path)
        conn.execute("CREATE TABLE widgets (id INTEGER, label TEXT)")
        conn.commit()
        conn.close()

        assert main(["schema", "--sqlite", str(db_path)]) == 0
        assert "widgets" in capsys.readouterr().out
