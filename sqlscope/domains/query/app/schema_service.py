"""Schema services that feed table and column metadata to completion.

A schema service fetches the raw schema for a connection and notifies
subscribers when that schema becomes stale. Fetching is async; the
completion engine itself never performs I/O.
"""

from __future__ import annotations

import asyncio
import json
import sqlite3
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from sqlscope.domains.query.app.exceptions import SchemaLoadError

InvalidationCallback = Callable[[str], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class SchemaService(Protocol):
    """Protocol for schema sources consumed by the completion provider."""

    async def fetch_schema(self, connection_id: str) -> Any:
        """Fetch the raw schema for a connection.

        Args:
            connection_id: Connection identifier.

        Returns:
            A table mapping, a list of table mappings, or None.
        """
        ...

    def on_schema_invalidated(self, connection_id: str, callback: InvalidationCallback) -> Unsubscribe:
        """Register a callback fired when the connection's schema changes.

        Returns:
            A callable that removes the registration.
        """
        ...


class _InvalidationRegistry:
    """Shared callback bookkeeping for schema services."""

    def __init__(self) -> None:
        self._callbacks: dict[str, list[InvalidationCallback]] = {}

    def on_schema_invalidated(self, connection_id: str, callback: InvalidationCallback) -> Unsubscribe:
        self._callbacks.setdefault(connection_id, []).append(callback)

        def unsubscribe() -> None:
            callbacks = self._callbacks.get(connection_id, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def invalidate(self, connection_id: str) -> None:
        """Notify subscribers that the connection's schema is stale."""
        for callback in list(self._callbacks.get(connection_id, [])):
            callback(connection_id)


class StaticSchemaService(_InvalidationRegistry):
    """In-memory schema service, mainly for embedding and tests."""

    def __init__(self, schemas: dict[str, Any] | None = None) -> None:
        super().__init__()
        self._schemas: dict[str, Any] = dict(schemas or {})

    async def fetch_schema(self, connection_id: str) -> Any:
        return self._schemas.get(connection_id)

    def set_schema(self, connection_id: str, raw_schema: Any) -> None:
        """Replace a connection's schema and notify subscribers."""
        self._schemas[connection_id] = raw_schema
        self.invalidate(connection_id)


class JSONSchemaService(_InvalidationRegistry):
    """Schema service reading raw schema payloads from JSON files.

    ``path`` is either a single JSON file used for every connection, or a
    directory holding ``<connection_id>.json`` files.
    """

    def __init__(self, path: Path | str) -> None:
        super().__init__()
        self._path = Path(path).expanduser()

    def _file_for(self, connection_id: str) -> Path:
        if self._path.is_dir():
            return self._path / f"{connection_id}.json"
        return self._path

    def _read(self, file_path: Path) -> Any:
        if not file_path.exists():
            raise SchemaLoadError(str(file_path), "file not found")
        try:
            with open(file_path, encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SchemaLoadError(str(file_path), f"invalid JSON ({e})") from e
        except OSError as e:
            raise SchemaLoadError(str(file_path), str(e)) from e

    async def fetch_schema(self, connection_id: str) -> Any:
        return await asyncio.to_thread(self._read, self._file_for(connection_id))


class SQLiteSchemaService(_InvalidationRegistry):
    """Schema service introspecting SQLite database files.

    Connection ids are ignored unless ``databases`` maps them to files; by
    default every connection reads ``file_path``.
    """

    def __init__(self, file_path: Path | str | None = None, databases: dict[str, str] | None = None) -> None:
        super().__init__()
        self._file_path = Path(file_path).expanduser() if file_path else None
        self._databases = {key: Path(value).expanduser() for key, value in (databases or {}).items()}

    @staticmethod
    def _quote_identifier(name: str) -> str:
        escaped = name.replace('"', '""')
        return f'"{escaped}"'

    def _resolve(self, connection_id: str) -> Path:
        file_path = self._databases.get(connection_id, self._file_path)
        if file_path is None:
            raise SchemaLoadError(connection_id, "no database file configured")
        if not file_path.exists():
            raise SchemaLoadError(str(file_path), "file not found")
        return file_path

    def _introspect(self, file_path: Path) -> list[dict[str, Any]]:
        try:
            conn = sqlite3.connect(f"{file_path.resolve().as_uri()}?mode=ro", uri=True)
        except sqlite3.Error as e:
            raise SchemaLoadError(str(file_path), str(e)) from e
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type IN ('table', 'view') "
                "AND name NOT LIKE 'sqlite_%' ORDER BY name"
            )
            tables = []
            for (table_name,) in cursor.fetchall():
                # PRAGMA table_info returns: cid, name, type, notnull, dflt_value, pk
                cursor.execute(f"PRAGMA table_info({self._quote_identifier(table_name)})")
                columns = [{"name": row[1], "type": row[2] or ""} for row in cursor.fetchall()]
                tables.append({"name": table_name, "columns": columns})
            return tables
        except sqlite3.Error as e:
            raise SchemaLoadError(str(file_path), str(e)) from e
        finally:
            conn.close()

    async def fetch_schema(self, connection_id: str) -> Any:
        file_path = self._resolve(connection_id)
        return await asyncio.to_thread(self._introspect, file_path)
