"""Editor-facing completion provider.

Adapts the completion engine to an editor host: UTF-16 cursor offsets in,
ranked candidates out, and a schema that follows the Schema Service.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import TYPE_CHECKING

from textual import log

from .completion import CompletionEngine
from .core import TextRange
from .ranking import CompletionResult
from .schema import Schema, load_schema
from .select import DEFAULT_PREVIEW_COLUMNS

if TYPE_CHECKING:
    from sqlscope.domains.query.app.schema_service import SchemaService, Unsubscribe
    from sqlscope.domains.shell.store.settings import CompletionSettings

TRIGGER_CHARACTERS = frozenset({" ", ".", ",", "(", "\n"})


def utf16_to_index(text: str, offset: int) -> int:
    """Convert a UTF-16 code unit offset into a Python string index.

    Offsets past the end clamp to ``len(text)``; an offset that falls inside
    a surrogate pair resolves to the start of that character.
    """
    if offset <= 0:
        return 0
    units = 0
    for index, char in enumerate(text):
        width = 2 if ord(char) > 0xFFFF else 1
        if units + width > offset:
            return index
        units += width
    return len(text)


def index_to_utf16(text: str, index: int) -> int:
    """Convert a Python string index into a UTF-16 code unit offset."""
    index = max(0, min(index, len(text)))
    return index + sum(1 for char in text[:index] if ord(char) > 0xFFFF)


def _range_to_utf16(text: str, text_range: TextRange) -> TextRange:
    return TextRange(index_to_utf16(text, text_range.start), index_to_utf16(text, text_range.end))


class SchemaCompletionProvider:
    """Completion provider for one connection.

    The schema is fetched from the Schema Service out of band. A failed fetch
    keeps the last good schema (empty before the first success), so
    completion keeps working with keywords and snippets.
    """

    trigger_characters = TRIGGER_CHARACTERS

    def __init__(
        self,
        schema_service: SchemaService,
        connection_id: str,
        settings: CompletionSettings | None = None,
    ) -> None:
        preview_columns = settings.preview_columns if settings else DEFAULT_PREVIEW_COLUMNS
        self._service = schema_service
        self._connection_id = connection_id
        self._engine = CompletionEngine(preview_columns=preview_columns)
        self._unsubscribe: Unsubscribe | None = None
        self._refresh_token = 0
        self._refresh_task: asyncio.Task[bool] | None = None

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def schema(self) -> Schema:
        return self._engine.schema

    def should_trigger(self, char: str) -> bool:
        """Whether typing ``char`` should re-request completions."""
        return char in self.trigger_characters

    def provide_completions(self, text: str, cursor_offset: int) -> CompletionResult:
        """Compute completions for an editor position.

        Args:
            text: Full document text
            cursor_offset: Cursor position in UTF-16 code units

        Returns:
            CompletionResult whose ranges are UTF-16 code unit offsets
        """
        cursor_pos = utf16_to_index(text, cursor_offset)
        result = self._engine.complete(text, cursor_pos)

        candidates = [
            replace(candidate, range=_range_to_utf16(text, candidate.range))
            if candidate.range is not None
            else candidate
            for candidate in result.candidates
        ]
        return CompletionResult(candidates=candidates, range=_range_to_utf16(text, result.range))

    async def refresh(self) -> bool:
        """Fetch the schema and swap it in.

        Returns:
            True if the schema was replaced, False if the fetch failed or a
            newer refresh superseded this one.
        """
        self._refresh_token += 1
        token = self._refresh_token
        try:
            raw_schema = await self._service.fetch_schema(self._connection_id)
        except Exception as error:
            log.error(f"Error loading schema for {self._connection_id}: {error}")
            return False

        if token != self._refresh_token:
            return False

        schema = load_schema(raw_schema)
        self._engine.set_schema(schema)
        log.info(f"Loaded schema for {self._connection_id}: {len(schema.tables)} tables")
        return True

    def attach(self) -> None:
        """Subscribe to schema invalidation for this connection."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._service.on_schema_invalidated(
            self._connection_id, self._on_schema_invalidated
        )

    def detach(self) -> None:
        """Stop following schema invalidation."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_schema_invalidated(self, connection_id: str) -> None:
        log.info(f"Schema invalidated for {connection_id}, reloading")
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self.refresh())
            return
        self._refresh_task = loop.create_task(self.refresh())
