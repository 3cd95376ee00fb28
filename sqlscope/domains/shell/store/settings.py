"""User settings, including the autocomplete options."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from sqlscope.domains.query.completion.select import DEFAULT_PREVIEW_COLUMNS
from sqlscope.shared.core.store import CONFIG_DIR, JSONFileStore

SETTINGS_PATH_ENV = "SQLSCOPE_SETTINGS_PATH"

PREVIEW_COLUMNS_KEY = "autocomplete_select_preview_columns"
MAX_RESULTS_KEY = "autocomplete_max_results"
DEFAULT_MAX_RESULTS = 50


def settings_path() -> Path:
    """Location of settings.json, honouring ``SQLSCOPE_SETTINGS_PATH``."""
    override = os.environ.get(SETTINGS_PATH_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return CONFIG_DIR / "settings.json"


@dataclass(frozen=True)
class CompletionSettings:
    """Autocomplete options.

    Attributes:
        preview_columns: Columns named in the label of a
            ``col1, col2... FROM table`` template.
        max_results: Cap applied by hosts that filter the candidate list.
    """

    preview_columns: int = DEFAULT_PREVIEW_COLUMNS
    max_results: int = DEFAULT_MAX_RESULTS

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> CompletionSettings:
        """Build from a settings dict, ignoring missing or invalid values."""
        return cls(
            preview_columns=_positive_int(settings.get(PREVIEW_COLUMNS_KEY), DEFAULT_PREVIEW_COLUMNS),
            max_results=_positive_int(settings.get(MAX_RESULTS_KEY), DEFAULT_MAX_RESULTS),
        )

    def to_settings(self) -> dict[str, int]:
        return {PREVIEW_COLUMNS_KEY: self.preview_columns, MAX_RESULTS_KEY: self.max_results}


def _positive_int(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return default
    return value


class SettingsStore(JSONFileStore):
    """The settings.json document.

    Keys this package does not know about are kept on every write, so the
    file can be shared with other tools.
    """

    def __init__(self, file_path: Path | str | None = None) -> None:
        super().__init__(file_path or settings_path())

    def get(self, key: str, default: Any = None) -> Any:
        return self.read().get(key, default)

    def update(self, **values: Any) -> dict[str, Any]:
        """Merge ``values`` into the file. A value of None removes the key.

        Returns:
            The settings as written.
        """
        settings = self.read()
        for key, value in values.items():
            if value is None:
                settings.pop(key, None)
            else:
                settings[key] = value
        self.write(settings)
        return settings

    def completion(self) -> CompletionSettings:
        return CompletionSettings.from_settings(self.read())

    def save_completion(self, completion: CompletionSettings) -> None:
        self.update(**completion.to_settings())


@lru_cache(maxsize=8)
def _store_at(path: Path) -> SettingsStore:
    return SettingsStore(path)


def get_settings_store() -> SettingsStore:
    """Shared store for the settings path currently in effect."""
    return _store_at(settings_path())


def load_settings() -> dict[str, Any]:
    return get_settings_store().read()


def save_settings(settings: dict[str, Any]) -> None:
    get_settings_store().write(settings)


def load_completion_settings() -> CompletionSettings:
    """Read the autocomplete options, falling back to defaults."""
    return get_settings_store().completion()
