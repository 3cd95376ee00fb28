"""JSON document stores kept under the sqlscope config directory."""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from textual import log

# Overridable so tests never touch the real home directory
CONFIG_DIR = Path(os.environ.get("SQLSCOPE_CONFIG_DIR", Path.home() / ".sqlscope"))


class JSONFileStore:
    """A JSON object persisted in a single file.

    Reading never raises: a missing, unreadable or non-object file loads as
    an empty dict. Writes replace the file in one rename and leave it
    readable by the owner only.
    """

    def __init__(self, file_path: Path | str):
        self._file_path = Path(file_path).expanduser()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def exists(self) -> bool:
        return self._file_path.is_file()

    def read(self) -> dict[str, Any]:
        try:
            text = self._file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            log.warning(f"Could not read {self._file_path}: {e}")
            return {}

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            log.warning(f"Ignoring malformed JSON in {self._file_path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def write(self, data: Mapping[str, Any]) -> None:
        """Serialize ``data`` and swap it in place of the current file."""
        directory = self._file_path.parent
        directory.mkdir(mode=0o700, parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{self._file_path.stem}-", suffix=".tmp")
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(dict(data), f, indent=2, sort_keys=True)
                f.write("\n")
            tmp_path.chmod(0o600)
            tmp_path.replace(self._file_path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
