"""Pytest fixtures for sqlscope tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

_TEST_CONFIG_DIR = Path(tempfile.mkdtemp(prefix="sqlscope-test-config-"))
os.environ.setdefault("SQLSCOPE_CONFIG_DIR", str(_TEST_CONFIG_DIR))
