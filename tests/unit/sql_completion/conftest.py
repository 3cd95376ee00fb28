"""Shared schema fixtures for completion tests."""

from __future__ import annotations

import pytest

from sqlscope.domains.query.completion import load_schema


@pytest.fixture
def schema():
    """Sample database schema."""
    return load_schema(
        [
            {
                "name": "users",
                "columns": [
                    {"name": "id", "type": "INTEGER"},
                    {"name": "username", "type": "VARCHAR(50)"},
                    {"name": "email", "type": "VARCHAR(255)"},
                ],
            },
            {
                "name": "orders",
                "columns": [
                    {"name": "id", "type": "INTEGER"},
                    {"name": "customer_id", "type": "INTEGER"},
                    {"name": "total", "type": "DECIMAL(10,2)"},
                    {"name": "user_id", "type": "INTEGER"},
                ],
            },
            {
                "name": "posts",
                "columns": [
                    {"name": "id", "type": "INTEGER"},
                    {"name": "title", "type": "TEXT"},
                    {"name": "user_id", "type": "INTEGER"},
                ],
            },
        ]
    )


@pytest.fixture
def users_schema():
    """Single-table schema."""
    return load_schema(
        {
            "name": "users",
            "columns": [
                {"name": "id", "type": "INTEGER"},
                {"name": "username", "type": "TEXT"},
                {"name": "email", "type": "TEXT"},
            ],
        }
    )
