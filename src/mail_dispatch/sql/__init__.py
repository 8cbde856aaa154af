# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Minimal async SQL layer with adapter pattern.

Usage:
    adapter = create_adapter("/data/mail_dispatch.db")  # SQLite (path)
    adapter = create_adapter("sqlite::memory:")         # in-memory SQLite

    await adapter.connect()
    rows = await adapter.fetch_all(
        "SELECT * FROM mail_logs WHERE status = :status",
        {"status": "error"}
    )
    await adapter.close()
"""

from .base import DbAdapter
from .sqlite import SqliteAdapter

__all__ = [
    "DbAdapter",
    "SqliteAdapter",
    "create_adapter",
]


def create_adapter(connection_string: str) -> DbAdapter:
    """Create database adapter from connection string.

    Connection string formats:
        - "sqlite:/path/to/db.sqlite", "/path/to/db.sqlite" or "db.sqlite"
        - "sqlite::memory:" or ":memory:" for in-memory SQLite

    Args:
        connection_string: Database connection string.

    Returns:
        Configured DbAdapter instance.

    Raises:
        ValueError: If the database type is not supported.
    """
    if ":" not in connection_string or connection_string == ":memory:":
        return SqliteAdapter(connection_string)

    db_type, connection_info = connection_string.split(":", 1)
    if db_type.lower() == "sqlite":
        return SqliteAdapter(connection_info)

    raise ValueError(
        f"Unknown database type: '{db_type}'. "
        "Supported: sqlite"
    )
