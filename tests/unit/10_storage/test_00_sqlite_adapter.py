# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for the SQL adapter layer."""

import pytest

from mail_dispatch.sql import SqliteAdapter, create_adapter


def test_create_adapter_paths():
    assert create_adapter("/data/mail.db").db_path == "/data/mail.db"
    assert create_adapter("mail.db").db_path == "mail.db"
    assert create_adapter("sqlite:/data/mail.db").db_path == "/data/mail.db"
    assert create_adapter("sqlite::memory:").db_path == ":memory:"
    assert create_adapter(":memory:").db_path == ":memory:"


def test_create_adapter_unknown_type():
    with pytest.raises(ValueError, match="Unknown database type"):
        create_adapter("mysql://user@host/db")


@pytest.mark.asyncio
async def test_file_database_roundtrip(tmp_path):
    adapter = SqliteAdapter(str(tmp_path / "t.db"))
    await adapter.execute_script("CREATE TABLE t (id INTEGER PRIMARY KEY AUTOINCREMENT, v TEXT)")
    first = await adapter.insert("t", {"v": "a"})
    second = await adapter.insert("t", {"v": "b"})
    assert second == first + 1
    assert await adapter.fetch_one("SELECT v FROM t WHERE id = :id", {"id": first}) == {"v": "a"}
    rows = await adapter.fetch_all("SELECT v FROM t ORDER BY id")
    assert rows == [{"v": "a"}, {"v": "b"}]
    assert await adapter.execute("DELETE FROM t WHERE v = :v", {"v": "a"}) == 1


@pytest.mark.asyncio
async def test_memory_database_survives_between_operations():
    adapter = SqliteAdapter(":memory:")
    await adapter.connect()
    try:
        await adapter.execute_script("CREATE TABLE t (v TEXT)")
        await adapter.insert("t", {"v": "kept"})
        assert await adapter.fetch_all("SELECT v FROM t") == [{"v": "kept"}]
    finally:
        await adapter.close()


@pytest.mark.asyncio
async def test_fetch_one_missing_row(tmp_path):
    adapter = SqliteAdapter(str(tmp_path / "t.db"))
    await adapter.execute_script("CREATE TABLE t (v TEXT)")
    assert await adapter.fetch_one("SELECT v FROM t") is None
