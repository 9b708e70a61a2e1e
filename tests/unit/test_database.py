"""Unit tests for migration handling."""

from unittest.mock import AsyncMock

import pytest

from login_api import database
from login_api.database import MIGRATIONS_DIR, health_check, run_migrations


class _Acquire:
    def __init__(self, conn):
        self._conn = conn

    async def __aenter__(self):
        return self._conn

    async def __aexit__(self, *args):
        pass


class MockPool:
    def __init__(self):
        self.conn = AsyncMock()

    def acquire(self):
        return _Acquire(self.conn)


async def test_applies_sql_files_in_name_order(tmp_path):
    (tmp_path / "002_second.sql").write_text("SELECT 2;")
    (tmp_path / "001_first.sql").write_text("SELECT 1;")
    pool = MockPool()

    applied = await run_migrations(pool, migrations_dir=tmp_path)

    assert applied == 2
    executed = [c.args[0] for c in pool.conn.execute.call_args_list]
    assert executed == ["SELECT 1;", "SELECT 2;"]


async def test_empty_directory_applies_nothing(tmp_path):
    pool = MockPool()

    assert await run_migrations(pool, migrations_dir=tmp_path) == 0
    pool.conn.execute.assert_not_awaited()


async def test_failure_propagates(tmp_path):
    (tmp_path / "001_bad.sql").write_text("NOT SQL")
    pool = MockPool()
    pool.conn.execute.side_effect = RuntimeError("syntax error")

    with pytest.raises(RuntimeError):
        await run_migrations(pool, migrations_dir=tmp_path)


async def test_requires_pool(monkeypatch):
    monkeypatch.setattr(database, "_pool", None)

    with pytest.raises(RuntimeError, match="not initialized"):
        await run_migrations()


def test_users_migration_enforces_unique_email():
    sql = (MIGRATIONS_DIR / "001_create_users.sql").read_text()
    assert "CREATE TABLE IF NOT EXISTS users" in sql
    assert "UNIQUE (email)" in sql


def test_users_migration_names_default_to_empty():
    sql = (MIGRATIONS_DIR / "001_create_users.sql").read_text()
    assert "first_name    TEXT NOT NULL DEFAULT ''" in sql
    assert "last_name     TEXT NOT NULL DEFAULT ''" in sql


async def test_health_check_true_when_database_answers():
    pool = MockPool()
    pool.conn.fetchval.return_value = 1

    assert await health_check(pool) is True
    pool.conn.fetchval.assert_awaited_once_with("SELECT 1")


async def test_health_check_false_when_database_unreachable():
    pool = MockPool()
    pool.conn.fetchval.side_effect = ConnectionRefusedError("connection refused")

    assert await health_check(pool) is False


async def test_health_check_false_without_pool(monkeypatch):
    monkeypatch.setattr(database, "_pool", None)

    assert await health_check() is False
