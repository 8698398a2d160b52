from contextlib import asynccontextmanager

import pytest

from portfolio.core import migrations
from portfolio.core.settings import settings


class FakeCursor:
    def __init__(self):
        self.executed = []

    async def execute(self, sql, params=None):
        self.executed.append(sql)


class FakeConn:
    def __init__(self):
        self.committed = False

    async def commit(self):
        self.committed = True


@pytest.mark.asyncio
async def test_contact_schema_applies_bundled_sql(monkeypatch):
    cursor, conn = FakeCursor(), FakeConn()

    @asynccontextmanager
    async def _ctx():
        yield conn, cursor

    monkeypatch.setattr(migrations, "db_conn", _ctx)
    monkeypatch.setattr(settings, "contact_migration_file", None)

    assert await migrations.ensure_contact_schema() is True
    assert "CREATE TABLE IF NOT EXISTS users" in cursor.executed[0]
    assert "email TEXT NOT NULL UNIQUE" in cursor.executed[0]
    assert conn.committed is True


@pytest.mark.asyncio
async def test_contact_schema_prefers_configured_file(monkeypatch, tmp_path):
    custom = tmp_path / "custom.sql"
    custom.write_text("SELECT 1;")
    cursor, conn = FakeCursor(), FakeConn()

    @asynccontextmanager
    async def _ctx():
        yield conn, cursor

    monkeypatch.setattr(migrations, "db_conn", _ctx)
    monkeypatch.setattr(settings, "contact_migration_file", str(custom))

    assert await migrations.ensure_contact_schema() is True
    assert cursor.executed == ["SELECT 1;"]


@pytest.mark.asyncio
async def test_missing_migration_file_is_skipped(monkeypatch, tmp_path):
    monkeypatch.setattr(migrations, "_DEFAULT_SQL_PATH", tmp_path / "nope.sql")
    monkeypatch.setattr(settings, "contact_migration_file", None)

    assert await migrations.ensure_contact_schema() is False
