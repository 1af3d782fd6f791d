"""
Tests for the store helpers: migrations, writes and cancellation.
"""

import asyncio
import sqlite3
import threading

import pytest

from finance_ledger_api.app.core import db


# Counts to a billion; only finishes if nothing interrupts it.
SLOW_QUERY = """
WITH RECURSIVE counter(n) AS (
    SELECT 1 UNION ALL SELECT n + 1 FROM counter WHERE n < 1000000000
)
SELECT COUNT(*) FROM counter
"""


@pytest.fixture
def migrated(database):
    db.init_db()
    return database


def test_init_db_is_idempotent(migrated):
    db.init_db()

    with db.get_cursor() as cursor:
        versions = [row["version"] for row in cursor.execute("SELECT version FROM migrations")]
        tables = {
            row["name"]
            for row in cursor.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        }

    assert versions == [1, 2]
    assert {"users", "categories", "accounts"} <= tables


def test_execute_commits(migrated):
    async def scenario():
        user_id, rowcount = await db.execute(
            "INSERT INTO users (username, password, email) VALUES (?, ?, ?)",
            ("bob", "hash", "bob@example.com"),
        )
        row = await db.fetch_one("SELECT username FROM users WHERE id = ?", (user_id,))
        return rowcount, row

    rowcount, row = asyncio.run(scenario())

    assert rowcount == 1
    assert row["username"] == "bob"


def test_failed_write_raises_sqlite_error(migrated):
    async def scenario():
        await db.execute(
            "INSERT INTO users (username, password, email) VALUES (?, ?, ?)",
            ("bob", "hash", "bob@example.com"),
        )
        await db.execute(
            "INSERT INTO users (username, password, email) VALUES (?, ?, ?)",
            ("bob", "hash", "other@example.com"),
        )

    with pytest.raises(sqlite3.IntegrityError):
        asyncio.run(scenario())


def test_cancelled_call_interrupts_query(migrated):
    async def scenario():
        await asyncio.wait_for(db.fetch_one(SLOW_QUERY), timeout=0.2)

    # asyncio.run waits for the worker thread on shutdown, so this only
    # returns promptly if the query was interrupted.
    with pytest.raises(asyncio.TimeoutError):
        asyncio.run(scenario())


def test_connection_is_opened_off_the_event_loop(migrated, monkeypatch):
    opened_on = []
    original = db.get_connection

    def recording_connection():
        opened_on.append(threading.get_ident())
        return original()

    monkeypatch.setattr(db, "get_connection", recording_connection)

    row = asyncio.run(db.fetch_one("SELECT 1 AS one"))

    assert row["one"] == 1
    assert opened_on and threading.get_ident() not in opened_on
