"""
SQLite database integration and simple migration system.

This module provides the connection factory (``get_connection``), the
startup migration runner (``init_db``) and the async helpers services
use to reach the store (``fetch_one``, ``fetch_all``, ``execute``).

Store calls run in a worker thread.  If the awaiting request task is
cancelled (client went away, server shutting down) the connection is
interrupted so the query stops, and the cancellation propagates.
"""

import asyncio
import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Generic, Iterator, List, Optional, Sequence, Tuple, TypeVar

from .config import settings


logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # finance_ledger_api/
    return str((base_dir / db_url).resolve())


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be read by
    name.  The connection may be handed to a worker thread, hence
    ``check_same_thread=False``; each connection is still used by one
    call at a time.
    """
    conn = sqlite3.connect(get_database_path(), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    # Foreign keys are off by default in SQLite and must be enabled per
    # connection.
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection()
    try:
        yield conn.cursor()
        conn.commit()
    finally:
        conn.close()


def _run(conn: sqlite3.Connection, operation: Callable[..., T], args: Tuple[Any, ...]) -> T:
    try:
        result = operation(conn.cursor(), *args)
        conn.commit()
        return result
    except BaseException:
        conn.rollback()
        raise
    finally:
        conn.close()


class _StoreCall(Generic[T]):
    """One store call: the worker opens the connection, the caller may interrupt it."""

    def __init__(self, operation: Callable[..., T], args: Tuple[Any, ...]) -> None:
        self.operation = operation
        self.args = args
        self.conn: Optional[sqlite3.Connection] = None
        self.cancelled = False
        self._lock = threading.Lock()

    def run(self) -> T:
        conn = get_connection()
        with self._lock:
            if self.cancelled:
                conn.close()
                raise sqlite3.OperationalError("interrupted")
            self.conn = conn
        return _run(conn, self.operation, self.args)

    def interrupt(self) -> None:
        with self._lock:
            self.cancelled = True
            conn = self.conn
        if conn is None:
            return
        try:
            conn.interrupt()
        except sqlite3.ProgrammingError:
            # The worker already finished and closed the connection.
            pass


async def run_in_store(operation: Callable[..., T], *args: Any) -> T:
    """Run ``operation(cursor, *args)`` on a fresh connection in a worker thread.

    Opening the connection happens in the worker too, so the event loop
    never blocks on SQLite.
    """
    call = _StoreCall(operation, args)
    try:
        return await asyncio.to_thread(call.run)
    except asyncio.CancelledError:
        logger.info("Store call cancelled; interrupting query")
        call.interrupt()
        raise


def _fetch_one(cursor: sqlite3.Cursor, sql: str, params: Sequence[Any]) -> Optional[sqlite3.Row]:
    return cursor.execute(sql, tuple(params)).fetchone()


def _fetch_all(cursor: sqlite3.Cursor, sql: str, params: Sequence[Any]) -> List[sqlite3.Row]:
    return cursor.execute(sql, tuple(params)).fetchall()


def _execute(cursor: sqlite3.Cursor, sql: str, params: Sequence[Any]) -> Tuple[int, int]:
    cursor.execute(sql, tuple(params))
    return cursor.lastrowid, cursor.rowcount


async def fetch_one(sql: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
    return await run_in_store(_fetch_one, sql, params)


async def fetch_all(sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
    return await run_in_store(_fetch_all, sql, params)


async def execute(sql: str, params: Sequence[Any] = ()) -> Tuple[int, int]:
    """Execute a write statement and return ``(lastrowid, rowcount)``."""
    return await run_in_store(_execute, sql, params)


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any newer migrations in order.
    To change the schema, append a migration with the next version
    number; never edit an applied one.
    """
    migrations: list[tuple[int, str]] = [
        # Migration 1: Initial schema
        (
            1,
            """
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE,
                password TEXT NOT NULL,
                email TEXT NOT NULL UNIQUE,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS categories (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                title TEXT NOT NULL,
                type TEXT NOT NULL,
                description TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY(user_id) REFERENCES users(id)
            );

            CREATE TABLE IF NOT EXISTS accounts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                category_id INTEGER NOT NULL,
                title TEXT NOT NULL,
                type TEXT NOT NULL,
                description TEXT NOT NULL,
                value INTEGER NOT NULL,
                date DATE NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY(user_id) REFERENCES users(id),
                FOREIGN KEY(category_id) REFERENCES categories(id)
            );
            """,
        ),
        # Migration 2: indices for the list filters
        (
            2,
            """
            CREATE INDEX IF NOT EXISTS idx_categories_user_type ON categories(user_id, type);
            CREATE INDEX IF NOT EXISTS idx_accounts_user_type ON accounts(user_id, type);
            CREATE INDEX IF NOT EXISTS idx_accounts_category_id ON accounts(category_id);
            """,
        ),
    ]

    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in migrations:
            if version > current_version:
                logger.info("Applying migration %d", version)
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
