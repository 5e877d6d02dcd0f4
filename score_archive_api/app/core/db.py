"""
SQLite database integration, migrations and the transaction runner.

This module provides functions for obtaining a database connection
(``get_connection``), applying migrations on application start
(``init_db``) and executing a unit of work atomically
(``run_in_transaction``).  SQLite serves as the relational store; to
switch to another DBMS you would replace the connection logic and
adapt the SQL in the repositories.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import asyncio
import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional, TypeVar

from .config import settings
from .errors import Conflict, Unavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: books, scores with embedded location, contributor registry
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS books (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            annotation TEXT
        );

        -- The location columns form one embedded page locator: either all
        -- of location_book/begin_number are set or the score has no location.
        CREATE TABLE IF NOT EXISTS scores (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            grade TEXT,
            annotation TEXT,
            back_of INTEGER,
            location_book INTEGER,
            begin_prefix TEXT,
            begin_number INTEGER,
            begin_suffix TEXT,
            end_prefix TEXT,
            end_number INTEGER,
            end_suffix TEXT,
            CHECK (back_of IS NULL OR back_of <> id),
            FOREIGN KEY(back_of) REFERENCES scores(id) ON DELETE SET NULL,
            FOREIGN KEY(location_book) REFERENCES books(id)
        );

        CREATE TABLE IF NOT EXISTS composers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE
        );

        CREATE TABLE IF NOT EXISTS arrangers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE
        );

        CREATE TABLE IF NOT EXISTS publishers (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE
        );

        CREATE TABLE IF NOT EXISTS score_composers (
            score_id INTEGER NOT NULL,
            composer_id INTEGER NOT NULL,
            PRIMARY KEY (score_id, composer_id),
            FOREIGN KEY(score_id) REFERENCES scores(id) ON DELETE CASCADE,
            FOREIGN KEY(composer_id) REFERENCES composers(id)
        );

        CREATE TABLE IF NOT EXISTS score_arrangers (
            score_id INTEGER NOT NULL,
            arranger_id INTEGER NOT NULL,
            PRIMARY KEY (score_id, arranger_id),
            FOREIGN KEY(score_id) REFERENCES scores(id) ON DELETE CASCADE,
            FOREIGN KEY(arranger_id) REFERENCES arrangers(id)
        );

        CREATE TABLE IF NOT EXISTS score_publishers (
            score_id INTEGER NOT NULL,
            publisher_id INTEGER NOT NULL,
            PRIMARY KEY (score_id, publisher_id),
            FOREIGN KEY(score_id) REFERENCES scores(id) ON DELETE CASCADE,
            FOREIGN KEY(publisher_id) REFERENCES publishers(id)
        );

        CREATE TABLE IF NOT EXISTS score_genres (
            score_id INTEGER NOT NULL,
            genre TEXT NOT NULL,
            PRIMARY KEY (score_id, genre),
            FOREIGN KEY(score_id) REFERENCES scores(id) ON DELETE CASCADE
        );

        CREATE TABLE IF NOT EXISTS score_aliases (
            score_id INTEGER NOT NULL,
            alias TEXT NOT NULL,
            PRIMARY KEY (score_id, alias),
            FOREIGN KEY(score_id) REFERENCES scores(id) ON DELETE CASCADE
        );

        -- Sub-titles keep their order and may repeat, hence the position key.
        CREATE TABLE IF NOT EXISTS score_sub_titles (
            score_id INTEGER NOT NULL,
            position INTEGER NOT NULL,
            sub_title TEXT NOT NULL,
            PRIMARY KEY (score_id, position),
            FOREIGN KEY(score_id) REFERENCES scores(id) ON DELETE CASCADE
        );
        """,
    ),
    # Migration 2: indices for search ordering and book page listings
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_scores_title ON scores(title, id);
        CREATE INDEX IF NOT EXISTS idx_scores_location_book ON scores(location_book);
        CREATE INDEX IF NOT EXISTS idx_scores_back_of ON scores(back_of);
        """,
    ),
]


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path (or the special
    ``:memory:`` name), use it directly.  Otherwise resolve it relative
    to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url) or db_url == ":memory:":
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # score_archive_api/
    return str((base_dir / db_url).resolve())


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value is not None else None


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection runs in autocommit mode so that transactions are
    opened explicitly by ``run_in_transaction``.  Waiting on a locked
    database is bounded by ``settings.store_timeout_seconds``.
    """
    conn = sqlite3.connect(
        get_database_path(),
        timeout=settings.store_timeout_seconds,
        isolation_level=None,
    )
    conn.row_factory = sqlite3.Row
    # SQLite's own lower()/LIKE only fold ASCII; search needs umlauts too.
    conn.create_function("casefold", 1, _casefold, deterministic=True)
    # Foreign key support is off by default in SQLite and must be
    # enabled per connection.
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_cursor() -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit."""
    conn = get_connection()
    try:
        yield conn.cursor()
        if conn.in_transaction:
            conn.commit()
    finally:
        conn.close()


def init_db() -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version and applies every newer entry of
    ``MIGRATIONS``.  Append new migrations with an incremented version.
    """
    with get_cursor() as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                logger.info("Applied migration %s", version)
                current_version = version


def _is_busy(exc: sqlite3.OperationalError) -> bool:
    message = str(exc).lower()
    return "locked" in message or "busy" in message


async def run_in_transaction(work: Callable[[sqlite3.Cursor], T], write: bool = True) -> T:
    """Run ``work`` inside a single transaction and return its result.

    Write transactions start with ``BEGIN IMMEDIATE`` which takes the
    database write lock up front, so concurrent writers to the same
    rows are serialized by SQLite.  Any exception rolls the
    transaction back before it propagates.

    Parameters
    ----------
    work : Callable[[sqlite3.Cursor], T]
        Function executing the reads and writes of one request.  It may
        be invoked more than once when the database is busy.
    write : bool
        ``False`` for read-only work, which uses a deferred transaction.

    Raises
    ------
    Unavailable
        If the database stays locked after
        ``settings.store_retry_attempts`` attempts.
    Conflict
        If the store rejects the write with an integrity violation.
    """
    attempts = max(1, settings.store_retry_attempts)
    for attempt in range(1, attempts + 1):
        conn = get_connection()
        try:
            conn.execute("BEGIN IMMEDIATE" if write else "BEGIN")
            result = work(conn.cursor())
            conn.commit()
            return result
        except sqlite3.OperationalError as exc:
            if conn.in_transaction:
                conn.rollback()
            if not _is_busy(exc):
                raise
            logger.warning("Database busy (attempt %s/%s): %s", attempt, attempts, exc)
            if attempt == attempts:
                raise Unavailable("The archive store is temporarily unavailable") from exc
        except sqlite3.IntegrityError as exc:
            if conn.in_transaction:
                conn.rollback()
            raise Conflict(f"Write rejected by the store: {exc}") from exc
        except Exception:
            if conn.in_transaction:
                conn.rollback()
            raise
        finally:
            conn.close()
        await asyncio.sleep(settings.store_retry_backoff_seconds * attempt)
    raise Unavailable("The archive store is temporarily unavailable")
