"""
SQLite key-value slot for persisting the betting store document.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path

from betting_ledger.config import settings


def _resolve_path(db_path: str | None) -> str:
    return db_path or settings.DB_PATH


def _ensure_dir(db_path: str):
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)


def get_connection(db_path: str | None = None) -> sqlite3.Connection:
    path = _resolve_path(db_path)
    _ensure_dir(path)
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


@contextmanager
def get_db(db_path: str | None = None):
    conn = get_connection(db_path)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def init_db(db_path: str | None = None):
    """Create tables if they don't exist."""
    with get_db(db_path) as conn:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );
        """)


def put_value(key: str, value: str, db_path: str | None = None):
    """Write value under key, replacing whatever was there (last writer wins)."""
    with get_db(db_path) as conn:
        conn.execute("""
            INSERT INTO kv_store (key, value, updated_at)
            VALUES (?, ?, datetime('now'))
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
        """, (key, value))


def get_value(key: str, db_path: str | None = None) -> str | None:
    """Return the stored value for key, or None."""
    with get_db(db_path) as conn:
        row = conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None


def delete_value(key: str, db_path: str | None = None) -> bool:
    """Remove key. Returns True if something was deleted."""
    with get_db(db_path) as conn:
        cursor = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        return cursor.rowcount > 0
