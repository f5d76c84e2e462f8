"""
SQLite backend — durable Memory.

Uses the standard sqlite3 module with WAL mode for concurrent readers.
An AUTOINCREMENT row id records first-insertion order; upserts keep the
row (and so the position), delete + insert gets a fresh, larger id.

Answers prefix queries natively, so Storage never falls back to a full
scan for this backend.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
import time
from pathlib import Path

from keystash.core.errors import StoreError
from keystash.store.base import Memory

logger = logging.getLogger(__name__)


class SQLiteMemory(Memory):
    """
    SQLite-based key-value storage.

    Usage:
        memory = SQLiteMemory("~/.keystash/data.db")
        memory.set("user/name", b'"Alex"')
        memory.get("user/name")               # b'"Alex"'
        memory.keys_with_prefix("user/")      # ["user/name"]

    The first operation opens the database; call initialize() to open it
    (and surface path errors) up front.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db: sqlite3.Connection | None = None
        self._lock = threading.Lock()
        self._closed = False

    @property
    def path(self) -> Path:
        return self._db_path

    def initialize(self) -> None:
        """Open the database and create tables."""
        with self._lock:
            self._ensure_db()

    def _ensure_db(self) -> sqlite3.Connection:
        """Open the database on first use. Caller holds the lock."""
        if self._closed:
            raise StoreError("storage is closed")
        if self._db is not None:
            return self._db

        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            db = sqlite3.connect(str(self._db_path), check_same_thread=False)
            db.execute("PRAGMA journal_mode=WAL")
            db.execute("PRAGMA synchronous=NORMAL")
            db.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    id         INTEGER PRIMARY KEY AUTOINCREMENT,
                    key        TEXT UNIQUE NOT NULL,
                    value      BLOB NOT NULL,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            db.commit()
        except (sqlite3.Error, OSError) as e:
            raise StoreError(
                f"Failed to initialize SQLite at {self._db_path}: {e}"
            ) from e

        self._db = db
        logger.debug(f"SQLite memory initialized at {self._db_path}")
        return db

    def get(self, key: str) -> bytes | None:
        with self._lock:
            db = self._ensure_db()
            try:
                row = db.execute(
                    "SELECT value FROM kv WHERE key = ?", (key,)
                ).fetchone()
            except sqlite3.Error as e:
                raise StoreError(f"Failed to get key '{key}': {e}") from e
        return bytes(row[0]) if row else None

    def set(self, key: str, value: bytes) -> None:
        now = time.time()
        with self._lock:
            db = self._ensure_db()
            try:
                db.execute(
                    """
                    INSERT INTO kv (key, value, created_at, updated_at)
                    VALUES (?, ?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value, updated_at = excluded.updated_at
                    """,
                    (key, value, now, now),
                )
                db.commit()
            except sqlite3.Error as e:
                raise StoreError(f"Failed to set key '{key}': {e}") from e

    def delete(self, key: str) -> bool:
        with self._lock:
            db = self._ensure_db()
            try:
                cursor = db.execute("DELETE FROM kv WHERE key = ?", (key,))
                db.commit()
            except sqlite3.Error as e:
                raise StoreError(f"Failed to delete key '{key}': {e}") from e
        return cursor.rowcount > 0

    def keys(self) -> list[str]:
        with self._lock:
            db = self._ensure_db()
            try:
                rows = db.execute("SELECT key FROM kv ORDER BY id").fetchall()
            except sqlite3.Error as e:
                raise StoreError(f"Failed to list keys: {e}") from e
        return [row[0] for row in rows]

    def keys_with_prefix(self, prefix: str) -> list[str]:
        # substr() instead of LIKE: no wildcard escaping, and it is case-sensitive
        with self._lock:
            db = self._ensure_db()
            try:
                rows = db.execute(
                    """
                    SELECT key FROM kv
                    WHERE key >= ? AND substr(key, 1, ?) = ?
                    ORDER BY key
                    """,
                    (prefix, len(prefix), prefix),
                ).fetchall()
            except sqlite3.Error as e:
                raise StoreError(
                    f"Failed to list keys with prefix '{prefix}': {e}"
                ) from e
        return [row[0] for row in rows]

    def close(self) -> None:
        with self._lock:
            self._closed = True
            if self._db is not None:
                self._db.close()
                self._db = None
