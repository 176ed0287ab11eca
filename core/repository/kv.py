"""SQLite key-value table holding opaque blobs under logical keys.

Updates:
  v0.1.1 - 2026-09-10 - Add key listing for diagnostics.
  v0.1.0 - 2026-09-03 - Introduce KeyValueRepository.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from .base import (
    RepositoryError,
    ensure_directory as _ensure_directory,
    logger,
    transaction as _transaction,
    utc_timestamp as _utc_timestamp,
)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class KeyValueRepository:
    """Blocking SQLite store mapping string keys to text values.

    Every call opens its own connection so instances can be shared with
    worker threads (``asyncio.to_thread``).
    """

    def __init__(self, db_path: str | Path) -> None:
        """Initialise repository storage and ensure the schema exists."""
        self._db_path = Path(db_path)
        _ensure_directory(self._db_path)
        try:
            with _transaction(self._db_path) as conn:
                conn.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to initialise SQLite schema") from exc

    @property
    def db_path(self) -> Path:
        return self._db_path

    def get(self, key: str) -> str | None:
        """Return the value stored under *key*, or ``None`` when absent."""
        try:
            with _transaction(self._db_path) as conn:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?;", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to read key {key!r}") from exc
        return None if row is None else str(row["value"])

    def set(self, key: str, value: str) -> None:
        """Insert or replace the value stored under *key*."""
        try:
            with _transaction(self._db_path) as conn:
                conn.execute(
                    "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value, "
                    "updated_at = excluded.updated_at;",
                    (key, value, _utc_timestamp()),
                )
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to write key {key!r}") from exc
        logger.debug("Stored key", extra={"key": key, "bytes": len(value)})

    def delete(self, key: str) -> bool:
        """Remove *key*; return True when a row was deleted."""
        try:
            with _transaction(self._db_path) as conn:
                cursor = conn.execute("DELETE FROM kv_store WHERE key = ?;", (key,))
        except sqlite3.Error as exc:
            raise RepositoryError(f"Failed to delete key {key!r}") from exc
        return cursor.rowcount > 0

    def keys(self) -> list[str]:
        """Return stored keys in lexical order."""
        try:
            with _transaction(self._db_path) as conn:
                rows = conn.execute("SELECT key FROM kv_store ORDER BY key;").fetchall()
        except sqlite3.Error as exc:
            raise RepositoryError("Failed to list keys") from exc
        return [str(row["key"]) for row in rows]


__all__ = ["KeyValueRepository"]
