"""Shared repository helpers and error hierarchy.

Updates:
  v0.2.0 - 2026-09-03 - Trim helpers down to what the key-value store needs.
  v0.1.0 - 2026-08-24 - Extract logger, connection helpers, and exceptions.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing, contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

logger = logging.getLogger("promptdeck.repository")


class RepositoryError(Exception):
    """Base exception for repository failures."""


def ensure_directory(path: Path) -> None:
    """Ensure the directory for the SQLite database exists."""
    path.parent.mkdir(parents=True, exist_ok=True)


def connect(db_path: Path) -> sqlite3.Connection:
    """Return a configured SQLite connection."""
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL;")
    conn.execute("PRAGMA synchronous = NORMAL;")
    return conn


@contextmanager
def transaction(db_path: Path) -> Iterator[sqlite3.Connection]:
    """Yield a connection that commits on success and is always closed."""
    with closing(connect(db_path)) as conn, conn:
        yield conn


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(UTC).isoformat()


__all__ = [
    "RepositoryError",
    "connect",
    "ensure_directory",
    "logger",
    "transaction",
    "utc_timestamp",
]
