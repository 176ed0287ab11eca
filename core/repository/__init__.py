"""SQLite-backed repository for durable PromptDeck state.

Updates:
  v0.2.0 - 2026-09-03 - Replace relational prompt tables with a key-value store.
  v0.1.0 - 2026-08-24 - Extract base helpers.
"""

from __future__ import annotations

from .base import RepositoryError
from .kv import KeyValueRepository

__all__ = [
    "KeyValueRepository",
    "RepositoryError",
]
