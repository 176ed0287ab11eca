"""Durable load/save of the prompt collection and the sync flag.

`PromptStorage` is a write-behind cache over :class:`core.repository.KeyValueRepository`.
The façade calls :meth:`PromptStorage.request_save` after every mutation and
moves on; a single flush loop writes the newest snapshot, so overlapping save
requests coalesce instead of racing (last writer wins, nothing lost within a
session). Failures are logged and never roll back in-memory state.

Usage (internal):
    >>> storage = PromptStorage(KeyValueRepository("data/promptdeck.db"))
    >>> prompts = await storage.load()
    >>> storage.request_save(prompts)
    >>> await storage.flush()

Updates:
  v0.4.0 - 2026-10-19 - Persist the local-to-remote id map between sessions.
  v0.3.0 - 2026-09-18 - Coalesce overlapping saves through a single flush loop.
  v0.2.0 - 2026-09-10 - Persist the sync-enabled flag under its own key.
  v0.1.0 - 2026-09-03 - Initial façade over the key-value repository.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

from models.prompt_model import Prompt

from ..exceptions import PersistenceError
from ..repository import RepositoryError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from ..repository import KeyValueRepository

logger = logging.getLogger("promptdeck.storage")

PROMPTS_KEY = "promptdeck.saved_prompts"
SYNC_ENABLED_KEY = "promptdeck.sync_enabled"
REMOTE_IDS_KEY = "promptdeck.remote_ids"

__all__ = ["PROMPTS_KEY", "REMOTE_IDS_KEY", "SYNC_ENABLED_KEY", "PromptStorage"]


def _decode_prompts(raw: str) -> list[Prompt]:
    try:
        payload: Any = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PersistenceError("Stored prompt collection is not valid JSON") from exc
    if not isinstance(payload, list):
        raise PersistenceError("Stored prompt collection must be a JSON list")
    try:
        return [Prompt.from_record(item) for item in payload]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise PersistenceError(f"Stored prompt record is invalid: {exc}") from exc


class PromptStorage:
    """Asynchronous persistent store for the prompt collection."""

    def __init__(
        self,
        repository: KeyValueRepository,
        *,
        prompts_key: str = PROMPTS_KEY,
        sync_key: str = SYNC_ENABLED_KEY,
        remote_ids_key: str = REMOTE_IDS_KEY,
    ) -> None:
        self._repository = repository
        self._prompts_key = prompts_key
        self._sync_key = sync_key
        self._remote_ids_key = remote_ids_key
        self._pending: list[dict[str, Any]] | None = None
        self._flush_task: asyncio.Task[None] | None = None
        self._last_save_ok = True

    @property
    def last_save_succeeded(self) -> bool:
        """Return whether the most recent write reached the repository."""
        return self._last_save_ok

    @property
    def has_pending_writes(self) -> bool:
        return self._pending is not None or (
            self._flush_task is not None and not self._flush_task.done()
        )

    # Collection ---------------------------------------------------------- #

    async def load(self) -> list[Prompt]:
        """Return the stored collection, or an empty list when it cannot be read."""
        try:
            raw = await asyncio.to_thread(self._repository.get, self._prompts_key)
            if raw is None:
                return []
            prompts = _decode_prompts(raw)
        except (RepositoryError, PersistenceError) as exc:
            logger.warning(
                "Unable to load stored prompts; starting with an empty collection",
                exc_info=exc,
                extra={"key": self._prompts_key},
            )
            return []
        logger.info("Loaded stored prompts", extra={"count": len(prompts)})
        return prompts

    async def save(self, prompts: Sequence[Prompt]) -> bool:
        """Write *prompts* immediately; return False (after logging) on failure."""
        return await self._write_records([prompt.to_record() for prompt in prompts])

    def request_save(self, prompts: Sequence[Prompt]) -> None:
        """Schedule a background save of *prompts* without waiting for it.

        The collection is snapshotted now. When a write is already in flight the
        snapshot replaces any older pending one and is written once the current
        write finishes. Must be called from a running event loop.
        """
        self._pending = [prompt.to_record() for prompt in prompts]
        if self._flush_task is None or self._flush_task.done():
            loop = asyncio.get_running_loop()
            self._flush_task = loop.create_task(self._flush_pending(), name="promptdeck-save")

    async def flush(self) -> None:
        """Wait until every requested save has been written (or has failed)."""
        while self._flush_task is not None and not self._flush_task.done():
            await asyncio.shield(self._flush_task)

    async def _flush_pending(self) -> None:
        while self._pending is not None:
            records, self._pending = self._pending, None
            await self._write_records(records)

    async def _write_records(self, records: list[dict[str, Any]]) -> bool:
        payload = json.dumps(records, ensure_ascii=False)
        try:
            await asyncio.to_thread(self._repository.set, self._prompts_key, payload)
        except RepositoryError as exc:
            self._last_save_ok = False
            logger.error(
                "Failed to persist prompt collection",
                exc_info=exc,
                extra={"key": self._prompts_key, "count": len(records)},
            )
            return False
        self._last_save_ok = True
        logger.debug("Persisted prompt collection", extra={"count": len(records)})
        return True

    # Sync flag ----------------------------------------------------------- #

    async def load_sync_enabled(self) -> bool:
        """Return the stored sync flag, defaulting to False when unreadable."""
        try:
            raw = await asyncio.to_thread(self._repository.get, self._sync_key)
        except RepositoryError as exc:
            logger.warning("Unable to read sync setting", exc_info=exc)
            return False
        if raw is None:
            return False
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed sync setting", extra={"raw": raw[:32]})
            return False
        return value is True

    async def save_sync_enabled(self, enabled: bool) -> bool:
        """Persist the sync flag; return False (after logging) on failure."""
        try:
            await asyncio.to_thread(self._repository.set, self._sync_key, json.dumps(bool(enabled)))
        except RepositoryError as exc:
            logger.error("Failed to persist sync setting", exc_info=exc)
            return False
        return True

    # Remote id map ------------------------------------------------------- #

    async def load_remote_ids(self) -> dict[str, str]:
        """Return the stored local-to-remote id map, empty when unreadable."""
        try:
            raw = await asyncio.to_thread(self._repository.get, self._remote_ids_key)
        except RepositoryError as exc:
            logger.warning("Unable to read remote id map", exc_info=exc)
            return {}
        if raw is None:
            return {}
        try:
            payload: Any = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed remote id map", extra={"raw": raw[:32]})
            return {}
        if not isinstance(payload, dict):
            logger.warning("Ignoring remote id map that is not a JSON object")
            return {}
        return {
            str(local_id): str(remote_id)
            for local_id, remote_id in payload.items()
            if isinstance(remote_id, str) and remote_id
        }

    async def save_remote_ids(self, remote_ids: Mapping[str, str]) -> bool:
        """Persist the local-to-remote id map; return False (after logging) on failure."""
        payload = json.dumps(dict(remote_ids), ensure_ascii=False)
        try:
            await asyncio.to_thread(self._repository.set, self._remote_ids_key, payload)
        except RepositoryError as exc:
            logger.error("Failed to persist remote id map", exc_info=exc)
            return False
        logger.debug("Persisted remote id map", extra={"count": len(remote_ids)})
        return True
