"""Remote mirroring of the prompt collection.

`SyncCoordinator` wraps a :class:`core.remote.RemotePromptClient`. The façade
asks it for a full fetch when sync is switched on (remote wins) and hands it
every mutation afterwards. Each propagation runs as its own asyncio task whose
failures are logged and dropped, so local state stays authoritative and the
remote copy is eventually consistent at best.

The remote service may assign its own identifier on create. Those ids are kept
in a map the façade persists between sessions; update and delete propagation wait for a pending create
of the same record before resolving the id to send.

Updates:
  v0.3.0 - 2026-10-19 - Expose the remote id map for persistence and track changes to it.
  v0.2.0 - 2026-09-19 - Track remote ids and order update/delete after pending creates.
  v0.1.0 - 2026-09-08 - Introduce fire-and-forget propagation tasks.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from ..exceptions import SyncError

if TYPE_CHECKING:
    from collections.abc import Coroutine, Mapping

    from models.prompt_model import Prompt

    from ..remote import RemotePromptClient

logger = logging.getLogger("promptdeck.sync")

__all__ = ["SyncCoordinator"]


class SyncCoordinator:
    """Spawn and track remote propagation tasks for local mutations."""

    def __init__(self, remote: RemotePromptClient, *, list_limit: int = 100) -> None:
        self._remote = remote
        self._list_limit = max(1, int(list_limit))
        self._tasks: set[asyncio.Task[None]] = set()
        self._pending_creates: dict[str, asyncio.Task[None]] = {}
        self._remote_ids: dict[str, str] = {}
        self._remote_ids_changed = False

    @property
    def remote(self) -> RemotePromptClient:
        return self._remote

    @property
    def in_flight(self) -> int:
        """Return the number of propagation tasks not yet finished."""
        return len(self._tasks)

    def remote_id_for(self, prompt_id: str) -> str:
        """Return the remote identifier recorded for *prompt_id* (itself when unmapped)."""
        return self._remote_ids.get(prompt_id, prompt_id)

    @property
    def remote_ids(self) -> dict[str, str]:
        """Return a copy of the local-to-remote id map."""
        return dict(self._remote_ids)

    @property
    def remote_ids_changed(self) -> bool:
        """Return True when the id map changed since it was last restored or saved."""
        return self._remote_ids_changed

    def restore_remote_ids(self, remote_ids: Mapping[str, str]) -> None:
        """Replace the id map with one recorded by an earlier session."""
        self._remote_ids = dict(remote_ids)
        self._remote_ids_changed = False

    def mark_remote_ids_saved(self) -> None:
        self._remote_ids_changed = False

    async def fetch_remote(self) -> list[Prompt]:
        """Return the remote collection.

        Raises:
            SyncError: when the remote call fails for any reason.
        """
        try:
            prompts = await self._remote.list(limit=self._list_limit)
        except SyncError:
            raise
        except Exception as exc:  # noqa: BLE001 - remote implementations may raise anything
            raise SyncError(f"Remote fetch failed: {exc}") from exc
        if self._remote_ids:
            self._remote_ids.clear()
            self._remote_ids_changed = True
        logger.info("Fetched remote prompts", extra={"count": len(prompts)})
        return list(prompts)

    # Propagation --------------------------------------------------------- #

    def propagate_create(self, prompt: Prompt) -> asyncio.Task[None]:
        """Mirror a newly created prompt."""
        task = self._spawn(self._create(prompt), operation="create", prompt_id=prompt.id)
        self._pending_creates[prompt.id] = task
        task.add_done_callback(lambda _task: self._forget_create(prompt.id, _task))
        return task

    def propagate_update(self, prompt_id: str, changes: Mapping[str, Any]) -> asyncio.Task[None]:
        """Mirror attribute-keyed *changes* of an existing prompt."""
        return self._spawn(
            self._update(prompt_id, dict(changes)), operation="update", prompt_id=prompt_id
        )

    def propagate_delete(self, prompt_id: str) -> asyncio.Task[None]:
        """Mirror the removal of a prompt."""
        return self._spawn(self._delete(prompt_id), operation="delete", prompt_id=prompt_id)

    async def drain(self) -> None:
        """Wait for every in-flight propagation to settle."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Drain outstanding work and release the remote client."""
        await self.drain()
        await self._remote.aclose()

    # Internals ----------------------------------------------------------- #

    def _spawn(
        self,
        coro: Coroutine[Any, Any, None],
        *,
        operation: str,
        prompt_id: str,
    ) -> asyncio.Task[None]:
        loop = asyncio.get_running_loop()
        task = loop.create_task(
            self._guard(coro, operation=operation, prompt_id=prompt_id),
            name=f"promptdeck-sync-{operation}:{prompt_id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _guard(
        self,
        coro: Coroutine[Any, Any, None],
        *,
        operation: str,
        prompt_id: str,
    ) -> None:
        try:
            await coro
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001 - propagation failures never reach callers
            logger.warning(
                "Remote %s failed; local state kept",
                operation,
                exc_info=exc,
                extra={"prompt_id": prompt_id, "operation": operation},
            )
        else:
            logger.debug(
                "Remote %s succeeded",
                operation,
                extra={"prompt_id": prompt_id, "operation": operation},
            )

    def _forget_create(self, prompt_id: str, task: asyncio.Task[None]) -> None:
        if self._pending_creates.get(prompt_id) is task:
            del self._pending_creates[prompt_id]

    async def _resolve_remote_id(self, prompt_id: str) -> str:
        pending = self._pending_creates.get(prompt_id)
        if pending is not None and not pending.done():
            # _guard swallows create failures, so awaiting never raises here.
            await asyncio.shield(pending)
        return self.remote_id_for(prompt_id)

    async def _create(self, prompt: Prompt) -> None:
        created = await self._remote.create(prompt)
        if created.id and created.id != prompt.id:
            self._remote_ids[prompt.id] = created.id
            self._remote_ids_changed = True

    async def _update(self, prompt_id: str, changes: dict[str, Any]) -> None:
        remote_id = await self._resolve_remote_id(prompt_id)
        await self._remote.update(remote_id, changes)

    async def _delete(self, prompt_id: str) -> None:
        remote_id = await self._resolve_remote_id(prompt_id)
        await self._remote.delete(remote_id)
        if self._remote_ids.pop(prompt_id, None) is not None:
            self._remote_ids_changed = True
