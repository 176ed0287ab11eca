"""Prompt Manager package façade and orchestration layer.

`PromptManager` owns the in-memory prompt collection. Each mutation validates
its input, applies the change locally, asks :class:`PromptStorage` to persist
the collection in the background and, while sync is enabled, hands the change
to the :class:`SyncCoordinator`. Mutations return as soon as the local
collection is updated, so they must be called from inside a running event loop;
``flush`` waits for the background work to settle.

Updates:
  v0.5.0 - 2026-10-19 - Persist remote ids across sessions; send only changed fields on update.
  v0.4.0 - 2026-09-20 - Bump updated_at monotonically and reject patches touching immutable fields.
  v0.3.0 - 2026-09-19 - Remote-wins enable_sync with persisted sync flag.
  v0.2.0 - 2026-09-16 - Expose search, suggestion, and filter statistics via mixin.
  v0.1.0 - 2026-09-03 - Local-first façade over the key-value prompt store.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from models.category_model import parse_category
from models.prompt_model import (
    IMMUTABLE_FIELDS,
    MUTABLE_FIELDS,
    Prompt,
    new_prompt_id,
    next_timestamp,
    normalize_tags,
)

from ..exceptions import SyncError, ValidationError
from ..search import DEFAULT_SUGGESTION_LIMIT
from .search import PromptSearchMixin
from .state import SyncState
from .storage import PROMPTS_KEY, REMOTE_IDS_KEY, SYNC_ENABLED_KEY, PromptStorage
from .sync import SyncCoordinator

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from types import TracebackType

    from models.category_model import PromptCategory

logger = logging.getLogger("promptdeck.manager")

__all__ = [
    "PROMPTS_KEY",
    "REMOTE_IDS_KEY",
    "SYNC_ENABLED_KEY",
    "PromptManager",
    "PromptStorage",
    "SyncCoordinator",
    "SyncState",
]


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _require_text(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"Prompt {field_name} must be a string")
    if not value.strip():
        raise ValidationError(f"Prompt {field_name} cannot be empty")
    return value


def _validate_category(value: Any) -> PromptCategory:
    try:
        return parse_category(value)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc


class PromptManager(PromptSearchMixin):
    """Local-first prompt collection with optional remote mirroring."""

    def __init__(
        self,
        storage: PromptStorage,
        *,
        sync: SyncCoordinator | None = None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] = new_prompt_id,
        suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT,
    ) -> None:
        """Initialise the manager.

        Args:
            storage: Durable store for the collection and the sync flag.
            sync: Remote mirroring coordinator; ``None`` keeps the manager offline.
            clock: Returns the current aware UTC time (tests pin it).
            id_factory: Generates identifiers for new prompts.
            suggestion_limit: Default number of autocomplete suggestions.
        """
        self._storage = storage
        self._sync = sync
        self._clock = clock or _utc_now
        self._id_factory = id_factory
        self._suggestion_limit = suggestion_limit
        self._prompts: list[Prompt] = []
        self._state = SyncState()
        self._started = False
        self._closed = False

    # Lifecycle ----------------------------------------------------------- #

    async def start(self) -> None:
        """Load the stored collection, sync flag, and remote id map (no remote fetch)."""
        if self._started:
            return
        self._prompts = await self._storage.load()
        if self._sync is not None:
            self._sync.restore_remote_ids(await self._storage.load_remote_ids())
        enabled = await self._storage.load_sync_enabled()
        if enabled and self._sync is None:
            logger.warning("Sync is enabled in storage but no remote service is configured")
            enabled = False
        self._state.enabled = enabled
        self._started = True
        logger.info(
            "Prompt manager started",
            extra={"count": len(self._prompts), "sync_enabled": enabled},
        )

    async def flush(self) -> None:
        """Wait for pending saves and remote propagations to settle."""
        if self._sync is not None:
            await self._sync.drain()
            await self._persist_remote_ids()
        await self._storage.flush()

    async def close(self) -> None:
        """Flush outstanding work and release the remote client."""
        if self._closed:
            return
        self._closed = True
        await self.flush()
        if self._sync is not None:
            await self._sync.aclose()

    async def __aenter__(self) -> PromptManager:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.close()

    # Queries ------------------------------------------------------------- #

    @property
    def prompts(self) -> tuple[Prompt, ...]:
        """Return an immutable snapshot of the collection."""
        return tuple(self._prompts)

    @property
    def sync_enabled(self) -> bool:
        return self._state.enabled

    @property
    def sync_available(self) -> bool:
        """Return True when a remote service is configured."""
        return self._sync is not None

    @property
    def last_save_succeeded(self) -> bool:
        return self._storage.last_save_succeeded

    def get_prompt(self, prompt_id: str) -> Prompt | None:
        """Return the prompt with *prompt_id*, or ``None``."""
        index = self._index_of(prompt_id)
        return None if index is None else self._prompts[index]

    # Mutations ----------------------------------------------------------- #

    def create_prompt(
        self,
        title: str,
        content: str,
        category: PromptCategory | str,
        tags: Iterable[str] = (),
        *,
        is_favorite: bool = False,
    ) -> Prompt:
        """Add a new prompt and return it.

        Raises:
            ValidationError: when title or content is blank or the category is unknown.
        """
        clean_title = _require_text(title, "title").strip()
        clean_content = _require_text(content, "content")
        clean_category = _validate_category(category)
        now = self._clock()
        prompt = Prompt(
            id=self._new_id(),
            title=clean_title,
            content=clean_content,
            category=clean_category,
            tags=normalize_tags(tags),
            is_favorite=bool(is_favorite),
            created_at=now,
            updated_at=now,
        )
        self._prompts.append(prompt)
        self._after_mutation()
        if self._sync is not None and self._state.enabled:
            self._sync.propagate_create(prompt)
        logger.info("Created prompt", extra={"prompt_id": prompt.id})
        return prompt

    def update_prompt(self, prompt_id: str, changes: Mapping[str, Any]) -> Prompt | None:
        """Apply *changes* to an existing prompt; ``None`` when it does not exist.

        Raises:
            ValidationError: when *changes* names an immutable or unknown field,
                or carries an invalid value.
        """
        normalised = self._validate_changes(changes)
        index = self._index_of(prompt_id)
        if index is None:
            logger.debug("Update skipped; prompt not found", extra={"prompt_id": prompt_id})
            return None
        current = self._prompts[index]
        updated = dataclasses.replace(
            current,
            **normalised,
            updated_at=next_timestamp(current.updated_at, self._clock()),
        )
        self._prompts[index] = updated
        self._after_mutation()
        if self._sync is not None and self._state.enabled:
            self._sync.propagate_update(prompt_id, normalised)
        logger.info(
            "Updated prompt",
            extra={"prompt_id": prompt_id, "fields": sorted(normalised)},
        )
        return updated

    def delete_prompt(self, prompt_id: str) -> bool:
        """Remove a prompt; return False when it does not exist."""
        index = self._index_of(prompt_id)
        if index is None:
            return False
        del self._prompts[index]
        self._after_mutation()
        if self._sync is not None and self._state.enabled:
            self._sync.propagate_delete(prompt_id)
        logger.info("Deleted prompt", extra={"prompt_id": prompt_id})
        return True

    def toggle_favorite(self, prompt_id: str) -> Prompt | None:
        """Flip the favourite flag of a prompt; ``None`` when it does not exist."""
        current = self.get_prompt(prompt_id)
        if current is None:
            return None
        return self.update_prompt(prompt_id, {"is_favorite": not current.is_favorite})

    # Sync state ---------------------------------------------------------- #

    async def enable_sync(self) -> bool:
        """Switch mirroring on, replacing the local collection with the remote one.

        Returns False (and stays disabled) when no remote is configured or the
        fetch fails.
        """
        if self._state.enabled:
            return True
        if self._sync is None:
            logger.warning("Cannot enable sync; no remote service configured")
            return False
        try:
            remote_prompts = await self._sync.fetch_remote()
        except SyncError as exc:
            logger.warning("Cannot enable sync; remote fetch failed", exc_info=exc)
            return False
        self._prompts = list(remote_prompts)
        self._state.enabled = True
        self._after_mutation()
        await self._persist_remote_ids()
        await self._storage.save_sync_enabled(True)
        logger.info("Sync enabled", extra={"count": len(self._prompts)})
        return True

    async def disable_sync(self) -> None:
        """Switch mirroring off; the local collection is left untouched."""
        self._state.enabled = False
        await self._storage.save_sync_enabled(False)
        logger.info("Sync disabled")

    # Internals ----------------------------------------------------------- #

    async def _persist_remote_ids(self) -> None:
        if self._sync is None or not self._sync.remote_ids_changed:
            return
        if await self._storage.save_remote_ids(self._sync.remote_ids):
            self._sync.mark_remote_ids_saved()

    def _index_of(self, prompt_id: str) -> int | None:
        for index, prompt in enumerate(self._prompts):
            if prompt.id == prompt_id:
                return index
        return None

    def _new_id(self) -> str:
        existing = {prompt.id for prompt in self._prompts}
        prompt_id = self._id_factory()
        while prompt_id in existing:
            prompt_id = self._id_factory()
        return prompt_id

    def _after_mutation(self) -> None:
        self._storage.request_save(self._prompts)

    @staticmethod
    def _validate_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
        if not isinstance(changes, Mapping):
            raise ValidationError("Prompt changes must be a mapping")
        immutable = sorted(set(changes) & IMMUTABLE_FIELDS)
        if immutable:
            raise ValidationError(f"Cannot modify immutable fields: {', '.join(immutable)}")
        unknown = sorted(set(changes) - MUTABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown prompt fields: {', '.join(unknown)}")
        normalised: dict[str, Any] = {}
        for key, value in changes.items():
            match key:
                case "title":
                    normalised[key] = _require_text(value, "title").strip()
                case "content":
                    normalised[key] = _require_text(value, "content")
                case "category":
                    normalised[key] = _validate_category(value)
                case "tags":
                    if isinstance(value, str):
                        raise ValidationError("Prompt tags must be a list of strings")
                    normalised[key] = normalize_tags(value)
                case "is_favorite":
                    if not isinstance(value, bool):
                        raise ValidationError("Prompt is_favorite must be a boolean")
                    normalised[key] = value
        return normalised
