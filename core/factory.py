"""Factories for constructing PromptDeck services from validated settings.

Updates:
  v0.9.0 - 2026-09-21 - Build the local-first PromptManager with optional remote sync and
    the LiteLLM completion client.
  v0.8.5 - 2025-12-09 - Skip LiteLLM components when no model is configured.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .completion import LiteLLMCompletionClient
from .exceptions import CompletionUnavailable
from .prompt_manager import PromptManager, PromptStorage, SyncCoordinator
from .remote import HttpRemotePromptClient, RemotePromptClient
from .repository import KeyValueRepository
from .retry import RetryPolicy

if TYPE_CHECKING:  # pragma: no cover - typing only
    from collections.abc import Callable
    from datetime import datetime

    from config import PromptDeckSettings

factory_logger = logging.getLogger("promptdeck.factory")


def build_remote_client(settings: PromptDeckSettings) -> RemotePromptClient | None:
    """Return the HTTP remote client, or ``None`` when no remote URL is configured."""
    if settings.remote_base_url is None:
        return None
    return HttpRemotePromptClient(
        base_url=settings.remote_base_url,
        timeout=settings.remote_timeout_seconds,
        retry_policy=RetryPolicy(max_attempts=settings.remote_max_attempts),
    )


def build_prompt_manager(
    settings: PromptDeckSettings,
    *,
    repository: KeyValueRepository | None = None,
    remote: RemotePromptClient | None = None,
    clock: Callable[[], datetime] | None = None,
) -> PromptManager:
    """Return a PromptManager configured from validated settings.

    The manager is not started; callers await :meth:`PromptManager.start`.
    """
    resolved_repository = repository or KeyValueRepository(settings.db_path)
    storage = PromptStorage(resolved_repository)
    resolved_remote = remote if remote is not None else build_remote_client(settings)
    sync = None
    if resolved_remote is not None:
        sync = SyncCoordinator(resolved_remote, list_limit=settings.remote_list_limit)
    else:
        factory_logger.info("Remote sync unavailable; no remote_base_url configured")
    factory_logger.debug(
        "Building prompt manager",
        extra={"db_path": str(resolved_repository.db_path), "sync": sync is not None},
    )
    return PromptManager(
        storage,
        sync=sync,
        clock=clock,
        suggestion_limit=settings.suggestion_limit,
    )


def build_completion_client(settings: PromptDeckSettings) -> LiteLLMCompletionClient:
    """Return the LiteLLM completion client.

    Raises:
        CompletionUnavailable: when no LiteLLM model is configured.
    """
    if not settings.litellm_model:
        raise CompletionUnavailable(
            "Text completion requires litellm_model; set PROMPTDECK_LITELLM_MODEL "
            "or add it to config/config.json."
        )
    return LiteLLMCompletionClient(
        model=settings.litellm_model,
        api_key=settings.litellm_api_key,
        api_base=settings.litellm_api_base,
        api_version=settings.litellm_api_version,
        timeout_seconds=settings.litellm_timeout_seconds,
        drop_params=settings.litellm_drop_params,
    )


__all__ = ["build_completion_client", "build_prompt_manager", "build_remote_client"]
