"""Core service layer for PromptDeck.

Updates:
  v0.12.0 - 2026-09-21 - Export the local-first manager, sync, search, and completion APIs.
  v0.3.0 - 2025-11-03 - Export build_prompt_manager factory for shared bootstrap.
"""

from .category_hints import keyword_suggestions, topic_suggestions
from .completion import LiteLLMCompletionClient, build_prompt_messages
from .exceptions import (
    CompletionError,
    CompletionUnavailable,
    PersistenceError,
    PromptDeckError,
    SyncError,
    ValidationError,
)
from .factory import build_completion_client, build_prompt_manager, build_remote_client
from .prompt_manager import PromptManager, PromptStorage, SyncCoordinator, SyncState
from .remote import HttpRemotePromptClient, RemotePromptClient
from .repository import KeyValueRepository, RepositoryError
from .retry import NO_RETRY, RetryPolicy, async_retry
from .search import filter_stats, fuzzy_ratio, score_prompt, search_prompts, suggest_completions

__all__ = [
    "CompletionError",
    "CompletionUnavailable",
    "HttpRemotePromptClient",
    "KeyValueRepository",
    "LiteLLMCompletionClient",
    "NO_RETRY",
    "PersistenceError",
    "PromptDeckError",
    "PromptManager",
    "PromptStorage",
    "RemotePromptClient",
    "RepositoryError",
    "RetryPolicy",
    "SyncCoordinator",
    "SyncError",
    "SyncState",
    "ValidationError",
    "async_retry",
    "build_completion_client",
    "build_prompt_manager",
    "build_prompt_messages",
    "build_remote_client",
    "filter_stats",
    "fuzzy_ratio",
    "keyword_suggestions",
    "score_prompt",
    "search_prompts",
    "suggest_completions",
    "topic_suggestions",
]
