"""Printable summaries for PromptDeck configuration.

Updates:
  v0.2.0 - 2026-09-22 - Summarise storage, remote sync, and completion settings.
  v0.1.0 - 2025-12-04 - Extract CLI settings summary rendering.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .utils import describe_path, mask_secret

if TYPE_CHECKING:
    from config import PromptDeckSettings


def print_settings_summary(settings: PromptDeckSettings) -> None:
    """Emit a readable summary of the resolved configuration."""
    drop_params = ", ".join(settings.litellm_drop_params or ()) or "none"
    lines = [
        "PromptDeck configuration summary",
        "--------------------------------",
        f"Database path: {describe_path(settings.db_path, allow_missing_file=True)}",
        f"Suggestion limit: {settings.suggestion_limit}",
        "",
        "Remote sync",
        "-----------",
        f"Remote base URL: {settings.remote_base_url or 'not set (sync unavailable)'}",
        f"Timeout (seconds): {settings.remote_timeout_seconds}",
        f"List limit: {settings.remote_list_limit}",
        f"Max attempts: {settings.remote_max_attempts}",
        "",
        "LiteLLM configuration",
        "---------------------",
        f"Model: {settings.litellm_model or 'not set (completion unavailable)'}",
        f"LiteLLM API key: {mask_secret(settings.litellm_api_key)}",
        f"LiteLLM API base: {settings.litellm_api_base or 'not set'}",
        f"LiteLLM API version: {settings.litellm_api_version or 'not set'}",
        f"Timeout (seconds): {settings.litellm_timeout_seconds or 'provider default'}",
        f"Dropped parameters: {drop_params}",
    ]
    print("\n".join(lines))
