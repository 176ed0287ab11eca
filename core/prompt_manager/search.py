"""Search, autocomplete, and filter statistics helpers for Prompt Manager.

Updates:
  v0.2.0 - 2026-09-16 - Delegate to the pure ranking engine in ``core.search``.
  v0.1.0 - 2025-12-03 - Extract search and suggestion mixin.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..search import filter_stats, search_prompts, suggest_completions

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from models.prompt_model import Prompt
    from models.search_model import FilterStats, ScoredPrompt, SearchFilters

__all__ = ["PromptSearchMixin"]


class PromptSearchMixin:
    """Read-only queries over the façade's prompt snapshot."""

    _prompts: list[Prompt]
    _suggestion_limit: int

    def search(
        self,
        filters: SearchFilters | None = None,
        *,
        now: datetime | None = None,
    ) -> list[ScoredPrompt]:
        """Return ranked prompts matching *filters* (defaults list everything)."""
        return search_prompts(self._prompts, filters, now=now)

    def suggest(self, partial: str, limit: int | None = None) -> list[str]:
        """Return autocomplete candidates for *partial*."""
        effective = self._suggestion_limit if limit is None else limit
        return suggest_completions(self._prompts, partial, effective)

    def filter_stats(self, results: Sequence[ScoredPrompt]) -> FilterStats:
        """Summarise *results* against the full collection."""
        return filter_stats(self._prompts, results)


