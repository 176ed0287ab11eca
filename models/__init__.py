"""Data models for PromptDeck.

Updates: v0.2.0 - 2026-09-16 - Export search filter and result models.
Updates: v0.1.0 - 2026-08-24 - Package scaffold.
"""

from .category_model import KeywordSuggestion, PromptCategory, TopicSuggestion, parse_category
from .prompt_model import Prompt, changes_to_record, new_prompt_id, normalize_tags
from .search_model import (
    DateRange,
    FilterStats,
    MatchFlags,
    ScoredPrompt,
    SearchFilters,
    SortKey,
    SortOrder,
)

__all__ = [
    "DateRange",
    "FilterStats",
    "KeywordSuggestion",
    "MatchFlags",
    "Prompt",
    "PromptCategory",
    "ScoredPrompt",
    "SearchFilters",
    "SortKey",
    "SortOrder",
    "TopicSuggestion",
    "changes_to_record",
    "new_prompt_id",
    "normalize_tags",
    "parse_category",
]
