"""Category enumeration and suggestion hint models.

Updates: v0.2.0 - 2026-09-14 - Replace free-form category records with the closed PromptCategory enum.
Updates: v0.1.0 - 2026-08-30 - Introduce keyword and topic suggestion dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class PromptCategory(str, Enum):
    """Closed set of categories a prompt can belong to."""
    WRITING = "writing"
    MARKETING = "marketing"
    DEVELOPMENT = "development"
    DESIGN = "design"
    BUSINESS = "business"
    EDUCATION = "education"
    PERSONAL = "personal"

    @property
    def label(self) -> str:
        """Return a human-friendly label."""
        return self.value.capitalize()


def parse_category(value: Any) -> PromptCategory:
    """Return the PromptCategory matching *value*, raising ValueError otherwise."""
    if isinstance(value, PromptCategory):
        return value
    text = str(value or "").strip().lower()
    try:
        return PromptCategory(text)
    except ValueError as exc:
        allowed = ", ".join(category.value for category in PromptCategory)
        raise ValueError(f"Unknown category '{value}'; expected one of: {allowed}") from exc


@dataclass(frozen=True, slots=True)
class KeywordSuggestion:
    """Keyword recommended for a category with a relevance weight (0..1)."""
    keyword: str
    relevance: float


@dataclass(frozen=True, slots=True)
class TopicSuggestion:
    """Topic idea recommended for a category."""
    topic: str
    description: str


__all__ = [
    "KeywordSuggestion",
    "PromptCategory",
    "TopicSuggestion",
    "parse_category",
]
