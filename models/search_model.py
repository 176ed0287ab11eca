"""Search filter descriptors and ranked result containers.

Updates: v0.2.1 - 2026-10-19 - Read naive DateRange bounds as UTC.
Updates: v0.2.0 - 2026-09-16 - Add FilterStats and active-filter detection.
Updates: v0.1.0 - 2026-09-05 - Introduce SearchFilters and ScoredPrompt dataclasses.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from .prompt_model import as_utc

if TYPE_CHECKING:
    from .category_model import PromptCategory
    from .prompt_model import Prompt


class SortKey(str, Enum):
    """Fields search results can be ordered by."""
    RELEVANCE = "relevance"
    TITLE = "title"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class SortOrder(str, Enum):
    """Direction applied to non-relevance sorts."""
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive creation-date window; either bound may be open.

    Naive bounds are read as UTC.
    """
    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        if self.start is not None:
            object.__setattr__(self, "start", as_utc(self.start))
        if self.end is not None:
            object.__setattr__(self, "end", as_utc(self.end))

    def contains(self, value: datetime) -> bool:
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value > self.end:
            return False
        return True

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None


@dataclass(frozen=True, slots=True)
class SearchFilters:
    """Transient query description consumed by the search engine.

    ``SearchFilters()`` carries the defaults and doubles as the reset value.
    ``max_length`` of ``None`` leaves the upper content-length bound open.
    """
    query: str = ""
    category: PromptCategory | None = None
    tags: tuple[str, ...] = ()
    favorites_only: bool = False
    date_range: DateRange = field(default_factory=DateRange)
    sort_by: SortKey = SortKey.UPDATED_AT
    sort_order: SortOrder = SortOrder.DESC
    min_length: int = 0
    max_length: int | None = None

    def has_active_filters(self) -> bool:
        """Return True when any field differs from the defaults."""
        defaults = SearchFilters()
        return any(
            getattr(self, item.name) != getattr(defaults, item.name) for item in fields(self)
        )


@dataclass(frozen=True, slots=True)
class MatchFlags:
    """Which structural matches contributed to a relevance score."""
    title: bool = False
    content: bool = False
    tags: bool = False


@dataclass(frozen=True, slots=True)
class ScoredPrompt:
    """A prompt paired with its relevance score."""
    prompt: Prompt
    score: float
    matches: MatchFlags = field(default_factory=MatchFlags)


@dataclass(frozen=True, slots=True)
class FilterStats:
    """Summary of how a filter narrowed the collection."""
    total_prompts: int
    filtered_prompts: int
    categories_count: int
    tags_count: int
    favorite_count: int
    filter_efficiency: float


__all__ = [
    "DateRange",
    "FilterStats",
    "MatchFlags",
    "ScoredPrompt",
    "SearchFilters",
    "SortKey",
    "SortOrder",
]
