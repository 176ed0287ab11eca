"""In-memory relevance scoring, filtering, and autocomplete for prompts.

Every function here is pure: it reads a collection snapshot and returns new
values without touching storage or the façade.

Relevance weights (query *q* stripped and lower-cased):

* title contains *q* +10, equals *q* +20, starts with *q* +10
* content contains *q* +5 plus ``min(occurrences * 2, 10)``
* +8 per tag containing *q*, +15 once when a tag equals *q*
* nothing matched: subsequence fuzzy ratio over title and content, counted
  (times 3) only above 0.7
* favourites ×1.2, prompts updated within the last week ×1.1

Updates:
  v0.3.1 - 2026-10-19 - Treat a naive ``now`` as UTC.
  v0.3.0 - 2026-09-16 - Add filter statistics for the CLI summary line.
  v0.2.0 - 2026-09-12 - Add title/tag autocomplete suggestions.
  v0.1.0 - 2026-09-05 - Linear relevance scoring with filter and sort pipeline.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from models.prompt_model import as_utc
from models.search_model import (
    FilterStats,
    MatchFlags,
    ScoredPrompt,
    SearchFilters,
    SortKey,
    SortOrder,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from models.prompt_model import Prompt

__all__ = [
    "DEFAULT_SUGGESTION_LIMIT",
    "RECENT_WINDOW",
    "filter_stats",
    "fuzzy_ratio",
    "score_prompt",
    "search_prompts",
    "suggest_completions",
]

DEFAULT_SUGGESTION_LIMIT = 5
RECENT_WINDOW = timedelta(days=7)
FUZZY_THRESHOLD = 0.7

_TITLE_CONTAINS = 10.0
_TITLE_EXACT = 20.0
_TITLE_PREFIX = 10.0
_CONTENT_CONTAINS = 5.0
_CONTENT_OCCURRENCE = 2.0
_CONTENT_OCCURRENCE_CAP = 10.0
_TAG_CONTAINS = 8.0
_TAG_EXACT = 15.0
_FUZZY_WEIGHT = 3.0
_FAVORITE_BOOST = 1.2
_RECENT_BOOST = 1.1


def fuzzy_ratio(query: str, text: str) -> float:
    """Return the share of *query* characters found in order within *text*.

    Characters are consumed greedily left to right; ``0.0`` when either side
    is empty.
    """
    if not query or not text:
        return 0.0
    matched = 0
    for char in text:
        if char == query[matched]:
            matched += 1
            if matched == len(query):
                break
    return matched / len(query)


def _normalise_query(query: str) -> str:
    return query.strip().lower()


def score_prompt(prompt: Prompt, query: str, now: datetime | None = None) -> ScoredPrompt:
    """Return *prompt* paired with its relevance score for *query*."""
    needle = _normalise_query(query)
    if not needle:
        return ScoredPrompt(prompt=prompt, score=1.0)

    title = prompt.title.lower()
    content = prompt.content.lower()
    tags = [tag.lower() for tag in prompt.tags]

    score = 0.0
    title_hit = needle in title
    if title_hit:
        score += _TITLE_CONTAINS
        if title == needle:
            score += _TITLE_EXACT
        if title.startswith(needle):
            score += _TITLE_PREFIX

    content_hit = needle in content
    if content_hit:
        score += _CONTENT_CONTAINS
        score += min(content.count(needle) * _CONTENT_OCCURRENCE, _CONTENT_OCCURRENCE_CAP)

    tag_hits = sum(1 for tag in tags if needle in tag)
    if tag_hits:
        score += tag_hits * _TAG_CONTAINS
        if needle in tags:
            score += _TAG_EXACT

    if score == 0:
        fuzzy = fuzzy_ratio(needle, title) + fuzzy_ratio(needle, content)
        if fuzzy > FUZZY_THRESHOLD:
            score += fuzzy * _FUZZY_WEIGHT

    if prompt.is_favorite:
        score *= _FAVORITE_BOOST
    current = as_utc(now) if now is not None else datetime.now(UTC)
    if current - prompt.updated_at < RECENT_WINDOW:
        score *= _RECENT_BOOST

    return ScoredPrompt(
        prompt=prompt,
        score=score,
        matches=MatchFlags(title=title_hit, content=content_hit, tags=bool(tag_hits)),
    )


def _passes_filters(prompt: Prompt, filters: SearchFilters) -> bool:
    if filters.category is not None and prompt.category != filters.category:
        return False
    if filters.tags:
        owned = [tag.lower() for tag in prompt.tags]
        for required in filters.tags:
            needle = required.lower()
            if not any(needle in tag for tag in owned):
                return False
    if filters.favorites_only and not prompt.is_favorite:
        return False
    if not filters.date_range.is_open and not filters.date_range.contains(prompt.created_at):
        return False
    length = prompt.content_length
    if length < filters.min_length:
        return False
    return filters.max_length is None or length <= filters.max_length


def _title_key(item: ScoredPrompt) -> str:
    return item.prompt.title.casefold()


def _created_key(item: ScoredPrompt) -> datetime:
    return item.prompt.created_at


def _updated_key(item: ScoredPrompt) -> datetime:
    return item.prompt.updated_at


_SORT_KEYS = {
    SortKey.TITLE: _title_key,
    SortKey.CREATED_AT: _created_key,
    SortKey.UPDATED_AT: _updated_key,
}


def _sort_results(results: list[ScoredPrompt], filters: SearchFilters) -> list[ScoredPrompt]:
    if filters.sort_by is SortKey.RELEVANCE:
        # Relevance always ranks best first; sort_order does not apply.
        return sorted(results, key=lambda item: item.score, reverse=True)
    key = _SORT_KEYS[filters.sort_by]
    return sorted(results, key=key, reverse=filters.sort_order is SortOrder.DESC)


def search_prompts(
    collection: Iterable[Prompt],
    filters: SearchFilters | None = None,
    *,
    now: datetime | None = None,
) -> list[ScoredPrompt]:
    """Return the filtered, scored, and sorted view of *collection*.

    With a non-blank query, prompts scoring zero are dropped. ``now`` pins the
    recency boost for deterministic callers.
    """
    active = filters or SearchFilters()
    current = as_utc(now) if now is not None else datetime.now(UTC)
    has_query = bool(_normalise_query(active.query))
    results = [
        score_prompt(prompt, active.query, current)
        for prompt in collection
        if _passes_filters(prompt, active)
    ]
    if has_query:
        results = [item for item in results if item.score > 0]
    return _sort_results(results, active)


def suggest_completions(
    collection: Iterable[Prompt],
    partial: str,
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> list[str]:
    """Return distinct titles, then tags, containing *partial* (case-insensitive)."""
    if not partial.strip() or limit <= 0:
        return []
    needle = partial.lower()
    prompts = list(collection)
    suggestions: dict[str, None] = {}
    for prompt in prompts:
        if needle in prompt.title.lower():
            suggestions.setdefault(prompt.title)
    for prompt in prompts:
        for tag in prompt.tags:
            if needle in tag.lower():
                suggestions.setdefault(tag)
    return list(suggestions)[:limit]


def filter_stats(collection: Sequence[Prompt], results: Sequence[ScoredPrompt]) -> FilterStats:
    """Summarise how *results* narrow *collection*."""
    total = len(collection)
    filtered = len(results)
    return FilterStats(
        total_prompts=total,
        filtered_prompts=filtered,
        categories_count=len({prompt.category for prompt in collection}),
        tags_count=len({tag for prompt in collection for tag in prompt.tags}),
        favorite_count=sum(1 for prompt in collection if prompt.is_favorite),
        filter_efficiency=(filtered / total) * 100 if total else 0.0,
    )
