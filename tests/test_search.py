"""Tests for relevance scoring, filtering, sorting, and autocomplete.

Updates:
  v0.2.0 - 2026-09-16 - Cover filter statistics and suggestion limits.
  v0.1.0 - 2026-09-05 - Cover scoring weights, boosts, and the filter pipeline.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from core.search import (
    filter_stats,
    fuzzy_ratio,
    score_prompt,
    search_prompts,
    suggest_completions,
)
from models.category_model import PromptCategory
from models.search_model import DateRange, SearchFilters, SortKey, SortOrder

from .support import FIXED_NOW, PromptFactory


def _ids(results) -> list[str]:
    return [result.prompt.id for result in results]


def test_fuzzy_ratio_counts_in_order_characters() -> None:
    assert fuzzy_ratio("abc", "a-b-c") == 1.0
    assert fuzzy_ratio("abc", "cab") == pytest.approx(2 / 3)
    assert fuzzy_ratio("", "text") == 0.0
    assert fuzzy_ratio("abc", "") == 0.0


def test_exact_title_match_collects_all_title_bonuses(make_prompt: PromptFactory) -> None:
    prompt = make_prompt(title="Email", content="Body text.")

    scored = score_prompt(prompt, "  EMAIL ", FIXED_NOW)

    assert scored.score == 40.0
    assert scored.matches.title is True
    assert scored.matches.content is False
    assert scored.matches.tags is False


def test_content_occurrence_bonus_is_capped(make_prompt: PromptFactory) -> None:
    twice = make_prompt(title="Guide", content="seo and more seo")
    many = make_prompt(title="Guide", content=" ".join(["seo"] * 8))
    overlapping = make_prompt(title="Guide", content="aaaa")

    assert score_prompt(twice, "seo", FIXED_NOW).score == 9.0
    assert score_prompt(many, "seo", FIXED_NOW).score == 15.0
    assert score_prompt(overlapping, "aa", FIXED_NOW).score == 9.0


def test_tag_matches_add_per_tag_and_exact_bonus_once(make_prompt: PromptFactory) -> None:
    prompt = make_prompt(title="Guide", content="Body.", tags=["email", "emails", "seo"])

    scored = score_prompt(prompt, "email", FIXED_NOW)

    assert scored.score == 31.0
    assert scored.matches.tags is True


def test_fuzzy_fallback_applies_only_above_threshold(make_prompt: PromptFactory) -> None:
    prompt = make_prompt(title="Marketing", content="xyz")

    assert score_prompt(prompt, "mrktng", FIXED_NOW).score == pytest.approx(3.0)
    assert score_prompt(prompt, "zzqq", FIXED_NOW).score == 0.0


def test_favorite_and_recent_boosts_multiply(make_prompt: PromptFactory) -> None:
    boosted = make_prompt(
        title="Email",
        content="Body.",
        is_favorite=True,
        updated_at=FIXED_NOW - timedelta(days=1),
    )
    week_old = make_prompt(title="Email", content="Body.", updated_at=FIXED_NOW - timedelta(days=7))

    assert score_prompt(boosted, "email", FIXED_NOW).score == pytest.approx(52.8)
    assert score_prompt(week_old, "email", FIXED_NOW).score == 40.0


def test_blank_query_scores_one_without_boosts(make_prompt: PromptFactory) -> None:
    prompt = make_prompt(is_favorite=True, updated_at=FIXED_NOW)

    scored = score_prompt(prompt, "   ", FIXED_NOW)

    assert scored.score == 1.0
    assert scored.matches.title is False


def test_marketing_copy_generator_outranks_content_match(make_prompt: PromptFactory) -> None:
    generator = make_prompt(
        title="Marketing Copy Generator",
        content="Write copy.",
        tags=["sales"],
    )
    blog = make_prompt(title="Blog Post Writer", content="Share marketing tactics with readers.")
    recipe = make_prompt(title="Recipe Ideas", content="Dinner plans.")

    results = search_prompts(
        [recipe, blog, generator],
        SearchFilters(query="marketing", sort_by=SortKey.RELEVANCE),
        now=FIXED_NOW,
    )

    assert _ids(results) == [generator.id, blog.id]


def test_exact_title_beats_content_match_and_misses_are_excluded(
    make_prompt: PromptFactory,
) -> None:
    exact = make_prompt(title="marketing", content="Body.")
    content_only = make_prompt(title="Notes", content="marketing notes")
    unrelated = make_prompt(title="Zebra", content="Quiet.")

    results = search_prompts(
        [content_only, unrelated, exact],
        SearchFilters(query="marketing", sort_by=SortKey.RELEVANCE),
        now=FIXED_NOW,
    )

    assert _ids(results) == [exact.id, content_only.id]
    assert results[0].score > results[1].score > 0


def test_category_filter_only_returns_matching_category(make_prompt: PromptFactory) -> None:
    collection = [
        make_prompt(category=PromptCategory.MARKETING),
        make_prompt(category=PromptCategory.DESIGN),
        make_prompt(category=PromptCategory.MARKETING),
    ]

    results = search_prompts(
        collection, SearchFilters(category=PromptCategory.MARKETING), now=FIXED_NOW
    )

    assert len(results) == 2
    assert all(result.prompt.category is PromptCategory.MARKETING for result in results)


def test_empty_query_passes_through_other_filters(make_prompt: PromptFactory) -> None:
    collection = [
        make_prompt(is_favorite=True),
        make_prompt(),
        make_prompt(is_favorite=True),
    ]

    results = search_prompts(collection, SearchFilters(favorites_only=True), now=FIXED_NOW)

    assert len(results) == sum(1 for prompt in collection if prompt.is_favorite)
    assert all(result.score == 1.0 for result in results)


def test_required_tags_match_by_case_insensitive_substring(make_prompt: PromptFactory) -> None:
    both = make_prompt(tags=["email-marketing", "launch"])
    one = make_prompt(tags=["email"])

    results = search_prompts([both, one], SearchFilters(tags=("EMAIL", "launch")), now=FIXED_NOW)

    assert _ids(results) == [both.id]


def test_date_range_and_length_bounds_are_inclusive(make_prompt: PromptFactory) -> None:
    start = FIXED_NOW - timedelta(days=10)
    end = FIXED_NOW - timedelta(days=5)
    at_start = make_prompt(created_at=start, content="12345")
    at_end = make_prompt(created_at=end, content="1234567890")
    too_early = make_prompt(created_at=start - timedelta(seconds=1), content="12345")
    too_long = make_prompt(created_at=end, content="12345678901")

    results = search_prompts(
        [at_start, at_end, too_early, too_long],
        SearchFilters(
            date_range=DateRange(start=start, end=end),
            min_length=5,
            max_length=10,
            sort_by=SortKey.CREATED_AT,
            sort_order=SortOrder.ASC,
        ),
        now=FIXED_NOW,
    )

    assert _ids(results) == [at_start.id, at_end.id]


def test_title_sort_is_case_insensitive_in_both_directions(make_prompt: PromptFactory) -> None:
    collection = [make_prompt(title="beta"), make_prompt(title="Alpha"), make_prompt(title="gamma")]

    ascending = search_prompts(
        collection, SearchFilters(sort_by=SortKey.TITLE, sort_order=SortOrder.ASC)
    )
    descending = search_prompts(collection, SearchFilters(sort_by=SortKey.TITLE))

    assert [result.prompt.title for result in ascending] == ["Alpha", "beta", "gamma"]
    assert [result.prompt.title for result in descending] == ["gamma", "beta", "Alpha"]


def test_default_sort_is_most_recently_updated_first(make_prompt: PromptFactory) -> None:
    old = make_prompt(updated_at=FIXED_NOW - timedelta(days=3))
    new = make_prompt(updated_at=FIXED_NOW - timedelta(days=1))

    assert _ids(search_prompts([old, new], now=FIXED_NOW)) == [new.id, old.id]


def test_relevance_sort_ignores_order_and_is_stable(make_prompt: PromptFactory) -> None:
    first = make_prompt(title="Notes", content="seo tips")
    second = make_prompt(title="Memo", content="seo ideas")
    best = make_prompt(title="SEO", content="Body.")

    results = search_prompts(
        [first, second, best],
        SearchFilters(query="seo", sort_by=SortKey.RELEVANCE, sort_order=SortOrder.ASC),
        now=FIXED_NOW,
    )

    assert _ids(results) == [best.id, first.id, second.id]


def test_suggestions_list_titles_before_tags(make_prompt: PromptFactory) -> None:
    collection = [
        make_prompt(title="Email Launch", tags=["email"]),
        make_prompt(title="Email Follow-up", tags=["Emails", "sales"]),
        make_prompt(title="Email Launch"),
    ]

    assert suggest_completions(collection, "EMA") == [
        "Email Launch",
        "Email Follow-up",
        "email",
        "Emails",
    ]
    assert suggest_completions(collection, "ema", limit=2) == ["Email Launch", "Email Follow-up"]
    assert suggest_completions(collection, "  ") == []


def test_filter_stats_summarise_collection(make_prompt: PromptFactory) -> None:
    collection = [
        make_prompt(category=PromptCategory.WRITING, tags=["a", "b"], is_favorite=True),
        make_prompt(category=PromptCategory.WRITING, tags=["a"]),
        make_prompt(category=PromptCategory.DESIGN),
    ]
    results = search_prompts(collection, SearchFilters(favorites_only=True), now=FIXED_NOW)

    stats = filter_stats(collection, results)

    assert stats.total_prompts == 3
    assert stats.filtered_prompts == 1
    assert stats.categories_count == 2
    assert stats.tags_count == 2
    assert stats.favorite_count == 1
    assert stats.filter_efficiency == pytest.approx(100 / 3)
    assert filter_stats([], []).filter_efficiency == 0.0


def test_search_filters_report_active_state() -> None:
    assert SearchFilters().has_active_filters() is False
    assert SearchFilters(query="x").has_active_filters() is True


def test_naive_date_range_and_now_are_read_as_utc(make_prompt: PromptFactory) -> None:
    inside = make_prompt(created_at=FIXED_NOW - timedelta(days=2), updated_at=FIXED_NOW)
    outside = make_prompt(created_at=FIXED_NOW - timedelta(days=20))
    naive_start = (FIXED_NOW - timedelta(days=5)).replace(tzinfo=None)
    naive_now = FIXED_NOW.replace(tzinfo=None)

    results = search_prompts(
        [inside, outside],
        SearchFilters(query="prompt", date_range=DateRange(start=naive_start)),
        now=naive_now,
    )

    assert _ids(results) == [inside.id]
    assert results[0].score == pytest.approx(score_prompt(inside, "prompt", FIXED_NOW).score)
    assert DateRange(end=datetime(2026, 1, 1)).end == datetime(2026, 1, 1, tzinfo=UTC)
