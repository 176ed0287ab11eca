"""CLI command handlers for PromptDeck.

Each handler is a coroutine receiving the started manager (``None`` for
commands that do not need one), the parsed arguments, the CLI logger, and the
resolved settings. Handlers return the process exit code.

Updates:
  v0.33.0 - 2026-09-22 - Prompt CRUD, search, sync, hint, and completion handlers.
  v0.32.0 - 2025-12-04 - Introduce CommandSpec dispatch table.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core import (
    CompletionError,
    ValidationError,
    build_completion_client,
    build_prompt_messages,
    keyword_suggestions,
    topic_suggestions,
)
from models.category_model import parse_category
from models.search_model import DateRange, SearchFilters, SortKey, SortOrder

from .utils import format_prompt_detail, format_prompt_line, parse_datetime_arg, print_and_log

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from config import PromptDeckSettings
    from core.prompt_manager import PromptManager
else:  # pragma: no cover - runtime placeholders for type-only imports
    PromptDeckSettings = PromptManager = object

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_SETTINGS = 2
EXIT_INIT = 3
EXIT_VALIDATION = 4
EXIT_NOT_FOUND = 5
EXIT_COMPLETION = 6

CommandHandler = Callable[
    [PromptManager | None, argparse.Namespace, logging.Logger, PromptDeckSettings],
    Awaitable[int],
]


@dataclass(frozen=True)
class CommandSpec:
    """Metadata for dispatching CLI command handlers."""

    handler: CommandHandler
    requires_manager: bool = True


def _require_manager(manager: PromptManager | None) -> PromptManager:
    if manager is None:
        raise ValueError("PromptDeck manager is required for this command.")
    return manager


def _not_found(logger: logging.Logger, prompt_id: str) -> int:
    logger.error("Prompt not found: %s", prompt_id)
    return EXIT_NOT_FOUND


async def run_list(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
    settings: PromptDeckSettings,
) -> int:
    active = _require_manager(manager)
    results = active.search(SearchFilters())
    if not results:
        print("No prompts stored yet.")
        return EXIT_OK
    for result in results:
        print(format_prompt_line(result.prompt))
    print(f"\n{len(results)} prompt(s)")
    return EXIT_OK


async def run_show(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
    settings: PromptDeckSettings,
) -> int:
    prompt = _require_manager(manager).get_prompt(args.prompt_id)
    if prompt is None:
        return _not_found(logger, args.prompt_id)
    print(format_prompt_detail(prompt))
    return EXIT_OK


async def run_add(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
    settings: PromptDeckSettings,
) -> int:
    try:
        prompt = _require_manager(manager).create_prompt(
            args.title,
            args.content,
            args.category,
            args.tags or (),
            is_favorite=bool(args.favorite),
        )
    except ValidationError as exc:
        logger.error("Cannot create prompt: %s", exc)
        return EXIT_VALIDATION
    print_and_log(logger, logging.INFO, f"Created prompt {prompt.id}")
    return EXIT_OK


async def run_edit(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
    settings: PromptDeckSettings,
) -> int:
    changes: dict[str, Any] = {}
    for field_name in ("title", "content", "category"):
        value = getattr(args, field_name, None)
        if value is not None:
            changes[field_name] = value
    if args.tags is not None:
        changes["tags"] = args.tags
    if not changes:
        logger.error("Nothing to update; pass --title, --content, --category, or --tag.")
        return EXIT_VALIDATION
    try:
        updated = _require_manager(manager).update_prompt(args.prompt_id, changes)
    except ValidationError as exc:
        logger.error("Cannot update prompt: %s", exc)
        return EXIT_VALIDATION
    if updated is None:
        return _not_found(logger, args.prompt_id)
    print_and_log(logger, logging.INFO, f"Updated prompt {updated.id}")
    return EXIT_OK


async def run_delete(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
    settings: PromptDeckSettings,
) -> int:
    if not _require_manager(manager).delete_prompt(args.prompt_id):
        return _not_found(logger, args.prompt_id)
    print_and_log(logger, logging.INFO, f"Deleted prompt {args.prompt_id}")
    return EXIT_OK


async def run_favorite(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
    settings: PromptDeckSettings,
) -> int:
    updated = _require_manager(manager).toggle_favorite(args.prompt_id)
    if updated is None:
        return _not_found(logger, args.prompt_id)
    state = "marked as favourite" if updated.is_favorite else "removed from favourites"
    print_and_log(logger, logging.INFO, f"Prompt {updated.id} {state}")
    return EXIT_OK


def _filters_from_args(args: argparse.Namespace) -> SearchFilters:
    query = args.query or ""
    if args.sort is not None:
        sort_by = SortKey(args.sort)
    else:
        sort_by = SortKey.RELEVANCE if query.strip() else SortKey.UPDATED_AT
    return SearchFilters(
        query=query,
        category=parse_category(args.category) if args.category else None,
        tags=tuple(args.tags or ()),
        favorites_only=bool(args.favorites),
        date_range=DateRange(
            start=parse_datetime_arg(args.since),
            end=parse_datetime_arg(args.until, end_of_day=True),
        ),
        sort_by=sort_by,
        sort_order=SortOrder(args.order),
        min_length=max(0, int(args.min_length or 0)),
        max_length=args.max_length,
    )


async def run_search(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
    settings: PromptDeckSettings,
) -> int:
    active = _require_manager(manager)
    try:
        filters = _filters_from_args(args)
    except ValueError as exc:
        logger.error("Invalid search filters: %s", exc)
        return EXIT_VALIDATION
    results = active.search(filters)
    for result in results:
        print(format_prompt_line(result.prompt, score=result.score))
    stats = active.filter_stats(results)
    print(
        f"\n{stats.filtered_prompts} of {stats.total_prompts} prompt(s) "
        f"({stats.filter_efficiency:.0f}%), {stats.categories_count} categories, "
        f"{stats.tags_count} tags, {stats.favorite_count} favourites"
    )
    return EXIT_OK


async def run_suggest(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
    settings: PromptDeckSettings,
) -> int:
    suggestions = _require_manager(manager).suggest(args.partial, limit=args.limit)
    if not suggestions:
        print("No suggestions.")
        return EXIT_OK
    for suggestion in suggestions:
        print(suggestion)
    return EXIT_OK


async def run_hints(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
    settings: PromptDeckSettings,
) -> int:
    try:
        category = parse_category(args.category)
    except ValueError as exc:
        logger.error("%s", exc)
        return EXIT_VALIDATION
    keywords = keyword_suggestions(category)
    topics = topic_suggestions(category)
    if not keywords and not topics:
        print(f"No hints available for {category.label}.")
        return EXIT_OK
    print(f"Keywords for {category.label}:")
    for keyword in keywords:
        print(f"  {keyword.keyword} ({keyword.relevance:.2f})")
    print(f"\nTopics for {category.label}:")
    for topic in topics:
        print(f"  {topic.topic}: {topic.description}")
    return EXIT_OK


async def run_sync(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
    settings: PromptDeckSettings,
) -> int:
    active = _require_manager(manager)
    match args.action:
        case "enable":
            if not await active.enable_sync():
                logger.error("Sync could not be enabled; local prompts are unchanged.")
                return EXIT_FAILURE
            print_and_log(
                logger,
                logging.INFO,
                f"Sync enabled; {len(active.prompts)} prompt(s) loaded from remote.",
            )
        case "disable":
            await active.disable_sync()
            print_and_log(logger, logging.INFO, "Sync disabled.")
        case _:
            availability = "configured" if active.sync_available else "not configured"
            state = "enabled" if active.sync_enabled else "disabled"
            print(f"Sync: {state} (remote {availability})")
    return EXIT_OK


async def run_complete(
    manager: PromptManager | None,
    args: argparse.Namespace,
    logger: logging.Logger,
    settings: PromptDeckSettings,
) -> int:
    prompt = _require_manager(manager).get_prompt(args.prompt_id)
    if prompt is None:
        return _not_found(logger, args.prompt_id)
    try:
        client = build_completion_client(settings)
        text = await asyncio.to_thread(
            client.complete, build_prompt_messages(prompt, args.instruction)
        )
    except CompletionError as exc:
        logger.error("Completion failed: %s", exc)
        return EXIT_COMPLETION
    print(text)
    return EXIT_OK


COMMAND_SPECS: dict[str | None, CommandSpec] = {
    "list": CommandSpec(run_list),
    "show": CommandSpec(run_show),
    "add": CommandSpec(run_add),
    "edit": CommandSpec(run_edit),
    "delete": CommandSpec(run_delete),
    "favorite": CommandSpec(run_favorite),
    "search": CommandSpec(run_search),
    "suggest": CommandSpec(run_suggest),
    "hints": CommandSpec(run_hints, requires_manager=False),
    "sync": CommandSpec(run_sync),
    "complete": CommandSpec(run_complete),
}

__all__ = [
    "COMMAND_SPECS",
    "EXIT_COMPLETION",
    "EXIT_FAILURE",
    "EXIT_INIT",
    "EXIT_NOT_FOUND",
    "EXIT_OK",
    "EXIT_SETTINGS",
    "EXIT_VALIDATION",
    "CommandSpec",
]
