"""Argument parser for the PromptDeck CLI.

Updates:
  v0.4.0 - 2026-09-22 - Prompt CRUD, search, suggestion, hint, sync, and completion commands.
  v0.3.0 - 2025-12-05 - Split parser construction from parsing for tests.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

from models.category_model import PromptCategory
from models.search_model import SortKey, SortOrder

if TYPE_CHECKING:
    from collections.abc import Sequence

_CATEGORY_CHOICES = [category.value for category in PromptCategory]


def _add_tag_argument(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument(
        "--tag",
        dest="tags",
        action="append",
        default=None,
        help=help_text,
    )


def build_parser() -> argparse.ArgumentParser:
    """Return the configured top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="promptdeck",
        description="Manage, search, and sync reusable prompts.",
    )
    parser.add_argument(
        "--logging-config",
        type=Path,
        default=None,
        help="Path to logging configuration file (INI format)",
    )
    parser.add_argument(
        "--print-settings",
        action="store_true",
        help="Print resolved settings and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("list", help="List every prompt, most recently updated first.")

    show_parser = subparsers.add_parser("show", help="Display a single prompt.")
    show_parser.add_argument("prompt_id", help="Prompt identifier.")

    add_parser = subparsers.add_parser("add", help="Create a prompt.")
    add_parser.add_argument("--title", required=True, help="Prompt title.")
    add_parser.add_argument("--content", required=True, help="Prompt body text.")
    add_parser.add_argument(
        "--category",
        required=True,
        choices=_CATEGORY_CHOICES,
        help="Prompt category.",
    )
    _add_tag_argument(add_parser, "Tag to attach (repeat for several tags).")
    add_parser.add_argument("--favorite", action="store_true", help="Mark as favourite.")

    edit_parser = subparsers.add_parser("edit", help="Update fields of an existing prompt.")
    edit_parser.add_argument("prompt_id", help="Prompt identifier.")
    edit_parser.add_argument("--title", default=None, help="New title.")
    edit_parser.add_argument("--content", default=None, help="New body text.")
    edit_parser.add_argument(
        "--category",
        default=None,
        choices=_CATEGORY_CHOICES,
        help="New category.",
    )
    _add_tag_argument(edit_parser, "Replacement tag (repeat; replaces the whole tag set).")

    delete_parser = subparsers.add_parser("delete", help="Delete a prompt.")
    delete_parser.add_argument("prompt_id", help="Prompt identifier.")

    favorite_parser = subparsers.add_parser("favorite", help="Toggle a prompt's favourite flag.")
    favorite_parser.add_argument("prompt_id", help="Prompt identifier.")

    search_parser = subparsers.add_parser("search", help="Rank and filter prompts.")
    search_parser.add_argument("query", nargs="?", default="", help="Free-text query.")
    search_parser.add_argument("--category", default=None, choices=_CATEGORY_CHOICES)
    _add_tag_argument(search_parser, "Required tag substring (repeat; all must match).")
    search_parser.add_argument(
        "--favorites",
        action="store_true",
        help="Only include favourite prompts.",
    )
    search_parser.add_argument(
        "--since",
        default=None,
        help="Earliest creation time (ISO-8601 date or datetime, inclusive).",
    )
    search_parser.add_argument(
        "--until",
        default=None,
        help="Latest creation time (ISO-8601 date or datetime, inclusive).",
    )
    search_parser.add_argument(
        "--sort",
        default=None,
        choices=[key.value for key in SortKey],
        help="Sort key (default: relevance with a query, updated_at otherwise).",
    )
    search_parser.add_argument(
        "--order",
        default=SortOrder.DESC.value,
        choices=[order.value for order in SortOrder],
        help="Sort direction for non-relevance sorts (default: desc).",
    )
    search_parser.add_argument("--min-length", type=int, default=0, help="Minimum body length.")
    search_parser.add_argument(
        "--max-length",
        type=int,
        default=None,
        help="Maximum body length (default: unbounded).",
    )

    suggest_parser = subparsers.add_parser("suggest", help="Autocomplete titles and tags.")
    suggest_parser.add_argument("partial", help="Partial text to complete.")
    suggest_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum suggestions (default: suggestion_limit setting).",
    )

    hints_parser = subparsers.add_parser(
        "hints",
        help="Show keyword and topic ideas for a category.",
    )
    hints_parser.add_argument("category", choices=_CATEGORY_CHOICES)

    sync_parser = subparsers.add_parser("sync", help="Control remote mirroring.")
    sync_parser.add_argument("action", choices=("enable", "disable", "status"))

    complete_parser = subparsers.add_parser(
        "complete",
        help="Run a prompt through the configured LiteLLM model.",
    )
    complete_parser.add_argument("prompt_id", help="Prompt identifier.")
    complete_parser.add_argument(
        "--instruction",
        default=None,
        help="System instruction sent ahead of the prompt body.",
    )

    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Return parsed CLI arguments."""
    return build_parser().parse_args(argv)
