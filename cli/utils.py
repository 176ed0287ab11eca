"""Shared CLI utility functions for PromptDeck commands.

Updates:
  v0.2.0 - 2026-09-22 - Add prompt formatting and ISO date argument parsing.
  v0.1.0 - 2025-12-04 - Extract stdout logging, masking, and path helpers.
"""

from __future__ import annotations

from datetime import UTC, datetime, time
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing helpers
    from logging import Logger

    from models.prompt_model import Prompt


def print_and_log(logger: Logger, level: int, message: str) -> None:
    """Log *message* at *level* and mirror it to stdout."""
    logger.log(level, message)
    print(message)


def mask_secret(value: str | None) -> str:
    """Return an obfuscated representation of secret configuration values."""
    if not value:
        return "not set"
    secret = value.strip()
    if len(secret) <= 6:
        return "set (****)"
    return f"set ({secret[:4]}...{secret[-4:]})"


def describe_path(path_value: object, *, allow_missing_file: bool = False) -> str:
    """Return a human-friendly description of a file path."""
    if path_value is None:
        return "not set"
    resolved = Path(str(path_value)).expanduser()
    if resolved.exists():
        if resolved.is_dir():
            return f"{resolved} (exists but is a directory)"
        return f"{resolved} (exists)"
    message = f"{resolved} (missing - created on demand)" if allow_missing_file else (
        f"{resolved} (missing)"
    )
    if not resolved.parent.exists():
        message += f", parent missing: {resolved.parent}"
    return message


def parse_datetime_arg(value: str | None, *, end_of_day: bool = False) -> datetime | None:
    """Parse an ISO date or datetime; bare dates cover the whole day when *end_of_day*.

    Raises:
        ValueError: when *value* is not ISO-8601.
    """
    if value is None or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    parsed = datetime.fromisoformat(text)
    if len(text) == 10 and end_of_day:
        parsed = datetime.combine(parsed.date(), time.max)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_prompt_line(prompt: Prompt, *, score: float | None = None) -> str:
    """Return a one-line listing entry for *prompt*."""
    star = "*" if prompt.is_favorite else " "
    tags = ", ".join(prompt.tags) if prompt.tags else "-"
    prefix = f"{score:7.2f}  " if score is not None else ""
    return f"{prefix}{star} {prompt.id}  {prompt.title} [{prompt.category.value}]  tags: {tags}"


def format_prompt_detail(prompt: Prompt) -> str:
    """Return a multi-line description of *prompt*."""
    lines = [
        f"ID: {prompt.id}",
        f"Title: {prompt.title}",
        f"Category: {prompt.category.label}",
        f"Tags: {', '.join(prompt.tags) if prompt.tags else '-'}",
        f"Favourite: {'yes' if prompt.is_favorite else 'no'}",
        f"Created: {prompt.created_at.isoformat()}",
        f"Updated: {prompt.updated_at.isoformat()}",
        "",
        prompt.content,
    ]
    return "\n".join(lines)
