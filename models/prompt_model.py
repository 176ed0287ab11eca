"""Prompt data model definitions.

Updates: v0.3.1 - 2026-10-19 - Read naive timestamps as UTC; drop the unused tag lookup.
Updates: v0.3.0 - 2026-09-14 - Store categories as PromptCategory and reject unknown slugs.
Updates: v0.2.1 - 2026-09-02 - Collapse duplicate tags case-insensitively.
Updates: v0.2.0 - 2026-08-30 - Add camelCase wire records shared by storage and the remote service.
Updates: v0.1.0 - 2026-08-24 - Initial Prompt schema with serialization helpers.
"""
from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from .category_model import PromptCategory, parse_category

# Attribute name -> wire/storage record key.
WIRE_FIELDS: dict[str, str] = {
    "id": "id",
    "title": "title",
    "content": "content",
    "category": "category",
    "tags": "tags",
    "is_favorite": "isFavorite",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
}

MUTABLE_FIELDS: frozenset[str] = frozenset(
    {"title", "content", "category", "tags", "is_favorite"}
)
IMMUTABLE_FIELDS: frozenset[str] = frozenset({"id", "created_at", "updated_at"})

_TIMESTAMP_STEP = timedelta(microseconds=1)


def _utc_now() -> datetime:
    """Return an aware UTC timestamp."""
    return datetime.now(UTC)


def new_prompt_id() -> str:
    """Return a fresh opaque prompt identifier."""
    return str(uuid.uuid4())


def next_timestamp(previous: datetime | None, now: datetime | None = None) -> datetime:
    """Return *now* or the smallest instant strictly after *previous*, whichever is later."""
    current = _ensure_datetime(now) if now is not None else _utc_now()
    if previous is not None and current <= previous:
        return previous + _TIMESTAMP_STEP
    return current


def as_utc(value: datetime) -> datetime:
    """Return *value* as an aware datetime; naive values are taken to be UTC."""
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _ensure_datetime(value: Any) -> datetime:
    """Parse incoming datetime values (isoformat strings or datetime)."""
    if isinstance(value, datetime):
        return as_utc(value)
    if value is None or value == "":
        raise ValueError("timestamp is required")
    text = str(value).strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    return as_utc(datetime.fromisoformat(text))


def _serialize_list(items: Iterable[Any] | None) -> list[Any]:
    """Normalize iterable inputs into JSON-serialisable lists."""
    if items is None:
        return []
    if isinstance(items, str):
        return [items]
    return list(items)


def normalize_tags(items: Iterable[Any] | None) -> list[str]:
    """Return a trimmed tag list with blank and duplicate entries collapsed."""
    tags: list[str] = []
    seen: set[str] = set()
    for raw in _serialize_list(items):
        text = str(raw).strip()
        if not text:
            continue
        key = text.casefold()
        if key in seen:
            continue
        seen.add(key)
        tags.append(text)
    return tags


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass(slots=True)
class Prompt:
    """A titled, tagged, categorised block of reusable text."""
    id: str
    title: str
    content: str
    category: PromptCategory
    tags: list[str] = field(default_factory=list)
    is_favorite: bool = False
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Normalise category, tag, and timestamp inputs."""
        self.category = parse_category(self.category)
        self.tags = normalize_tags(self.tags)
        self.created_at = as_utc(self.created_at)
        self.updated_at = as_utc(self.updated_at)

    @property
    def content_length(self) -> int:
        """Return the number of characters in the prompt body."""
        return len(self.content)

    def to_record(self, *, include_id: bool = True) -> dict[str, Any]:
        """Return the camelCase record used by storage and the remote service."""
        record: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "category": self.category.value,
            "tags": list(self.tags),
            "isFavorite": self.is_favorite,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
        if not include_id:
            record.pop("id")
        return record

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> Prompt:
        """Create a Prompt from a storage or remote record.

        Raises:
            KeyError: when a required field is missing.
            ValueError: when a field holds an invalid value.
        """
        prompt_id = str(data["id"]).strip()
        if not prompt_id:
            raise ValueError("prompt record has an empty id")
        created_at = _ensure_datetime(data.get("createdAt", data.get("created_at")))
        updated_raw = data.get("updatedAt", data.get("updated_at"))
        updated_at = _ensure_datetime(updated_raw) if updated_raw else created_at
        return cls(
            id=prompt_id,
            title=str(data["title"]),
            content=str(data["content"]),
            category=parse_category(data.get("category")),
            tags=_serialize_list(data.get("tags")),
            is_favorite=_coerce_bool(data.get("isFavorite", data.get("is_favorite", False))),
            created_at=created_at,
            updated_at=updated_at,
        )


def changes_to_record(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Translate attribute-keyed changes into a camelCase wire payload."""
    payload: dict[str, Any] = {}
    for key, value in changes.items():
        wire_key = WIRE_FIELDS.get(key, key)
        if isinstance(value, PromptCategory):
            value = value.value
        elif isinstance(value, datetime):
            value = value.isoformat()
        elif key == "tags":
            value = list(value)
        payload[wire_key] = value
    return payload


__all__ = [
    "IMMUTABLE_FIELDS",
    "MUTABLE_FIELDS",
    "Prompt",
    "WIRE_FIELDS",
    "as_utc",
    "changes_to_record",
    "new_prompt_id",
    "next_timestamp",
    "normalize_tags",
]
