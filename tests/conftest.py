"""Pytest fixtures shared across the PromptDeck test-suite.

Updates:
  v0.2.0 - 2026-09-22 - Provide prompt factories and temporary SQLite repositories.
  v0.1.0 - 2025-12-10 - Initial shared hooks.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from core.repository import KeyValueRepository
from models.category_model import PromptCategory
from models.prompt_model import Prompt

from .support import STALE, PromptFactory


@pytest.fixture()
def make_prompt() -> PromptFactory:
    """Return a factory building prompts with stable, overridable defaults."""
    counter = iter(range(1, 10_000))

    def _factory(**overrides: Any) -> Prompt:
        index = next(counter)
        values: dict[str, Any] = {
            "id": f"prompt-{index}",
            "title": f"Prompt {index}",
            "content": "Reusable body text.",
            "category": PromptCategory.WRITING,
            "tags": [],
            "is_favorite": False,
            "created_at": STALE,
            "updated_at": STALE,
        }
        values.update(overrides)
        return Prompt(**values)

    return _factory


@pytest.fixture()
def kv_repository(tmp_path: Path) -> KeyValueRepository:
    return KeyValueRepository(tmp_path / "promptdeck.db")
