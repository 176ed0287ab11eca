"""Shared constants and test doubles for the PromptDeck test-suite."""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from models.prompt_model import Prompt

FIXED_NOW = datetime(2026, 9, 1, 12, 0, tzinfo=UTC)
STALE = FIXED_NOW - timedelta(days=30)

PromptFactory = Callable[..., Prompt]


class FakeRemote:
    """In-memory RemotePromptClient double that records every call."""

    def __init__(
        self,
        prompts: Iterable[Prompt] = (),
        *,
        fail_on: Iterable[str] = (),
        remote_id_prefix: str | None = None,
    ) -> None:
        self.prompts = list(prompts)
        self.fail_on = set(fail_on)
        self.remote_id_prefix = remote_id_prefix
        self.create_gate: asyncio.Event | None = None
        self.calls: list[tuple[Any, ...]] = []
        self.closed = False

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise RuntimeError(f"remote {operation} exploded")

    async def list(self, *, limit: int) -> list[Prompt]:
        self.calls.append(("list", limit))
        self._maybe_fail("list")
        return self.prompts[:limit]

    async def create(self, prompt: Prompt) -> Prompt:
        self.calls.append(("create", prompt.id))
        if self.create_gate is not None:
            await self.create_gate.wait()
        self._maybe_fail("create")
        remote_id = f"{self.remote_id_prefix}{prompt.id}" if self.remote_id_prefix else prompt.id
        return dataclasses.replace(prompt, id=remote_id)

    async def update(self, prompt_id: str, changes: Mapping[str, Any]) -> Prompt:
        self.calls.append(("update", prompt_id, dict(changes)))
        self._maybe_fail("update")
        return Prompt(id=prompt_id, title="remote", content="remote", category="writing")

    async def delete(self, prompt_id: str) -> bool:
        self.calls.append(("delete", prompt_id))
        self._maybe_fail("delete")
        return True

    async def aclose(self) -> None:
        self.closed = True

    def operations(self) -> list[str]:
        return [call[0] for call in self.calls]
