"""Tests for the httpx-backed remote prompt client."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from core.exceptions import SyncError
from core.remote import HttpRemotePromptClient, RemotePromptClient
from core.retry import RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable

    from .support import PromptFactory

BASE_URL = "https://prompts.example.test/api"
FAST_RETRY = RetryPolicy(max_attempts=3, base_delay_seconds=0.0)


def _record(prompt_id: str = "srv-1", **overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": prompt_id,
        "title": "Remote prompt",
        "content": "Body",
        "category": "writing",
        "tags": ["remote"],
        "isFavorite": False,
        "createdAt": "2026-09-01T12:00:00Z",
        "updatedAt": "2026-09-01T12:00:00Z",
    }
    record.update(overrides)
    return record


def _client(
    handler: Callable[[httpx.Request], httpx.Response],
    policy: RetryPolicy = FAST_RETRY,
) -> HttpRemotePromptClient:
    return HttpRemotePromptClient(
        f"{BASE_URL}/",
        retry_policy=policy,
        client_factory=lambda: httpx.AsyncClient(
            base_url=BASE_URL, transport=httpx.MockTransport(handler)
        ),
    )


def test_client_satisfies_protocol_and_normalises_url() -> None:
    client = HttpRemotePromptClient(f"{BASE_URL}/")

    assert isinstance(client, RemotePromptClient)
    assert client.base_url == BASE_URL
    with pytest.raises(ValueError):
        HttpRemotePromptClient("  ")


@pytest.mark.asyncio()
@pytest.mark.parametrize("wrap", [False, True])
async def test_list_accepts_plain_and_enveloped_payloads(wrap: bool) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        items = [_record("srv-1"), _record("srv-2", isFavorite=True)]
        return httpx.Response(200, json={"prompts": items} if wrap else items)

    client = _client(handler)
    prompts = await client.list(limit=5000)
    await client.aclose()

    assert [prompt.id for prompt in prompts] == ["srv-1", "srv-2"]
    assert prompts[1].is_favorite is True
    assert seen[0].method == "GET"
    assert seen[0].url.path == "/api/prompts"
    assert seen[0].url.params["limit"] == "1000"


@pytest.mark.asyncio()
async def test_create_omits_local_id(make_prompt: PromptFactory) -> None:
    bodies: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(201, json={"prompt": _record("srv-9")})

    client = _client(handler)
    created = await client.create(make_prompt(tags=["email"], is_favorite=True))
    await client.aclose()

    assert created.id == "srv-9"
    assert "id" not in bodies[0]
    assert bodies[0]["isFavorite"] is True
    assert bodies[0]["tags"] == ["email"]


@pytest.mark.asyncio()
async def test_update_sends_camel_case_patch() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json=_record("srv-1", isFavorite=True))

    client = _client(handler)
    await client.update("srv-1", {"is_favorite": True, "tags": ("a", "b")})
    await client.aclose()

    assert requests[0].method == "PATCH"
    assert requests[0].url.path == "/api/prompts/srv-1"
    assert json.loads(requests[0].content) == {"isFavorite": True, "tags": ["a", "b"]}


@pytest.mark.asyncio()
async def test_transient_failures_are_retried() -> None:
    statuses = iter([503, 503, 204])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(next(statuses))

    client = _client(handler)

    assert await client.delete("srv-1") is True
    await client.aclose()


@pytest.mark.asyncio()
async def test_client_errors_raise_sync_error_without_retry() -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(404, json={"error": "missing"})

    client = _client(handler)
    with pytest.raises(SyncError):
        await client.delete("ghost")
    await client.aclose()

    assert len(calls) == 1


@pytest.mark.asyncio()
async def test_invalid_payload_raises_sync_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": True})

    client = _client(handler)
    with pytest.raises(SyncError):
        await client.list(limit=10)
    await client.aclose()
