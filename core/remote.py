"""Remote prompt service protocol and the httpx-backed REST client.

Updates:
  v0.2.0 - 2026-09-12 - Retry transient HTTP failures with exponential backoff.
  v0.1.1 - 2026-09-09 - Accept list payloads wrapped in a ``prompts`` envelope.
  v0.1.0 - 2026-09-08 - Introduce RemotePromptClient protocol and HTTP client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx

from models.prompt_model import Prompt, changes_to_record

from .exceptions import SyncError
from .retry import RetryPolicy, async_retry, is_retryable_httpx_error

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

MAX_LIST_LIMIT = 1000


@runtime_checkable
class RemotePromptClient(Protocol):
    """Contract consumed by the sync coordinator.

    Implementations raise on failure; callers treat any exception as "call threw".
    """

    async def list(self, *, limit: int) -> list[Prompt]:
        """Return up to *limit* prompts held remotely."""
        ...

    async def create(self, prompt: Prompt) -> Prompt:
        """Store *prompt* (its id is not sent) and return the remote copy with its id."""
        ...

    async def update(self, prompt_id: str, changes: Mapping[str, Any]) -> Prompt:
        """Apply attribute-keyed *changes* to the remote prompt."""
        ...

    async def delete(self, prompt_id: str) -> bool:
        """Remove the remote prompt."""
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...


def _parse_prompt(payload: Any, operation: str) -> Prompt:
    if isinstance(payload, dict) and isinstance(payload.get("prompt"), dict):
        payload = payload["prompt"]
    if not isinstance(payload, dict):
        raise SyncError(f"Remote {operation} returned an unexpected payload")
    try:
        return Prompt.from_record(payload)
    except (KeyError, TypeError, ValueError) as exc:
        raise SyncError(f"Remote {operation} returned an invalid prompt: {exc}") from exc


def _parse_prompt_list(payload: Any) -> list[Prompt]:
    items = payload.get("prompts") if isinstance(payload, dict) else payload
    if not isinstance(items, list):
        raise SyncError("Remote list returned an unexpected payload")
    return [_parse_prompt(item, "list") for item in items]


@dataclass(slots=True)
class HttpRemotePromptClient:
    """HTTPX-backed client for a REST prompt service.

    Endpoints: ``GET /prompts?limit=N``, ``POST /prompts``,
    ``PATCH /prompts/{id}``, ``DELETE /prompts/{id}``.
    """

    base_url: str
    timeout: float = 15.0
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    client_factory: Callable[[], httpx.AsyncClient] | None = None
    _client: httpx.AsyncClient | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Validate and normalise the base URL."""
        if not self.base_url or not self.base_url.strip():
            raise ValueError("Remote base URL is required")
        self.base_url = self.base_url.strip().rstrip("/")

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            if self.client_factory is not None:
                self._client = self.client_factory()
            else:
                self._client = httpx.AsyncClient(
                    base_url=self.base_url,
                    headers={"Accept": "application/json"},
                    timeout=self.timeout,
                )
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        json: Any | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> httpx.Response:
        client = self._get_client()

        async def _send_request() -> httpx.Response:
            response = await client.request(method, path, json=json, params=params)
            response.raise_for_status()
            return response

        try:
            return await async_retry(
                _send_request,
                policy=self.retry_policy,
                should_retry=is_retryable_httpx_error,
            )
        except httpx.HTTPError as exc:
            raise SyncError(f"Remote {operation} request failed: {exc}") from exc

    @staticmethod
    def _json(response: httpx.Response, operation: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise SyncError(f"Remote {operation} returned invalid JSON") from exc

    async def list(self, *, limit: int) -> list[Prompt]:
        clamped = max(1, min(int(limit), MAX_LIST_LIMIT))
        response = await self._request(
            "GET", "/prompts", operation="list", params={"limit": clamped}
        )
        return _parse_prompt_list(self._json(response, "list"))

    async def create(self, prompt: Prompt) -> Prompt:
        response = await self._request(
            "POST",
            "/prompts",
            operation="create",
            json=prompt.to_record(include_id=False),
        )
        return _parse_prompt(self._json(response, "create"), "create")

    async def update(self, prompt_id: str, changes: Mapping[str, Any]) -> Prompt:
        response = await self._request(
            "PATCH",
            f"/prompts/{prompt_id}",
            operation="update",
            json=changes_to_record(changes),
        )
        return _parse_prompt(self._json(response, "update"), "update")

    async def delete(self, prompt_id: str) -> bool:
        await self._request("DELETE", f"/prompts/{prompt_id}", operation="delete")
        return True

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


__all__ = ["HttpRemotePromptClient", "MAX_LIST_LIMIT", "RemotePromptClient"]
