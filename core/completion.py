"""LiteLLM-backed text completion collaborator.

Role-tagged messages go in, the first choice's text comes out. There is no
retry and no validation of the returned text.

Updates:
  v0.1.0 - 2026-09-20 - Introduce LiteLLMCompletionClient.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, TypedDict

from .exceptions import CompletionError
from .litellm_adapter import (
    apply_configured_drop_params,
    call_completion_with_fallback,
    extract_message_content,
    get_completion,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from models.prompt_model import Prompt

logger = logging.getLogger("promptdeck.completion")

_ROLES = frozenset({"system", "user", "assistant"})

DEFAULT_INSTRUCTION = (
    "You are a writing assistant. Follow the user's prompt and reply with the result only."
)


class ChatMessage(TypedDict):
    """Single role-tagged chat message."""

    role: Literal["system", "user", "assistant"]
    content: str


def build_prompt_messages(prompt: Prompt, instruction: str | None = None) -> list[ChatMessage]:
    """Return the messages that run *prompt* with an optional system *instruction*."""
    system_text = (instruction or DEFAULT_INSTRUCTION).strip()
    return [
        {"role": "system", "content": system_text},
        {"role": "user", "content": prompt.content},
    ]


def _validate_messages(messages: Sequence[Mapping[str, str]]) -> list[dict[str, str]]:
    if not messages:
        raise CompletionError("At least one message is required")
    cleaned: list[dict[str, str]] = []
    for message in messages:
        if not isinstance(message, Mapping):
            raise CompletionError("Messages must be mappings with role and content")
        role = str(message.get("role", "")).strip()
        if role not in _ROLES:
            raise CompletionError(f"Unsupported message role: {role or '<missing>'}")
        cleaned.append({"role": role, "content": str(message.get("content", ""))})
    return cleaned


@dataclass(slots=True)
class LiteLLMCompletionClient:
    """Send chat messages to a LiteLLM model and return the reply text."""

    model: str
    api_key: str | None = None
    api_base: str | None = None
    api_version: str | None = None
    timeout_seconds: float | None = None
    drop_params: Sequence[str] | None = None
    temperature: float | None = None

    def complete(self, messages: Sequence[Mapping[str, str]]) -> str:
        """Return the completion text for *messages*.

        Raises:
            CompletionError: when the request fails or the response has no content.
        """
        completion, lite_llm_exception = get_completion()
        request: dict[str, object] = {
            "model": self.model,
            "messages": _validate_messages(messages),
        }
        if self.temperature is not None:
            request["temperature"] = self.temperature
        if self.timeout_seconds is not None:
            request["timeout"] = self.timeout_seconds
        if self.api_key:
            request["api_key"] = self.api_key
        if self.api_base:
            request["api_base"] = self.api_base
        if self.api_version:
            request["api_version"] = self.api_version

        dropped = apply_configured_drop_params(request, self.drop_params)
        if dropped:
            logger.debug(
                "Dropping LiteLLM parameters for completion",
                extra={"dropped_params": list(dropped)},
            )

        try:
            response = call_completion_with_fallback(
                request,
                completion,
                lite_llm_exception,
                pre_dropped=dropped,
            )
        except lite_llm_exception as exc:
            raise CompletionError(str(exc)) from exc
        except Exception as exc:  # noqa: BLE001 - provider SDKs raise assorted errors
            raise CompletionError("Unexpected error while calling LiteLLM") from exc

        content = extract_message_content(response)
        if content is None:
            raise CompletionError("LiteLLM returned an unexpected payload")
        logger.info(
            "Completion received",
            extra={"model": self.model, "characters": len(content)},
        )
        return content


__all__ = [
    "DEFAULT_INSTRUCTION",
    "ChatMessage",
    "LiteLLMCompletionClient",
    "build_prompt_messages",
]
