"""Shared LiteLLM adapters for PromptDeck.

Updates:
  v0.8.0 - 2026-09-20 - Completion-only adapter; add response serialisation helper.
  v0.7.0 - 2025-11-02 - Strip drop parameters before LiteLLM retries to match provider support.
  v0.6.3 - 2025-11-17 - Retry completion calls without unsupported parameters rejected by models.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

logger = logging.getLogger("promptdeck.litellm")

_DEFAULT_DROP_CANDIDATES = frozenset({"max_tokens", "max_output_tokens", "temperature", "timeout"})
_UNSUPPORTED_INDICATORS = (
    "not support",
    "unsupported",
    "not allowed",
    "additional property",
    "additional properties",
    "unexpected",
    "unknown",
)

_LITELLM_ERROR_NAMES = (
    "APIError",
    "APIConnectionError",
    "AuthenticationError",
    "BadRequestError",
    "NotFoundError",
    "RateLimitError",
    "ServiceUnavailableError",
    "Timeout",
    "UnsupportedParamsError",
)

LiteLLMErrors = tuple[type[Exception], ...]

_completion: Callable[..., object] | None = None
_completion_errors: LiteLLMErrors | None = None


def _ensure_loaded() -> None:
    """Import LiteLLM on first use; importing it eagerly slows every CLI call."""
    global _completion, _completion_errors
    if _completion is not None:
        return
    litellm = importlib.import_module("litellm")
    exceptions_module = importlib.import_module("litellm.exceptions")
    _completion = cast("Callable[..., object]", litellm.completion)
    errors = tuple(
        error
        for name in _LITELLM_ERROR_NAMES
        if isinstance(error := getattr(exceptions_module, name, None), type)
        and issubclass(error, Exception)
    )
    _completion_errors = errors or (Exception,)


def get_completion() -> tuple[Callable[..., object], LiteLLMErrors]:
    """Return the LiteLLM completion callable and the exception types it raises."""
    _ensure_loaded()
    assert _completion is not None and _completion_errors is not None  # noqa: S101
    return _completion, _completion_errors


def call_completion_with_fallback(
    request: dict[str, object],
    completion: Callable[..., object],
    lite_llm_exception: LiteLLMErrors,
    *,
    drop_candidates: Iterable[str] | None = None,
    pre_dropped: Iterable[str] | None = None,
) -> object:
    """Invoke LiteLLM completion and retry once without parameters the model rejected."""
    try:
        return completion(**request)
    except lite_llm_exception as exc:
        unsupported = _detect_unsupported_parameters(str(exc), request.keys(), drop_candidates)
        if not unsupported:
            raise
        trimmed_request = {key: value for key, value in request.items() if key not in unsupported}
        already = {str(item).strip() for item in pre_dropped or () if str(item).strip()}
        logger.info(
            "LiteLLM model rejected parameters %s; retrying request without them.",
            ", ".join(sorted(already | unsupported)),
        )
        return completion(**trimmed_request)


def apply_configured_drop_params(
    request: dict[str, object],
    drop_params: Sequence[str] | None,
) -> tuple[str, ...]:
    """Remove configured parameters from *request* and return those dropped, in order."""
    dropped: list[str] = []
    for raw_key in drop_params or ():
        key = str(raw_key).strip()
        if key and key in request and key not in dropped:
            request.pop(key)
            dropped.append(key)
    return tuple(dropped)


def serialise_litellm_response(response: object) -> Mapping[str, Any] | None:
    """Return *response* as a plain mapping, or ``None`` when it cannot be converted."""
    if isinstance(response, Mapping):
        return cast("Mapping[str, Any]", response)
    for attribute in ("model_dump", "dict", "to_dict"):
        converter = getattr(response, attribute, None)
        if not callable(converter):
            continue
        try:
            payload = converter()
        except Exception:  # noqa: BLE001 - fall through to the next converter
            logger.debug("LiteLLM response %s() failed", attribute, exc_info=True)
            continue
        if isinstance(payload, Mapping):
            return cast("Mapping[str, Any]", payload)
    return None


def extract_message_content(response: object) -> str | None:
    """Return the first choice's message content from a LiteLLM response."""
    mapping = serialise_litellm_response(response)
    if mapping is None:
        return None
    choices = mapping.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, Mapping):
        return None
    message = first.get("message")
    if not isinstance(message, Mapping):
        return None
    content = message.get("content")
    return None if content is None else str(content)


def _detect_unsupported_parameters(
    message: str,
    parameters: Iterable[str],
    drop_candidates: Iterable[str] | None = None,
) -> set[str]:
    lowered = message.lower()
    if not any(token in lowered for token in _UNSUPPORTED_INDICATORS):
        return set()
    candidates = set(drop_candidates or _DEFAULT_DROP_CANDIDATES)
    unsupported: set[str] = set()
    for key in parameters:
        if key not in candidates:
            continue
        if any(form in lowered for form in (key, key.replace("_", " "), key.replace("_", "-"))):
            unsupported.add(key)
    return unsupported


__all__ = [
    "apply_configured_drop_params",
    "call_completion_with_fallback",
    "extract_message_content",
    "get_completion",
    "serialise_litellm_response",
]
