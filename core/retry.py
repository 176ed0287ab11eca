"""Retry helpers for transient remote I/O failures.

Updates:
  v0.2.0 - 2026-09-08 - Bundle backoff knobs into RetryPolicy; remote calls are async-only.
  v0.1.0 - 2026-08-30 - Add async exponential backoff retry helper.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger("promptdeck.retry")

_RETRYABLE_HTTP_STATUS_CODES = {408, 429}


def is_retryable_http_status(status_code: int) -> bool:
    """Return ``True`` when *status_code* suggests a transient failure."""
    return status_code in _RETRYABLE_HTTP_STATUS_CODES or 500 <= status_code < 600


def is_retryable_httpx_error(exc: Exception) -> bool:
    """Return ``True`` when *exc* represents a transient httpx error."""
    if isinstance(exc, httpx.HTTPStatusError):
        return is_retryable_http_status(exc.response.status_code)
    return isinstance(exc, (httpx.TimeoutException, httpx.TransportError))


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Exponential backoff configuration.

    ``max_attempts`` counts the first call; ``base_delay_seconds`` is the wait
    before the second attempt and doubles for each later one up to
    ``max_delay_seconds``. ``jitter_fraction`` adds a random share of the delay.
    """

    max_attempts: int = 3
    base_delay_seconds: float = 0.5
    max_delay_seconds: float = 4.0
    jitter_fraction: float = 0.1

    def delay_for(self, attempt: int) -> float:
        """Return the sleep applied after failed *attempt* (1-based)."""
        if self.base_delay_seconds <= 0:
            return 0.0
        delay = min(self.max_delay_seconds, self.base_delay_seconds * (2 ** (attempt - 1)))
        if self.jitter_fraction <= 0:
            return delay
        return delay + (delay * self.jitter_fraction * random.random())


NO_RETRY = RetryPolicy(max_attempts=1)


async def async_retry[T](
    operation: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy | None = None,
    should_retry: Callable[[Exception], bool],
) -> T:
    """Await *operation* until it succeeds or *policy* gives up.

    Raises:
      Exception: the last failure when retries are exhausted or the error is not retryable.
    """
    active = policy or RetryPolicy()
    attempts = max(1, int(active.max_attempts))
    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except Exception as exc:
            if attempt >= attempts or not should_retry(exc):
                raise
            delay = active.delay_for(attempt)
            logger.debug(
                "Retrying after transient failure",
                extra={"attempt": attempt, "delay_seconds": round(delay, 3)},
            )
            if delay > 0:
                await asyncio.sleep(delay)
    raise RuntimeError("async_retry exhausted retries")  # pragma: no cover
