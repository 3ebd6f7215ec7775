"""Bounded retry loop for upstream requests.

Transport failures (aiohttp client errors, timeouts, non-success HTTP
status) are retried with exponential backoff. Everything else propagates
immediately. The delay function is injectable so tests can run without
real timers.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Callable, TypeVar

import aiohttp

from ratingvault.shared.constants import OMDbErrorHandling
from ratingvault.shared.errors import (
    ErrorCode,
    ErrorContext,
    TransientUpstreamFailureError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


class UpstreamStatusError(Exception):
    """Non-success HTTP status from upstream (eligible for retry)."""

    def __init__(self, status: int, reason: str | None = None) -> None:
        self.status = status
        self.reason = reason or ""
        super().__init__(f"HTTP error {status} {self.reason}".rstrip())


RETRYABLE_EXCEPTIONS: tuple[type[BaseException], ...] = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    UpstreamStatusError,
)


@dataclass
class FetchAttempt:
    """Bookkeeping for one fetch across its attempts."""

    attempt: int = 0
    last_error: BaseException | None = None
    next_delay: float = 0.0


def backoff_delay(attempt: int, base_delay: float) -> float:
    """Delay before the attempt following ``attempt`` (1-based)."""
    return base_delay * (2 ** (attempt - 1))


async def run_with_retry(
    call: Callable[[], Awaitable[T]],
    *,
    operation: str,
    attempts: int = OMDbErrorHandling.RETRY_ATTEMPTS,
    base_delay: float = OMDbErrorHandling.RETRY_BASE_DELAY,
    sleep: SleepFunc = asyncio.sleep,
) -> T:
    """Run call, retrying transport failures.

    Args:
        call: Coroutine factory performing one attempt
        operation: Operation name for logs and error context
        attempts: Total attempts including the first
        base_delay: Delay in seconds after the first failure, doubled each time
        sleep: Awaitable delay function

    Returns:
        Result of the first successful attempt

    Raises:
        TransientUpstreamFailureError: When every attempt failed
    """
    state = FetchAttempt()

    while state.attempt < attempts:
        state.attempt += 1
        try:
            return await call()
        except RETRYABLE_EXCEPTIONS as e:
            state.last_error = e
            if state.attempt >= attempts:
                break
            state.next_delay = backoff_delay(state.attempt, base_delay)
            logger.warning(
                "Attempt %d/%d for %s failed: %s; retrying in %.1fs",
                state.attempt,
                attempts,
                operation,
                e or type(e).__name__,
                state.next_delay,
            )
            await sleep(state.next_delay)

    last_error = state.last_error
    detail = str(last_error) or type(last_error).__name__
    raise TransientUpstreamFailureError(
        ErrorCode.OMDB_API_RETRIES_EXHAUSTED,
        f"Failed to fetch after {state.attempt} attempts: {detail}",
        ErrorContext(operation=operation, additional_data={"attempts": state.attempt}),
        original_error=last_error if isinstance(last_error, Exception) else None,
    )
