"""Bounded exponential backoff for provider requests."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

import httpx


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Attempt count and delay schedule (1s, 2s, 4s... capped)."""

    max_attempts: int = 3
    base_delay: float = 1.0
    backoff_factor: float = 2.0
    max_delay: float = 8.0

    def delay_for(self, attempt: int) -> float:
        """Delay after the given failed attempt (1-based)."""
        return min(self.base_delay * self.backoff_factor ** (attempt - 1), self.max_delay)


def is_retryable(error: BaseException) -> bool:
    """Timeouts, connection errors and 5xx responses are worth retrying; 4xx are not."""
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code >= 500
    return isinstance(error, (httpx.TimeoutException, httpx.TransportError))


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    description: str = "request",
) -> T:
    """
    Await `fn` until it succeeds or the policy is exhausted.

    Non-retryable errors propagate immediately. After the last attempt the
    final error is re-raised.
    """
    policy = policy or RetryPolicy()
    attempt = 1

    while True:
        try:
            return await fn()
        except httpx.HTTPError as e:
            if not is_retryable(e) or attempt >= policy.max_attempts:
                raise
            delay = policy.delay_for(attempt)
            logger.warning(
                f"{description} failed (attempt {attempt}/{policy.max_attempts}): {e}; "
                f"retrying in {delay:.1f}s"
            )
            await sleep(delay)
            attempt += 1


async def send_with_deadline(
    client: httpx.AsyncClient, request: httpx.Request, timeout: float
) -> httpx.Response:
    """
    Send `request` with a limit on the whole call, not just each phase.

    Exceeding the limit raises httpx.ReadTimeout so it is retried like any
    other timeout.
    """
    try:
        return await asyncio.wait_for(client.send(request), timeout)
    except asyncio.TimeoutError as e:
        raise httpx.ReadTimeout(
            f"No complete response within {timeout:g}s", request=request
        ) from e
