"""Bounded exponential backoff for rate-limited model calls."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .errors import is_rate_limit

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    base_delay: float = 2.0  # seconds
    multiplier: float = 2.0


RATE_LIMIT_POLICY = RetryPolicy()


async def call_with_rate_limit_retry(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    policy: RetryPolicy = RATE_LIMIT_POLICY,
    sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
    label: str = "model call",
    **kwargs: Any,
) -> T:
    """Await ``func`` and retry only on rate-limit errors.

    With the default policy that is at most 3 retries, waiting 2s, 4s and 8s.
    Any other error, or the last rate-limit error once the retries are spent,
    propagates to the caller.
    """
    sleep = sleep or asyncio.sleep
    retries_left = policy.max_retries
    wait = policy.base_delay

    while True:
        try:
            return await func(*args, **kwargs)
        except Exception as exc:
            if not is_rate_limit(exc) or retries_left == 0:
                raise
            logger.warning(f"[Retry] Rate limit hit in {label}. Retrying in {wait:.0f}s...")
            await sleep(wait)
            retries_left -= 1
            wait *= policy.multiplier
