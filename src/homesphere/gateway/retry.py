"""Caller-driven retry for idempotent reads.

The gateway never retries on its own. Screens that want a read retried wrap
it here; only TransportError (connection, timeout, unstructured 5xx) is
retried, since a structured server answer will not change on a retry.
"""

from __future__ import annotations

__all__ = ["retry_read"]

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from homesphere.constants import (
    READ_RETRY_BACKOFF_MULTIPLIER,
    READ_RETRY_INITIAL_DELAY,
    READ_RETRY_MAX_ATTEMPTS,
)
from homesphere.exceptions import TransportError
from homesphere.telemetry.system_logger import get_logger

T = TypeVar("T")

_logger = get_logger("gateway")


async def retry_read(
    call: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = READ_RETRY_MAX_ATTEMPTS,
    initial_delay: float = READ_RETRY_INITIAL_DELAY,
    backoff_multiplier: float = READ_RETRY_BACKOFF_MULTIPLIER,
) -> T:
    """Run ``call`` until it succeeds or attempts run out.

    Args:
        call: Zero-argument coroutine factory performing one read.
        max_attempts: Total attempts including the first.
        initial_delay: Seconds before the second attempt.
        backoff_multiplier: Delay growth per attempt.

    Returns:
        The result of the first successful attempt.

    Raises:
        TransportError: The last failure when every attempt failed.
        GatewayError: Any non-transport failure, immediately.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    delay = initial_delay
    for attempt in range(1, max_attempts + 1):
        try:
            return await call()
        except TransportError as e:
            if attempt == max_attempts:
                raise
            _logger.info(
                {
                    "event": "read_retry",
                    "message": f"Read failed ({e}); retrying in {delay:.1f}s",
                    "attempt": attempt,
                }
            )
            await asyncio.sleep(delay)
            delay *= backoff_multiplier

    raise AssertionError("unreachable")
