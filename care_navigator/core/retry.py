"""
Retry executor shared by every fallible remote call.

Linear backoff: after failed attempt ``n`` the next attempt waits
``base_delay * n`` seconds.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from care_navigator.core.errors import RetryExhaustedError
from care_navigator.utils.constants import MAX_RETRIES, RETRY_BASE_DELAY
from care_navigator.utils.helpers import StructuredLogger

T = TypeVar("T")


async def retry_operation(
    operation: Callable[[], Awaitable[T]],
    label: str,
    max_retries: int = MAX_RETRIES,
    base_delay: float = RETRY_BASE_DELAY,
    log: Optional[StructuredLogger] = None,
) -> T:
    """
    Run ``operation`` until it succeeds or ``max_retries`` attempts have failed.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt
        label: Description used in log lines and in the final error
        max_retries: Maximum number of attempts
        base_delay: Backoff unit in seconds
        log: Logger to report failed attempts to

    Returns:
        The operation's result

    Raises:
        RetryExhaustedError: every attempt failed; carries the last error
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    log = log or StructuredLogger("Retry")
    last_error: Optional[Exception] = None

    for attempt in range(1, max_retries + 1):
        try:
            return await operation()
        except Exception as e:
            last_error = e
            log.warning(f"{label} - attempt {attempt}/{max_retries} failed: {e}")
            if attempt < max_retries:
                await asyncio.sleep(base_delay * attempt)

    raise RetryExhaustedError(label, last_error, max_retries) from last_error
