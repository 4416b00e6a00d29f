"""
RETRY UTILITY
=============

Calls a function and, if it raises, retries a few times with exponential backoff.
Used for completion-service calls so network blips or a transient server error
don't immediately fail the request. retry_if decides which failures are worth
another attempt; a rejected API key, for example, never is.

Example:
  code = with_retry(lambda: client.complete(messages), max_retries=2, initial_delay=1.0)
"""

import logging
import time
from typing import Callable, Optional, TypeVar


logger = logging.getLogger("CodeGen")

# Type variable: with_retry returns whatever the callable returns.
T = TypeVar("T")


def with_retry(
    fn: Callable[[], T],
    max_retries: int = 3,
    initial_delay: float = 1.0,
    retry_if: Optional[Callable[[Exception], bool]] = None,
) -> T:
    """
    Execute fn(). If it raises, wait initial_delay seconds and try again; delay doubles each retry.
    After max_retries attempts (including the first), re-raise the last exception.
    If retry_if is given and returns False for an exception, it is re-raised at once.
    """
    attempts = max(1, max_retries)
    delay = initial_delay

    for attempt in range(attempts):
        try:
            return fn()
        except Exception as e:
            if attempt == attempts - 1:
                raise
            if retry_if is not None and not retry_if(e):
                raise
            logger.warning(
                "Attempt %s/%s failed (%s). Retrying in %.1fs: %s",
                attempt + 1,
                attempts,
                fn.__name__ if hasattr(fn, "__name__") else "call",
                delay,
                e,
            )
            time.sleep(delay)
            delay *= 2  # Exponential backoff: 1s, 2s, 4s, ...

    # Unreachable: the last attempt either returns or raises.
    raise RuntimeError("with_retry exhausted without a result")
