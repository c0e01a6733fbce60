"""Bounded retry with a fixed backoff schedule."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Sequence, TypeVar

_T = TypeVar("_T")

logger = logging.getLogger(__name__)


def run_with_retry(
    operation: Callable[[], _T],
    backoff: Sequence[float],
    on_failure: Optional[Callable[[Exception], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> _T:
    """Call operation, retrying failures with the delays in backoff.

    The operation runs at most ``len(backoff) + 1`` times. Each failure is
    reported to ``on_failure`` before sleeping; once the schedule is used up
    the last exception is re-raised.

    Args:
        operation: Zero-argument callable to run
        backoff: Delays in seconds between consecutive attempts
        on_failure: Called with each exception raised by operation
        sleep: Sleep function (injectable for tests)

    Returns:
        Result of the first successful attempt

    Raises:
        Exception: The exception of the final failed attempt
    """
    attempt = 0
    while True:
        try:
            return operation()
        except Exception as e:
            if on_failure is not None:
                on_failure(e)
            if attempt >= len(backoff):
                raise
            delay = backoff[attempt]
            attempt += 1
            logger.debug(
                "Attempt %d failed with %s, retrying in %ss", attempt, type(e).__name__, delay
            )
            sleep(delay)
