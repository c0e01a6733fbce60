"""Per-second admission throttle for kubelet calls."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, TypeVar

from .. import metrics
from ..constants import EVENT_THROTTLED

_T = TypeVar("_T")

logger = logging.getLogger(__name__)


class AdmissionThrottle:
    """Fixed one-second window counter shared by all callers.

    Rejections are immediate; nothing is queued for the next window.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sink: Optional[metrics.MetricsSink] = None,
    ) -> None:
        self._clock = clock
        self._sink = sink or metrics.NullSink()
        self._lock = threading.Lock()
        self._second: Optional[int] = None
        self._count = 0

    def try_admit(self, limit_per_second: int) -> bool:
        """Count one call against the current second.

        Args:
            limit_per_second: Maximum admitted calls per truncated second

        Returns:
            True if the call may proceed
        """
        with self._lock:
            second = int(self._clock())
            if self._second is None or second > self._second:
                self._second = second
                self._count = 1
            else:
                # a stale reading counts against the current window
                self._count += 1
            count = self._count
        return count <= limit_per_second

    def throttled(self, operation: Callable[[], _T], limit_per_second: int, fallback: _T) -> _T:
        """Run operation if admitted, otherwise return fallback without calling it.

        Args:
            operation: Zero-argument callable guarded by the throttle
            limit_per_second: Maximum admitted calls per second
            fallback: Value returned when the call is rejected

        Returns:
            Result of operation or fallback
        """
        if self.try_admit(limit_per_second):
            return operation()
        logger.debug("Kubelet request throttled (limit %s/s)", limit_per_second)
        self._sink.increment(EVENT_THROTTLED)
        return fallback

    @property
    def bucket(self) -> tuple[Optional[int], int]:
        """Current (second, count) pair."""
        with self._lock:
            return (self._second, self._count)
