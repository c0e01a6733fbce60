"""Pod label resolution backed by a kubelet-filled LRU cache."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Sequence

from . import logging as structured_logging
from . import metrics
from .constants import (
    EVENT_HARD_MISS,
    EVENT_KUBELET_ERROR,
    EVENT_REFRESH,
    EVENT_SOFT_MISS,
    KUBELET_ERROR_BACKOFF_SECONDS,
    KUBELET_MAX_REQUESTS_PER_SECOND,
    POD_CACHE_SIZE,
)
from .services.kubelet.base import PodSource
from .services.kubelet.models import PodRecord
from .tracing import add_span_attribute, trace_span
from .utils.cache import ThreadSafeLRUCache, make_cache_key
from .utils.errors import sanitize_exception
from .utils.rate_limit import AdmissionThrottle
from .utils.retry import run_with_retry

logger = logging.getLogger(__name__)


class MetadataResolver:
    """Resolves (namespace, pod name) to pod labels.

    Lookups are served from a bounded LRU cache. A miss refreshes the whole
    cache from the pod source once, through the admission throttle and the
    retry schedule, and then checks the cache again. Failures never escape:
    the worst case is an empty label mapping.

    Safe to share between threads; the resolver starts no threads itself.
    """

    def __init__(
        self,
        source: PodSource,
        cache_size: int = POD_CACHE_SIZE,
        max_requests_per_second: int = KUBELET_MAX_REQUESTS_PER_SECOND,
        backoff: Sequence[float] = KUBELET_ERROR_BACKOFF_SECONDS,
        sink: Optional[metrics.MetricsSink] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the resolver.

        Args:
            source: Pod source queried on cache misses
            cache_size: Maximum number of pods kept in the cache
            max_requests_per_second: Admission limit for pod source calls
            backoff: Delays between retries of a failed pod source call
            sink: Counter sink for soft/hard misses, throttling and errors
            sleep: Sleep function used between retries
            clock: Monotonic clock used by the admission throttle
        """
        self.source = source
        self.max_requests_per_second = max_requests_per_second
        self.backoff = tuple(backoff)
        self.sink = sink or metrics.NullSink()
        self.cache = ThreadSafeLRUCache(cache_size)
        self.throttle = AdmissionThrottle(clock=clock, sink=self.sink)
        self._sleep = sleep

    def lookup(
        self,
        namespace: str,
        pod_name: str,
        tags: Optional[Sequence[str]] = None,
    ) -> dict[str, str]:
        """Get the labels of a pod.

        Args:
            namespace: Pod namespace
            pod_name: Pod name
            tags: Extra counter tags reported with a hard miss

        Returns:
            Pod labels; empty if the pod is unknown or the source is unavailable
        """
        key = make_cache_key(namespace, pod_name)
        try:
            labels = self.cache.get(key)
            if labels is not None:
                return dict(labels)

            self.sink.increment(EVENT_SOFT_MISS)
            self.refresh()

            labels = self.cache.get(key)
            if labels is not None:
                return dict(labels)

            # not memoized: the next lookup of this pod refreshes again
            self.sink.increment(EVENT_HARD_MISS, tags=tags)
            structured_logging.log_lookup_event(
                logger,
                EVENT_HARD_MISS,
                namespace,
                pod_name,
                "Pod not found in kubelet pod list",
                level=logging.DEBUG,
            )
            return {}
        except Exception as e:
            logger.error(
                f"Unexpected error resolving labels for {namespace}/{pod_name}: {sanitize_exception(e)}"
            )
            return {}

    def refresh(self) -> int:
        """Reload the cache from the pod source.

        Every listed pod overwrites its cache entry; pods missing from the
        list are left in place and only leave the cache through LRU eviction.
        That keeps a refresh proportional to the number of listed pods.

        Returns:
            Number of pods written to the cache
        """
        start_time = time.time()
        with trace_span("kubelet_metadata.refresh"):
            pods = self._fetch_pods()
            for pod in pods:
                self.cache.put(make_cache_key(pod.namespace, pod.name), dict(pod.labels))
            add_span_attribute("kubelet.pods", len(pods))

        self.sink.increment(EVENT_REFRESH)
        metrics.refresh_duration_seconds.observe(time.time() - start_time)
        metrics.cache_entries.set(len(self.cache))
        logger.debug(f"Refreshed pod cache with {len(pods)} pods")
        return len(pods)

    def warm_up(self) -> int:
        """Fill the cache eagerly so the first lookup is not cold."""
        return self.refresh()

    def _fetch_pods(self) -> list[PodRecord]:
        try:
            return run_with_retry(
                lambda: self.throttle.throttled(
                    self.source.list_pods, self.max_requests_per_second, fallback=[]
                ),
                self.backoff,
                on_failure=self._record_failure,
                sleep=self._sleep,
            )
        except Exception as e:
            logger.warning(f"Giving up on kubelet pod list: {sanitize_exception(e)}")
            return []

    def _record_failure(self, error: Exception) -> None:
        self.sink.increment(EVENT_KUBELET_ERROR, tags=[f"error:{type(error).__name__}"])
