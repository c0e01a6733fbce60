"""Builder for filter instances."""

from __future__ import annotations

import time
from typing import Any, Callable, Optional

from ..config import FilterConfig
from ..filter import KubeletMetadataFilter
from ..metrics import load_sink
from ..resolver import MetadataResolver
from ..services.kubelet.base import PodSource
from ..services.kubelet.client import KubeletClient


def create_filter_from_config(
    config: FilterConfig,
    source: Optional[PodSource] = None,
    sink: Optional[Any] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> KubeletMetadataFilter:
    """Create a filter, its resolver and kubelet client from configuration.

    Args:
        config: Startup configuration
        source: Pod source to use instead of a kubelet client
        sink: Metrics sink to use instead of the configured one
        sleep: Sleep function used between retries
        clock: Monotonic clock used by the admission throttle

    Returns:
        Configured filter (warmed up unless ``config.dry_run``)

    Raises:
        ValueError: If the configured metrics sink cannot be loaded
    """
    if source is None:
        source = KubeletClient(
            url=config.kubelet_url,
            token_path=config.token_path,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
        )
    if sink is None:
        sink = load_sink(config.metrics_sink, config.metrics_prefix)

    resolver = MetadataResolver(
        source,
        cache_size=config.cache_size,
        max_requests_per_second=config.max_requests_per_second,
        backoff=config.backoff,
        sink=sink,
        sleep=sleep,
        clock=clock,
    )
    return KubeletMetadataFilter(resolver, dry_run=config.dry_run)
