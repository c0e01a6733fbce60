"""Prometheus metrics and counter sinks for the kubelet metadata filter."""

from __future__ import annotations

import importlib
import logging
from typing import Any, Optional, Protocol, Sequence

from prometheus_client import Counter, Gauge, Histogram

logger = logging.getLogger(__name__)

METRIC_NAMESPACE = "kubelet_metadata"

# Lookup / refresh events (soft_miss, hard_miss, throttled, kubelet_error, refresh)
events_total = Counter(
    "kubelet_metadata_events_total",
    "Total number of metadata resolver events",
    ["event"],
)

errors_total = Counter(
    "kubelet_metadata_errors_total",
    "Total number of failed kubelet requests",
    ["error"],
)

hard_miss_total = Counter(
    "kubelet_metadata_hard_miss_total",
    "Pods not found even after refreshing from the kubelet",
    ["namespace", "container"],
)

refresh_duration_seconds = Histogram(
    "kubelet_metadata_refresh_duration_seconds",
    "Duration of cache refreshes in seconds",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

cache_entries = Gauge(
    "kubelet_metadata_cache_entries",
    "Number of pods currently held in the metadata cache",
)


class MetricsSink(Protocol):
    """Fire-and-forget counter sink."""

    def increment(self, name: str, tags: Optional[Sequence[str]] = None) -> None:
        """Increment the counter ``name``."""
        ...


class NullSink:
    """Sink that drops everything."""

    def increment(self, name: str, tags: Optional[Sequence[str]] = None) -> None:
        return None


class PrometheusSink:
    """Maps dotted counter names onto the Prometheus counters above."""

    def increment(self, name: str, tags: Optional[Sequence[str]] = None) -> None:
        event = name.rsplit(".", 1)[-1]
        events_total.labels(event=event).inc()
        parsed = parse_tags(tags)
        if event == "kubelet_error":
            errors_total.labels(error=parsed.get("error", "unknown")).inc()
        elif event == "hard_miss":
            hard_miss_total.labels(
                namespace=parsed.get("namespace", ""),
                container=parsed.get("container", ""),
            ).inc()


class PrefixedSink:
    """Prefixes event names with ``<prefix>.kubelet_metadata.`` and never raises."""

    def __init__(self, sink: Any, prefix: str = "fluentd") -> None:
        self.sink = sink
        self.prefix = prefix

    def increment(self, name: str, tags: Optional[Sequence[str]] = None) -> None:
        metric = f"{METRIC_NAMESPACE}.{name}"
        if self.prefix:
            metric = f"{self.prefix}.{metric}"
        try:
            if tags:
                self.sink.increment(metric, tags=list(tags))
            else:
                self.sink.increment(metric)
        except Exception as e:
            logger.warning(f"Failed to send metric {metric}: {e}")


def parse_tags(tags: Optional[Sequence[str]]) -> dict[str, str]:
    """Turn ``["key:value", ...]`` tags into a dict.

    Args:
        tags: Tags in ``key:value`` form

    Returns:
        Dictionary of tag values (tags without a colon are ignored)
    """
    parsed: dict[str, str] = {}
    for tag in tags or ():
        key, sep, value = tag.partition(":")
        if sep:
            parsed[key] = value
    return parsed


def load_sink(selection: Optional[str], prefix: str = "fluentd") -> PrefixedSink:
    """Build the metrics sink named by configuration.

    Args:
        selection: ``"none"``, ``"prometheus"`` or an import path such as
            ``"mypkg.stats:client"`` / ``"mypkg.stats.client"`` naming an object
            with an ``increment`` method
        prefix: First component of every metric name

    Returns:
        Sink wrapped so that failures never propagate

    Raises:
        ValueError: If the import path cannot be resolved
    """
    if not selection or selection.lower() == "none":
        return PrefixedSink(NullSink(), prefix)
    if selection.lower() == "prometheus":
        return PrefixedSink(PrometheusSink(), prefix)

    if ":" in selection:
        module_name, _, attr = selection.partition(":")
    else:
        module_name, _, attr = selection.rpartition(".")
    if not module_name or not attr:
        raise ValueError(f"Invalid metrics sink '{selection}'")
    try:
        target = getattr(importlib.import_module(module_name), attr)
    except (ImportError, AttributeError) as e:
        raise ValueError(f"Cannot load metrics sink '{selection}': {e}") from e
    if not hasattr(target, "increment"):
        raise ValueError(f"Metrics sink '{selection}' has no increment method")
    return PrefixedSink(target, prefix)
