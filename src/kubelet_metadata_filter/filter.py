"""Record filter adding kubelet pod metadata to container log records."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Optional

from .constants import FIELD_DOCKER, FIELD_KUBERNETES
from .resolver import MetadataResolver
from .utils.tags import parse_source_tag

logger = logging.getLogger(__name__)


class KubeletMetadataFilter:
    """Adds container id, container name, namespace, pod name and labels to records."""

    def __init__(self, resolver: MetadataResolver, dry_run: bool = False) -> None:
        """Initialize the filter.

        Args:
            resolver: Resolver used to look up pod labels
            dry_run: Skip the startup fetch (e.g. when only validating configuration)
        """
        self.resolver = resolver
        if not dry_run:
            self.resolver.warm_up()

    def filter(self, tag: str, time: Any, record: dict[str, Any]) -> dict[str, Any]:
        """Enrich a record whose tag names a container log file.

        Args:
            tag: Log source tag
            time: Event time (unused)
            record: Log record

        Returns:
            A new enriched record, or the record unchanged if the tag does not
            name a container log
        """
        source = parse_source_tag(tag)
        if source is None:
            return record

        labels = self.resolver.lookup(source.namespace, source.pod_name, tags=source.metric_tags)

        return {
            **record,
            FIELD_DOCKER: {"container_id": source.container_id},
            FIELD_KUBERNETES: {
                "container_name": source.container_name,
                "namespace_name": source.namespace,
                "pod_name": source.pod_name,
                "labels": labels,
            },
        }

    def filter_stream(
        self,
        records: Iterable[dict[str, Any]],
        tag_key: str = "tag",
        time_key: Optional[str] = None,
    ) -> Iterator[dict[str, Any]]:
        """Filter records that carry their own source tag.

        Args:
            records: Records holding the tag under ``tag_key``
            tag_key: Record field holding the source tag (removed from output)
            time_key: Optional record field holding the event time

        Yields:
            Filtered records
        """
        for record in records:
            record = dict(record)
            tag = record.pop(tag_key, None)
            if not isinstance(tag, str):
                yield record
                continue
            event_time = record.get(time_key) if time_key else None
            yield self.filter(tag, event_time, record)
