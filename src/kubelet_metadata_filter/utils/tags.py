"""Parsing of container log source tags."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

# for example: input.kubernetes.pod.var.log.containers.fluentd-mgj9v_default_vault-pki-auth-manager-26f3a7bad715d9d324fb3c818681ec01df14831f0585cb83f2df25a7386ee5f4.log
TAG_REGEX = re.compile(
    r"var\.log\.containers\."
    r"(?P<pod_name>[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*)"
    r"_(?P<namespace>[^_]+)"
    r"_(?P<container_name>.+)"
    r"-(?P<container_id>[a-z0-9]{64})\.log$"
)


@dataclass(frozen=True)
class SourceTag:
    """Identifiers extracted from a container log path."""

    pod_name: str
    namespace: str
    container_name: str
    container_id: str

    @property
    def metric_tags(self) -> list[str]:
        """Tags attached to diagnostic counters for this container."""
        return [
            f"pod_name:{self.pod_name}",
            f"namespace:{self.namespace}",
            f"container:{self.container_name}",
        ]


def parse_source_tag(tag: str) -> Optional[SourceTag]:
    """Extract pod, namespace, container and container id from a tag.

    Args:
        tag: Log source tag, e.g. ``var.log.containers.<pod>_<ns>_<container>-<id>.log``

    Returns:
        Parsed tag, or None if the tag does not name a container log
    """
    match = TAG_REGEX.search(tag)
    if match is None:
        return None
    return SourceTag(
        pod_name=match.group("pod_name"),
        namespace=match.group("namespace"),
        container_name=match.group("container_name"),
        container_id=match.group("container_id"),
    )
