"""Models for kubelet pod data."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class PodRecord:
    """The part of a kubelet pod object the filter keeps."""

    namespace: str
    name: str
    labels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_item(cls, item: Any) -> Optional[PodRecord]:
        """Build a record from one entry of the kubelet ``items`` array.

        Args:
            item: Decoded pod object

        Returns:
            PodRecord, or None if the item carries no namespace or name
        """
        if not isinstance(item, dict):
            return None
        metadata = item.get("metadata") or {}
        namespace = metadata.get("namespace")
        name = metadata.get("name")
        if not namespace or not name:
            return None
        labels = metadata.get("labels") or {}
        return cls(
            namespace=namespace,
            name=name,
            labels={str(k): str(v) for k, v in labels.items()},
        )
