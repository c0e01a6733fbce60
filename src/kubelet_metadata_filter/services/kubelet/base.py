"""Base pod source interface."""

from __future__ import annotations

from typing import Protocol

from .models import PodRecord


class PodSource(Protocol):
    """Protocol for anything that can list the pods running on this node."""

    def list_pods(self) -> list[PodRecord]:
        """Fetch and decode the current pod list.

        Raises:
            KubeletApiError: On transport, status or decode failure
        """
        ...
