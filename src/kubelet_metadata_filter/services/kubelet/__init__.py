"""Kubelet pod source."""

from .base import PodSource
from .client import KubeletClient
from .models import PodRecord

__all__ = ["KubeletClient", "PodRecord", "PodSource"]
