"""Kubelet pod metadata enrichment for container log records."""

from .config import FilterConfig
from .filter import KubeletMetadataFilter
from .resolver import MetadataResolver

__version__ = "0.1.0"

__all__ = ["FilterConfig", "KubeletMetadataFilter", "MetadataResolver", "__version__"]
