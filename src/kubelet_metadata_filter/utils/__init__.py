"""Utility functions for the kubelet metadata filter."""

from .cache import CacheKey, ThreadSafeLRUCache, make_cache_key
from .errors import (
    KubeletApiError,
    KubeletDecodeError,
    KubeletStatusError,
    KubeletTransportError,
    sanitize_dict,
    sanitize_error_message,
    sanitize_exception,
)
from .rate_limit import AdmissionThrottle
from .retry import run_with_retry
from .secrets import read_bearer_token
from .tags import SourceTag, parse_source_tag

__all__ = [
    "CacheKey",
    "ThreadSafeLRUCache",
    "make_cache_key",
    "AdmissionThrottle",
    "run_with_retry",
    "KubeletApiError",
    "KubeletTransportError",
    "KubeletStatusError",
    "KubeletDecodeError",
    "sanitize_error_message",
    "sanitize_exception",
    "sanitize_dict",
    "read_bearer_token",
    "SourceTag",
    "parse_source_tag",
]
