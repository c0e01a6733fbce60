"""Structured logging configuration for the kubelet metadata filter."""

import json
import logging
import sys
from typing import Any, TextIO

from .utils.errors import sanitize_dict


def setup_structured_logging(level: str = "INFO", stream: TextIO = sys.stderr) -> None:
    """Configure structured JSON logging.

    Enriched records are written to stdout, so logs default to stderr.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        handlers=[logging.StreamHandler(stream)],
    )


def log_lookup_event(
    logger: logging.Logger,
    event: str,
    namespace: str,
    pod_name: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log a structured pod lookup event with secrets redacted."""
    log_data = {
        "component": "kubelet_metadata",
        "event": event,
        "namespace": namespace,
        "pod_name": pod_name,
        "message": message,
    }
    log_data.update(kwargs)
    logger.log(level, json.dumps(sanitize_dict(log_data)))
