"""Main entry point for the kubelet metadata filter."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Iterator, Optional, Sequence, TextIO

from . import health
from . import logging as structured_logging
from .builders.filter import create_filter_from_config
from .config import FilterConfig
from .filter import KubeletMetadataFilter
from .tracing import initialize_tracing

logger = logging.getLogger(__name__)


def read_records(stream: TextIO) -> Iterator[dict[str, Any]]:
    """Read JSON objects, one per line, skipping blank and malformed lines."""
    for line_number, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except ValueError as e:
            logger.warning(f"Skipping malformed record on line {line_number}: {e}")
            continue
        if not isinstance(record, dict):
            logger.warning(f"Skipping non-object record on line {line_number}")
            continue
        yield record


def run(
    log_filter: KubeletMetadataFilter,
    stdin: TextIO,
    stdout: TextIO,
) -> int:
    """Filter JSON lines from stdin to stdout.

    Returns:
        Number of records written
    """
    count = 0
    for record in log_filter.filter_stream(read_records(stdin)):
        stdout.write(json.dumps(record) + "\n")
        stdout.flush()
        count += 1
    return count


def main(
    argv: Optional[Sequence[str]] = None,
    stdin: TextIO = sys.stdin,
    stdout: TextIO = sys.stdout,
) -> int:
    """Run the filter as a JSON lines pipe."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        config = FilterConfig.from_env(argv=args)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    structured_logging.setup_structured_logging(config.log_level)
    initialize_tracing()

    state: dict[str, Optional[KubeletMetadataFilter]] = {"filter": None}
    server = None
    if config.metrics_port:
        app = health.create_combined_wsgi_app(lambda: state["filter"] is not None)
        try:
            server = health.start_metrics_server(config.metrics_port, app)
        except OSError as e:
            logger.error(
                f"Cannot serve metrics on port {config.metrics_port}, continuing without it: {e}"
            )

    try:
        try:
            log_filter = create_filter_from_config(config)
        except ValueError as e:
            logger.error(f"Cannot start filter: {e}")
            return 2
        state["filter"] = log_filter

        if config.dry_run:
            logger.info("Dry run, configuration is valid")
            return 0

        count = run(log_filter, stdin, stdout)
        logger.info(f"Processed {count} records")
        return 0
    finally:
        if server is not None:
            server.shutdown()


if __name__ == "__main__":
    sys.exit(main())
