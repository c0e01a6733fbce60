"""Startup configuration for the kubelet metadata filter."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from .constants import (
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_KUBELET_URL,
    DEFAULT_METRICS_PORT,
    DEFAULT_METRICS_PREFIX,
    DEFAULT_METRICS_SINK,
    DEFAULT_READ_TIMEOUT_SECONDS,
    DEFAULT_TOKEN_PATH,
    DRY_RUN_FLAG,
    KUBELET_ERROR_BACKOFF_SECONDS,
    KUBELET_MAX_REQUESTS_PER_SECOND,
    POD_CACHE_SIZE,
)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class FilterConfig:
    """Configuration fixed at startup."""

    kubelet_url: str = DEFAULT_KUBELET_URL
    token_path: str = DEFAULT_TOKEN_PATH
    cache_size: int = POD_CACHE_SIZE
    max_requests_per_second: int = KUBELET_MAX_REQUESTS_PER_SECOND
    backoff: tuple[float, ...] = KUBELET_ERROR_BACKOFF_SECONDS
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    read_timeout: float = DEFAULT_READ_TIMEOUT_SECONDS
    metrics_sink: str = DEFAULT_METRICS_SINK
    metrics_prefix: str = DEFAULT_METRICS_PREFIX
    metrics_port: int = DEFAULT_METRICS_PORT
    dry_run: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.cache_size < 1:
            raise ValueError(f"cache_size must be at least 1, got {self.cache_size}")
        if self.max_requests_per_second < 1:
            raise ValueError(
                f"max_requests_per_second must be at least 1, got {self.max_requests_per_second}"
            )
        if any(delay < 0 for delay in self.backoff):
            raise ValueError(f"backoff delays must not be negative, got {self.backoff}")
        if self.metrics_port < 0:
            raise ValueError(f"metrics_port must not be negative, got {self.metrics_port}")

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        argv: Optional[Sequence[str]] = None,
    ) -> FilterConfig:
        """Build configuration from environment variables.

        Args:
            environ: Environment mapping (defaults to os.environ)
            argv: Command line arguments checked for ``--dry-run`` (defaults to sys.argv)

        Returns:
            FilterConfig

        Raises:
            ValueError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        args = sys.argv if argv is None else argv

        return cls(
            kubelet_url=env.get("KUBELET_URL", DEFAULT_KUBELET_URL),
            token_path=env.get("KUBELET_TOKEN_PATH", DEFAULT_TOKEN_PATH),
            cache_size=_get_int(env, "KUBELET_POD_CACHE_SIZE", POD_CACHE_SIZE),
            max_requests_per_second=_get_int(
                env, "KUBELET_MAX_REQUESTS_PER_SECOND", KUBELET_MAX_REQUESTS_PER_SECOND
            ),
            backoff=_get_backoff(env, "KUBELET_ERROR_BACKOFF_SECONDS", KUBELET_ERROR_BACKOFF_SECONDS),
            connect_timeout=_get_float(
                env, "KUBELET_CONNECT_TIMEOUT_SECONDS", DEFAULT_CONNECT_TIMEOUT_SECONDS
            ),
            read_timeout=_get_float(env, "KUBELET_READ_TIMEOUT_SECONDS", DEFAULT_READ_TIMEOUT_SECONDS),
            metrics_sink=env.get("KUBELET_METRICS_SINK", DEFAULT_METRICS_SINK),
            metrics_prefix=env.get("KUBELET_METRICS_PREFIX", DEFAULT_METRICS_PREFIX),
            metrics_port=_get_int(env, "METRICS_PORT", DEFAULT_METRICS_PORT),
            dry_run=DRY_RUN_FLAG in args or _get_bool(env, "KUBELET_DRY_RUN", False),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from e


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got '{raw}'") from e


def _get_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got '{raw}'")


def _get_backoff(env: Mapping[str, str], name: str, default: tuple[float, ...]) -> tuple[float, ...]:
    """Parse a comma separated list of delays; an empty value disables retries."""
    raw = env.get(name)
    if raw is None:
        return default
    try:
        return tuple(float(part) for part in raw.split(",") if part.strip())
    except ValueError as e:
        raise ValueError(f"{name} must be a comma separated list of seconds, got '{raw}'") from e
