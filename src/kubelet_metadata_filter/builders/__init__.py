"""Builders for configured filter instances."""

from .filter import create_filter_from_config

__all__ = ["create_filter_from_config"]
