"""Utilities for reading the service account credential."""

from __future__ import annotations

from .errors import KubeletTransportError


def read_bearer_token(path: str) -> str:
    """Read a bearer token from disk.

    The file is read on every call so rotated projected tokens are picked up.

    Args:
        path: Path to the token file

    Returns:
        Token with surrounding whitespace removed

    Raises:
        KubeletTransportError: If the file cannot be read or is empty
    """
    try:
        with open(path, encoding="utf-8") as f:
            token = f.read().strip()
    except OSError as e:
        raise KubeletTransportError(f"Cannot read service account token from '{path}': {e}") from e
    if not token:
        raise KubeletTransportError(f"Service account token file '{path}' is empty")
    return token
