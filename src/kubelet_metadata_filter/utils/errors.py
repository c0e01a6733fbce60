"""Kubelet error types and sanitization to prevent credential leakage."""

import re
from typing import Any


class KubeletApiError(Exception):
    """Base class for failed kubelet requests."""


class KubeletTransportError(KubeletApiError):
    """Connection, timeout, TLS or credential read failure."""


class KubeletStatusError(KubeletApiError):
    """Kubelet answered with a non-200 status."""

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Error response {status_code} -- {body[:200]}")


class KubeletDecodeError(KubeletApiError):
    """Response body was not a valid pod list."""


# Patterns that might expose sensitive information, with their replacement
SENSITIVE_PATTERNS = [
    (r"\b(bearer)\s+[^\s,;\)\"']+", r"\1 [REDACTED]"),
    (r"\beyJ[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]*", "[REDACTED]"),
    (r"\b(token|password|secret|credentials)([\"']?\s*[=:]\s*[\"']?)[^\s,;\)\"']+", r"\1\2[REDACTED]"),
]

# Fields to redact completely
SENSITIVE_FIELDS = {
    "authorization",
    "token",
    "password",
    "secret",
    "credentials",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove credentials.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message
    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = re.sub(pattern, replacement, sanitized, flags=re.IGNORECASE)
    return sanitized


def sanitize_exception(error: BaseException) -> str:
    """Sanitize exception message, prefixed by the exception class name.

    Args:
        error: Exception object

    Returns:
        Sanitized error message
    """
    return f"{type(error).__name__}: {sanitize_error_message(str(error))}"


def sanitize_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """Sanitize dictionary by redacting sensitive fields.

    Args:
        data: Dictionary to sanitize
        sensitive_keys: Additional keys to redact (merged with SENSITIVE_FIELDS)

    Returns:
        Sanitized dictionary with sensitive values redacted
    """
    if sensitive_keys is None:
        sensitive_keys = set()

    all_sensitive = SENSITIVE_FIELDS | sensitive_keys
    sanitized: dict[str, Any] = {}

    for key, value in data.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in all_sensitive):
            sanitized[key] = "[REDACTED]"
        elif isinstance(value, dict):
            sanitized[key] = sanitize_dict(value, sensitive_keys)
        elif isinstance(value, str):
            sanitized[key] = sanitize_error_message(value)
        else:
            sanitized[key] = value

    return sanitized
