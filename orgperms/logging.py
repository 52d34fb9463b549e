"""
orgperms logging utilities.

Provides configurable logging for GraphQL requests/responses and pagination
steps. Ensures the access token never reaches the logs.
"""

import logging
import re
from typing import Any

# Package loggers
_pkg_logger = logging.getLogger("orgperms")
_http_logger = logging.getLogger("orgperms.http")
_pagination_logger = logging.getLogger("orgperms.pagination")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Authorization header values ("token <pat>" / "bearer <pat>")
    (re.compile(r"(authorization['\"]?\s*[:=]\s*['\"]?)(token|bearer)\s+[^\s'\"]+", re.IGNORECASE), r"\1\2 [REDACTED]"),
    # GitHub token formats (classic and fine-grained)
    (re.compile(r"\b(gh[pousr]_[A-Za-z0-9]{20,}|github_pat_[A-Za-z0-9_]{20,})\b"), "[TOKEN_REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = frozenset(
    {"authorization", "token", "secret", "password", "api_key"}
)

# Handler added by the last configure_logging() call
_installed_handler: logging.Handler | None = None


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    pagination_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure orgperms logging.

    Args:
        level: Default log level for all package loggers (default: INFO)
        http_level: Log level for GraphQL request/response logging (default: same as level)
        pagination_level: Log level for page fetches and failures (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Calling it again replaces the handler installed by the previous call.

    Example:
        ```python
        import logging
        from orgperms.logging import configure_logging

        # Show every GraphQL request
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    global _installed_handler
    if _installed_handler is not None:
        _pkg_logger.removeHandler(_installed_handler)
    _installed_handler = handler

    _pkg_logger.setLevel(level)
    _pkg_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _pagination_logger.setLevel(
        pagination_level if pagination_level is not None else level
    )


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get an orgperms logger.

    Args:
        name: Logger name suffix (e.g., "http", "pagination"). If None, returns the package logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _pkg_logger
    return logging.getLogger(f"orgperms.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask tokens and other secrets in a string.

    Args:
        text: Text that may contain sensitive data

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(
    data: dict[str, Any], sensitive_keys: frozenset[str] | set[str] | None = None
) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Keys to mask (default: authorization, token, secret, password, api_key)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    keys = _DEFAULT_SENSITIVE_KEYS if sensitive_keys is None else sensitive_keys

    def masked(value: Any) -> Any:
        if isinstance(value, dict):
            return safe_log_dict(value, keys)
        if isinstance(value, list):
            return [masked(item) for item in value]
        return value

    return {
        key: "[REDACTED]" if any(k in key.lower() for k in keys) else masked(value)
        for key, value in data.items()
    }


def log_http_request(
    url: str,
    headers: dict[str, str] | None = None,
    variables: dict[str, Any] | None = None,
) -> None:
    """Log a GraphQL request at DEBUG level with the token masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"POST {url}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    if variables:
        log_parts.append(f"variables={safe_log_dict(variables)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
    request_id: str | None = None,
) -> None:
    """Log a GraphQL response at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    if request_id:
        log_parts.append(f"request_id={request_id}")

    _http_logger.debug(" | ".join(log_parts))


def log_page_fetch(
    organization: str,
    end_cursor: str | None,
    inner_cursor: str | None,
    repositories: int,
    records: int,
) -> None:
    """Log one fetched page at DEBUG level."""
    if not _pagination_logger.isEnabledFor(logging.DEBUG):
        return

    _pagination_logger.debug(
        "page: org=%s, endCursor=%s, innerCursor=%s | repositories=%d, records=%d",
        organization,
        end_cursor,
        inner_cursor,
        repositories,
        records,
    )


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_page_fetch",
]
