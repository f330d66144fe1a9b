"""Observability module for logging."""

from url_fetcher.observability.logging import (
    bind_fetch_context,
    clear_fetch_context,
    configure_logging,
    get_logger,
    quiet_http_client_loggers,
    redact_fetch_fields,
)


__all__ = [
    "bind_fetch_context",
    "clear_fetch_context",
    "configure_logging",
    "get_logger",
    "quiet_http_client_loggers",
    "redact_fetch_fields",
]
