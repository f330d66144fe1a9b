"""Structured logging setup for applications embedding the fetcher.

The fetch layer logs through ``structlog.get_logger()`` and never configures
logging itself. Applications call ``configure_logging`` once at startup.
"""

import logging
import sys
from collections.abc import Mapping
from typing import TextIO

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from url_fetcher.fetch.redact import redact_headers, redact_url_credentials


# Event keys the fetch layer fills with URLs
URL_EVENT_KEYS = ("url", "location", "resolved_url", "repeated_url", "fetch_url")

# Standard library loggers of the HTTP client stack
HTTP_CLIENT_LOGGERS = ("httpx", "httpcore")


def redact_fetch_fields(
    logger: WrappedLogger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Strip credentials from URL and header fields of an event.

    Covers events logged by callers as well as the fetch layer, so a URL
    with userinfo or an Authorization header never reaches the renderer.
    """
    for key in URL_EVENT_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str):
            event_dict[key] = redact_url_credentials(value)

    headers = event_dict.get("headers")
    if isinstance(headers, Mapping):
        event_dict["headers"] = redact_headers(headers.items())
    elif isinstance(headers, list | tuple) and all(
        isinstance(pair, list | tuple) and len(pair) == 2 for pair in headers
    ):
        event_dict["headers"] = redact_headers(headers)
    return event_dict


def quiet_http_client_loggers(level: int) -> None:
    """Keep httpx/httpcore request chatter out of non-debug output.

    httpx logs every request at INFO through the standard library; the
    fetch layer already emits its own hop events.

    Args:
        level: Level the application logs at.
    """
    client_level = level if level <= logging.DEBUG else logging.WARNING
    for name in HTTP_CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(client_level)


def configure_logging(
    level: int = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Configure structlog for fetch events.

    Args:
        level: Logging level (default: INFO).
        output: Output stream (default: stderr).
        json_format: JSON lines when True, console rendering otherwise.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        redact_fetch_fields,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=output.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=output, level=level)
    quiet_http_client_loggers(level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger bound to the fetch component."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name).bind(
        component="fetch"
    )
    return logger


def bind_fetch_context(request_id: str, url: str | None = None) -> None:
    """Bind a caller-chosen request id (and URL) to subsequent log messages.

    Args:
        request_id: Identifier correlating the log lines of one fetch.
        url: URL being fetched; credentials are redacted on output.
    """
    if url is None:
        structlog.contextvars.bind_contextvars(request_id=request_id)
    else:
        structlog.contextvars.bind_contextvars(request_id=request_id, fetch_url=url)


def clear_fetch_context() -> None:
    """Remove the request id and URL from log messages."""
    structlog.contextvars.unbind_contextvars("request_id", "fetch_url")
