"""HTTP fetch layer with redirect resolution and streamed bodies.

This module fetches a URL and exposes the body as a stream with:
- Redirect following with loop detection and an attempt ceiling
- Content-Length enforcement before the body is read
- Bodies captured into temporary files instead of memory
- Typed failures for every non-success outcome
- Header redaction and metrics for observability
"""

from url_fetcher.fetch.cancel import CancellationToken
from url_fetcher.fetch.capture import capture_body, declared_content_length
from url_fetcher.fetch.client import UrlFetcher, fetch
from url_fetcher.fetch.config import FetchMethod, FetchOptions
from url_fetcher.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_SIZE_BYTES,
    MAX_ATTEMPTS,
    MEGABYTE,
)
from url_fetcher.fetch.errors import (
    CircularRedirectError,
    FetchCancelledError,
    FetchErrorClass,
    FetchTimeoutError,
    FileTooBigError,
    HttpStatusError,
    InvalidUrlError,
    StorageError,
    TooManyRedirectsError,
    TransportError,
    UrlFetcherError,
)
from url_fetcher.fetch.metrics import FetchMetrics
from url_fetcher.fetch.models import FetchOutcome, FetchResult
from url_fetcher.fetch.observer import (
    AllowAllRedirects,
    CallbackRedirectObserver,
    RedirectObserver,
)
from url_fetcher.fetch.redact import redact_headers, redact_url_credentials
from url_fetcher.fetch.resolver import RedirectResolver
from url_fetcher.fetch.sink import (
    BodySink,
    MemorySink,
    SinkClosedError,
    SinkFactory,
    SinkSealedError,
    SinkStateError,
    TempFileSink,
)
from url_fetcher.fetch.status import StatusClass, body_permitted, classify_status


__all__ = [
    # Client
    "UrlFetcher",
    "fetch",
    "RedirectResolver",
    "capture_body",
    "declared_content_length",
    # Config
    "FetchOptions",
    "FetchMethod",
    # Models
    "FetchResult",
    "FetchOutcome",
    # Sinks
    "BodySink",
    "TempFileSink",
    "MemorySink",
    "SinkFactory",
    "SinkStateError",
    "SinkClosedError",
    "SinkSealedError",
    # Observers and cancellation
    "RedirectObserver",
    "AllowAllRedirects",
    "CallbackRedirectObserver",
    "CancellationToken",
    # Errors
    "UrlFetcherError",
    "FetchErrorClass",
    "TooManyRedirectsError",
    "CircularRedirectError",
    "FileTooBigError",
    "InvalidUrlError",
    "StorageError",
    "HttpStatusError",
    "TransportError",
    "FetchTimeoutError",
    "FetchCancelledError",
    # Status
    "StatusClass",
    "classify_status",
    "body_permitted",
    # Constants
    "MAX_ATTEMPTS",
    "MEGABYTE",
    "DEFAULT_MAX_SIZE_BYTES",
    "DEFAULT_CHUNK_SIZE",
    # Metrics
    "FetchMetrics",
    # Redaction
    "redact_headers",
    "redact_url_credentials",
]
