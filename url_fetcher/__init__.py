"""Fetch URLs over HTTP(S) into lazily readable, disk-backed byte streams."""

from url_fetcher.fetch import (
    BodySink,
    CancellationToken,
    CircularRedirectError,
    FetchCancelledError,
    FetchErrorClass,
    FetchMethod,
    FetchOptions,
    FetchOutcome,
    FetchResult,
    FetchTimeoutError,
    FileTooBigError,
    HttpStatusError,
    InvalidUrlError,
    StorageError,
    RedirectObserver,
    TooManyRedirectsError,
    TransportError,
    UrlFetcher,
    UrlFetcherError,
    fetch,
)


__version__ = "0.1.0"

__all__ = [
    "BodySink",
    "CancellationToken",
    "CircularRedirectError",
    "FetchCancelledError",
    "FetchErrorClass",
    "FetchMethod",
    "FetchOptions",
    "FetchOutcome",
    "FetchResult",
    "FetchTimeoutError",
    "FileTooBigError",
    "HttpStatusError",
    "InvalidUrlError",
    "StorageError",
    "RedirectObserver",
    "TooManyRedirectsError",
    "TransportError",
    "UrlFetcher",
    "UrlFetcherError",
    "fetch",
]
