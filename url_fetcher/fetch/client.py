"""Public entry point for fetching a URL into a streamable body."""

import time
from collections.abc import Callable
from typing import Any

import httpx
import structlog

from url_fetcher.fetch.cancel import CancellationToken
from url_fetcher.fetch.config import FetchOptions
from url_fetcher.fetch.errors import UrlFetcherError
from url_fetcher.fetch.metrics import FetchMetrics
from url_fetcher.fetch.models import FetchResult
from url_fetcher.fetch.observer import RedirectObserver, as_observer
from url_fetcher.fetch.redact import redact_url_credentials
from url_fetcher.fetch.resolver import RedirectResolver
from url_fetcher.fetch.sink import SinkFactory, TempFileSink


logger = structlog.get_logger()

ObserverArg = RedirectObserver | Callable[[str], object] | None


class UrlFetcher:
    """Fetches URLs into temporary-file backed body streams.

    Provides:
    - Redirect following with loop detection and an attempt ceiling
    - Content-Length enforcement before any body byte is read
    - Bodies streamed to a sink instead of held in memory
    - Typed failures, structured logging and metrics

    The fetcher holds no per-call state, so one instance can be shared by
    threads fetching concurrently.
    """

    def __init__(
        self,
        transport: httpx.BaseTransport | None = None,
        sink_factory: SinkFactory = TempFileSink.create,
    ) -> None:
        """Initialize the fetcher.

        Args:
            transport: httpx transport for outgoing requests (default network).
            sink_factory: Creates body sinks from (suffix, unlink_on_close).
        """
        self._transport = transport
        self._sink_factory = sink_factory
        self._metrics = FetchMetrics.get_instance()
        self._log = logger.bind(component="fetch")

    def fetch(
        self,
        url: str,
        options: FetchOptions | None = None,
        observer: ObserverArg = None,
        cancel: CancellationToken | None = None,
    ) -> FetchResult:
        """Fetch a URL.

        Args:
            url: The URL to fetch.
            options: Fetch options; defaults apply when None.
            observer: Redirect observer, or a callable returning False to stop
                at a redirect.
            cancel: Optional cancellation token.

        Returns:
            FetchResult for the final response of the chain.

        Raises:
            UrlFetcherError: Typed failure (redirect loop, too many
                redirects, too big, invalid URL, HTTP status, transport).
        """
        options = options or FetchOptions()
        start_time_ns = time.perf_counter_ns()
        log = self._log.bind(
            url=redact_url_credentials(url),
            method=options.method.value,
        )

        resolver = RedirectResolver(
            options,
            observer=as_observer(observer),
            transport=self._transport,
            sink_factory=self._sink_factory,
            cancel=cancel,
            metrics=self._metrics,
        )

        try:
            result = resolver.resolve(url)
        except UrlFetcherError as e:
            duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
            self._metrics.record_duration(duration_ms)
            self._metrics.record_failure(e.error_class)
            log.warning(
                "fetch_failed",
                error_class=e.error_class.value,
                error=e.message,
                hops=len(resolver.history),
                duration_ms=round(duration_ms, 2),
            )
            raise

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        self._metrics.record_duration(duration_ms)
        log.info(
            "fetch_complete",
            outcome=result.outcome.value,
            status_code=result.status_code,
            resolved_url=redact_url_credentials(result.resolved_url),
            hops=len(result.history),
            bytes=result.body.size if result.body else 0,
            duration_ms=round(duration_ms, 2),
        )
        return result


def fetch(
    url: str,
    options: FetchOptions | None = None,
    observer: ObserverArg = None,
    *,
    transport: httpx.BaseTransport | None = None,
    sink_factory: SinkFactory = TempFileSink.create,
    cancel: CancellationToken | None = None,
    **option_overrides: Any,
) -> FetchResult:
    """Fetch a URL with a one-off UrlFetcher.

    Keyword arguments not listed below are FetchOptions fields; they
    override ``options`` (or the defaults when ``options`` is None).

    Args:
        url: The URL to fetch.
        options: Base fetch options.
        observer: Redirect observer or callable.
        transport: httpx transport for outgoing requests.
        sink_factory: Creates body sinks.
        cancel: Optional cancellation token.
        **option_overrides: FetchOptions fields to override.

    Returns:
        FetchResult for the final response of the chain.
    """
    if option_overrides:
        base = options.model_dump() if options else {}
        options = FetchOptions(**{**base, **option_overrides})
    fetcher = UrlFetcher(transport=transport, sink_factory=sink_factory)
    return fetcher.fetch(url, options, observer=observer, cancel=cancel)
