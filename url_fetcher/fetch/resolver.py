"""Redirect resolution for a single top-level fetch."""

from dataclasses import dataclass

import httpx
import structlog

from url_fetcher.fetch.cancel import CancellationToken
from url_fetcher.fetch.capture import capture_body
from url_fetcher.fetch.config import FetchOptions
from url_fetcher.fetch.errors import (
    CircularRedirectError,
    FetchTimeoutError,
    HttpStatusError,
    TooManyRedirectsError,
    TransportError,
)
from url_fetcher.fetch.metrics import FetchMetrics
from url_fetcher.fetch.models import FetchOutcome, FetchResult
from url_fetcher.fetch.observer import AllowAllRedirects, RedirectObserver
from url_fetcher.fetch.redact import redact_headers, redact_url_credentials
from url_fetcher.fetch.sink import BodySink, SinkFactory, TempFileSink
from url_fetcher.fetch.status import StatusClass, body_permitted, classify_status
from url_fetcher.fetch.urls import normalize_url, resolve_location


logger = structlog.get_logger()

_TIMEOUT_PHASES: tuple[tuple[type[httpx.TimeoutException], str], ...] = (
    (httpx.ConnectTimeout, "open"),
    (httpx.ReadTimeout, "read"),
    (httpx.WriteTimeout, "write"),
    (httpx.PoolTimeout, "pool"),
)


@dataclass(frozen=True)
class _Hop:
    """One HTTP exchange of a redirect chain."""

    url: str
    status_class: StatusClass
    status_code: int
    reason_phrase: str
    headers: tuple[tuple[str, str], ...]
    body: BodySink | None

    @property
    def location(self) -> str | None:
        for name, value in self.headers:
            if name.lower() == "location":
                return value.strip() or None
        return None


class RedirectResolver:
    """Follows a redirect chain from one URL to a final response.

    Each instance resolves exactly one top-level URL and owns the history of
    URLs visited along the way. The history is the single source of truth
    for both the loop check and the attempt ceiling.
    """

    def __init__(
        self,
        options: FetchOptions,
        observer: RedirectObserver | None = None,
        transport: httpx.BaseTransport | None = None,
        sink_factory: SinkFactory = TempFileSink.create,
        cancel: CancellationToken | None = None,
        metrics: FetchMetrics | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            options: Options applied to every hop of the chain.
            observer: Gets a veto over each redirect; follows all if None.
            transport: httpx transport to send requests through.
            sink_factory: Creates the sink a successful body is captured into.
            cancel: Optional cancellation token.
            metrics: Metrics collector (defaults to the shared instance).
        """
        self._options = options
        self._observer = observer or AllowAllRedirects()
        self._transport = transport
        self._sink_factory = sink_factory
        self._cancel = cancel
        self._metrics = metrics or FetchMetrics.get_instance()
        self._history: list[str] = []
        self._requested_url = ""
        self._log = logger.bind(component="fetch", method=options.method.value)

    @property
    def history(self) -> tuple[str, ...]:
        """URLs requested so far, in order."""
        return tuple(self._history)

    def resolve(self, url: str) -> FetchResult:
        """Fetch ``url``, following redirects as configured.

        Args:
            url: URL to start from.

        Returns:
            A Success result, or a Redirect result when a redirect was not
            followed.

        Raises:
            UrlFetcherError: Any typed fetch failure.
        """
        if self._history:
            msg = "RedirectResolver instances resolve a single URL"
            raise RuntimeError(msg)

        self._requested_url = url
        candidate = url
        while True:
            hop_url = self._admit(candidate)
            hop = self._exchange(hop_url)

            if hop.status_class is StatusClass.SUCCESS:
                return self._build_result(url, hop, FetchOutcome.SUCCESS)

            location = hop.location
            if not self._options.follow_redirects or location is None:
                return self._build_result(url, hop, FetchOutcome.REDIRECT)

            next_url = resolve_location(hop.url, location)
            if not self._observer.on_redirect(next_url):
                self._metrics.record_redirect(aborted=True)
                self._log.info(
                    "redirect_aborted",
                    url=redact_url_credentials(hop.url),
                    location=redact_url_credentials(next_url),
                    status_code=hop.status_code,
                )
                return self._build_result(url, hop, FetchOutcome.REDIRECT)

            self._metrics.record_redirect()
            self._log.debug(
                "redirect_followed",
                url=redact_url_credentials(hop.url),
                location=redact_url_credentials(next_url),
                status_code=hop.status_code,
                hop=len(self._history),
            )
            candidate = next_url

    def _admit(self, candidate: str) -> str:
        """Run the ceiling and loop checks, then record the hop.

        Args:
            candidate: URL about to be requested.

        Returns:
            The normalized URL that was appended to the history.
        """
        if len(self._history) > self._options.max_redirects:
            raise TooManyRedirectsError(
                self._requested_url, self._options.max_redirects
            )

        normalized = normalize_url(candidate)
        if normalized in self._history:
            raise CircularRedirectError(self._requested_url, repeated_url=normalized)

        self._history.append(normalized)
        if self._cancel is not None:
            self._cancel.raise_if_cancelled(normalized)
        return normalized

    def _exchange(self, url: str) -> _Hop:
        """Send one request and turn the response into a hop.

        A fresh client per hop keeps fetches free of shared connection state.

        Args:
            url: Normalized URL to request.

        Returns:
            The hop, with its body captured when it is a body-bearing success.
        """
        options = self._options
        timeout = httpx.Timeout(options.read_timeout, connect=options.open_timeout)
        headers = options.header_items()
        self._log.debug(
            "hop_request",
            url=redact_url_credentials(url),
            headers=redact_headers(headers),
            hop=len(self._history),
        )

        try:
            with httpx.Client(
                timeout=timeout,
                verify=options.verify_tls,
                follow_redirects=False,
                transport=self._transport,
            ) as client:
                request = client.build_request(options.method.value, url, headers=headers)
                response = client.send(request, stream=True)
                try:
                    return self._handle_response(url, response)
                finally:
                    response.close()
        except httpx.TimeoutException as e:
            phase = next(
                (name for cls, name in _TIMEOUT_PHASES if isinstance(e, cls)), "read"
            )
            limit = options.open_timeout if phase == "open" else options.read_timeout
            raise FetchTimeoutError(phase, url, timeout=limit) from e
        except httpx.RequestError as e:
            msg = f"Request to {redact_url_credentials(url)} failed: {e}"
            raise TransportError(msg, url=url) from e

    def _handle_response(self, url: str, response: httpx.Response) -> _Hop:
        status_code = response.status_code
        self._metrics.record_request(status_code)
        status_class = classify_status(status_code)
        self._log.debug(
            "hop_response",
            url=redact_url_credentials(url),
            status_code=status_code,
            status_class=status_class.value,
        )

        if status_class is StatusClass.OTHER:
            raise HttpStatusError(status_code, response.reason_phrase, url)

        body: BodySink | None = None
        if status_class is StatusClass.SUCCESS and body_permitted(
            self._options.method, status_code
        ):
            body = capture_body(
                response,
                max_size_bytes=self._options.max_size_bytes,
                source_url=url,
                sink_factory=self._sink_factory,
                unlink_on_close=self._options.unlink_sink_on_close,
                chunk_size=self._options.chunk_size,
                enforce_streamed_limit=self._options.enforce_streamed_limit,
                cancel=self._cancel,
            )
            self._metrics.record_bytes(body.size)

        return _Hop(
            url=url,
            status_class=status_class,
            status_code=status_code,
            reason_phrase=response.reason_phrase,
            headers=tuple(response.headers.multi_items()),
            body=body,
        )

    def _build_result(
        self, requested_url: str, hop: _Hop, outcome: FetchOutcome
    ) -> FetchResult:
        return FetchResult(
            outcome=outcome,
            url=requested_url,
            resolved_url=hop.url,
            status_code=hop.status_code,
            reason_phrase=hop.reason_phrase,
            headers=hop.headers,
            body=hop.body,
            history=tuple(self._history),
        )
