"""Cooperative cancellation for in-flight fetches."""

import threading

from url_fetcher.fetch.errors import FetchCancelledError


class CancellationToken:
    """Thread-safe flag checked between hops and between body chunks.

    A caller on another thread calls ``cancel()``; the fetch notices at its
    next check point and raises FetchCancelledError.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._event.is_set()

    def raise_if_cancelled(self, url: str) -> None:
        """Raise if cancellation has been requested.

        Args:
            url: URL being fetched, carried on the error.

        Raises:
            FetchCancelledError: If the token was cancelled.
        """
        if self._event.is_set():
            raise FetchCancelledError(url)
