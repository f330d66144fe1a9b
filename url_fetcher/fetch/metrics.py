"""Metrics collection for the fetch layer."""

import threading
from dataclasses import dataclass, field
from typing import ClassVar

from url_fetcher.fetch.errors import FetchErrorClass


@dataclass
class FetchMetrics:
    """Counters for fetch operations.

    Singleton class that tracks request counts per status, redirects,
    captured bytes and failures. Updates are guarded by a lock because
    callers fetch concurrently from several threads.
    """

    requests_total: dict[int, int] = field(default_factory=dict)
    redirects_total: int = 0
    redirects_aborted_total: int = 0
    failures_total: dict[str, int] = field(default_factory=dict)
    bytes_captured_total: int = 0
    duration_ms_total: float = 0.0
    fetch_count: int = 0

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    _instance: ClassVar["FetchMetrics | None"] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def get_instance(cls) -> "FetchMetrics":
        """Get singleton metrics instance."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        with cls._instance_lock:
            cls._instance = None

    def record_request(self, status_code: int) -> None:
        """Record one HTTP exchange (one hop of a redirect chain).

        Args:
            status_code: HTTP status code.
        """
        with self._lock:
            self.requests_total[status_code] = (
                self.requests_total.get(status_code, 0) + 1
            )

    def record_redirect(self, aborted: bool = False) -> None:
        """Record a redirect that was followed, or vetoed by an observer."""
        with self._lock:
            if aborted:
                self.redirects_aborted_total += 1
            else:
                self.redirects_total += 1

    def record_bytes(self, bytes_captured: int) -> None:
        """Record bytes written to a body sink."""
        with self._lock:
            self.bytes_captured_total += bytes_captured

    def record_failure(self, error_class: FetchErrorClass) -> None:
        """Record a fetch failure.

        Args:
            error_class: Classification of the failure.
        """
        key = error_class.value
        with self._lock:
            self.failures_total[key] = self.failures_total.get(key, 0) + 1

    def record_duration(self, duration_ms: float) -> None:
        """Record the duration of one top-level fetch.

        Args:
            duration_ms: Duration in milliseconds.
        """
        with self._lock:
            self.duration_ms_total += duration_ms
            self.fetch_count += 1

    def to_dict(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        with self._lock:
            return {
                "requests_total": dict(self.requests_total),
                "redirects_total": self.redirects_total,
                "redirects_aborted_total": self.redirects_aborted_total,
                "failures_total": dict(self.failures_total),
                "bytes_captured_total": self.bytes_captured_total,
                "duration_ms_total": self.duration_ms_total,
                "fetch_count": self.fetch_count,
            }

    @property
    def avg_duration_ms(self) -> float:
        """Calculate average fetch duration.

        Returns:
            Average duration in milliseconds.
        """
        if self.fetch_count == 0:
            return 0.0
        return self.duration_ms_total / self.fetch_count
