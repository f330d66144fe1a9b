"""Error types for the fetch layer."""

from enum import Enum


ErrorDetails = dict[str, str | int | float | bool | None]


class FetchErrorClass(str, Enum):
    """Classification of fetch failures.

    - TOO_MANY_REDIRECTS: Redirect chain exceeded the attempt ceiling
    - CIRCULAR_REDIRECT: A URL repeated within one redirect chain
    - FILE_TOO_BIG: Response size exceeded the configured maximum
    - INVALID_URL: URL could not be parsed or is not http(s)
    - HTTP_STATUS: Response status was neither 2xx nor 3xx
    - NETWORK_TIMEOUT: Connect or read timed out
    - CONNECTION_ERROR: Transport failure talking to the server
    - STORAGE_ERROR: Body could not be written to its sink
    - CANCELLED: Caller cancelled the fetch
    """

    TOO_MANY_REDIRECTS = "TOO_MANY_REDIRECTS"
    CIRCULAR_REDIRECT = "CIRCULAR_REDIRECT"
    FILE_TOO_BIG = "FILE_TOO_BIG"
    INVALID_URL = "INVALID_URL"
    HTTP_STATUS = "HTTP_STATUS"
    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    STORAGE_ERROR = "STORAGE_ERROR"
    CANCELLED = "CANCELLED"


class UrlFetcherError(Exception):
    """Base exception for fetch failures.

    Provides structured error information so callers can branch on
    ``error_class`` instead of message text.
    """

    def __init__(
        self,
        error_class: FetchErrorClass,
        message: str,
        url: str | None = None,
        details: ErrorDetails | None = None,
    ) -> None:
        """Initialize the fetch error.

        Args:
            error_class: Classification of the error.
            message: Human-readable error message.
            url: URL the failure relates to.
            details: Additional structured error details.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.url = url
        self.details = details or {}

    def to_dict(self) -> dict[str, str | ErrorDetails | None]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "url": self.url,
            "details": self.details,
        }


class TooManyRedirectsError(UrlFetcherError):
    """Redirect chain grew past the attempt ceiling."""

    def __init__(self, url: str, max_attempts: int) -> None:
        """Initialize the error.

        Args:
            url: The URL the chain started from.
            max_attempts: The configured ceiling.
        """
        super().__init__(
            error_class=FetchErrorClass.TOO_MANY_REDIRECTS,
            message=f"{url} has too many redirects (over {max_attempts}).",
            url=url,
            details={"max_attempts": max_attempts},
        )
        self.max_attempts = max_attempts


class CircularRedirectError(UrlFetcherError):
    """A redirect pointed back at a URL already visited in the chain."""

    def __init__(self, url: str, repeated_url: str | None = None) -> None:
        """Initialize the error.

        Args:
            url: The URL the chain started from.
            repeated_url: The URL that was visited twice.
        """
        super().__init__(
            error_class=FetchErrorClass.CIRCULAR_REDIRECT,
            message=f"{url} has a redirect loop.",
            url=url,
            details={"repeated_url": repeated_url},
        )
        self.repeated_url = repeated_url


class FileTooBigError(UrlFetcherError):
    """Response body is larger than the configured maximum."""

    def __init__(self, size: int, url: str | None = None) -> None:
        """Initialize the error.

        Args:
            size: Declared (or streamed) size in bytes.
            url: URL being fetched.
        """
        super().__init__(
            error_class=FetchErrorClass.FILE_TOO_BIG,
            message=f"File too big ({size} bytes)",
            url=url,
            details={"size": size},
        )
        self.size = size


class InvalidUrlError(UrlFetcherError):
    """URL could not be parsed into an absolute http(s) URL."""

    def __init__(self, url: str, reason: str | None = None) -> None:
        message = f"Invalid URL: {url!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            error_class=FetchErrorClass.INVALID_URL,
            message=message,
            url=url,
            details={"reason": reason},
        )


class HttpStatusError(UrlFetcherError):
    """Server answered with a status that is neither success nor redirect.

    Attributes:
        status_code: HTTP status code from the response.
        reason_phrase: HTTP reason phrase from the response.
    """

    def __init__(self, status_code: int, reason_phrase: str, url: str) -> None:
        super().__init__(
            error_class=FetchErrorClass.HTTP_STATUS,
            message=f"{status_code} {reason_phrase}".strip(),
            url=url,
            details={"status_code": status_code, "reason_phrase": reason_phrase},
        )
        self.status_code = status_code
        self.reason_phrase = reason_phrase


class TransportError(UrlFetcherError):
    """Connection or protocol failure in the underlying HTTP client.

    The original client exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        url: str,
        error_class: FetchErrorClass = FetchErrorClass.CONNECTION_ERROR,
        details: ErrorDetails | None = None,
    ) -> None:
        super().__init__(
            error_class=error_class,
            message=message,
            url=url,
            details=details,
        )


class FetchTimeoutError(TransportError):
    """Connect (open) or read timed out."""

    def __init__(self, phase: str, url: str, timeout: float | None = None) -> None:
        """Initialize the timeout error.

        Args:
            phase: Which operation timed out ("open", "read", "write", "pool").
            url: URL being fetched.
            timeout: Configured timeout in seconds for that phase.
        """
        super().__init__(
            message=f"{phase.capitalize()} timeout fetching {url}",
            url=url,
            error_class=FetchErrorClass.NETWORK_TIMEOUT,
            details={"phase": phase, "timeout": timeout},
        )
        self.phase = phase
        self.timeout = timeout


class StorageError(UrlFetcherError):
    """Body sink could not be created or written (disk full, no tmpdir).

    The underlying ``OSError`` is chained as ``__cause__``.
    """

    def __init__(self, url: str, error: OSError) -> None:
        reason = error.strerror or str(error)
        super().__init__(
            error_class=FetchErrorClass.STORAGE_ERROR,
            message=f"Could not store body of {url}: {reason}",
            url=url,
            details={"errno": error.errno},
        )
        self.errno = error.errno


class FetchCancelledError(UrlFetcherError):
    """Fetch was cancelled through its cancellation token."""

    def __init__(self, url: str) -> None:
        super().__init__(
            error_class=FetchErrorClass.CANCELLED,
            message=f"Fetch of {url} was cancelled",
            url=url,
        )
