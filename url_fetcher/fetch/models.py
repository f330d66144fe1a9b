"""Data models for fetch results."""

from enum import Enum
from types import TracebackType
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field

from url_fetcher.fetch.sink import BodySink


class FetchOutcome(str, Enum):
    """Kind of result a completed fetch produced.

    - SUCCESS: 2xx response; body captured when the response carries one
    - REDIRECT: 3xx response that was not followed
    """

    SUCCESS = "SUCCESS"
    REDIRECT = "REDIRECT"


class FetchResult(BaseModel):
    """Outcome of one top-level fetch.

    Immutable once built. The body sink, when present, belongs to this
    result until ``close()`` is called.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    outcome: FetchOutcome = Field(description="Success or unfollowed redirect")
    url: Annotated[str, Field(min_length=1, description="URL as requested")]
    resolved_url: Annotated[
        str, Field(min_length=1, description="Final URL after redirects")
    ]
    status_code: int = Field(ge=100, le=599, description="HTTP status code")
    reason_phrase: str = Field(default="", description="HTTP reason phrase")
    headers: tuple[tuple[str, str], ...] = Field(
        default=(), description="Response headers in wire order"
    )
    body: BodySink | None = Field(default=None, description="Captured body stream")
    history: tuple[str, ...] = Field(
        default=(), description="URLs requested, in order"
    )

    @property
    def is_success(self) -> bool:
        """Check if the fetch ended in a 2xx response."""
        return self.outcome is FetchOutcome.SUCCESS

    @property
    def is_redirect(self) -> bool:
        """Check if the fetch ended in an unfollowed redirect."""
        return self.outcome is FetchOutcome.REDIRECT

    def header(self, name: str) -> str | None:
        """Get the first value of a response header.

        Args:
            name: Header name (case-insensitive).

        Returns:
            The first value, or None if the header is absent.
        """
        values = self.header_values(name)
        return values[0] if values else None

    def header_values(self, name: str) -> list[str]:
        """Get every value of a response header, in wire order."""
        key = name.lower()
        return [value for header, value in self.headers if header.lower() == key]

    @property
    def location(self) -> str | None:
        """Raw Location header of a redirect result."""
        return self.header("location")

    @property
    def content_length(self) -> int | None:
        """Declared Content-Length, if the server sent a valid one."""
        value = self.header("content-length")
        if value is None or not value.strip().isdigit():
            return None
        return int(value)

    @property
    def closed(self) -> bool | None:
        """Whether the body has been released; None when there is no body."""
        if self.body is None:
            return None
        return self.body.closed

    def close(self) -> None:
        """Release the body sink. Safe to call more than once."""
        if self.body is not None:
            self.body.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
