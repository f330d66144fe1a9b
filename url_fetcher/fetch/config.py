"""Configuration models for the fetch layer."""

from collections.abc import Mapping
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from url_fetcher.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_SIZE_BYTES,
    DEFAULT_OPEN_TIMEOUT_SECONDS,
    DEFAULT_READ_TIMEOUT_SECONDS,
    MAX_ATTEMPTS,
)


class FetchMethod(str, Enum):
    """HTTP methods a fetch may use."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"


class FetchOptions(BaseModel):
    """Per-call options for a fetch.

    Immutable for the duration of one top-level fetch, including every hop
    of its redirect chain.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    follow_redirects: bool = True
    method: FetchMethod = FetchMethod.GET
    max_size_bytes: Annotated[int, Field(ge=0)] = DEFAULT_MAX_SIZE_BYTES
    open_timeout: Annotated[float, Field(gt=0, description="Connect timeout (s)")] = (
        DEFAULT_OPEN_TIMEOUT_SECONDS
    )
    read_timeout: Annotated[
        float, Field(gt=0, description="Per-read timeout (s)")
    ] = DEFAULT_READ_TIMEOUT_SECONDS
    headers: tuple[tuple[str, tuple[str, ...]], ...] = Field(
        default=(),
        description="(name, values) pairs; each value is sent as its own field",
    )
    unlink_sink_on_close: bool = True
    max_redirects: Annotated[int, Field(ge=0, le=100)] = MAX_ATTEMPTS
    verify_tls: bool = Field(
        default=False, description="Verify server certificates on https hops"
    )
    chunk_size: Annotated[int, Field(ge=1)] = DEFAULT_CHUNK_SIZE
    enforce_streamed_limit: bool = Field(
        default=False,
        description="Also cap bytes actually streamed, not just Content-Length",
    )

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: object) -> object:
        """Accept method names in any case."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("headers", mode="before")
    @classmethod
    def coerce_header_values(cls, v: object) -> object:
        """Freeze headers into (name, values) pairs of strings.

        Accepts a mapping or a sequence of pairs. Scalar values become
        one-element tuples.
        """
        if isinstance(v, Mapping):
            pairs = list(v.items())
        elif isinstance(v, list | tuple):
            pairs = list(v)
        else:
            return v
        coerced: list[tuple[str, tuple[str, ...]]] = []
        for name, value in pairs:
            values = value if isinstance(value, list | tuple) else (value,)
            coerced.append((str(name), tuple(str(item) for item in values)))
        return tuple(coerced)

    def header_items(self) -> list[tuple[str, str]]:
        """Flatten configured headers into ordered (name, value) pairs.

        Returns:
            One pair per value, preserving the order values were supplied.
        """
        return [(name, value) for name, values in self.headers for value in values]
