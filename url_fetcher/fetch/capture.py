"""Bounded capture of a streaming response body into a sink."""

import httpx
import structlog

from url_fetcher.fetch.cancel import CancellationToken
from url_fetcher.fetch.constants import DEFAULT_CHUNK_SIZE
from url_fetcher.fetch.errors import FileTooBigError, StorageError
from url_fetcher.fetch.redact import redact_url_credentials
from url_fetcher.fetch.sink import BodySink, SinkFactory, TempFileSink
from url_fetcher.fetch.urls import suffix_hint


logger = structlog.get_logger()


def declared_content_length(headers: httpx.Headers) -> int | None:
    """Read the Content-Length the server declared.

    Args:
        headers: Response headers.

    Returns:
        The declared length, or None when absent or not a number.
    """
    value = headers.get("content-length")
    if value is None:
        return None
    try:
        length = int(value.strip())
    except ValueError:
        return None
    return length if length >= 0 else None


def capture_body(
    response: httpx.Response,
    max_size_bytes: int,
    source_url: str,
    sink_factory: SinkFactory = TempFileSink.create,
    unlink_on_close: bool = True,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    enforce_streamed_limit: bool = False,
    cancel: CancellationToken | None = None,
) -> BodySink:
    """Stream a successful response body into a fresh sink.

    A declared Content-Length above ``max_size_bytes`` is rejected before
    any body byte is read. Bytes actually streamed are only capped when
    ``enforce_streamed_limit`` is set.

    Args:
        response: Streaming response whose body has not been read yet.
        max_size_bytes: Maximum allowed body size.
        source_url: URL the body came from (used for the suffix hint).
        sink_factory: Creates the sink from (suffix, unlink_on_close).
        unlink_on_close: Passed through to the sink factory.
        chunk_size: Read size for streaming.
        enforce_streamed_limit: Fail once streamed bytes exceed the maximum.
        cancel: Optional cancellation token checked after each chunk.

    Returns:
        A sealed sink positioned at the start of the body.

    Raises:
        FileTooBigError: If the body is larger than allowed.
        FetchCancelledError: If the token is cancelled mid-stream.
        StorageError: If the sink cannot be created or written.
    """
    declared = declared_content_length(response.headers)
    if declared is not None and declared > max_size_bytes:
        raise FileTooBigError(declared, url=source_url)

    try:
        sink = sink_factory(suffix_hint(source_url), unlink_on_close)
    except OSError as e:
        raise StorageError(source_url, e) from e

    try:
        for chunk in response.iter_bytes(chunk_size=chunk_size):
            sink.write(chunk)
            if enforce_streamed_limit and sink.size > max_size_bytes:
                raise FileTooBigError(sink.size, url=source_url)
            if cancel is not None:
                cancel.raise_if_cancelled(source_url)
        sink.seal()
    except OSError as e:
        sink.discard()
        raise StorageError(source_url, e) from e
    except BaseException:
        sink.discard()
        raise

    logger.debug(
        "body_captured",
        component="fetch",
        url=redact_url_credentials(source_url),
        bytes=sink.size,
        declared_length=declared,
        path=str(sink.path) if sink.path else None,
    )
    return sink
