"""Unit tests for bounded body capture."""

import errno

import httpx
import pytest

from tests.helpers.sinks import RecordingSinkFactory
from tests.helpers.transport import CountingByteStream
from url_fetcher.fetch.cancel import CancellationToken
from url_fetcher.fetch.capture import capture_body, declared_content_length
from url_fetcher.fetch.errors import (
    FetchCancelledError,
    FetchErrorClass,
    FileTooBigError,
    StorageError,
)
from url_fetcher.fetch.sink import MemorySink, TempFileSink


def streaming_response(
    chunks: list[bytes],
    headers: dict[str, str] | None = None,
    fail_with: Exception | None = None,
) -> tuple[httpx.Response, CountingByteStream]:
    stream = CountingByteStream(chunks, fail_with=fail_with)
    return httpx.Response(200, headers=headers, stream=stream), stream


class TestDeclaredContentLength:
    """Tests for Content-Length parsing."""

    def test_parses_number(self) -> None:
        """A numeric value is returned as int."""
        assert declared_content_length(httpx.Headers({"Content-Length": "42"})) == 42

    def test_absent(self) -> None:
        """A missing header means undeclared."""
        assert declared_content_length(httpx.Headers()) is None

    @pytest.mark.parametrize("value", ["", "abc", "-5", "1.5"])
    def test_garbage_is_undeclared(self, value: str) -> None:
        """Unparseable values are treated as undeclared."""
        headers = httpx.Headers({"Content-Length": value})
        assert declared_content_length(headers) is None


class TestCaptureBody:
    """Tests for capture_body."""

    def test_streams_all_chunks(self) -> None:
        """Every chunk lands in the sink, which is rewound once."""
        response, stream = streaming_response([b"hello ", b"wide ", b"world"])
        factory = RecordingSinkFactory()

        sink = capture_body(
            response,
            max_size_bytes=1024,
            source_url="https://a.example/greeting.txt",
            sink_factory=factory,
        )

        assert stream.reads == 3
        assert sink.sealed is True
        assert sink.size == len(b"hello wide world")
        assert sink.read() == b"hello wide world"

    def test_rejects_declared_oversize_without_reading(self) -> None:
        """Declared length over the limit fails before any read or sink."""
        response, stream = streaming_response(
            [b"x" * 100], headers={"Content-Length": "5000"}
        )
        factory = RecordingSinkFactory()

        with pytest.raises(FileTooBigError) as exc_info:
            capture_body(
                response,
                max_size_bytes=4999,
                source_url="https://a.example/big",
                sink_factory=factory,
            )

        assert exc_info.value.size == 5000
        assert str(exc_info.value) == "File too big (5000 bytes)"
        assert stream.reads == 0
        assert factory.sinks == []

    def test_declared_length_at_limit_is_allowed(self) -> None:
        """Exactly max_size_bytes is accepted."""
        response, _ = streaming_response([b"x" * 10], headers={"Content-Length": "10"})

        sink = capture_body(
            response,
            max_size_bytes=10,
            source_url="https://a.example/ten",
            sink_factory=MemorySink.create,
        )

        assert sink.size == 10

    def test_undeclared_oversize_not_capped_by_default(self) -> None:
        """Without Content-Length, streamed bytes are not capped."""
        response, _ = streaming_response([b"x" * 600, b"y" * 600])

        sink = capture_body(
            response,
            max_size_bytes=1000,
            source_url="https://a.example/stream",
            sink_factory=MemorySink.create,
        )

        assert sink.size == 1200

    def test_streamed_limit_when_enforced(self) -> None:
        """enforce_streamed_limit stops once bytes exceed the limit."""
        response, stream = streaming_response([b"x" * 600, b"y" * 600, b"z" * 600])
        factory = RecordingSinkFactory()

        with pytest.raises(FileTooBigError) as exc_info:
            capture_body(
                response,
                max_size_bytes=1000,
                source_url="https://a.example/stream",
                sink_factory=factory,
                enforce_streamed_limit=True,
                chunk_size=600,
            )

        assert exc_info.value.size == 1200
        assert stream.reads == 2
        assert factory.sinks[0].closed is True

    def test_read_failure_discards_sink(self) -> None:
        """A failure mid-stream closes the partial sink."""
        response, _ = streaming_response(
            [b"partial"], fail_with=httpx.ReadError("connection reset")
        )
        factory = RecordingSinkFactory()

        with pytest.raises(httpx.ReadError):
            capture_body(
                response,
                max_size_bytes=1024,
                source_url="https://a.example/flaky",
                sink_factory=factory,
            )

        assert factory.sinks[0].closed is True

    def test_cancellation_discards_sink(self) -> None:
        """A cancelled token stops capture and discards the sink."""
        token = CancellationToken()
        token.cancel()
        response, stream = streaming_response([b"a", b"b", b"c"])
        factory = RecordingSinkFactory()

        with pytest.raises(FetchCancelledError):
            capture_body(
                response,
                max_size_bytes=1024,
                source_url="https://a.example/slow",
                sink_factory=factory,
                cancel=token,
                chunk_size=1,
            )

        assert stream.reads == 1
        assert factory.sinks[0].closed is True

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://a.example/report.pdf", ".pdf"),
            ("https://a.example/report.pdf?download=1", ".pdf"),
            ("https://a.example/archive.tar.gz", ".gz"),
            ("https://a.example/no-extension", None),
            ("https://a.example/name.averyveryverylongthing", None),
        ],
    )
    def test_suffix_hint_passed_to_factory(
        self, url: str, expected: str | None
    ) -> None:
        """The sink factory gets the URL path extension as a hint."""
        response, _ = streaming_response([b"data"])
        factory = RecordingSinkFactory()

        capture_body(response, max_size_bytes=1024, source_url=url, sink_factory=factory)

        assert factory.calls == [(expected, True)]

    def test_default_factory_uses_temp_file(self) -> None:
        """Without a factory the body goes to a temporary file."""
        response, _ = streaming_response([b"on disk"])

        sink = capture_body(
            response, max_size_bytes=1024, source_url="https://a.example/f.txt"
        )

        try:
            assert isinstance(sink, TempFileSink)
            assert sink.read() == b"on disk"
        finally:
            sink.close()


class FullDiskSink(MemorySink):
    """Memory sink whose writes fail as if the disk were full."""

    def write(self, data: bytes) -> int:
        raise OSError(errno.ENOSPC, "No space left on device")


class TestStorageFailures:
    """Tests for sink storage failures."""

    def test_factory_failure_is_typed(self) -> None:
        """A sink that cannot be created raises StorageError without reading."""

        def no_tmpdir(suffix: str | None, unlink_on_close: bool) -> MemorySink:
            raise OSError(errno.ENOSPC, "No space left on device")

        response, stream = streaming_response([b"data"])

        with pytest.raises(StorageError) as exc_info:
            capture_body(
                response,
                max_size_bytes=1024,
                source_url="https://a.example/file",
                sink_factory=no_tmpdir,
            )

        assert exc_info.value.error_class == FetchErrorClass.STORAGE_ERROR
        assert exc_info.value.errno == errno.ENOSPC
        assert isinstance(exc_info.value.__cause__, OSError)
        assert stream.reads == 0

    def test_write_failure_discards_sink(self) -> None:
        """A failed write raises StorageError and releases the partial sink."""
        response, _ = streaming_response([b"data"])
        sinks: list[MemorySink] = []

        def full_disk(suffix: str | None, unlink_on_close: bool) -> MemorySink:
            sink = FullDiskSink()
            sinks.append(sink)
            return sink

        with pytest.raises(StorageError):
            capture_body(
                response,
                max_size_bytes=1024,
                source_url="https://a.example/file",
                sink_factory=full_disk,
            )

        assert sinks[0].closed is True
