"""Unit tests for body sinks."""

from pathlib import Path

import pytest

from url_fetcher.fetch.sink import (
    MemorySink,
    SinkClosedError,
    SinkSealedError,
    SinkStateError,
    TempFileSink,
)


class TestMemorySink:
    """Tests for the shared sink lifecycle, using MemorySink."""

    def test_write_seal_read(self) -> None:
        """Written bytes are readable after sealing."""
        sink = MemorySink()
        sink.write(b"abc")
        sink.write(b"def")
        sink.seal()

        assert sink.size == 6
        assert sink.read() == b"abcdef"

    def test_partial_reads(self) -> None:
        """read(size) returns at most size bytes."""
        sink = MemorySink()
        sink.write(b"abcdef")
        sink.seal()

        assert sink.read(2) == b"ab"
        assert sink.read(2) == b"cd"
        assert sink.read() == b"ef"
        assert sink.read() == b""

    def test_rewind_allows_rereading(self) -> None:
        """The body can be read again after rewinding."""
        sink = MemorySink()
        sink.write(b"again")
        sink.seal()

        assert sink.read() == b"again"
        sink.rewind()
        assert sink.read() == b"again"

    def test_iter_chunks(self) -> None:
        """iter_chunks yields the body in pieces."""
        sink = MemorySink()
        sink.write(b"0123456789")
        sink.seal()

        assert list(sink.iter_chunks(4)) == [b"0123", b"4567", b"89"]

    def test_write_after_seal_rejected(self) -> None:
        """Sealed sinks are read-only."""
        sink = MemorySink()
        sink.seal()

        with pytest.raises(SinkSealedError):
            sink.write(b"late")

    def test_read_before_seal_rejected(self) -> None:
        """Reading while still being written is an error."""
        sink = MemorySink()
        sink.write(b"half")

        with pytest.raises(SinkStateError):
            sink.read()

    def test_read_after_close_rejected(self) -> None:
        """Reading a closed sink raises SinkClosedError."""
        sink = MemorySink()
        sink.write(b"gone")
        sink.seal()
        sink.close()

        with pytest.raises(SinkClosedError):
            sink.read()
        with pytest.raises(SinkClosedError):
            sink.rewind()

    def test_double_close_is_noop(self) -> None:
        """Closing twice does not raise."""
        sink = MemorySink()
        sink.close()
        sink.close()

        assert sink.closed is True

    def test_closed_error_is_value_error(self) -> None:
        """Closed-sink errors behave like reading a closed file."""
        assert issubclass(SinkClosedError, ValueError)

    def test_context_manager_closes(self) -> None:
        """Leaving a with block closes the sink."""
        with MemorySink() as sink:
            sink.seal()

        assert sink.closed is True

    def test_has_no_path(self) -> None:
        """Memory sinks live nowhere on disk."""
        assert MemorySink().path is None


class TestTempFileSink:
    """Tests for disk-backed sinks."""

    def test_unlinked_sink_has_no_path(self) -> None:
        """With unlink_on_close the file has no name to find."""
        sink = TempFileSink.create(suffix=".txt", unlink_on_close=True)
        try:
            sink.write(b"anonymous")
            sink.seal()

            assert sink.path is None
            assert sink.read() == b"anonymous"
        finally:
            sink.close()

    def test_named_sink_survives_close(self) -> None:
        """Without unlink_on_close the file stays after close."""
        sink = TempFileSink.create(suffix=".pdf", unlink_on_close=False)
        path = sink.path
        assert path is not None
        try:
            sink.write(b"%PDF-1.7")
            sink.seal()
            sink.close()

            assert path.exists()
            assert path.suffix == ".pdf"
            assert path.name.startswith("url_fetcher")
            assert path.read_bytes() == b"%PDF-1.7"
        finally:
            path.unlink(missing_ok=True)

    def test_discard_removes_named_file(self) -> None:
        """discard() deletes the backing file even when not unlinking."""
        sink = TempFileSink.create(unlink_on_close=False)
        path = sink.path
        assert isinstance(path, Path)
        sink.write(b"partial")

        sink.discard()

        assert sink.closed is True
        assert not path.exists()

    def test_discard_twice_is_safe(self) -> None:
        """discard() tolerates an already removed file."""
        sink = TempFileSink.create(unlink_on_close=False)
        sink.discard()
        sink.discard()

        assert sink.closed is True

    def test_large_body_roundtrip(self) -> None:
        """Multi-megabyte bodies are written and read back intact."""
        chunk = bytes(range(256)) * 4096
        sink = TempFileSink.create()
        try:
            for _ in range(4):
                sink.write(chunk)
            sink.seal()

            assert sink.size == len(chunk) * 4
            assert b"".join(sink.iter_chunks(65536)) == chunk * 4
        finally:
            sink.close()
