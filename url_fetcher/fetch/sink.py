"""Spillable storage for captured response bodies.

A sink is written once while the body streams off the wire, sealed
(flushed and rewound), and from then on is a read-only byte stream owned by
the fetch result until the caller closes it.
"""

import tempfile
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from io import BytesIO
from pathlib import Path
from types import TracebackType
from typing import IO, Self

from url_fetcher.fetch.constants import DEFAULT_CHUNK_SIZE, SINK_FILE_PREFIX


class SinkStateError(ValueError):
    """Operation not allowed in the sink's current state."""


class SinkClosedError(SinkStateError):
    """Raised when reading from or writing to a closed sink."""


class SinkSealedError(SinkStateError):
    """Raised when writing to a sink that has already been sealed."""


class BodySink(ABC):
    """Write-once, read-many byte store for one response body.

    Subclasses supply the backing file object and decide where (if
    anywhere) it lives on disk.
    """

    def __init__(self, fileobj: IO[bytes]) -> None:
        self._file = fileobj
        self._sealed = False
        self._size = 0

    @property
    @abstractmethod
    def path(self) -> Path | None:
        """Filesystem path of the backing file, if it has one."""

    @abstractmethod
    def discard(self) -> None:
        """Close the sink and remove any backing storage."""

    @property
    def size(self) -> int:
        """Number of bytes written to the sink."""
        return self._size

    @property
    def sealed(self) -> bool:
        """Whether writing has finished and the sink is readable."""
        return self._sealed

    @property
    def closed(self) -> bool:
        """Whether the sink has been released."""
        return self._file.closed

    def write(self, data: bytes) -> int:
        """Append bytes during capture.

        Raises:
            SinkClosedError: If the sink is closed.
            SinkSealedError: If the sink was already sealed.
        """
        if self.closed:
            raise SinkClosedError("Cannot write to a closed body sink")
        if self._sealed:
            raise SinkSealedError("Body sink is sealed and read-only")
        written = self._file.write(data)
        self._size += written
        return written

    def seal(self) -> None:
        """Finish writing: flush, rewind to the start and switch to read-only."""
        if self.closed:
            raise SinkClosedError("Cannot seal a closed body sink")
        self._file.flush()
        self._file.seek(0)
        self._sealed = True

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes (all remaining bytes when negative)."""
        self._ensure_readable()
        return self._file.read(size)

    def rewind(self) -> None:
        """Move back to the start so the body can be read again."""
        self._ensure_readable()
        self._file.seek(0)

    def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Iterate over the remaining body in chunks.

        Args:
            chunk_size: Maximum size of each chunk.

        Yields:
            Successive chunks until the end of the body.
        """
        self._ensure_readable()
        while chunk := self._file.read(chunk_size):
            yield chunk

    def close(self) -> None:
        """Release the sink. Closing twice is a no-op."""
        if not self._file.closed:
            self._file.close()

    def _ensure_readable(self) -> None:
        if self.closed:
            raise SinkClosedError("Body sink has been closed")
        if not self._sealed:
            raise SinkStateError("Body sink is still being written")

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class TempFileSink(BodySink):
    """Body sink backed by a temporary file on disk."""

    def __init__(self, fileobj: IO[bytes], path: Path | None) -> None:
        super().__init__(fileobj)
        self._path = path

    @classmethod
    def create(
        cls,
        suffix: str | None = None,
        unlink_on_close: bool = True,
    ) -> "TempFileSink":
        """Create a fresh temporary file sink.

        With ``unlink_on_close`` the file is anonymous: on POSIX it is
        removed from the filesystem as soon as it is created, and on every
        platform it is gone once closed. Otherwise the file keeps its name
        after ``close()`` and removing it is the caller's job.

        Args:
            suffix: Optional filename suffix (e.g. ".pdf").
            unlink_on_close: Remove the file when the sink is closed.

        Returns:
            A writable TempFileSink.
        """
        if unlink_on_close:
            fileobj = tempfile.TemporaryFile(prefix=SINK_FILE_PREFIX, suffix=suffix)
            return cls(fileobj, path=None)

        named = tempfile.NamedTemporaryFile(  # noqa: SIM115
            prefix=SINK_FILE_PREFIX, suffix=suffix, delete=False
        )
        return cls(named, path=Path(named.name))

    @property
    def path(self) -> Path | None:
        return self._path

    def discard(self) -> None:
        self.close()
        if self._path is not None:
            self._path.unlink(missing_ok=True)


class MemorySink(BodySink):
    """In-memory body sink, for tests and callers that want no disk I/O."""

    def __init__(self) -> None:
        super().__init__(BytesIO())

    @classmethod
    def create(
        cls,
        suffix: str | None = None,  # noqa: ARG003
        unlink_on_close: bool = True,  # noqa: ARG003
    ) -> "MemorySink":
        """Create an empty memory sink (matches the SinkFactory signature)."""
        return cls()

    @property
    def path(self) -> Path | None:
        return None

    def discard(self) -> None:
        self.close()


SinkFactory = Callable[[str | None, bool], BodySink]
