"""Sink factory test double."""

from url_fetcher.fetch.sink import BodySink, MemorySink


class RecordingSinkFactory:
    """Sink factory that remembers what it created and with which hints."""

    def __init__(self) -> None:
        self.sinks: list[BodySink] = []
        self.calls: list[tuple[str | None, bool]] = []

    def __call__(self, suffix: str | None, unlink_on_close: bool) -> BodySink:
        self.calls.append((suffix, unlink_on_close))
        sink = MemorySink()
        self.sinks.append(sink)
        return sink
