"""Stream driver: pumps response bytes through a parser.

Chunks are read on a worker thread and handed over through a bounded queue,
so the driver can wake up between chunks when the thinking buffer has a flush
due: reasoning that arrives just before a network stall is still delivered
after the debounce interval instead of waiting for the next chunk.

The cancellation token is checked at every chunk boundary, at every timed
wake-up and once more before the end-of-stream sequence, so a cancelled turn
never emits ``StreamEnd``. When the parser raises a :class:`ProviderError`
part way through a chunk, the events that earlier lines of that chunk
produced are delivered before the error propagates. The caller owns the
response (closing it unblocks the reader) and the parser's
:meth:`~StreamParser.abandon` on cancellation.
"""

from __future__ import annotations

import queue
import threading
from typing import Any, Callable, Iterable, Iterator, List, Optional, Tuple

from ..cancellation import CancellationToken
from ..errors import ProviderError
from .events import StreamEvent
from .stream_parser import StreamParser

_END = object()
_QUEUE_DEPTH = 64
# Upper bound on how long a waiting driver goes without checking its token.
_WAKE_SECONDS = 0.05


class _ChunkReader:
    """Iterates ``chunks`` on a daemon thread; errors are handed to the consumer."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._queue: "queue.Queue[Tuple[Any, Optional[Exception]]]" = queue.Queue(maxsize=_QUEUE_DEPTH)
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, args=(chunks,), name="chatwire-stream-reader", daemon=True)
        self._thread.start()

    def _run(self, chunks: Iterable[bytes]) -> None:
        try:
            for chunk in chunks:
                if not self._put((chunk, None)):
                    return
        except Exception as exc:  # noqa: BLE001 - re-raised by the consumer
            self._put((_END, exc))
            return
        self._put((_END, None))

    def _put(self, item: Tuple[Any, Optional[Exception]]) -> bool:
        while not self._stopped.is_set():
            try:
                self._queue.put(item, timeout=_WAKE_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def get(self, timeout: Optional[float]) -> Tuple[Any, Optional[Exception]]:
        """Next ``(chunk, None)`` or ``(_END, error)``; raises ``queue.Empty`` on timeout."""
        return self._queue.get(timeout=timeout)

    def stop(self) -> None:
        self._stopped.set()


def _step(parser: StreamParser, action: Callable[[], List[StreamEvent]]) -> Iterator[StreamEvent]:
    try:
        events = action()
    except ProviderError:
        yield from parser.state.drain()
        raise
    yield from events


def _next_wake(parser: StreamParser, token: Optional[CancellationToken]) -> Optional[float]:
    wait = parser.state.thinking.seconds_until_flush()
    if token is not None:
        wait = _WAKE_SECONDS if wait is None else min(wait, _WAKE_SECONDS)
    return wait


def drive_stream(
    chunks: Iterable[bytes],
    parser: StreamParser,
    token: Optional[CancellationToken] = None,
) -> Iterator[StreamEvent]:
    """Yield canonical events for ``chunks`` in emission order."""
    reader = _ChunkReader(chunks)
    try:
        while True:
            if token is not None:
                token.raise_if_cancelled()
            try:
                chunk, error = reader.get(_next_wake(parser, token))
            except queue.Empty:
                yield from _step(parser, parser.poll)
                continue
            if chunk is _END:
                if error is not None:
                    raise error
                break
            if token is not None:
                token.raise_if_cancelled()
            yield from _step(parser, lambda: parser.feed(chunk))
    finally:
        reader.stop()
    if token is not None:
        token.raise_if_cancelled()
    yield from _step(parser, parser.close)


__all__ = ["drive_stream"]
