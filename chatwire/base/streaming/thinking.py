"""Debounced reasoning accumulator.

:class:`ThinkingBuffer` coalesces reasoning fragments into fewer
:class:`ThinkingDelta` events. The first fragment of a sequence mints an
opaque sequence id; fragments accumulate until the scheduled flush deadline
passes. The deadline is an explicit handle owned by the buffer and evaluated
by :meth:`poll`, which the stream driver calls at every chunk boundary and
when :meth:`seconds_until_flush` elapses without new input, so no ambient
timer can fire after the stream is gone. :meth:`end` forces the
pending flush and closes the sequence; :meth:`cancel` discards everything.

Providers that send cumulative snapshots instead of deltas go through
:meth:`push_snapshot`, which emits only the part beyond the longest common
prefix with the text already seen (or the whole text when the two are
unrelated).
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional

from ..constants import REASONING_EFFORT_WORDS, THINKING_FLUSH_INTERVAL_SECONDS
from ..utils.ids import generate_thinking_id
from .events import StreamEvent, ThinkingDelta, ThinkingEnd


class ThinkingBuffer:
    """Per-stream reasoning state.

    Parameters:
        outbox: Event list shared with the rest of the parse state.
        interval: Debounce interval in seconds (0 flushes on every poll).
        clock: Monotonic clock used for the flush deadline.
        id_factory: Generator of sequence ids.
    """

    def __init__(
        self,
        outbox: List[StreamEvent],
        *,
        interval: float = THINKING_FLUSH_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        id_factory: Callable[[], str] = generate_thinking_id,
    ) -> None:
        self._outbox = outbox
        self._interval = interval
        self._clock = clock
        self._id_factory = id_factory
        self._thinking_id: Optional[str] = None
        self._accumulated = ""
        self._deadline: Optional[float] = None
        self._seen = ""
        self.captured: List[str] = []

    @property
    def is_open(self) -> bool:
        return self._thinking_id is not None

    @property
    def thinking_id(self) -> Optional[str]:
        return self._thinking_id

    @property
    def flush_pending(self) -> bool:
        return self._deadline is not None

    def push(self, text: str) -> None:
        """Append a reasoning fragment, opening a sequence when needed."""
        if not text:
            return
        if not self.is_open and text.strip().lower() in REASONING_EFFORT_WORDS:
            return
        if self._thinking_id is None:
            self._thinking_id = self._id_factory()
        self._accumulated += text
        self._seen += text
        self.captured.append(text)
        if self._deadline is None:
            self._deadline = self._clock() + self._interval

    def push_snapshot(self, snapshot: str) -> None:
        """Accept a cumulative snapshot and push only the new suffix."""
        if not snapshot:
            return
        seen = self._seen
        if snapshot.startswith(seen):
            suffix = snapshot[len(seen):]
        elif seen.startswith(snapshot):
            return
        else:
            suffix = snapshot
            self._seen = ""
        self.push(suffix)
        if len(snapshot) > len(self._seen):
            self._seen = snapshot

    def seconds_until_flush(self) -> Optional[float]:
        """Time left before the scheduled flush is due (None when none is pending)."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def poll(self) -> None:
        """Fire the scheduled flush if its deadline has passed."""
        if self._deadline is not None and self._clock() >= self._deadline:
            self.flush()

    def flush(self) -> None:
        """Emit accumulated text under the current id (sequence stays open)."""
        self._deadline = None
        if self._accumulated and self._thinking_id is not None:
            self._outbox.append(ThinkingDelta(text=self._accumulated, thinking_id=self._thinking_id))
        self._accumulated = ""

    def end(self) -> None:
        """Force the pending flush, then close the sequence."""
        if self._thinking_id is None:
            return
        self.flush()
        self._outbox.append(ThinkingEnd(thinking_id=self._thinking_id))
        self._thinking_id = None

    def cancel(self) -> None:
        """Discard pending text and the scheduled flush without emitting."""
        self._deadline = None
        self._accumulated = ""
        self._thinking_id = None


__all__ = ["ThinkingBuffer"]
