"""Optional fixed inter-request delay.

A :class:`RequestPacer` is the only state shared between chat turns: the
completion time of the previous request. When a positive delay applies, turns
are serialized. A new turn waits out whatever remains of the delay window
since the previous completion, holds the slot while its stream runs, and
records its own completion time on exit (success or failure).

The wait is cancellable through the turn's :class:`CancellationToken`.
"""
from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from ..cancellation import CancellationToken
from ..logging import LogContext, get_logger, normalized_log_event

_logger = get_logger("chatwire.pacing")

_ACQUIRE_POLL_SECONDS = 0.05


class RequestPacer:
    """Serializes request start times when a delay is configured."""

    def __init__(self, *, clock: Callable[[], float] = time.monotonic, sleep: Callable[[float], None] = time.sleep) -> None:
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_completion: Optional[float] = None

    @property
    def last_completion(self) -> Optional[float]:
        return self._last_completion

    def remaining(self, delay_ms: int) -> float:
        """Seconds left in the delay window (0 when elapsed or no prior request)."""
        if delay_ms <= 0 or self._last_completion is None:
            return 0.0
        elapsed = self._clock() - self._last_completion
        return max(0.0, delay_ms / 1000.0 - elapsed)

    def _acquire(self, token: Optional[CancellationToken]) -> None:
        """Take the slot; a turn queued behind a running stream stays cancellable."""
        if token is None:
            self._lock.acquire()
            return
        while not self._lock.acquire(timeout=_ACQUIRE_POLL_SECONDS):
            token.raise_if_cancelled()

    def _wait(self, seconds: float, token: Optional[CancellationToken]) -> None:
        if token is None:
            self._sleep(seconds)
            return
        if token.wait(seconds):
            token.raise_if_cancelled()

    @contextmanager
    def slot(
        self,
        delay_ms: int,
        token: Optional[CancellationToken] = None,
        ctx: Optional[LogContext] = None,
    ) -> Iterator[None]:
        """Hold the request slot for the duration of the ``with`` block."""
        if delay_ms <= 0:
            try:
                yield
            finally:
                self._last_completion = self._clock()
            return
        self._acquire(token)
        try:
            wait_for = self.remaining(delay_ms)
            if wait_for > 0:
                normalized_log_event(_logger, "pacing.wait", ctx, phase="pacing", delay_ms=delay_ms, wait_s=round(wait_for, 3))
                self._wait(wait_for, token)
            try:
                yield
            finally:
                self._last_completion = self._clock()
        finally:
            self._lock.release()


__all__ = ["RequestPacer"]
