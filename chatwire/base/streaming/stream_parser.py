"""Base class for the per-family streaming event parsers.

A parser is fed raw response bytes and returns the canonical events produced
so far. Framing (SSE ``data:`` lines or JSON lines), incremental decoding,
malformed-line handling and the end-of-stream sequence live here; subclasses
implement :meth:`StreamParser.handle_event` for one decoded JSON object.

Usage::

    parser = ChatCompletionsStreamParser()
    for chunk in response.iter_bytes():
        for event in parser.feed(chunk):
            ...
    for event in parser.close():
        ...
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, ClassVar, Dict, List, Optional

from ..constants import THINKING_FLUSH_INTERVAL_SECONDS, TOOL_CALL_FILLER_TEXT
from ..errors import ProtocolDecodeError
from ..logging import LogContext, get_logger, normalized_log_event
from .events import StreamEvent
from .line_decoder import SSE_DONE, LineDecoder, sse_data
from .parse_state import StreamParseState

_logger = get_logger("chatwire.streaming")


class StreamParser:
    """Incremental parser skeleton shared by every protocol family.

    Class attributes:
        family: Protocol family name (logs and errors).
        sse: ``True`` for ``data:`` framed streams, ``False`` for JSON lines.
    """

    family: ClassVar[str] = "unknown"
    sse: ClassVar[bool] = True

    def __init__(
        self,
        *,
        thinking_interval: float = THINKING_FLUSH_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        tool_call_filler: Optional[str] = TOOL_CALL_FILLER_TEXT,
        cumulative_reasoning: bool = False,
        log_context: Optional[LogContext] = None,
    ) -> None:
        self.log_context = log_context
        self.cumulative_reasoning = cumulative_reasoning
        self.state = StreamParseState(
            family=self.family,
            thinking_interval=thinking_interval,
            clock=clock,
            tool_call_filler=tool_call_filler,
            log_context=log_context,
        )
        self._decoder = LineDecoder()
        self.decode_errors = 0

    # ---------------------------------------------------------------- public
    def feed(self, chunk: bytes) -> List[StreamEvent]:
        """Consume one network chunk and return the events it produced."""
        for line in self._decoder.feed(chunk):
            self._handle_line(line)
        self.state.poll()
        return self.state.drain()

    def poll(self) -> List[StreamEvent]:
        """Fire a due thinking flush without new input."""
        self.state.poll()
        return self.state.drain()

    def close(self) -> List[StreamEvent]:
        """End of bytes: parse the trailing line and run the end sequence."""
        for line in self._decoder.flush():
            self._handle_line(line)
        if not self.state.finished:
            self.on_close()
            self.state.finish()
            self.on_finished()
        return self.state.drain()

    def abandon(self) -> None:
        """Discard all pending state (cancelled stream)."""
        self.state.abandon()

    # ------------------------------------------------------------ subclasses
    def handle_event(self, event: Dict[str, Any]) -> None:  # pragma: no cover - abstract
        raise NotImplementedError

    def on_done_marker(self) -> None:
        """``[DONE]`` payload: ambiguous ending, flush tool calls leniently."""
        self.state.tools.flush(strict=False)

    def on_close(self) -> None:
        """Hook run once before the end-of-stream sequence."""

    def on_finished(self) -> None:
        """Hook run once after the end-of-stream sequence (all events queued)."""

    def push_reasoning(self, text: str) -> None:
        """Route a reasoning-field value (delta or snapshot per configuration)."""
        if self.cumulative_reasoning:
            self.state.emit_thinking_snapshot(text)
        else:
            self.state.emit_thinking(text)

    # --------------------------------------------------------------- framing
    def _handle_line(self, line: str) -> None:
        line = line.strip()
        if not line:
            return
        if self.sse:
            payload = sse_data(line)
            if payload is None:
                return
            if payload == SSE_DONE:
                self.on_done_marker()
                return
        else:
            payload = line
        try:
            event = json.loads(payload)
            if not isinstance(event, dict):
                raise ValueError("stream payload is not a JSON object")
        except ValueError as exc:
            self._decode_error(ProtocolDecodeError(family=self.family, line=payload, raw=exc))
            return
        try:
            self.handle_event(event)
        except (KeyError, TypeError, AttributeError, IndexError, ValueError) as exc:
            self._decode_error(ProtocolDecodeError(family=self.family, line=payload, raw=exc))

    def _decode_error(self, err: ProtocolDecodeError) -> None:
        self.decode_errors += 1
        normalized_log_event(
            _logger,
            "stream.decode_error",
            self.log_context,
            phase="stream",
            level=logging.WARNING,
            error_code=err.code.value,
            detail=err.message,
            cause=repr(err.raw) if err.raw else None,
        )


__all__ = ["StreamParser"]
