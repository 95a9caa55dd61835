"""Per-request stream parse state.

:class:`StreamParseState` wires the tool-call assembler, the thinking buffer
and the inline tag scanner to one ordered event outbox and enforces the
ordering rules between them:

- answer text closes an open thinking sequence before it is emitted;
- the first tool-call fragment closes an open thinking sequence;
- a single ``" "`` filler text precedes the first tool call emitted after
  answer text, once per stream;
- at the end of the stream the tag scanner is drained, thinking is closed,
  remaining tool calls are flushed leniently and ``StreamEnd`` is appended.

One instance belongs to exactly one in-flight request.
"""

from __future__ import annotations

import time
from typing import Callable, List, Optional

from ..constants import THINKING_FLUSH_INTERVAL_SECONDS, TOOL_CALL_FILLER_TEXT
from ..logging import LogContext
from .events import StreamEnd, StreamEvent, TextDelta
from .tagged_thinking import TaggedThinkingScanner
from .thinking import ThinkingBuffer
from .tool_calls import ToolCallAssembler


class StreamParseState:
    """Ordered event outbox plus the state machines feeding it."""

    def __init__(
        self,
        *,
        family: str = "unknown",
        thinking_interval: float = THINKING_FLUSH_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        tool_call_filler: Optional[str] = TOOL_CALL_FILLER_TEXT,
        log_context: Optional[LogContext] = None,
    ) -> None:
        self.outbox: List[StreamEvent] = []
        self.family = family
        self.tool_call_filler = tool_call_filler
        self.has_emitted_text = False
        self.filler_emitted = False
        self.finished = False
        self.thinking = ThinkingBuffer(self.outbox, interval=thinking_interval, clock=clock)
        self.tools = ToolCallAssembler(
            self.outbox, family=family, before_emit=self._before_tool_call, log_context=log_context
        )
        self.scanner = TaggedThinkingScanner()

    # ------------------------------------------------------------------ text
    def emit_text(self, text: str) -> None:
        if not text:
            return
        self.thinking.end()
        self.outbox.append(TextDelta(text=text))
        self.has_emitted_text = True

    def route_content(self, text: str) -> None:
        """Send answer content through the inline ``<think>`` scanner."""
        if not text:
            return
        self._apply_segments(self.scanner.feed(text))

    def _apply_segments(self, segments) -> None:
        for kind, payload in segments:
            if kind == "text":
                self.emit_text(payload)
            elif kind == "thinking":
                self.thinking.push(payload)
            else:
                self.thinking.end()

    # -------------------------------------------------------------- thinking
    def emit_thinking(self, text: str) -> None:
        self.thinking.push(text)

    def emit_thinking_snapshot(self, text: str) -> None:
        self.thinking.push_snapshot(text)

    def end_thinking(self) -> None:
        self.thinking.end()

    @property
    def reasoning_text(self) -> str:
        """All reasoning pushed so far in this stream."""
        return "".join(self.thinking.captured)

    # ------------------------------------------------------------ tool calls
    def begin_tool_call(self) -> None:
        """A tool-call fragment arrived: close reasoning before it."""
        self.thinking.end()

    def _before_tool_call(self) -> None:
        self.thinking.end()
        if self.tool_call_filler and self.has_emitted_text and not self.filler_emitted:
            self.outbox.append(TextDelta(text=self.tool_call_filler))
            self.filler_emitted = True

    # -------------------------------------------------------------- lifecycle
    def poll(self) -> None:
        self.thinking.poll()

    def drain(self) -> List[StreamEvent]:
        events = list(self.outbox)
        self.outbox.clear()
        return events

    def finish(self) -> None:
        """End-of-stream sequence; idempotent."""
        if self.finished:
            return
        self._apply_segments(self.scanner.flush())
        self.thinking.end()
        self.tools.flush(strict=False)
        self.outbox.append(StreamEnd())
        self.finished = True

    def abandon(self) -> None:
        """Drop pending state without emitting (cancellation)."""
        self.thinking.cancel()
        self.outbox.clear()
        self.finished = True


__all__ = ["StreamParseState"]
