"""Message-block stream parser (SSE, ``/v1/messages``).

Events are tracked per content block ``index``: the block type recorded at
``content_block_start`` decides what ``content_block_stop`` does (close a
thinking sequence, or complete a tool call whose input never streamed).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from ..base.logging import get_logger, normalized_log_event
from ..base.streaming import StreamParser

_logger = get_logger("chatwire.anthropic")


class MessagesStreamParser(StreamParser):
    """Parser for ``/v1/messages`` streams."""

    family = "anthropic"

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._block_types: Dict[int, str] = {}
        self.stop_reason: Optional[str] = None

    def handle_event(self, event: Dict[str, Any]) -> None:
        kind = event.get("type")
        if kind == "content_block_start":
            self._block_start(event)
        elif kind == "content_block_delta":
            self._block_delta(event)
        elif kind == "content_block_stop":
            self._block_stop(event)
        elif kind == "message_delta":
            reason = (event.get("delta") or {}).get("stop_reason")
            if reason:
                self.stop_reason = reason
                self.state.tools.flush(strict=True)
        elif kind == "message_stop":
            self.state.end_thinking()
            self.state.tools.flush(strict=False)
        elif kind == "error":
            error = event.get("error") or {}
            normalized_log_event(
                _logger,
                "stream.provider_error",
                self.log_context,
                phase="stream",
                level=logging.ERROR,
                error_type=error.get("type") or "unknown_error",
                detail=error.get("message"),
            )

    @staticmethod
    def _index(event: Dict[str, Any]) -> int:
        index = event.get("index")
        return index if isinstance(index, int) else 0

    def _block_start(self, event: Dict[str, Any]) -> None:
        block = event.get("content_block") or {}
        index = self._index(event)
        block_type = block.get("type") or "text"
        self._block_types[index] = block_type
        if block_type == "text":
            self.state.emit_text(block.get("text") or "")
        elif block_type == "thinking":
            thinking = block.get("thinking")
            if thinking:
                self.push_reasoning(thinking)
        elif block_type == "tool_use":
            self.state.begin_tool_call()
            self.state.tools.open(index, id=block.get("id"), name=block.get("name"))
            initial = block.get("input")
            # complete input objects sometimes arrive on the start event
            if isinstance(initial, dict) and initial:
                self.state.tools.merge(index, fragment=json.dumps(initial), replace=True)

    def _block_delta(self, event: Dict[str, Any]) -> None:
        delta = event.get("delta") or {}
        index = self._index(event)
        kind = delta.get("type")
        if kind == "text_delta":
            self.state.emit_text(delta.get("text") or "")
        elif kind == "thinking_delta":
            thinking = delta.get("thinking")
            if thinking:
                self.push_reasoning(thinking)
        elif kind == "input_json_delta":
            partial = delta.get("partial_json")
            if partial and self.state.tools.has_buffer(index):
                self.state.tools.merge(index, fragment=partial)

    def _block_stop(self, event: Dict[str, Any]) -> None:
        index = self._index(event)
        block_type = self._block_types.pop(index, None)
        if block_type == "thinking":
            self.state.end_thinking()
        elif block_type == "tool_use":
            self.state.tools.complete(index)


__all__ = ["MessagesStreamParser"]
