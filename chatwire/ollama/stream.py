"""Local-native stream parser (JSON lines).

Every line is one complete object: ``message.thinking`` is reasoning,
``message.content`` runs through the inline ``<think>`` scanner and
``message.tool_calls`` are whole calls with argument objects. ``done: true``
is a definitive end and flushes tool calls strictly.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from ..base.logging import get_logger, normalized_log_event
from ..base.streaming import StreamParser

_logger = get_logger("chatwire.ollama")


class NativeChatStreamParser(StreamParser):
    """Parser for ``/api/chat`` streams."""

    family = "ollama"
    sse = False

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._call_count = 0
        self.done_reason = None

    def handle_event(self, event: Dict[str, Any]) -> None:
        error = event.get("error")
        if error:
            normalized_log_event(
                _logger,
                "stream.provider_error",
                self.log_context,
                phase="stream",
                level=logging.ERROR,
                detail=str(error),
            )
            return

        message = event.get("message") or {}
        thinking = message.get("thinking")
        if thinking:
            self.push_reasoning(str(thinking))
        content = message.get("content")
        if content:
            self.state.route_content(str(content))

        calls = message.get("tool_calls")
        if isinstance(calls, list) and calls:
            self.state.begin_tool_call()
            for call in calls:
                self._add_call(call)

        if event.get("done") is True:
            self.done_reason = event.get("done_reason")
            self.state.tools.flush(strict=True)

    def _add_call(self, call: Dict[str, Any]) -> None:
        function = call.get("function") or {}
        index = function.get("index")
        key = index if isinstance(index, int) else self._call_count
        self._call_count += 1
        args = function.get("arguments")
        text = args if isinstance(args, str) else json.dumps(args if args is not None else {})
        self.state.tools.merge(
            key,
            id=call.get("id") if isinstance(call.get("id"), str) else None,
            name=function.get("name"),
            fragment=text,
            replace=True,
        )


__all__ = ["NativeChatStreamParser"]
