"""Generate-content stream parser (SSE).

Only ``candidates[0].content.parts`` is read. Parts flagged ``thought`` are
reasoning, other text parts are answer text and ``functionCall`` parts are
complete calls. A ``finishReason`` is a definitive end.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict

from ..base.logging import get_logger, normalized_log_event
from ..base.streaming import StreamParser

_logger = get_logger("chatwire.gemini")


class GenerateContentStreamParser(StreamParser):
    """Parser for ``:streamGenerateContent?alt=sse`` streams."""

    family = "gemini"

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._call_count = 0
        self.finish_reason = None

    def handle_event(self, event: Dict[str, Any]) -> None:
        feedback = event.get("promptFeedback") or {}
        if feedback.get("blockReason"):
            normalized_log_event(
                _logger,
                "stream.prompt_blocked",
                self.log_context,
                phase="stream",
                level=logging.WARNING,
                detail=feedback.get("blockReason"),
            )
        error = event.get("error")
        if isinstance(error, dict):
            normalized_log_event(
                _logger,
                "stream.provider_error",
                self.log_context,
                phase="stream",
                level=logging.ERROR,
                detail=error.get("message"),
                status=error.get("status"),
            )
            return

        candidates = event.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return
        candidate = candidates[0]
        for part in (candidate.get("content") or {}).get("parts") or []:
            self._handle_part(part)

        finish = candidate.get("finishReason")
        if finish:
            self.finish_reason = finish
            self.state.tools.flush(strict=True)

    def _handle_part(self, part: Dict[str, Any]) -> None:
        call = part.get("functionCall")
        if isinstance(call, dict):
            self.state.begin_tool_call()
            key = self._call_count
            self._call_count += 1
            args = call.get("args")
            self.state.tools.merge(
                key,
                id=call.get("id") if isinstance(call.get("id"), str) else None,
                name=call.get("name"),
                fragment=json.dumps(args if args is not None else {}),
                replace=True,
            )
            return
        text = part.get("text")
        if not isinstance(text, str) or not text:
            return
        if part.get("thought") is True:
            self.push_reasoning(text)
        else:
            self.state.route_content(text)


__all__ = ["GenerateContentStreamParser"]
