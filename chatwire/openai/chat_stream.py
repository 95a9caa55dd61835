"""Chat-completions stream parser (SSE).

Each chunk carries at most one relevant choice. Per chunk, in order:

1. reasoning: ``reasoning_details`` (sorted by ``index``) take priority over
   the plain ``thinking`` / ``reasoning_content`` / ``reasoning`` fields;
2. ``delta.content`` through the inline ``<think>`` scanner;
3. ``delta.tool_calls`` fragments keyed by their ``index``;
4. ``finish_reason`` ``stop`` / ``tool_calls``: strict tool-call flush.

At close the reasoning of the response is stored in the reasoning cache under
every tool-call id seen, so a later request can replay it.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from ..base.resilience.reasoning_cache import ReasoningCache
from ..base.streaming import StreamParser

_STRICT_FINISH_REASONS = frozenset({"stop", "tool_calls"})


def reasoning_detail_text(detail: Dict[str, Any]) -> str:
    """Text of one ``reasoning_details`` entry."""
    kind = detail.get("type")
    if kind == "reasoning.summary":
        return str(detail.get("summary") or "")
    if kind == "reasoning.text":
        return str(detail.get("text") or "")
    if kind == "reasoning.encrypted":
        return "[REDACTED]"
    return json.dumps(detail, ensure_ascii=False)


def _reasoning_value_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        text = value.get("text")
        return text if isinstance(text, str) else json.dumps(value, ensure_ascii=False)
    return ""


class ChatCompletionsStreamParser(StreamParser):
    """Parser for ``/chat/completions`` streams."""

    family = "openai"

    def __init__(self, *, reasoning_cache: Optional[ReasoningCache] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._reasoning_cache = reasoning_cache
        self.seen_tool_call_ids: List[str] = []

    def handle_event(self, event: Dict[str, Any]) -> None:
        choices = event.get("choices")
        if not isinstance(choices, list) or not choices:
            return
        choice = choices[0]
        delta = choice.get("delta") or {}

        self._handle_reasoning(choice, delta)

        content = delta.get("content")
        if content:
            self.state.route_content(str(content))

        tool_calls = delta.get("tool_calls")
        if isinstance(tool_calls, list) and tool_calls:
            self.state.begin_tool_call()
            for fragment in tool_calls:
                self._merge_tool_fragment(fragment)

        if choice.get("finish_reason") in _STRICT_FINISH_REASONS:
            self.state.tools.flush(strict=True)

    def _handle_reasoning(self, choice: Dict[str, Any], delta: Dict[str, Any]) -> None:
        details = delta.get("reasoning_details") or choice.get("reasoning_details")
        if isinstance(details, list) and details:
            ordered = sorted(
                (d for d in details if isinstance(d, dict)), key=lambda d: d.get("index") or 0
            )
            for detail in ordered:
                text = reasoning_detail_text(detail)
                if text:
                    self.push_reasoning(text)
            return
        for value in (
            choice.get("thinking"),
            delta.get("thinking"),
            delta.get("reasoning_content"),
            delta.get("reasoning"),
        ):
            if value is None:
                continue
            text = _reasoning_value_text(value)
            if text:
                self.push_reasoning(text)
            return

    def _merge_tool_fragment(self, fragment: Dict[str, Any]) -> None:
        index = fragment.get("index")
        key = index if isinstance(index, int) else 0
        if self.state.tools.is_completed(key):
            return
        call_id = fragment.get("id") if isinstance(fragment.get("id"), str) else None
        if call_id and call_id not in self.seen_tool_call_ids:
            self.seen_tool_call_ids.append(call_id)
        function = fragment.get("function") or {}
        name = function.get("name") if isinstance(function.get("name"), str) else None
        args = function.get("arguments")
        self.state.tools.merge(key, id=call_id, name=name, fragment=args if isinstance(args, str) else "")

    def on_finished(self) -> None:
        if self._reasoning_cache is None:
            return
        ids = list(self.seen_tool_call_ids)
        for emitted in self.state.tools.emitted_ids:
            if emitted not in ids:
                ids.append(emitted)
        reasoning = self.state.reasoning_text
        if reasoning and ids:
            self._reasoning_cache.add(ids, reasoning)


__all__ = ["ChatCompletionsStreamParser", "reasoning_detail_text"]
