"""Structured responses stream parser (SSE, named events).

Handled event types:

- ``response.output_text.delta`` / ``response.refusal.delta``: text.
- ``response.output_text.done`` / ``response.refusal.done``: text only when
  no delta produced text (avoids duplicate output).
- reasoning deltas (``response.reasoning.delta``,
  ``response.reasoning_text.delta``, ``response.reasoning_summary.delta``,
  ``response.reasoning_summary_text.delta``) and their ``.done`` snapshots,
  compared per summary or content part.
- ``response.output_item.added`` / ``.done`` for ``function_call`` items: open
  or complete a call buffer and map the item id to the call id.
- ``response.function_call_arguments.delta`` appends; ``.done`` and
  ``response.function_call.done`` replace the argument text.
- ``response.completed`` / ``response.done``: extract text, reasoning and tool
  calls from the full response when no deltas surfaced them, then flush
  strictly.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ..base.streaming import StreamParser

_TEXT_DELTAS = frozenset({"response.output_text.delta", "response.refusal.delta"})
_TEXT_DONE = frozenset({"response.output_text.done", "response.refusal.done"})
_REASONING_DELTAS = frozenset(
    {
        "response.reasoning.delta",
        "response.reasoning_text.delta",
        "response.reasoning_summary.delta",
        "response.reasoning_summary_text.delta",
    }
)
_REASONING_DONE = frozenset(
    {
        "response.reasoning.done",
        "response.reasoning_text.done",
        "response.reasoning_summary.done",
        "response.reasoning_summary_text.done",
    }
)
_ARGUMENT_EVENTS = frozenset(
    {
        "response.function_call_arguments.delta",
        "response.function_call_arguments.done",
        "response.function_call.done",
    }
)
_COMPLETION_EVENTS = frozenset({"response.completed", "response.done"})


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _reasoning_part(kind: str, event: Dict[str, Any]) -> Tuple[Any, str, int]:
    """Key of the summary or content part a reasoning event belongs to."""
    section = "summary" if "summary" in kind else "content"
    index = event.get("summary_index" if section == "summary" else "content_index")
    owner = _str(event.get("item_id")) or event.get("output_index")
    return (owner, section, index if isinstance(index, int) else 0)


def extract_output_text(response: Dict[str, Any]) -> str:
    """Joined ``output_text`` parts of a full response object."""
    direct = response.get("output_text")
    if isinstance(direct, str) and direct.strip():
        return direct
    parts: List[str] = []
    for item in response.get("output") or []:
        if not isinstance(item, dict):
            continue
        for content in item.get("content") or []:
            if isinstance(content, dict) and content.get("type") == "output_text" and _str(content.get("text")):
                parts.append(content["text"])
    return "".join(parts)


def extract_reasoning_text(response: Dict[str, Any]) -> str:
    """Joined reasoning summary/content text of a full response object."""
    parts: List[str] = []
    for item in response.get("output") or []:
        if not isinstance(item, dict) or item.get("type") != "reasoning":
            continue
        for key in ("summary", "content"):
            for entry in item.get(key) or []:
                if isinstance(entry, dict) and _str(entry.get("text")):
                    parts.append(entry["text"])
    return "\n".join(parts)


def extract_tool_calls(response: Dict[str, Any]) -> List[Tuple[str, str, str]]:
    """``(call id, name, arguments)`` of every complete ``function_call`` item."""
    calls: List[Tuple[str, str, str]] = []
    for item in response.get("output") or []:
        if not isinstance(item, dict) or item.get("type") != "function_call":
            continue
        call_id = _str(item.get("call_id")) or _str(item.get("callId")) or _str(item.get("id"))
        name = _str(item.get("name"))
        args = _str(item.get("arguments"))
        if call_id and name and args:
            calls.append((call_id, name, args))
    return calls


class ResponsesStreamParser(StreamParser):
    """Parser for ``/responses`` event streams."""

    family = "openai-responses"

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._item_to_call: Dict[str, str] = {}
        self._output_index_to_call: Dict[int, str] = {}
        self._reasoning_seen = False
        self._reasoning_parts: Dict[Tuple[Any, str, int], str] = {}

    def handle_event(self, event: Dict[str, Any]) -> None:
        kind = _str(event.get("type"))
        if not kind:
            return
        if kind in _TEXT_DELTAS:
            self.state.emit_text(_str(event.get("delta")))
        elif kind in _TEXT_DONE:
            if not self.state.has_emitted_text:
                self.state.emit_text(_str(event.get("text")))
        elif kind in _REASONING_DELTAS:
            delta = _str(event.get("delta"))
            if delta:
                self._reasoning_seen = True
                part = _reasoning_part(kind, event)
                self._reasoning_parts[part] = self._reasoning_parts.get(part, "") + delta
                self.push_reasoning(delta)
        elif kind in _REASONING_DONE:
            text = _str(event.get("text"))
            if text:
                self._reasoning_seen = True
                self._reasoning_done(_reasoning_part(kind, event), text)
        elif kind == "response.output_item.added":
            self._item_added(event.get("item") or {}, event.get("output_index"))
        elif kind == "response.output_item.done":
            self._item_done(event.get("item") or {}, event.get("output_index"))
        elif kind in _ARGUMENT_EVENTS:
            self._arguments(kind, event)
        elif kind in _COMPLETION_EVENTS:
            self._completed(event.get("response"))

    def _reasoning_done(self, part: Tuple[Any, str, int], text: str) -> None:
        # A ``.done`` text snapshots one part; only what its deltas missed is new.
        seen = self._reasoning_parts.get(part, "")
        if text.startswith(seen):
            suffix = text[len(seen):]
        elif seen.startswith(text):
            suffix = ""
        else:
            suffix = text
        if len(text) > len(seen):
            self._reasoning_parts[part] = text
        if suffix:
            self.state.emit_thinking(suffix)

    # ------------------------------------------------------------ tool calls
    def _resolve_call_id(self, event: Dict[str, Any]) -> str:
        call_id = _str(event.get("call_id")) or _str(event.get("callId"))
        if call_id:
            return call_id
        item_id = _str(event.get("item_id")) or _str(event.get("id"))
        if item_id:
            return self._item_to_call.get(item_id, item_id)
        index = event.get("output_index")
        if isinstance(index, int):
            return self._output_index_to_call.get(index, "")
        return ""

    def _item_added(self, item: Dict[str, Any], output_index: Optional[int]) -> None:
        if item.get("type") != "function_call":
            return
        call_id = _str(item.get("call_id")) or _str(item.get("id"))
        if not call_id:
            return
        item_id = _str(item.get("id"))
        if item_id:
            self._item_to_call[item_id] = call_id
        if isinstance(output_index, int):
            self._output_index_to_call[output_index] = call_id
        self.state.begin_tool_call()
        self.state.tools.open(call_id, id=call_id, name=_str(item.get("name")) or None)
        if _str(item.get("arguments")):
            self.state.tools.merge(call_id, fragment=item["arguments"], replace=True)

    def _item_done(self, item: Dict[str, Any], output_index: Optional[int]) -> None:
        if item.get("type") != "function_call":
            return
        call_id = _str(item.get("call_id")) or self._item_to_call.get(_str(item.get("id")), _str(item.get("id")))
        if not call_id:
            return
        self.state.begin_tool_call()
        self.state.tools.merge(
            call_id,
            id=call_id,
            name=_str(item.get("name")) or None,
            fragment=_str(item.get("arguments")),
            replace=bool(_str(item.get("arguments"))),
        )

    def _arguments(self, kind: str, event: Dict[str, Any]) -> None:
        call_id = self._resolve_call_id(event)
        if not call_id:
            return
        self.state.begin_tool_call()
        if kind == "response.function_call_arguments.delta":
            self.state.tools.merge(
                call_id, id=call_id, name=_str(event.get("name")) or None, fragment=_str(event.get("delta"))
            )
            return
        args = _str(event.get("arguments"))
        self.state.tools.merge(
            call_id, id=call_id, name=_str(event.get("name")) or None, fragment=args, replace=bool(args)
        )
        self.state.tools.flush_key(call_id, strict=True)

    # ------------------------------------------------------------ completion
    def _completed(self, response: Any) -> None:
        if isinstance(response, dict):
            if not self._reasoning_seen:
                reasoning = extract_reasoning_text(response)
                if reasoning:
                    self._reasoning_seen = True
                    self.state.emit_thinking(reasoning)
            if not self.state.has_emitted_text:
                self.state.emit_text(extract_output_text(response))
            for call_id, name, args in extract_tool_calls(response):
                if self.state.tools.is_completed(call_id):
                    continue
                self.state.begin_tool_call()
                self.state.tools.merge(call_id, id=call_id, name=name, fragment=args, replace=True)
        self.state.tools.flush(strict=True)


__all__ = [
    "ResponsesStreamParser",
    "extract_output_text",
    "extract_reasoning_text",
    "extract_tool_calls",
]
