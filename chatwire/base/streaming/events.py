"""Canonical response events.

A chat turn yields these strictly in emission order. Every family parser
produces the same variants so the host never sees provider wire shapes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Union


@dataclass(frozen=True)
class TextDelta:
    """Visible answer text."""

    kind: ClassVar[str] = "text"
    text: str


@dataclass(frozen=True)
class ThinkingDelta:
    """Reasoning text belonging to the sequence ``thinking_id``."""

    kind: ClassVar[str] = "thinking"
    text: str
    thinking_id: str


@dataclass(frozen=True)
class ThinkingEnd:
    """Closes the reasoning sequence ``thinking_id``."""

    kind: ClassVar[str] = "thinking_end"
    thinking_id: str


@dataclass(frozen=True)
class ToolCall:
    """A complete tool invocation with parsed JSON object arguments."""

    kind: ClassVar[str] = "tool_call"
    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)

    @property
    def arguments_json(self) -> str:
        return json.dumps(self.arguments, ensure_ascii=False)


@dataclass(frozen=True)
class StreamEnd:
    """Terminal event of a successful stream."""

    kind: ClassVar[str] = "end"


StreamEvent = Union[TextDelta, ThinkingDelta, ThinkingEnd, ToolCall, StreamEnd]


def event_to_dict(event: StreamEvent) -> Dict[str, Any]:
    """JSON-friendly representation tagged with ``type``."""
    data: Dict[str, Any] = {"type": event.kind}
    if isinstance(event, TextDelta):
        data["text"] = event.text
    elif isinstance(event, ThinkingDelta):
        data.update(text=event.text, thinking_id=event.thinking_id)
    elif isinstance(event, ThinkingEnd):
        data["thinking_id"] = event.thinking_id
    elif isinstance(event, ToolCall):
        data.update(id=event.id, name=event.name, arguments=event.arguments)
    return data


__all__ = [
    "TextDelta",
    "ThinkingDelta",
    "ThinkingEnd",
    "ToolCall",
    "StreamEnd",
    "StreamEvent",
    "event_to_dict",
]
