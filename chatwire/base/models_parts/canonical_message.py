"""
Canonical, backend-agnostic conversation turn.

Every request builder consumes a sequence of :class:`CanonicalMessage`. The
host constructs the messages fresh for each request; they are immutable once
built. Segments are stored as tuples so a message is hashable and cannot be
mutated by a builder.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Tuple

from .image_part import ImagePart
from .tool_call_part import ToolCallPart
from .tool_result_part import ToolResultPart

Role = Literal["system", "user", "assistant", "tool"]

_ROLES = ("system", "user", "assistant", "tool")


@dataclass(frozen=True)
class CanonicalMessage:
    """A single conversation turn.

    Attributes:
        role: ``"system"``, ``"user"``, ``"assistant"`` or ``"tool"``.
        text_segments: Ordered text fragments.
        image_segments: Ordered inline images.
        tool_calls: Calls requested by the assistant on this turn.
        tool_results: Results returned for earlier calls.
        thinking_segments: Reasoning text produced on an assistant turn.

    Invariant:
        A ``tool`` message carries exactly one tool result and nothing else.
    """

    role: Role
    text_segments: Tuple[str, ...] = ()
    image_segments: Tuple[ImagePart, ...] = ()
    tool_calls: Tuple[ToolCallPart, ...] = ()
    tool_results: Tuple[ToolResultPart, ...] = ()
    thinking_segments: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.role not in _ROLES:
            raise ValueError(f"unknown role: {self.role!r}")
        for name in ("text_segments", "image_segments", "tool_calls", "tool_results", "thinking_segments"):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))
        if self.role == "tool":
            others = self.text_segments or self.image_segments or self.tool_calls or self.thinking_segments
            if len(self.tool_results) != 1 or others:
                raise ValueError("a tool message must carry exactly one tool result and no other content")

    # -------------------------------------------------------------- factories
    @classmethod
    def system(cls, text: str) -> "CanonicalMessage":
        return cls(role="system", text_segments=(text,))

    @classmethod
    def user(cls, text: str = "", images: Iterable[ImagePart] = ()) -> "CanonicalMessage":
        return cls(role="user", text_segments=(text,) if text else (), image_segments=tuple(images))

    @classmethod
    def assistant(
        cls,
        text: str = "",
        *,
        tool_calls: Iterable[ToolCallPart] = (),
        thinking: Iterable[str] = (),
    ) -> "CanonicalMessage":
        return cls(
            role="assistant",
            text_segments=(text,) if text else (),
            tool_calls=tuple(tool_calls),
            thinking_segments=tuple(thinking),
        )

    @classmethod
    def tool(cls, call_id: str, content: str) -> "CanonicalMessage":
        return cls(role="tool", tool_results=(ToolResultPart(call_id=call_id, content=content),))

    # -------------------------------------------------------------- views
    @property
    def text(self) -> str:
        """Text segments concatenated in order."""
        return "".join(self.text_segments)

    @property
    def thinking(self) -> str:
        """Thinking segments concatenated in order."""
        return "".join(self.thinking_segments)

    def supported_images(self) -> Tuple[ImagePart, ...]:
        return tuple(img for img in self.image_segments if img.is_supported)


__all__ = ["CanonicalMessage", "Role"]
