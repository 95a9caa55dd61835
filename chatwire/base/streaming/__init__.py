"""Streaming state machines and canonical events."""

from .events import (
    StreamEnd,
    StreamEvent,
    TextDelta,
    ThinkingDelta,
    ThinkingEnd,
    ToolCall,
    event_to_dict,
)
from .driver import drive_stream
from .line_decoder import LineDecoder, sse_data
from .parse_state import StreamParseState
from .stream_parser import StreamParser
from .tagged_thinking import TaggedThinkingScanner
from .thinking import ThinkingBuffer
from .tool_calls import ToolCallAssembler

__all__ = [
    "StreamEnd",
    "StreamEvent",
    "TextDelta",
    "ThinkingDelta",
    "ThinkingEnd",
    "ToolCall",
    "event_to_dict",
    "drive_stream",
    "LineDecoder",
    "sse_data",
    "StreamParseState",
    "StreamParser",
    "TaggedThinkingScanner",
    "ThinkingBuffer",
    "ToolCallAssembler",
]
