"""Message-block family: request bodies and content-block streams."""

from __future__ import annotations

import pytest

from chatwire.anthropic import MessagesStreamParser, build_messages_body
from chatwire.base.errors import ToolCallAssemblyError
from chatwire.base.models import (
    BuildContext,
    CanonicalMessage,
    ImagePart,
    ModelConfig,
    RequestOptions,
    ToolCallPart,
    ToolResultPart,
    ToolSpec,
)
from chatwire.base.streaming import StreamEnd, TextDelta, ThinkingDelta, ThinkingEnd, ToolCall

CLAUDE = ModelConfig(id="claude-sonnet-4", protocol_family="anthropic")


def test_system_lifted_and_defaults_applied():
    body = build_messages_body(
        [CanonicalMessage.system("one"), CanonicalMessage.user("hi"), CanonicalMessage.system("two")],
        CLAUDE,
        RequestOptions(stop=["\n\nHuman:"]),
    )
    assert body == {  # nosec B101
        "model": "claude-sonnet-4",
        "messages": [{"role": "user", "content": [{"type": "text", "text": "hi"}]}],
        "stream": True,
        "max_tokens": 4096,
        "system": "one\ntwo",
        "temperature": 0,
        "stop_sequences": ["\n\nHuman:"],
    }


def test_block_order_and_shapes():
    config = ModelConfig(id="c", include_reasoning_in_request=True)
    call = ToolCallPart(id="toolu_1", name="read", arguments_json='{"path": "a.txt"}')
    messages = [
        CanonicalMessage.user("see", images=[ImagePart("image/jpeg", b"\xff\xd8")]),
        CanonicalMessage.assistant("reading", tool_calls=[call], thinking=["need the file"]),
        CanonicalMessage.tool("toolu_1", "contents"),
    ]
    body = build_messages_body(messages, config)
    user, assistant, result = body["messages"]
    assert user["content"][1] == {  # nosec B101
        "type": "image",
        "source": {"type": "base64", "media_type": "image/jpeg", "data": "/9g="},
    }
    assert [b["type"] for b in assistant["content"]] == ["text", "thinking", "tool_use"]  # nosec B101
    assert assistant["content"][2]["input"] == {"path": "a.txt"}  # nosec B101
    assert result == {  # nosec B101
        "role": "user",
        "content": [{"type": "tool_result", "tool_use_id": "toolu_1", "content": "contents"}],
    }


def test_adjacent_tool_results_share_one_user_turn():
    messages = [
        CanonicalMessage.assistant(tool_calls=[ToolCallPart("a", "f"), ToolCallPart("b", "f")]),
        CanonicalMessage.tool("a", "1"),
        CanonicalMessage.tool("b", "2"),
    ]
    body = build_messages_body(messages, CLAUDE)
    assert len(body["messages"]) == 2  # nosec B101
    assert [b["tool_use_id"] for b in body["messages"][1]["content"]] == ["a", "b"]  # nosec B101


def test_tool_result_on_system_turn_dropped_with_diagnostic():
    odd = CanonicalMessage(role="system", text_segments=("sys",), tool_results=(ToolResultPart("c1", "r"),))
    ctx = BuildContext()
    body = build_messages_body([odd, CanonicalMessage.user("go")], CLAUDE, ctx=ctx)
    assert body["system"] == "sys"  # nosec B101
    assert body["messages"] == [{"role": "user", "content": [{"type": "text", "text": "go"}]}]  # nosec B101
    assert ctx.diagnostics == ["dropped 1 tool result(s) attached to a system turn"]  # nosec B101


def test_thinking_budget_tools_and_extra():
    config = ModelConfig(
        id="c",
        enable_thinking=True,
        thinking_budget=2048,
        max_tokens=8000,
        top_k=5,
        extra={"thinking": {"budget_tokens": 4096}},
    )
    body = build_messages_body(
        [CanonicalMessage.user("x")], config, RequestOptions(tools=(ToolSpec(name="f", description="d"),))
    )
    assert body["thinking"] == {"type": "enabled", "budget_tokens": 4096}  # nosec B101
    assert body["max_tokens"] == 8000 and body["top_k"] == 5  # nosec B101
    assert body["tools"] == [  # nosec B101
        {"name": "f", "description": "d", "input_schema": {"type": "object", "properties": {}}}
    ]
    assert body["tool_choice"] == {"type": "auto"}  # nosec B101


def test_stream_thinking_text_and_tool_use(sse):
    parser = MessagesStreamParser(thinking_interval=60.0)
    payloads = [
        {"type": "message_start", "message": {"id": "msg_1"}},
        {"type": "content_block_start", "index": 0, "content_block": {"type": "thinking", "thinking": ""}},
        {"type": "content_block_delta", "index": 0, "delta": {"type": "thinking_delta", "thinking": "Let me"}},
        {"type": "content_block_delta", "index": 0, "delta": {"type": "signature_delta", "signature": "sig"}},
        {"type": "content_block_stop", "index": 0},
        {"type": "content_block_start", "index": 1, "content_block": {"type": "text", "text": ""}},
        {"type": "ping"},
        {"type": "content_block_delta", "index": 1, "delta": {"type": "text_delta", "text": "Sure"}},
        {"type": "content_block_stop", "index": 1},
        {
            "type": "content_block_start",
            "index": 2,
            "content_block": {"type": "tool_use", "id": "toolu_1", "name": "get_weather", "input": {}},
        },
        {"type": "content_block_delta", "index": 2, "delta": {"type": "input_json_delta", "partial_json": '{"city":'}},
        {"type": "content_block_delta", "index": 2, "delta": {"type": "input_json_delta", "partial_json": '"Oslo"}'}},
        {"type": "content_block_stop", "index": 2},
        {"type": "message_delta", "delta": {"stop_reason": "tool_use"}},
        {"type": "message_stop"},
    ]
    events = parser.feed(sse(*payloads)) + parser.close()
    tid = events[0].thinking_id
    assert events == [  # nosec B101
        ThinkingDelta(text="Let me", thinking_id=tid),
        ThinkingEnd(thinking_id=tid),
        TextDelta(text="Sure"),
        TextDelta(text=" "),
        ToolCall(id="toolu_1", name="get_weather", arguments={"city": "Oslo"}),
        StreamEnd(),
    ]
    assert parser.stop_reason == "tool_use"  # nosec B101


def test_tool_use_without_input_deltas_gets_empty_arguments(sse):
    parser = MessagesStreamParser()
    events = parser.feed(
        sse(
            {"type": "content_block_start", "index": 0, "content_block": {"type": "tool_use", "id": "t", "name": "now"}},
            {"type": "content_block_stop", "index": 0},
        )
    ) + parser.close()
    assert events == [ToolCall(id="t", name="now", arguments={}), StreamEnd()]  # nosec B101


def test_truncated_tool_input_at_stop_reason_raises(sse):
    parser = MessagesStreamParser()
    with pytest.raises(ToolCallAssemblyError):
        parser.feed(
            sse(
                {"type": "content_block_start", "index": 0, "content_block": {"type": "tool_use", "id": "t", "name": "f"}},
                {"type": "content_block_delta", "index": 0, "delta": {"type": "input_json_delta", "partial_json": '{"a'}},
                {"type": "message_delta", "delta": {"stop_reason": "max_tokens"}},
            )
        )


def test_error_event_is_logged(sse, log_records, logged_events):
    parser = MessagesStreamParser()
    parser.feed(sse({"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}}))
    (logged,) = logged_events(log_records, "stream.provider_error")
    assert logged["error_type"] == "overloaded_error" and logged["detail"] == "Overloaded"  # nosec B101
