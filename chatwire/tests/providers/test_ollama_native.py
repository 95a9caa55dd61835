"""Local-native family: flat messages, think flag and JSON-lines streams."""

from __future__ import annotations

from chatwire.base.models import BuildContext, CanonicalMessage, ImagePart, ModelConfig, RequestOptions, ToolCallPart, ToolSpec
from chatwire.base.streaming import StreamEnd, TextDelta, ThinkingDelta, ThinkingEnd, ToolCall
from chatwire.ollama import NativeChatStreamParser, build_chat_body
from chatwire.ollama.builder import think_value

QWEN = ModelConfig(id="qwen3:8b", protocol_family="ollama", context_length=8192, max_tokens=512)


def test_body_with_options_and_tools():
    body = build_chat_body(
        [CanonicalMessage.system("sys"), CanonicalMessage.user("hi", images=[ImagePart("image/png", b"\x89PNG")])],
        QWEN,
        RequestOptions(tools=(ToolSpec(name="f"),), stop="###"),
    )
    assert body["messages"] == [  # nosec B101
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "hi", "images": ["iVBORw=="]},
    ]
    assert body["options"] == {"temperature": 0, "stop": ["###"], "num_ctx": 8192, "num_predict": 512}  # nosec B101
    assert body["tools"][0]["function"]["name"] == "f" and "think" not in body  # nosec B101


def test_tool_calls_carry_objects_and_results_name_the_tool():
    messages = [
        CanonicalMessage.assistant(tool_calls=[ToolCallPart("c1", "ls", '{"dir": "/"}')], thinking=["look"]),
        CanonicalMessage.tool("c1", "a b c"),
        CanonicalMessage.tool("zz", "orphan"),
    ]
    ctx = BuildContext()
    body = build_chat_body(messages, QWEN.model_copy(update={"include_reasoning_in_request": True}), ctx=ctx)
    assert body["messages"] == [  # nosec B101
        {
            "role": "assistant",
            "content": "",
            "thinking": "look",
            "tool_calls": [{"function": {"name": "ls", "arguments": {"dir": "/"}}}],
        },
        {"role": "tool", "content": "a b c", "tool_name": "ls"},
        {"role": "tool", "content": "orphan"},
    ]
    assert ctx.diagnostics == ["no earlier tool call matches result id 'zz'"]  # nosec B101


def test_think_flag_variants():
    assert think_value(ModelConfig(id="m", reasoning_effort="high")) == "high"  # nosec B101
    assert think_value(ModelConfig(id="m", reasoning={"effort": "low"})) == "low"  # nosec B101
    assert think_value(ModelConfig(id="m", enable_thinking=False)) is False  # nosec B101
    assert think_value(ModelConfig(id="m", reasoning={"enabled": True})) is True  # nosec B101
    assert think_value(ModelConfig(id="m")) is None  # nosec B101


def test_extra_options_deep_merge():
    config = ModelConfig(id="m", extra={"options": {"seed": 3}, "keep_alive": "5m"})
    body = build_chat_body([CanonicalMessage.user("x")], config)
    assert body["options"] == {"temperature": 0, "seed": 3} and body["keep_alive"] == "5m"  # nosec B101


def test_stream_lines(jsonl):
    parser = NativeChatStreamParser(thinking_interval=60.0)
    data = jsonl(
        {"message": {"role": "assistant", "content": "", "thinking": "hmm"}, "done": False},
        {"message": {"role": "assistant", "content": "Hi"}, "done": False},
        {"message": {"role": "assistant", "content": "", "tool_calls": [{"function": {"name": "f", "arguments": {"a": 1}}}]}, "done": False},
        {"message": {"role": "assistant", "content": ""}, "done": True, "done_reason": "stop"},
    )
    events = parser.feed(data[:25]) + parser.feed(data[25:]) + parser.close()
    tid = events[0].thinking_id
    call = events[4]
    assert events[:4] == [  # nosec B101
        ThinkingDelta(text="hmm", thinking_id=tid),
        ThinkingEnd(thinking_id=tid),
        TextDelta(text="Hi"),
        TextDelta(text=" "),
    ]
    assert isinstance(call, ToolCall) and call.name == "f" and call.arguments == {"a": 1}  # nosec B101
    assert call.id.startswith("call_") and events[5:] == [StreamEnd()]  # nosec B101
    assert parser.done_reason == "stop"  # nosec B101


def test_error_line_is_logged(jsonl, log_records, logged_events):
    parser = NativeChatStreamParser()
    events = parser.feed(jsonl({"error": "model not found"})) + parser.close()
    assert events == [StreamEnd()]  # nosec B101
    assert logged_events(log_records, "stream.provider_error")[0]["detail"] == "model not found"  # nosec B101
