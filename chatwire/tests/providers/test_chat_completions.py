"""Chat-completions family: request bodies and stream parsing."""

from __future__ import annotations

import pytest

from chatwire.base.errors import InvalidToolConstraint, ToolCallAssemblyError
from chatwire.base.models import (
    BuildContext,
    CanonicalMessage,
    ImagePart,
    ModelConfig,
    RequestOptions,
    ToolCallPart,
    ToolMode,
    ToolSpec,
)
from chatwire.base.resilience.reasoning_cache import ReasoningCache
from chatwire.base.streaming import StreamEnd, TextDelta, ThinkingDelta, ThinkingEnd, ToolCall
from chatwire.openai import ChatCompletionsStreamParser, build_chat_completions_body

WEATHER = ToolSpec(name="get_weather", description="Weather by city", input_schema={"type": "object"})


def test_basic_body_shape():
    body = build_chat_completions_body(
        [CanonicalMessage.system("be brief"), CanonicalMessage.user("  hi  ")],
        ModelConfig(id="gpt-4o", max_tokens=256, top_k=20),
        RequestOptions(stop="END"),
    )
    assert body == {  # nosec B101
        "model": "gpt-4o",
        "messages": [{"role": "system", "content": "be brief"}, {"role": "user", "content": "hi"}],
        "stream": True,
        "stream_options": {"include_usage": True},
        "temperature": 0,
        "max_tokens": 256,
        "stop": ["END"],
        "top_k": 20,
    }


def test_images_become_data_url_parts():
    msg = CanonicalMessage.user("what is this", images=[ImagePart("image/png", b"\x89PNG")])
    body = build_chat_completions_body([msg], ModelConfig(id="m"))
    assert body["messages"][0]["content"] == [  # nosec B101
        {"type": "text", "text": "what is this"},
        {"type": "image_url", "image_url": {"url": "data:image/png;base64,iVBORw=="}},
    ]


def test_tool_turns_and_required_tool_choice():
    call = ToolCallPart(id="call_1", name="get_weather", arguments_json='{"city": "Oslo"}')
    messages = [
        CanonicalMessage.user("weather?"),
        CanonicalMessage.assistant(tool_calls=[call]),
        CanonicalMessage.tool("call_1", "rainy"),
    ]
    body = build_chat_completions_body(
        messages, ModelConfig(id="m"), RequestOptions(tools=(WEATHER,), tool_mode=ToolMode.REQUIRED)
    )
    assert body["messages"][1] == {  # nosec B101
        "role": "assistant",
        "tool_calls": [
            {"id": "call_1", "type": "function", "function": {"name": "get_weather", "arguments": '{"city": "Oslo"}'}}
        ],
    }
    assert body["messages"][2] == {"role": "tool", "tool_call_id": "call_1", "content": "rainy"}  # nosec B101
    assert body["tool_choice"] == {"type": "function", "function": {"name": "get_weather"}}  # nosec B101
    assert body["tools"][0]["function"]["parameters"] == {"type": "object"}  # nosec B101


def test_required_mode_with_two_tools_fails_before_anything_is_built():
    with pytest.raises(InvalidToolConstraint):
        build_chat_completions_body(
            [CanonicalMessage.user("x")],
            ModelConfig(id="m"),
            RequestOptions(tools=(WEATHER, ToolSpec(name="b")), tool_mode=ToolMode.REQUIRED),
        )


def test_reasoning_knobs_and_extra_merge():
    config = ModelConfig(
        id="m",
        temperature=None,
        reasoning={"effort": "high", "exclude": True},
        enable_thinking=True,
        thinking_budget=512,
        extra={"reasoning": {"enabled": True}, "seed": 7},
    )
    body = build_chat_completions_body([CanonicalMessage.user("x")], config)
    assert "temperature" not in body  # nosec B101
    assert body["reasoning"] == {"effort": "high", "exclude": True, "enabled": True}  # nosec B101
    assert body["enable_thinking"] is True and body["thinking_budget"] == 512 and body["seed"] == 7  # nosec B101


def test_reasoning_without_effort_gets_default_budget():
    body = build_chat_completions_body([CanonicalMessage.user("x")], ModelConfig(id="m", reasoning={"effort": "auto"}))
    assert body["reasoning"] == {"max_tokens": 2000}  # nosec B101


def test_reasoning_replayed_from_cache_or_sent_as_null():
    cache = ReasoningCache()
    cache.add(["call_1"], "earlier thoughts")
    config = ModelConfig(id="m", include_reasoning_in_request=True)
    hit = CanonicalMessage.assistant(tool_calls=[ToolCallPart(id="call_1", name="f")])
    miss = CanonicalMessage.assistant(tool_calls=[ToolCallPart(id="call_2", name="f")])
    own = CanonicalMessage.assistant("ok", thinking=["my own"])
    body = build_chat_completions_body([hit, miss, own], config, ctx=BuildContext(reasoning_cache=cache))
    replayed = [m.get("reasoning_content", "absent") for m in body["messages"]]
    assert replayed == ["earlier thoughts", None, "my own"]  # nosec B101


def test_stream_reasoning_text_and_tool_call(sse):
    parser = ChatCompletionsStreamParser(thinking_interval=0.0)
    chunks = [
        sse({"choices": [{"delta": {"reasoning_content": "Let me check"}}]}),
        sse({"choices": [{"delta": {"content": "Checking."}}]}),
        sse(
            {
                "choices": [
                    {
                        "delta": {
                            "tool_calls": [
                                {"index": 0, "id": "call_9", "function": {"name": "get_weather", "arguments": '{"city":'}}
                            ]
                        }
                    }
                ]
            }
        ),
        sse({"choices": [{"delta": {"tool_calls": [{"index": 0, "function": {"arguments": '"Oslo"}'}}]}}]}),
        sse({"choices": [{"delta": {}, "finish_reason": "tool_calls"}]}, done=True),
    ]
    events = []
    for chunk in chunks:
        events.extend(parser.feed(chunk))
    events.extend(parser.close())
    thinking_id = events[0].thinking_id
    assert events == [  # nosec B101
        ThinkingDelta(text="Let me check", thinking_id=thinking_id),
        ThinkingEnd(thinking_id=thinking_id),
        TextDelta(text="Checking."),
        TextDelta(text=" "),
        ToolCall(id="call_9", name="get_weather", arguments={"city": "Oslo"}),
        StreamEnd(),
    ]


def test_reasoning_details_take_priority_and_are_ordered(sse):
    parser = ChatCompletionsStreamParser(thinking_interval=0.0)
    delta = {
        "reasoning": "ignored",
        "reasoning_details": [
            {"type": "reasoning.text", "text": "second", "index": 1},
            {"type": "reasoning.summary", "summary": "first ", "index": 0},
            {"type": "reasoning.encrypted", "data": "xyz", "index": 2},
        ],
    }
    events = parser.feed(sse({"choices": [{"delta": delta}]})) + parser.close()
    assert events[0].text == "first second[REDACTED]"  # nosec B101


def test_inline_think_tags_become_thinking(sse):
    parser = ChatCompletionsStreamParser(thinking_interval=0.0)
    events = parser.feed(
        sse(
            {"choices": [{"delta": {"content": "<think>hm"}}]},
            {"choices": [{"delta": {"content": "m</think>Answer"}}]},
        )
    ) + parser.close()
    texts = [(type(e).__name__, getattr(e, "text", None)) for e in events]
    assert texts == [  # nosec B101
        ("ThinkingDelta", "hmm"),
        ("ThinkingEnd", None),
        ("TextDelta", "Answer"),
        ("StreamEnd", None),
    ]


def test_strict_finish_with_broken_arguments_raises(sse):
    parser = ChatCompletionsStreamParser()
    payloads = [
        {"choices": [{"delta": {"tool_calls": [{"index": 0, "id": "c", "function": {"name": "f", "arguments": '{"a":'}}]}}]},
        {"choices": [{"delta": {}, "finish_reason": "stop"}]},
    ]
    with pytest.raises(ToolCallAssemblyError):
        parser.feed(sse(*payloads))


def test_reasoning_cached_under_emitted_call_ids(sse):
    cache = ReasoningCache()
    parser = ChatCompletionsStreamParser(reasoning_cache=cache, thinking_interval=0.0)
    parser.feed(
        sse(
            {"choices": [{"delta": {"reasoning_content": "why"}}]},
            {"choices": [{"delta": {"tool_calls": [{"index": 0, "id": "call_x", "function": {"name": "f", "arguments": "{}"}}]}}]},
        )
    )
    parser.close()
    assert cache.get("call_x") == "why"  # nosec B101
