"""Generate-content family: URL, contents and candidate streams."""

from __future__ import annotations

import pytest

from chatwire.base.models import BuildContext, CanonicalMessage, ModelConfig, RequestOptions, ToolCallPart, ToolMode, ToolSpec
from chatwire.base.streaming import StreamEnd, TextDelta, ThinkingDelta, ThinkingEnd, ToolCall
from chatwire.gemini import GenerateContentStreamParser, build_generate_content_body, generate_content_url


@pytest.mark.parametrize(
    ("base", "expected"),
    [
        (
            "https://generativelanguage.googleapis.com",
            "https://generativelanguage.googleapis.com/v1beta/models/gemini-2.5-pro:streamGenerateContent?alt=sse",
        ),
        (
            "https://generativelanguage.googleapis.com/v1/",
            "https://generativelanguage.googleapis.com/v1/models/gemini-2.5-pro:streamGenerateContent?alt=sse",
        ),
    ],
)
def test_generate_content_url(base, expected):
    assert generate_content_url(base, "models/gemini-2.5-pro") == expected  # nosec B101


def test_contents_roles_and_function_parts():
    messages = [
        CanonicalMessage.system("be terse"),
        CanonicalMessage.user("weather?"),
        CanonicalMessage.assistant("checking", tool_calls=[ToolCallPart("c1", "get_weather", '{"city": "Oslo"}')]),
        CanonicalMessage.tool("c1", "rain"),
    ]
    body = build_generate_content_body(messages, ModelConfig(id="gemini-2.5-pro", protocol_family="gemini"))
    assert body["systemInstruction"] == {"role": "user", "parts": [{"text": "be terse"}]}  # nosec B101
    assert body["contents"] == [  # nosec B101
        {"role": "user", "parts": [{"text": "weather?"}]},
        {
            "role": "model",
            "parts": [
                {"text": "checking"},
                {"functionCall": {"id": "c1", "name": "get_weather", "args": {"city": "Oslo"}}},
            ],
        },
        {"role": "user", "parts": [{"functionResponse": {"id": "c1", "name": "get_weather", "response": {"content": "rain"}}}]},
    ]
    assert body["generationConfig"] == {"temperature": 0}  # nosec B101


def test_tool_result_joins_preceding_user_turn():
    messages = [
        CanonicalMessage.assistant(tool_calls=[ToolCallPart("a", "f"), ToolCallPart("b", "g")]),
        CanonicalMessage.tool("a", "1"),
        CanonicalMessage.tool("b", "2"),
    ]
    body = build_generate_content_body(messages, ModelConfig(id="g"))
    assert [c["role"] for c in body["contents"]] == ["model", "user"]  # nosec B101
    assert len(body["contents"][1]["parts"]) == 2  # nosec B101


def test_generation_config_thinking_and_required_tool():
    config = ModelConfig(id="g", thinking_budget=1024, enable_thinking=True, top_p=0.9, max_tokens=100)
    ctx = BuildContext()
    body = build_generate_content_body(
        [CanonicalMessage.tool("unknown", "x")],
        config,
        RequestOptions(tools=(ToolSpec(name="f"),), tool_mode=ToolMode.REQUIRED),
        ctx,
    )
    assert body["generationConfig"] == {  # nosec B101
        "temperature": 0,
        "topP": 0.9,
        "maxOutputTokens": 100,
        "thinkingConfig": {"thinkingBudget": 1024, "includeThoughts": True},
    }
    assert body["toolConfig"] == {"functionCallingConfig": {"mode": "ANY", "allowedFunctionNames": ["f"]}}  # nosec B101
    assert body["contents"][0]["parts"][0]["functionResponse"]["name"] == "unknown"  # nosec B101
    assert len(ctx.diagnostics) == 1  # nosec B101


def test_stream_thought_text_and_function_call(sse):
    parser = GenerateContentStreamParser(thinking_interval=60.0)
    payloads = [
        {"candidates": [{"content": {"role": "model", "parts": [{"text": "pondering", "thought": True}]}}]},
        {"candidates": [{"content": {"role": "model", "parts": [{"text": "Here"}]}}]},
        {
            "candidates": [
                {
                    "content": {"role": "model", "parts": [{"functionCall": {"name": "get_weather", "args": {"city": "Oslo"}}}]},
                    "finishReason": "STOP",
                }
            ]
        },
    ]
    events = parser.feed(sse(*payloads)) + parser.close()
    tid = events[0].thinking_id
    assert events[:4] == [  # nosec B101
        ThinkingDelta(text="pondering", thinking_id=tid),
        ThinkingEnd(thinking_id=tid),
        TextDelta(text="Here"),
        TextDelta(text=" "),
    ]
    assert isinstance(events[4], ToolCall) and events[4].arguments == {"city": "Oslo"}  # nosec B101
    assert events[5:] == [StreamEnd()] and parser.finish_reason == "STOP"  # nosec B101


def test_blocked_prompt_is_logged(sse, log_records, logged_events):
    parser = GenerateContentStreamParser()
    events = parser.feed(sse({"promptFeedback": {"blockReason": "SAFETY"}})) + parser.close()
    assert events == [StreamEnd()]  # nosec B101
    assert logged_events(log_records, "stream.prompt_blocked")[0]["detail"] == "SAFETY"  # nosec B101
