"""``chatwire`` command: argument parsing, rendering and exit codes."""

from __future__ import annotations

import io
import json

import httpx
import pytest

from chatwire.service.cli import main
from chatwire.service.cli.cli_actions import handle_run, render_event
from chatwire.service.cli.cli_parser import build_parser
from chatwire.base.streaming import StreamEnd, TextDelta, ThinkingDelta, ThinkingEnd, ToolCall


def run(argv, factory):
    out, err = io.StringIO(), io.StringIO()
    code = handle_run(build_parser().parse_args(argv), dispatcher_factory=factory, out=out, err=err)
    return code, out.getvalue(), err.getvalue()


def test_parser_requires_model():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["hello"])


def test_render_plain_events():
    out, err = io.StringIO(), io.StringIO()
    for event in (
        ThinkingDelta(text="hmm", thinking_id="t1"),
        ThinkingEnd(thinking_id="t1"),
        TextDelta(text="Hi"),
        ToolCall(id="c", name="f", arguments={"a": 1}),
        StreamEnd(),
    ):
        render_event(event, as_json=False, out=out, err=err)
    assert err.getvalue() == "hmm\n"  # nosec B101
    lines = out.getvalue().splitlines()
    assert lines[0] == "Hi"  # nosec B101
    assert json.loads(lines[1]) == {"tool_call": {"type": "tool_call", "id": "c", "name": "f", "arguments": {"a": 1}}}  # nosec B101


def test_successful_turn_with_system_prompt(make_dispatcher, sse):
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(200, content=sse({"choices": [{"delta": {"content": "Hello!"}}]}, done=True))

    code, out, err = run(["hi", "--model", "m", "--system", "be nice"], lambda args: make_dispatcher(handler))
    assert code == 0 and out == "Hello!\n" and err == ""  # nosec B101
    assert [m["role"] for m in bodies[0]["messages"]] == ["system", "user"]  # nosec B101


def test_json_mode_prints_one_event_per_line(make_dispatcher, sse):
    handler = lambda request: httpx.Response(200, content=sse({"choices": [{"delta": {"content": "x"}}]}))  # noqa: E731
    code, out, _ = run(["hi", "--model", "m", "--json"], lambda args: make_dispatcher(handler))
    assert code == 0  # nosec B101
    assert [json.loads(line) for line in out.splitlines()] == [{"type": "text", "text": "x"}, {"type": "end"}]  # nosec B101


def test_transport_error_exit_code(make_dispatcher):
    handler = lambda request: httpx.Response(401, text="bad key")  # noqa: E731
    code, _, err = run(["hi", "--model", "m"], lambda args: make_dispatcher(handler))
    assert code == 1 and err.startswith("Openai API error: [401]") and "bad key" in err  # nosec B101


def test_configuration_error_exit_code(make_dispatcher):
    handler = lambda request: httpx.Response(200)  # noqa: E731
    code, _, err = run(["hi", "--model", "m"], lambda args: make_dispatcher(handler, secrets={}))
    assert code == 1 and err.startswith("configuration: API key not found")  # nosec B101


def test_main_with_settings_file(tmp_path, monkeypatch, capsys):
    path = tmp_path / "settings.yaml"
    path.write_text("base_url: not-a-url\n", encoding="utf-8")
    monkeypatch.delenv("CHATWIRE_BASE_URL", raising=False)
    assert main(["hi", "--model", "m", "--settings", str(path)]) == 1  # nosec B101
    assert "invalid base URL" in capsys.readouterr().err  # nosec B101
