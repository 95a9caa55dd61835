"""Byte-to-line decoding and SSE payload extraction."""

from __future__ import annotations

from chatwire.base.streaming.line_decoder import LineDecoder, sse_data


def test_lines_split_across_chunks():
    dec = LineDecoder()
    assert dec.feed(b"data: {\"a\"") == []  # nosec B101
    assert dec.feed(b": 1}\r\ndata: [DO") == ['data: {"a": 1}']  # nosec B101
    assert dec.feed(b"NE]\n") == ["data: [DONE]"]  # nosec B101
    assert dec.flush() == []  # nosec B101


def test_multibyte_character_split_between_chunks():
    encoded = "héllo\n".encode("utf-8")
    split = encoded.index(b"\xa9")
    dec = LineDecoder()
    assert dec.feed(encoded[:split]) == []  # nosec B101
    assert dec.feed(encoded[split:]) == ["héllo"]  # nosec B101


def test_trailing_line_without_newline_is_flushed():
    dec = LineDecoder()
    dec.feed(b'{"done": true}')
    assert dec.flush() == ['{"done": true}']  # nosec B101


def test_sse_data_extraction():
    assert sse_data('data: {"x":1}') == '{"x":1}'  # nosec B101
    assert sse_data('data:{"x":1}') == '{"x":1}'  # nosec B101
    assert sse_data("event: message_start") is None  # nosec B101
    assert sse_data(": keep-alive") is None  # nosec B101
    assert sse_data("data: ") is None  # nosec B101
