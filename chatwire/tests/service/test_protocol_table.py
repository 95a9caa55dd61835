"""Protocol family table."""

from __future__ import annotations

import pytest

from chatwire.anthropic import MessagesStreamParser
from chatwire.base.errors import InvalidConfiguration
from chatwire.base.models import CanonicalMessage, ModelConfig, ProtocolFamily
from chatwire.base.resilience.reasoning_cache import ReasoningCache
from chatwire.openai import ChatCompletionsStreamParser
from chatwire.protocols import PROTOCOLS, get_protocol


def test_every_family_is_bound():
    assert set(PROTOCOLS) == set(ProtocolFamily)  # nosec B101


@pytest.mark.parametrize(
    ("family", "base", "expected"),
    [
        ("openai", "https://api.openai.com/v1/", "https://api.openai.com/v1/chat/completions"),
        ("openai-responses", "https://api.openai.com/v1", "https://api.openai.com/v1/responses"),
        ("anthropic", "https://api.anthropic.com", "https://api.anthropic.com/v1/messages"),
        ("ollama", "http://localhost:11434", "http://localhost:11434/api/chat"),
    ],
)
def test_endpoint_paths(family, base, expected):
    assert get_protocol(family).url(base, "m") == expected  # nosec B101


def test_auth_headers_per_family():
    assert get_protocol("openai").auth_headers("k") == {"Authorization": "Bearer k"}  # nosec B101
    assert get_protocol("ollama").auth_headers("ollama") == {}  # nosec B101
    assert get_protocol("ollama").auth_headers("k") == {"Authorization": "Bearer k"}  # nosec B101
    assert get_protocol("gemini").auth_headers("k") == {"x-goog-api-key": "k"}  # nosec B101
    assert get_protocol(ProtocolFamily.ANTHROPIC).auth_headers("k") == {  # nosec B101
        "anthropic-version": "2023-06-01",
        "x-api-key": "k",
    }


def test_unknown_family_raises():
    with pytest.raises(InvalidConfiguration):
        get_protocol("smoke-signals")


def test_binding_builds_and_creates_parsers():
    binding = get_protocol(" Anthropic ")
    body = binding.build([CanonicalMessage.user("x")], ModelConfig(id="c"))
    assert body["model"] == "c"  # nosec B101
    assert isinstance(binding.new_parser(reasoning_cache=ReasoningCache()), MessagesStreamParser)  # nosec B101

    cache = ReasoningCache()
    parser = get_protocol("openai").new_parser(reasoning_cache=cache)
    assert isinstance(parser, ChatCompletionsStreamParser) and parser._reasoning_cache is cache  # nosec B101
