"""Shared constants for the adapter.

Numeric defaults live here so builders, parsers and the retry executor agree
on one value and tests can reference them by name.
"""

from __future__ import annotations

# Retry executor defaults
RETRY_MAX_ATTEMPTS = 3
RETRY_INTERVAL_MS = 1000
DEFAULT_RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

# Thinking buffer debounce (seconds)
THINKING_FLUSH_INTERVAL_SECONDS = 0.1

# Filler emitted once before the first tool call when text already streamed
TOOL_CALL_FILLER_TEXT = " "

# Characters of argument text quoted in ToolCallAssemblyError
TOOL_CALL_SNIPPET_LIMIT = 200

# Fallback tool name when a buffered call never received one
UNKNOWN_TOOL_NAME = "unknown_tool"

# Literal values some providers echo into reasoning fields instead of content
REASONING_EFFORT_WORDS = frozenset(
    {"minimal", "low", "medium", "high", "xhigh", "auto", "none", "default"}
)

# Inline thinking markers
THINK_OPEN_TAG = "<think>"
THINK_CLOSE_TAG = "</think>"

# Image MIME types accepted by every family
SUPPORTED_IMAGE_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})

# Model id separator: "<base id>::<config id>"
MODEL_ID_SEPARATOR = "::"

# Anthropic-style message protocol
ANTHROPIC_VERSION = "2023-06-01"
ANTHROPIC_DEFAULT_MAX_TOKENS = 4096

# OpenRouter-style reasoning object default budget when no effort is given
REASONING_DEFAULT_MAX_TOKENS = 2000

# Process-lifetime reasoning cache bound
REASONING_CACHE_MAX_ENTRIES = 512

# Credential value that means "no auth header" for local-native servers
OLLAMA_NO_AUTH_KEY = "ollama"

__all__ = [
    "RETRY_MAX_ATTEMPTS",
    "RETRY_INTERVAL_MS",
    "DEFAULT_RETRYABLE_STATUS_CODES",
    "THINKING_FLUSH_INTERVAL_SECONDS",
    "TOOL_CALL_FILLER_TEXT",
    "TOOL_CALL_SNIPPET_LIMIT",
    "UNKNOWN_TOOL_NAME",
    "REASONING_EFFORT_WORDS",
    "THINK_OPEN_TAG",
    "THINK_CLOSE_TAG",
    "SUPPORTED_IMAGE_MIME_TYPES",
    "MODEL_ID_SEPARATOR",
    "ANTHROPIC_VERSION",
    "ANTHROPIC_DEFAULT_MAX_TOKENS",
    "REASONING_DEFAULT_MAX_TOKENS",
    "REASONING_CACHE_MAX_ENTRIES",
    "OLLAMA_NO_AUTH_KEY",
]
