"""Closed set of supported wire protocols."""
from __future__ import annotations

from enum import Enum


class ProtocolFamily(str, Enum):
    """Wire protocol spoken by a model endpoint."""

    OPENAI = "openai"
    OPENAI_RESPONSES = "openai-responses"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"
    GEMINI = "gemini"


__all__ = ["ProtocolFamily"]
