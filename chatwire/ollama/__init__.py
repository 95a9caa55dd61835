"""Local-native (Ollama-style) family."""

from .builder import build_chat_body
from .stream import NativeChatStreamParser

__all__ = ["build_chat_body", "NativeChatStreamParser"]
