"""Message-block (Anthropic-style) family."""

from .builder import build_messages_body
from .stream import MessagesStreamParser

__all__ = ["build_messages_body", "MessagesStreamParser"]
