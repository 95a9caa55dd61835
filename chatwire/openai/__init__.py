"""OpenAI-style families: chat-completions and structured responses."""

from .chat_builder import build_chat_completions_body
from .chat_stream import ChatCompletionsStreamParser
from .responses_builder import build_responses_body
from .responses_stream import ResponsesStreamParser

__all__ = [
    "build_chat_completions_body",
    "ChatCompletionsStreamParser",
    "build_responses_body",
    "ResponsesStreamParser",
]
