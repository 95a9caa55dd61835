"""Generate-content (Gemini-style) family."""

from .builder import build_generate_content_body, generate_content_url
from .stream import GenerateContentStreamParser

__all__ = ["build_generate_content_body", "generate_content_url", "GenerateContentStreamParser"]
