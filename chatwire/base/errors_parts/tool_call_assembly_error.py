"""Tool-call buffer that never became valid JSON at a definitive end of stream."""
from __future__ import annotations

from typing import Hashable

from .error_code import ErrorCode
from .provider_error import ProviderError


class ToolCallAssemblyError(ProviderError):
    """Raised by a strict flush when a buffered tool call is not a JSON object.

    Attributes:
        key: Buffer key (stream index or call id) of the offending call.
        snippet: First 200 characters of the buffered argument text.
    """

    def __init__(self, *, key: Hashable, snippet: str, family: str = "unknown") -> None:
        super().__init__(
            code=ErrorCode.TOOL_CALL,
            message=f"Invalid JSON for tool call {key}: {snippet}",
            provider=family,
        )
        self.key = key
        self.snippet = snippet


__all__ = ["ToolCallAssemblyError"]
