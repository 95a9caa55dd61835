"""Malformed stream line error (logged and skipped by the parsers)."""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class ProtocolDecodeError(ProviderError):
    """A single stream line could not be decoded.

    Parsers raise this internally for one line, log it, and continue with the
    next line; it never aborts a stream.
    """

    def __init__(self, *, family: str, line: str, raw: Optional[Exception] = None) -> None:
        super().__init__(
            code=ErrorCode.PROTOCOL,
            message=f"undecodable stream line: {line[:200]}",
            provider=family,
            raw=raw,
        )
        self.line = line


__all__ = ["ProtocolDecodeError"]
