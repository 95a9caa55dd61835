"""
Normalized error codes (taxonomy).

Defines the `ErrorCode` enumeration used by the protocol families, the retry
executor and structured logging. Values are lowercase snake_case and are
considered a stable public contract for log consumers.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    TRANSIENT = "transient"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    SERVER_ERROR = "server_error"
    UNAVAILABLE = "unavailable"
    CONFIGURATION = "configuration"
    PROTOCOL = "protocol"
    TOOL_CALL = "tool_call"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
