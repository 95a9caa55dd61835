"""Result of a host-executed tool call."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ToolResultPart:
    """Text output of a tool call, referencing the originating call id."""

    call_id: str
    content: str


__all__ = ["ToolResultPart"]
