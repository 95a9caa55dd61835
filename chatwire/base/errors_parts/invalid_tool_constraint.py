"""Tool-mode constraint violation (required mode with other than one tool)."""
from __future__ import annotations

from typing import Optional

from .invalid_configuration import InvalidConfiguration


class InvalidToolConstraint(InvalidConfiguration):
    """A mandatory tool call was requested but exactly one tool was not offered."""

    def __init__(self, tool_count: int, *, provider: str = "config", model: Optional[str] = None) -> None:
        super().__init__(
            f"required tool mode needs exactly one tool, got {tool_count}",
            provider=provider,
            model=model,
        )
        self.tool_count = tool_count


__all__ = ["InvalidToolConstraint"]
