"""Tool-mode validation shared by the builders."""

from __future__ import annotations

from typing import Optional

from ..errors import InvalidToolConstraint
from ..models import ModelConfig, RequestOptions, ToolMode, ToolSpec


def validate_tool_mode(options: RequestOptions, config: Optional[ModelConfig] = None, family: str = "config") -> None:
    """Raise :class:`InvalidToolConstraint` when required mode lacks exactly one tool."""
    if options.tool_mode is ToolMode.REQUIRED and len(options.tools) != 1:
        raise InvalidToolConstraint(
            len(options.tools), provider=family, model=config.id if config is not None else None
        )


def required_tool(options: RequestOptions, config: Optional[ModelConfig] = None, family: str = "config") -> Optional[ToolSpec]:
    """The single mandatory tool in required mode, else ``None``."""
    validate_tool_mode(options, config, family)
    if options.tool_mode is ToolMode.REQUIRED:
        return options.tools[0]
    return None


__all__ = ["validate_tool_mode", "required_tool"]
