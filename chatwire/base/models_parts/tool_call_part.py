"""Tool call recorded on an assistant turn."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from ..utils.json_utils import try_parse_json_object


@dataclass(frozen=True)
class ToolCallPart:
    """A model-requested invocation with its JSON argument text."""

    id: str
    name: str
    arguments_json: str = "{}"

    def arguments(self) -> Dict[str, Any]:
        """Return the parsed argument object (empty when not a JSON object)."""
        return try_parse_json_object(self.arguments_json) or {}


__all__ = ["ToolCallPart"]
