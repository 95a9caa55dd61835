"""Per-request options supplied by the host alongside the conversation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from .tool_spec import ToolMode, ToolSpec


@dataclass(frozen=True)
class RequestOptions:
    """Host-side request knobs.

    Attributes:
        tools: Tools advertised to the model.
        tool_mode: ``AUTO`` or ``REQUIRED`` (exactly one mandatory call).
        temperature: Host default used when the model config leaves it unset.
        stop: Stop string or sequence of strings.
    """

    tools: Tuple[ToolSpec, ...] = ()
    tool_mode: ToolMode = ToolMode.AUTO
    temperature: Optional[float] = None
    stop: Optional[Union[str, Sequence[str]]] = None

    def __post_init__(self) -> None:
        if not isinstance(self.tools, tuple):
            object.__setattr__(self, "tools", tuple(self.tools))


__all__ = ["RequestOptions"]
