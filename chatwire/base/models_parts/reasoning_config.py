"""OpenRouter-style reasoning block of a model configuration."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class ReasoningConfig(BaseModel):
    """Reasoning request knobs.

    ``effort`` takes precedence over ``max_tokens``; ``enabled=False`` disables
    the block entirely; ``exclude`` asks the provider to hide reasoning from the
    response while still using it.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    effort: Optional[str] = None
    max_tokens: Optional[int] = None
    enabled: Optional[bool] = None
    exclude: Optional[bool] = None


__all__ = ["ReasoningConfig"]
