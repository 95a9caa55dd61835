"""Configuration errors detected before any network call is made."""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class InvalidConfiguration(ProviderError):
    """Missing credential, malformed base URL or an unusable model entry."""

    def __init__(self, message: str, *, provider: str = "config", model: Optional[str] = None) -> None:
        super().__init__(code=ErrorCode.CONFIGURATION, message=message, provider=provider, model=model)


__all__ = ["InvalidConfiguration"]
