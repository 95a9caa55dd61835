"""
Transport failure raised for non-success HTTP responses and connection errors.

The retry executor inspects ``status_code`` to decide whether another attempt
is warranted; everything else treats the error as terminal for the turn.
"""
from __future__ import annotations

from typing import Optional

from .classification import classify_status
from .error_code import ErrorCode
from .provider_error import ProviderError


class TransportError(ProviderError):
    """Non-success status (or connection failure) from a provider endpoint.

    Attributes:
        status_code: HTTP status, or ``None`` when no response was received.
        body: Provider response body text (may be empty).
        url: Request URL that failed.
        family: Protocol family name used for the request.
    """

    def __init__(
        self,
        *,
        status_code: Optional[int],
        body: str = "",
        url: str = "",
        family: str = "unknown",
        model: Optional[str] = None,
        reason: str = "",
        raw: Optional[Exception] = None,
    ) -> None:
        code = classify_status(status_code) if status_code is not None else ErrorCode.TRANSIENT
        message = f"[{status_code if status_code is not None else '-'}] {reason}".rstrip()
        if body:
            message = f"{message}\n{body}"
        if url:
            message = f"{message}\nURL: {url}"
        super().__init__(
            code=code,
            message=message,
            provider=family,
            model=model,
            retryable=code in (ErrorCode.RATE_LIMIT, ErrorCode.TRANSIENT, ErrorCode.UNAVAILABLE),
            raw=raw,
        )
        self.status_code = status_code
        self.body = body
        self.url = url
        self.family = family
        self.reason = reason

    def user_message(self) -> str:
        """Return a short summary naming status code, family and provider body."""
        label = self.family.replace("-", " ").title()
        status = self.status_code if self.status_code is not None else "no response"
        summary = f"{label} API error: [{status}]"
        if self.reason:
            summary = f"{summary} {self.reason}"
        if self.body:
            summary = f"{summary}\n{self.body.strip()[:500]}"
        return summary


__all__ = ["TransportError"]
