"""Cancellation error type.

Defines the public ``CancelledError`` used to signal cooperative cancellation
of a chat turn. Kept isolated to satisfy the one-class-per-file layout.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when a chat turn is cancelled cooperatively.

    Distinguishes cancellation from other runtime failures so the dispatcher
    can log it at info level and skip failure classification and retries.
    """

__all__ = ["CancelledError"]
