"""Cooperative cancellation primitives (public API facade).

Notes
-----
- ``CancellationToken`` signals cancellation across the dispatcher, retry
  waits, pacing waits and stream reads.
- ``CancelledError`` is raised by operations that observe a cancellation request.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
