"""Retry, request pacing and the bounded reasoning cache."""

from .retry import RetryPolicy, DEFAULT_RETRY_POLICY, execute_with_retry, retry
from .pacing import RequestPacer
from .reasoning_cache import ReasoningCache

__all__ = [
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "execute_with_retry",
    "retry",
    "RequestPacer",
    "ReasoningCache",
]
