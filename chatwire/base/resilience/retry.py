"""Bounded fixed-interval retry for transport failures.

Only :class:`TransportError` instances whose ``status_code`` is in the
retryable set are retried. The set is the default transient codes unioned with
any configured additions. Waits between attempts are fixed (not exponential)
and abort immediately when the supplied cancellation token fires.
"""
from __future__ import annotations

import functools
import time
from dataclasses import dataclass
from typing import Callable, FrozenSet, Optional, Protocol, Tuple, TypeVar

from ..cancellation import CancellationToken
from ..constants import DEFAULT_RETRYABLE_STATUS_CODES, RETRY_INTERVAL_MS, RETRY_MAX_ATTEMPTS
from ..errors import ProviderError, TransportError

T = TypeVar("T")


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay: float | None,
        error: ProviderError | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryPolicy:
    """Retry settings for one request.

    Attributes:
        enabled: When False exactly one attempt is made.
        max_attempts: Total attempts including the first.
        interval_ms: Fixed wait between attempts.
        status_codes: Extra retryable statuses, added to the defaults.
    """

    enabled: bool = True
    max_attempts: int = RETRY_MAX_ATTEMPTS
    interval_ms: int = RETRY_INTERVAL_MS
    status_codes: Tuple[int, ...] = ()

    @property
    def retryable_status_codes(self) -> FrozenSet[int]:
        return DEFAULT_RETRYABLE_STATUS_CODES | frozenset(self.status_codes)

    @property
    def attempts(self) -> int:
        return max(1, self.max_attempts) if self.enabled else 1

    def is_retryable(self, error: Exception) -> bool:
        return (
            isinstance(error, TransportError)
            and error.status_code is not None
            and error.status_code in self.retryable_status_codes
        )


DEFAULT_RETRY_POLICY = RetryPolicy()


def _wait(seconds: float, token: Optional[CancellationToken]) -> None:
    if token is None:
        time.sleep(seconds)
        return
    if token.wait(seconds):
        token.raise_if_cancelled()


def execute_with_retry(
    attempt_fn: Callable[[], T],
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    *,
    token: Optional[CancellationToken] = None,
    attempt_logger: Optional[AttemptLogger] = None,
) -> T:
    """Run ``attempt_fn`` under ``policy`` and return its result.

    Raises the last error once attempts are exhausted, or immediately when the
    error is not retryable. ``CancelledError`` from the token propagates
    without further attempts.
    """
    total = policy.attempts
    delay = policy.interval_ms / 1000.0
    for attempt in range(1, total + 1):
        if token is not None:
            token.raise_if_cancelled()
        try:
            result = attempt_fn()
        except ProviderError as exc:
            will_retry = attempt < total and policy.is_retryable(exc)
            if attempt_logger:
                attempt_logger(
                    attempt=attempt,
                    max_attempts=total,
                    delay=delay if will_retry else None,
                    error=exc,
                )
            if not will_retry:
                raise
            _wait(delay, token)
            continue
        if attempt_logger:
            attempt_logger(attempt=attempt, max_attempts=total, delay=None, error=None)
        return result
    raise RuntimeError("retry: reached terminal state without result")  # pragma: no cover


def retry(policy: RetryPolicy = DEFAULT_RETRY_POLICY, *, attempt_logger: Optional[AttemptLogger] = None):
    """Decorator form of :func:`execute_with_retry`."""

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            return execute_with_retry(
                lambda: func(*args, **kwargs), policy, attempt_logger=attempt_logger
            )

        return wrapper

    return decorator


__all__ = [
    "AttemptLogger",
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "execute_with_retry",
    "retry",
]
