"""Per-request context handed to request builders."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from ..logging import LogContext, get_logger, normalized_log_event

if TYPE_CHECKING:
    from ..resilience.reasoning_cache import ReasoningCache

_logger = get_logger("chatwire.builders")


@dataclass
class BuildContext:
    """Collaborators and outputs of one request build.

    Attributes:
        reasoning_cache: Store recovering reasoning by tool-call id, or None.
        diagnostics: Non-fatal conversion notes recorded during the build.
        log_context: Correlation fields for emitted log events.
    """

    reasoning_cache: Optional["ReasoningCache"] = None
    diagnostics: List[str] = field(default_factory=list)
    log_context: Optional[LogContext] = None

    def note(self, message: str, **fields) -> None:
        """Record a diagnostic and log it at warning level."""
        self.diagnostics.append(message)
        normalized_log_event(
            _logger,
            "build.diagnostic",
            self.log_context,
            phase="build",
            level=logging.WARNING,
            detail=message,
            **fields,
        )


__all__ = ["BuildContext"]
