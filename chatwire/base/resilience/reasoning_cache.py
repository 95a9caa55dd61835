"""Bounded store recovering reasoning text by tool-call id.

Some chat-completions providers reject an assistant turn that carries tool
calls without its ``reasoning_content``. Hosts often drop reasoning from
history (e.g. after summarization), so the stream parser records the
reasoning of each response under every tool-call id it produced and the
request builder looks it up when replaying the turn.

Eviction: least-recently-used beyond ``max_entries`` (a lookup refreshes an
entry). The cache is thread-safe and lives for the process unless the owner
clears it.
"""
from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Iterable, Optional

from ..constants import REASONING_CACHE_MAX_ENTRIES


class ReasoningCache:
    """LRU mapping of tool-call id to reasoning text."""

    def __init__(self, max_entries: int = REASONING_CACHE_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._entries: "OrderedDict[str, str]" = OrderedDict()
        self._lock = threading.Lock()

    def add(self, call_ids: Iterable[str], content: str) -> None:
        """Store ``content`` under each id in ``call_ids`` (empty content ignored)."""
        if not content:
            return
        with self._lock:
            for call_id in call_ids:
                if not call_id:
                    continue
                self._entries[call_id] = content
                self._entries.move_to_end(call_id)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def get(self, call_id: str) -> Optional[str]:
        with self._lock:
            value = self._entries.get(call_id)
            if value is not None:
                self._entries.move_to_end(call_id)
            return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, call_id: object) -> bool:
        with self._lock:
            return call_id in self._entries


__all__ = ["ReasoningCache"]
