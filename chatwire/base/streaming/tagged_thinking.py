"""Inline ``<think>...</think>`` detection in ordinary content deltas.

Some models emit reasoning as tagged text inside the answer content. The
scanner routes text between the markers as thinking and everything else as
answer text. Markers may be split across chunks: a tail that could be the
start of a marker is held back until the next chunk disambiguates it.

The opening tag is only recognised while no visible answer text has been
produced, i.e. the reasoning must lead the answer. Leading whitespace before
the opening tag is discarded.
"""

from __future__ import annotations

from typing import List, Tuple

from ..constants import THINK_CLOSE_TAG, THINK_OPEN_TAG

Segment = Tuple[str, str]
"""(``"text"`` | ``"thinking"`` | ``"close"``, payload)"""


def _partial_marker_len(text: str, marker: str) -> int:
    """Length of the longest suffix of ``text`` that is a proper prefix of ``marker``."""
    for size in range(min(len(text), len(marker) - 1), 0, -1):
        if text.endswith(marker[:size]):
            return size
    return 0


class TaggedThinkingScanner:
    """Stateful splitter of content deltas into text and thinking segments."""

    def __init__(self, open_tag: str = THINK_OPEN_TAG, close_tag: str = THINK_CLOSE_TAG) -> None:
        self._open = open_tag
        self._close = close_tag
        self._carry = ""
        self._in_think = False
        self._detecting = True

    @property
    def in_think(self) -> bool:
        return self._in_think

    def feed(self, chunk: str) -> List[Segment]:
        out: List[Segment] = []
        buf = self._carry + chunk
        self._carry = ""
        while buf:
            if self._in_think:
                idx = buf.find(self._close)
                if idx >= 0:
                    if idx:
                        out.append(("thinking", buf[:idx]))
                    out.append(("close", ""))
                    self._in_think = False
                    buf = buf[idx + len(self._close):]
                    continue
                held = _partial_marker_len(buf, self._close)
                if len(buf) > held:
                    out.append(("thinking", buf[: len(buf) - held]))
                self._carry = buf[len(buf) - held:] if held else ""
                break
            if not self._detecting:
                out.append(("text", buf))
                break
            idx = buf.find(self._open)
            if idx >= 0 and not buf[:idx].strip():
                self._in_think = True
                buf = buf[idx + len(self._open):]
                continue
            held = _partial_marker_len(buf, self._open)
            head = buf[: len(buf) - held]
            if idx >= 0 or head.strip():
                self._detecting = False
                out.append(("text", buf))
                break
            self._carry = buf
            break
        return out

    def flush(self) -> List[Segment]:
        """Release held text at end of stream."""
        tail, self._carry = self._carry, ""
        if not tail:
            return []
        if self._in_think:
            return [("thinking", tail)]
        if not tail.strip():
            return []
        return [("text", tail)]


__all__ = ["TaggedThinkingScanner", "Segment"]
