"""Incremental byte-to-line decoding and SSE payload extraction.

Network chunks can split multi-byte UTF-8 sequences and lines at arbitrary
points. :class:`LineDecoder` carries both over between chunks and hands out
complete lines only; :meth:`LineDecoder.flush` returns the final unterminated
line at end of stream.
"""

from __future__ import annotations

import codecs
from typing import List, Optional

SSE_DATA_PREFIX = "data:"
SSE_DONE = "[DONE]"


class LineDecoder:
    """Turns a byte stream into text lines (``\\n`` or ``\\r\\n`` terminated)."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending = ""

    def feed(self, chunk: bytes) -> List[str]:
        if not chunk:
            return []
        self._pending += self._decoder.decode(chunk)
        if "\n" not in self._pending:
            return []
        *lines, self._pending = self._pending.split("\n")
        return [line[:-1] if line.endswith("\r") else line for line in lines]

    def flush(self) -> List[str]:
        self._pending += self._decoder.decode(b"", final=True)
        tail, self._pending = self._pending, ""
        if tail.endswith("\r"):
            tail = tail[:-1]
        return [tail] if tail else []


def sse_data(line: str) -> Optional[str]:
    """Return the payload of an SSE ``data:`` line, or ``None`` for other lines.

    Both ``data:{...}`` and ``data: {...}`` are accepted. ``event:``, ``id:``,
    ``retry:`` fields and ``:`` comments yield ``None``.
    """
    if not line.startswith(SSE_DATA_PREFIX):
        return None
    payload = line[len(SSE_DATA_PREFIX):]
    if payload.startswith(" "):
        payload = payload[1:]
    payload = payload.strip()
    return payload or None


__all__ = ["LineDecoder", "sse_data", "SSE_DATA_PREFIX", "SSE_DONE"]
