"""Tool-call reassembly from fragmented stream payloads.

Providers stream a call's id, name and argument text in pieces, keyed by a
call index (chat-completions), an item or call id (responses), or a content
block index (message blocks). :class:`ToolCallAssembler` buffers the pieces
per key and emits a :class:`ToolCall` as soon as the buffer holds a name and
a complete JSON object. Emitted keys are remembered so late duplicate
fragments are ignored.

Terminal flush has two modes:

``strict``
    Used at a definitive end (finish reason, completion event). A buffer that
    is still not a JSON object raises :class:`ToolCallAssemblyError`.
``lenient``
    Used at ambiguous endings (``[DONE]`` payload, end of bytes). Invalid
    buffers are dropped and logged at debug level.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, List, Optional, Set

from ..constants import TOOL_CALL_SNIPPET_LIMIT, UNKNOWN_TOOL_NAME
from ..errors import ToolCallAssemblyError
from ..logging import LogContext, get_logger, normalized_log_event
from ..utils.ids import generate_call_id
from ..utils.json_utils import try_parse_json_object
from .events import StreamEvent, ToolCall

_logger = get_logger("chatwire.streaming.tool_calls")


@dataclass
class _Buffer:
    id: Optional[str] = None
    name: Optional[str] = None
    args: str = ""


class ToolCallAssembler:
    """Per-stream tool-call buffers.

    Parameters:
        outbox: Event list shared with the rest of the parse state.
        family: Protocol family name used in errors and logs.
        before_emit: Hook called right before each ``ToolCall`` is appended.
        log_context: Correlation fields for log events.
    """

    def __init__(
        self,
        outbox: List[StreamEvent],
        *,
        family: str = "unknown",
        before_emit: Optional[Callable[[], None]] = None,
        log_context: Optional[LogContext] = None,
    ) -> None:
        self._outbox = outbox
        self._family = family
        self._before_emit = before_emit
        self._ctx = log_context
        self._buffers: Dict[Hashable, _Buffer] = {}
        self._completed: Set[Hashable] = set()
        self.emitted_ids: List[str] = []

    @property
    def pending_keys(self) -> List[Hashable]:
        return list(self._buffers)

    def is_completed(self, key: Hashable) -> bool:
        return key in self._completed

    def has_buffer(self, key: Hashable) -> bool:
        return key in self._buffers

    def open(self, key: Hashable, *, id: Optional[str] = None, name: Optional[str] = None) -> None:  # noqa: A002
        """Start (or update) a buffer without attempting emission."""
        if key in self._completed:
            return
        buf = self._buffers.setdefault(key, _Buffer())
        if id:
            buf.id = id
        if name:
            buf.name = name

    def merge(
        self,
        key: Hashable,
        *,
        id: Optional[str] = None,  # noqa: A002
        name: Optional[str] = None,
        fragment: str = "",
        replace: bool = False,
    ) -> bool:
        """Merge one fragment and try to emit; return True when a call was emitted.

        ``replace`` swaps the argument text instead of appending (for events
        that carry the complete argument string).
        """
        if key in self._completed:
            return False
        self.open(key, id=id, name=name)
        buf = self._buffers[key]
        if replace:
            buf.args = fragment or ""
        elif fragment:
            buf.args += fragment
        return self.try_emit(key)

    def try_emit(self, key: Hashable) -> bool:
        buf = self._buffers.get(key)
        if buf is None or not buf.name:
            return False
        parsed = try_parse_json_object(buf.args)
        if parsed is None:
            return False
        self._emit(key, buf, parsed)
        return True

    def complete(self, key: Hashable, *, arguments_default: str = "{}") -> bool:
        """Emit a buffer whose argument text ended empty, using ``arguments_default``."""
        buf = self._buffers.get(key)
        if buf is None:
            return False
        if not buf.args.strip():
            buf.args = arguments_default
        return self.try_emit(key)

    def flush(self, *, strict: bool) -> None:
        """Emit every valid remaining buffer; handle invalid ones per ``strict``.

        Valid buffers without a name are emitted as ``unknown_tool``.
        """
        for key in list(self._buffers):
            self.flush_key(key, strict=strict)

    def flush_key(self, key: Hashable, *, strict: bool) -> None:
        """Terminal flush of a single buffer (see :meth:`flush`)."""
        buf = self._buffers.get(key)
        if buf is None:
            return
        parsed = try_parse_json_object(buf.args)
        if parsed is not None:
            if not buf.name:
                buf.name = UNKNOWN_TOOL_NAME
            self._emit(key, buf, parsed)
            return
        self._buffers.pop(key, None)
        if strict:
            raise ToolCallAssemblyError(
                key=key,
                snippet=buf.args[:TOOL_CALL_SNIPPET_LIMIT],
                family=self._family,
            )
        normalized_log_event(
            _logger,
            "tool_call.dropped",
            self._ctx,
            phase="stream",
            level=logging.DEBUG,
            key=str(key),
            tool_name=buf.name,
            snippet=buf.args[:TOOL_CALL_SNIPPET_LIMIT],
        )

    def _emit(self, key: Hashable, buf: _Buffer, arguments: dict) -> None:
        if self._before_emit is not None:
            self._before_emit()
        call_id = buf.id or generate_call_id()
        self._outbox.append(ToolCall(id=call_id, name=buf.name or UNKNOWN_TOOL_NAME, arguments=arguments))
        self.emitted_ids.append(call_id)
        self._buffers.pop(key, None)
        self._completed.add(key)


__all__ = ["ToolCallAssembler"]
