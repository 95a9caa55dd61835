"""Shared fixtures for the chatwire test suite.

Network traffic is served by ``httpx.MockTransport``; nothing leaves the
process. Log assertions attach a collecting handler to the package logger
(which does not propagate to the root logger).
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

import httpx
import pytest

from chatwire.base.repositories import GENERIC_SECRET_KEY, CredentialResolver, MemorySecretStore
from chatwire.base.resilience.pacing import RequestPacer
from chatwire.config import ChatwireSettings
from chatwire.service.dispatcher import ChatDispatcher


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def log_records() -> Iterator[List[logging.LogRecord]]:
    """Collect records emitted under the ``chatwire`` logger at any level."""
    records: List[logging.LogRecord] = []
    handler = logging.Handler()
    handler.emit = lambda record: records.append(record)  # type: ignore[method-assign]
    logger = logging.getLogger("chatwire")
    previous = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield records
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous)


def events_named(records: Iterable[logging.LogRecord], name: str) -> List[Dict[str, Any]]:
    out = []
    for record in records:
        try:
            payload = json.loads(record.getMessage())
        except ValueError:
            continue
        if payload.get("event") == name:
            out.append(payload)
    return out


@pytest.fixture()
def logged_events() -> Callable[[Iterable[logging.LogRecord], str], List[Dict[str, Any]]]:
    """``logged_events(records, "chat.end")`` -> decoded payloads of that event."""
    return events_named


def sse_bytes(*payloads: Any, done: bool = False) -> bytes:
    """Encode payloads as ``data:`` lines (dicts are JSON-encoded)."""
    lines = []
    for payload in payloads:
        text = payload if isinstance(payload, str) else json.dumps(payload)
        lines.append(f"data: {text}\n\n")
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode("utf-8")


def jsonl_bytes(*payloads: Dict[str, Any]) -> bytes:
    return "".join(json.dumps(p) + "\n" for p in payloads).encode("utf-8")


@pytest.fixture()
def sse() -> Callable[..., bytes]:
    return sse_bytes


@pytest.fixture()
def jsonl() -> Callable[..., bytes]:
    return jsonl_bytes


class ChunkedStream(httpx.SyncByteStream):
    """Response body delivered in the given chunks."""

    def __init__(self, chunks: Iterable[bytes]) -> None:
        self._chunks = list(chunks)

    def __iter__(self) -> Iterator[bytes]:
        yield from self._chunks


@pytest.fixture()
def chunked() -> Callable[..., ChunkedStream]:
    """``chunked(b"a", b"b")`` -> response stream delivering those chunks."""
    return lambda *chunks: ChunkedStream(chunks)


@pytest.fixture()
def make_dispatcher() -> Callable[..., ChatDispatcher]:
    """Build a dispatcher whose HTTP client is served by ``handler``.

    ``settings`` entries are passed to :class:`ChatwireSettings`; retries wait
    0 ms unless overridden and the generic key ``sk-generic`` is stored.
    """

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        *,
        settings: Optional[Dict[str, Any]] = None,
        secrets: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> ChatDispatcher:
        data: Dict[str, Any] = {"base_url": "https://api.example.test/v1", "retry": {"interval_ms": 0}}
        data.update(settings or {})
        store = MemorySecretStore({GENERIC_SECRET_KEY: "sk-generic"} if secrets is None else secrets)
        kwargs.setdefault("thinking_interval", 0.0)
        kwargs.setdefault("pacer", RequestPacer(sleep=lambda s: None))
        return ChatDispatcher(
            ChatwireSettings.model_validate(data),
            client=httpx.Client(transport=httpx.MockTransport(handler)),
            credentials=CredentialResolver(store),
            **kwargs,
        )

    return factory
