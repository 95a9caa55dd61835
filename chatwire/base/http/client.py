"""Shared HTTP client pool.

Purpose:
    Provide a thread-safe pool of reusable ``httpx.Client`` instances so
    repeated chat turns against the same endpoint share connections. Timeouts
    derive from :func:`get_timeout_config`.

Lifecycle & cleanup:
    - Clients are cached by ``purpose`` (e.g. ``"stream"``). Requests always
      use absolute URLs, so one client serves every provider.
    - All clients are closed at interpreter exit via ``atexit``. Tests may also
      call :func:`close_all_clients` explicitly.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[str, httpx.Client] = {}
_LOCK = threading.RLock()


def get_httpx_client(purpose: str = "stream") -> httpx.Client:
    """Return a pooled ``httpx.Client`` for ``purpose``.

    The first request for a purpose creates a client configured with timeouts
    from :func:`get_timeout_config`. Subsequent requests reuse it.
    """
    client = _CLIENTS.get(purpose)
    if client is not None and not client.is_closed:
        return client
    with _LOCK:
        client = _CLIENTS.get(purpose)
        if client is not None and not client.is_closed:
            return client
        client = httpx.Client(timeout=get_timeout_config().to_httpx())
        _CLIENTS[purpose] = client
        return client


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            try:
                c.close()
            except Exception:  # nosec B110 - best-effort shutdown
                pass
        _CLIENTS.clear()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients"]
