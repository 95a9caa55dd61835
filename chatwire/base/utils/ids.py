"""Opaque identifier generators."""

from __future__ import annotations

import secrets
import time


def generate_thinking_id() -> str:
    """Return a new thinking-sequence id: ``thinking_<epoch ms>_<6 hex>``."""
    return f"thinking_{int(time.time() * 1000)}_{secrets.token_hex(3)}"


def generate_call_id() -> str:
    """Return a synthetic tool-call id for providers that omit one."""
    return f"call_{secrets.token_hex(4)}"


__all__ = ["generate_thinking_id", "generate_call_id"]
