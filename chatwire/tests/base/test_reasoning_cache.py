"""Reasoning cache: bounded LRU of reasoning text by tool-call id."""

from __future__ import annotations

import pytest

from chatwire.base.resilience.reasoning_cache import ReasoningCache


def test_add_under_every_id_and_lookup():
    cache = ReasoningCache(max_entries=8)
    cache.add(["call_a", "call_b", ""], "because")
    assert cache.get("call_a") == "because" and cache.get("call_b") == "because"  # nosec B101
    assert len(cache) == 2 and "call_c" not in cache  # nosec B101


def test_empty_content_is_ignored():
    cache = ReasoningCache()
    cache.add(["call_a"], "")
    assert cache.get("call_a") is None  # nosec B101


def test_least_recently_used_entry_is_evicted():
    cache = ReasoningCache(max_entries=2)
    cache.add(["a"], "1")
    cache.add(["b"], "2")
    assert cache.get("a") == "1"  # nosec B101
    cache.add(["c"], "3")
    assert "b" not in cache and "a" in cache and "c" in cache  # nosec B101


def test_invalid_bound_rejected():
    with pytest.raises(ValueError):
        ReasoningCache(max_entries=0)
