"""Timeout configuration and the pooled HTTP client."""

from __future__ import annotations

from chatwire.base.http import close_all_clients, get_httpx_client
from chatwire.base.timeouts import TimeoutConfig, get_timeout_config


def test_env_overrides_and_invalid_values(monkeypatch):
    monkeypatch.setenv("CHATWIRE_TIMEOUT_READ_SECONDS", "12.5")
    monkeypatch.setenv("CHATWIRE_TIMEOUT_CONNECT_SECONDS", "-1")
    monkeypatch.setenv("CHATWIRE_TIMEOUT_WRITE_SECONDS", "soon")
    cfg = get_timeout_config()
    assert cfg.read_timeout_seconds == 12.5  # nosec B101
    assert cfg.connect_timeout_seconds == TimeoutConfig().connect_timeout_seconds  # nosec B101
    assert cfg.write_timeout_seconds == TimeoutConfig().write_timeout_seconds  # nosec B101


def test_cache_refreshes_when_env_changes(monkeypatch):
    monkeypatch.setenv("CHATWIRE_TIMEOUT_READ_SECONDS", "7")
    assert get_timeout_config().to_httpx().read == 7.0  # nosec B101
    monkeypatch.setenv("CHATWIRE_TIMEOUT_READ_SECONDS", "9")
    assert get_timeout_config().to_httpx().read == 9.0  # nosec B101


def test_clients_are_pooled_per_purpose():
    try:
        first = get_httpx_client("stream")
        assert get_httpx_client("stream") is first  # nosec B101
        assert get_httpx_client("other") is not first  # nosec B101
        close_all_clients()
        assert first.is_closed and get_httpx_client("stream") is not first  # nosec B101
    finally:
        close_all_clients()
