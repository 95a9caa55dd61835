"""Secret stores holding API keys.

Keys are addressed by name: :data:`GENERIC_SECRET_KEY` for the shared key and
``provider_secret_key(provider)`` for a per-provider key. Stores only need
``get`` and ``store``.
"""

from __future__ import annotations

import os
import threading
from typing import Dict, Optional, Protocol

from ...config.env import GENERIC_KEY_ENV, is_placeholder, normalize_provider, provider_env_var, resolve_provider_key

GENERIC_SECRET_KEY = "chatwire.apiKey"
_PROVIDER_PREFIX = GENERIC_SECRET_KEY + "."


def provider_secret_key(provider: str) -> str:
    return _PROVIDER_PREFIX + normalize_provider(provider)


class SecretStore(Protocol):  # pragma: no cover - structural protocol
    def get(self, key: str) -> Optional[str]: ...

    def store(self, key: str, value: str) -> None: ...


class MemorySecretStore:
    """Process-local store (tests, embedding hosts)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def store(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value


class EnvSecretStore:
    """Environment-backed store.

    The generic key reads ``CHATWIRE_API_KEY``; a provider key reads
    ``CHATWIRE_API_KEY_<PROVIDER>`` then the well-known provider variables.
    ``store`` writes the chatwire-specific variable of the current process.
    """

    def get(self, key: str) -> Optional[str]:
        if key == GENERIC_SECRET_KEY:
            val = os.environ.get(GENERIC_KEY_ENV)
            return val if val and not is_placeholder(val) else None
        if key.startswith(_PROVIDER_PREFIX):
            val, _ = resolve_provider_key(key[len(_PROVIDER_PREFIX):])
            return val
        return None

    def store(self, key: str, value: str) -> None:
        if key == GENERIC_SECRET_KEY:
            os.environ[GENERIC_KEY_ENV] = value
        elif key.startswith(_PROVIDER_PREFIX):
            os.environ[provider_env_var(key[len(_PROVIDER_PREFIX):])] = value


__all__ = [
    "GENERIC_SECRET_KEY",
    "provider_secret_key",
    "SecretStore",
    "MemorySecretStore",
    "EnvSecretStore",
]
