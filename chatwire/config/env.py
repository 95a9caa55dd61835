"""chatwire.config.env
===================

Environment variable names and credential lookup helpers.

Credential variables
--------------------
- ``CHATWIRE_API_KEY``: generic key used when a model has no own key.
- ``CHATWIRE_API_KEY_<PROVIDER>``: key for one ``credential_ref``
  (upper-cased, ``-`` and ``.`` replaced by ``_``).
- Well-known provider variables from ``ENV_MAP`` (and ``ENV_ALIASES``) are
  accepted after the chatwire-specific one.

Helpers never raise on unknown providers or unset variables; callers decide
how to proceed.
"""

from __future__ import annotations

import os
import re
from typing import Dict, Iterable, Optional, Tuple

GENERIC_KEY_ENV = "CHATWIRE_API_KEY"
PROVIDER_KEY_ENV_PREFIX = "CHATWIRE_API_KEY_"
SETTINGS_FILE_ENV = "CHATWIRE_SETTINGS_FILE"
BASE_URL_ENV = "CHATWIRE_BASE_URL"
DELAY_ENV = "CHATWIRE_DELAY_MS"

# Provider -> canonical env var
ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "xai": "XAI_API_KEY",
    "ollama": "OLLAMA_API_KEY",
}

# Provider -> ordered acceptable names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}

_NON_WORD = re.compile(r"[^A-Z0-9]+")


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the value looks like a placeholder rather than a key.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_' (case-insensitive).
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "example" in v or v.startswith("test_")


def normalize_provider(provider: Optional[str]) -> str:
    return (provider or "").strip().lower()


def provider_env_var(provider: str) -> str:
    """``CHATWIRE_API_KEY_<PROVIDER>`` for a credential reference."""
    return PROVIDER_KEY_ENV_PREFIX + _NON_WORD.sub("_", normalize_provider(provider).upper()).strip("_")


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield env var names for a provider key in priority order."""
    p = normalize_provider(provider)
    if not p:
        return
    yield provider_env_var(p)
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, env_var_used)`` for a provider key, or ``(None, None)``."""
    for name in get_env_var_candidates(provider):
        val = os.environ.get(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


def resolve_generic_key() -> Optional[str]:
    val = os.environ.get(GENERIC_KEY_ENV)
    return val if val and not is_placeholder(val) else None


__all__ = [
    "GENERIC_KEY_ENV",
    "PROVIDER_KEY_ENV_PREFIX",
    "SETTINGS_FILE_ENV",
    "BASE_URL_ENV",
    "DELAY_ENV",
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "normalize_provider",
    "provider_env_var",
    "get_env_var_candidates",
    "resolve_provider_key",
    "resolve_generic_key",
]
