"""
Credential resolution

Resolve the API key for one model with a strict priority order:

1) stored provider-specific key (by ``credential_ref``)
2) for a model with its own base URL: a prompt for the provider key, stored
   under the provider name
3) stored generic key
4) for a model on the global base URL: a prompt for the generic key, stored
   as the generic key
5) None

Prompts only happen when a prompt callable is supplied.

Resolution never raises; the dispatcher decides whether a missing key is
fatal for the protocol family.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from ...config.env import normalize_provider
from .secret_store import GENERIC_SECRET_KEY, EnvSecretStore, SecretStore, provider_secret_key

PromptFn = Callable[[str], Optional[str]]


@dataclass
class KeyResolution:
    provider: Optional[str]
    api_key: Optional[str]
    source: str  # "provider", "generic", "prompt", "none"
    extra: Dict[str, Any] = field(default_factory=dict)


class CredentialResolver:
    """Look up (and optionally prompt for) the key a request should use."""

    def __init__(self, store: Optional[SecretStore] = None, prompt: Optional[PromptFn] = None) -> None:
        self.store: SecretStore = store if store is not None else EnvSecretStore()
        self.prompt = prompt

    def resolve(self, provider: Optional[str], *, use_generic_key: bool) -> KeyResolution:
        """Resolve a key.

        Args:
            provider: ``credential_ref`` of the model (may be empty).
            use_generic_key: True when the model has no own base URL; the
                prompt then asks for the generic key.
        """
        name = normalize_provider(provider) or None
        if name:
            key = self.store.get(provider_secret_key(name))
            if key:
                return KeyResolution(name, key, "provider")
            if not use_generic_key:
                entered = self._ask(f"API key for {name}")
                if entered:
                    self.store.store(provider_secret_key(name), entered)
                    return KeyResolution(name, entered, "prompt", {"stored_as": provider_secret_key(name)})

        key = self.store.get(GENERIC_SECRET_KEY)
        if key:
            return KeyResolution(name, key, "generic")

        if use_generic_key:
            entered = self._ask("API key")
            if entered:
                self.store.store(GENERIC_SECRET_KEY, entered)
                return KeyResolution(name, entered, "prompt", {"stored_as": GENERIC_SECRET_KEY})
        return KeyResolution(name, None, "none")

    def get_api_key(self, provider: Optional[str], *, use_generic_key: bool) -> Optional[str]:
        return self.resolve(provider, use_generic_key=use_generic_key).api_key

    def _ask(self, title: str) -> Optional[str]:
        if self.prompt is None:
            return None
        entered = self.prompt(title)
        return entered.strip() if entered and entered.strip() else None


__all__ = ["KeyResolution", "CredentialResolver", "PromptFn"]
