"""
Repositories package.

Exports:
- CredentialResolver / KeyResolution: API key resolution
- SecretStore, EnvSecretStore, MemorySecretStore: key storage backends
"""

from .keys import CredentialResolver, KeyResolution
from .secret_store import (
    GENERIC_SECRET_KEY,
    EnvSecretStore,
    MemorySecretStore,
    SecretStore,
    provider_secret_key,
)

__all__ = [
    "CredentialResolver",
    "KeyResolution",
    "SecretStore",
    "EnvSecretStore",
    "MemorySecretStore",
    "GENERIC_SECRET_KEY",
    "provider_secret_key",
]
