"""Configuration layer.

Public API
----------
* ``load_settings(path=None, overrides=None) -> ChatwireSettings``
* ``parse_model_id`` / ``find_model_config`` for ``id::config_id`` lookup
* environment helpers in :mod:`chatwire.config.env`
"""

from __future__ import annotations

from .model_lookup import ParsedModelId, find_model_config, parse_model_id
from .settings import ChatwireSettings, RetrySettings, load_settings, read_settings_file

__all__ = [
    "ChatwireSettings",
    "RetrySettings",
    "load_settings",
    "read_settings_file",
    "ParsedModelId",
    "parse_model_id",
    "find_model_config",
]
