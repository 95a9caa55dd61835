"""Settings model and loader.

Merge order (later wins): defaults -> settings file -> environment ->
explicit overrides.

The settings file is named by ``CHATWIRE_SETTINGS_FILE`` (or passed
explicitly). JSON is tried first, then YAML. Keys may use the editor
extension spellings (``oaicopilot.baseUrl``, ``oaicopilot.delay``,
``oaicopilot.retry``, ``oaicopilot.models``) or the plain names::

    base_url: https://openrouter.ai/api/v1
    delay_ms: 0
    retry:
      max_attempts: 3
      interval_ms: 1000
      status_codes: [408]
    models:
      - id: deepseek/deepseek-r1
        owned_by: openrouter
        include_reasoning_in_request: true
      - id: qwen3:8b
        apiMode: ollama
        baseUrl: http://localhost:11434
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from ..base.constants import RETRY_INTERVAL_MS, RETRY_MAX_ATTEMPTS
from ..base.errors import InvalidConfiguration
from ..base.models import ModelConfig
from ..base.resilience.retry import RetryPolicy
from .defaults import DEFAULT_BASE_URL, DEFAULT_DELAY_MS, LEGACY_SETTINGS_PREFIX
from .env import BASE_URL_ENV, DELAY_ENV, SETTINGS_FILE_ENV


class RetrySettings(BaseModel):
    """``retry`` section of the settings file."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    enabled: bool = True
    max_attempts: int = Field(default=RETRY_MAX_ATTEMPTS, ge=1)
    interval_ms: int = Field(default=RETRY_INTERVAL_MS, ge=0)
    status_codes: List[int] = Field(default_factory=list)

    def to_policy(self) -> RetryPolicy:
        return RetryPolicy(
            enabled=self.enabled,
            max_attempts=self.max_attempts,
            interval_ms=self.interval_ms,
            status_codes=tuple(self.status_codes),
        )


class ChatwireSettings(BaseModel):
    """Global settings plus the configured models."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    base_url: Optional[str] = Field(default=DEFAULT_BASE_URL, validation_alias=AliasChoices("base_url", "baseUrl"))
    delay_ms: int = Field(default=DEFAULT_DELAY_MS, ge=0, validation_alias=AliasChoices("delay_ms", "delay"))
    retry: RetrySettings = Field(default_factory=RetrySettings)
    models: List[ModelConfig] = Field(default_factory=list)

    @property
    def retry_policy(self) -> RetryPolicy:
        return self.retry.to_policy()


def _strip_legacy_prefix(data: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(key, str) and key.startswith(LEGACY_SETTINGS_PREFIX):
            key = key[len(LEGACY_SETTINGS_PREFIX):]
        out[key] = value
    return out


def read_settings_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Parse a JSON or YAML settings file into a mapping.

    Raises:
        InvalidConfiguration: the file is missing, unparsable or not a mapping.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidConfiguration(f"cannot read settings file {p}: {exc}") from exc
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise InvalidConfiguration(f"settings file {p} is neither JSON nor YAML: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"settings file {p} must contain a mapping")
    return _strip_legacy_prefix(data)


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    base_url = os.getenv(BASE_URL_ENV)
    if base_url:
        out["base_url"] = base_url
    delay = os.getenv(DELAY_ENV)
    if delay:
        try:
            out["delay_ms"] = int(delay)
        except ValueError as exc:
            raise InvalidConfiguration(f"{DELAY_ENV} must be an integer, got {delay!r}") from exc
    return out


def load_settings(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ChatwireSettings:
    """Return merged settings (defaults -> file -> env -> overrides)."""
    data: Dict[str, Any] = {}
    file_path = path or os.getenv(SETTINGS_FILE_ENV)
    if file_path:
        data |= read_settings_file(file_path)
    data |= _env_overrides()
    if overrides:
        data |= {k: v for k, v in _strip_legacy_prefix(overrides).items() if v is not None}
    try:
        return ChatwireSettings.model_validate(data)
    except ValidationError as exc:
        raise InvalidConfiguration(f"invalid settings: {exc}") from exc


__all__ = ["RetrySettings", "ChatwireSettings", "read_settings_file", "load_settings"]
