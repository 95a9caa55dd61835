"""
Per-model configuration.

Pydantic model loaded once per request from settings and read-only afterwards
(``frozen=True``). Field names follow the request bodies they feed; the
spellings used by existing settings files (``baseUrl``, ``apiMode``,
``owned_by``, ``configId``, ``delay``) are accepted as aliases.

Unset vs explicit null
----------------------
``temperature`` and ``top_p`` distinguish *not specified* (the builder uses a
default) from *explicitly null* (the builder omits the field). Pydantic tracks
which fields were supplied in ``model_fields_set``; :meth:`is_explicit_null`
exposes the distinction.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..constants import MODEL_ID_SEPARATOR
from .protocol_family import ProtocolFamily
from .reasoning_config import ReasoningConfig


class ModelConfig(BaseModel):
    """Configuration of one model endpoint.

    Attributes:
        id: Base model id sent on the wire.
        config_id: Optional discriminator allowing several entries per id.
        protocol_family: Wire protocol used to talk to the endpoint.
        base_url: Endpoint root; falls back to the global base URL.
        credential_ref: Provider key under which the credential is stored.
        context_length: Context window (sent as ``num_ctx`` by local-native).
        max_tokens / max_completion_tokens: Output budget fields.
        temperature ... repetition_penalty: Sampling knobs, sent only when set.
        reasoning_effort / reasoning / enable_thinking / thinking_budget /
            thinking: Reasoning knobs in the shapes different providers expect.
        include_reasoning_in_request: Replay thinking on assistant turns.
        cumulative_reasoning: The provider streams reasoning snapshots.
        vision: ``False`` strips images from requests.
        delay_ms: Minimum gap between requests (overrides the global delay).
        extra: Merged verbatim into the request body last.
        headers: Custom headers, winning over computed ones.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1)
    config_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("config_id", "configId"))
    protocol_family: ProtocolFamily = Field(
        default=ProtocolFamily.OPENAI,
        validation_alias=AliasChoices("protocol_family", "apiMode", "api_mode"),
    )
    base_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("base_url", "baseUrl"))
    credential_ref: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("credential_ref", "owned_by", "provider")
    )
    context_length: Optional[int] = None

    max_tokens: Optional[int] = None
    max_completion_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    min_p: Optional[float] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    repetition_penalty: Optional[float] = None

    reasoning_effort: Optional[str] = None
    reasoning: Optional[ReasoningConfig] = None
    enable_thinking: Optional[bool] = None
    thinking_budget: Optional[int] = None
    thinking: Optional[Dict[str, Any]] = None
    include_reasoning_in_request: bool = False
    cumulative_reasoning: bool = False

    vision: Optional[bool] = None
    delay_ms: Optional[int] = Field(default=None, ge=0, validation_alias=AliasChoices("delay_ms", "delay"))
    extra: Dict[str, Any] = Field(default_factory=dict)
    headers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("protocol_family", mode="before")
    @classmethod
    def _normalize_family(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def is_set(self, field_name: str) -> bool:
        """True when ``field_name`` was supplied (even as null)."""
        return field_name in self.model_fields_set

    def is_explicit_null(self, field_name: str) -> bool:
        """True when ``field_name`` was supplied with a ``null`` value."""
        return self.is_set(field_name) and getattr(self, field_name) is None

    @property
    def full_id(self) -> str:
        """``id`` joined with ``config_id`` the way hosts address the model."""
        return f"{self.id}{MODEL_ID_SEPARATOR}{self.config_id}" if self.config_id else self.id

    @property
    def images_allowed(self) -> bool:
        return self.vision is not False


__all__ = ["ModelConfig"]
