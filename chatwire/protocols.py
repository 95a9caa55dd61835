"""Protocol family lookup table.

Maps each :class:`~chatwire.base.models.ProtocolFamily` to the pieces the
dispatcher needs: request body builder, stream parser class, endpoint URL and
authentication headers. Builders and parsers are imported lazily with
``importlib`` so loading the table does not import every family.
"""

from __future__ import annotations

from dataclasses import dataclass
from importlib import import_module
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from .base.constants import ANTHROPIC_VERSION, OLLAMA_NO_AUTH_KEY
from .base.errors import InvalidConfiguration
from .base.models import BuildContext, CanonicalMessage, ModelConfig, ProtocolFamily, RequestOptions
from .base.streaming import StreamParser


def _join(path: str) -> Callable[[str, str], str]:
    def url(base_url: str, model_id: str) -> str:
        return f"{base_url.rstrip('/')}{path}"

    return url


def _gemini_url(base_url: str, model_id: str) -> str:
    from .gemini.builder import generate_content_url

    return generate_content_url(base_url, model_id)


def _bearer(api_key: Optional[str]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {api_key}"} if api_key else {}


def _ollama_auth(api_key: Optional[str]) -> Dict[str, str]:
    if not api_key or api_key == OLLAMA_NO_AUTH_KEY:
        return {}
    return _bearer(api_key)


def _anthropic_auth(api_key: Optional[str]) -> Dict[str, str]:
    headers = {"anthropic-version": ANTHROPIC_VERSION}
    if api_key:
        headers["x-api-key"] = api_key
    return headers


def _gemini_auth(api_key: Optional[str]) -> Dict[str, str]:
    return {"x-goog-api-key": api_key} if api_key else {}


@dataclass(frozen=True)
class ProtocolBinding:
    """Everything needed to talk one protocol family.

    Attributes:
        family: The protocol family.
        builder: ``"module:function"`` path of the request body builder.
        parser: ``"module:Class"`` path of the stream parser.
        url: ``url(base_url, model_id)`` endpoint builder.
        auth_headers: ``auth_headers(api_key)`` credential headers.
        credential_optional: The family may run without a credential.
        uses_reasoning_cache: The parser stores reasoning by tool-call id.
    """

    family: ProtocolFamily
    builder: str
    parser: str
    url: Callable[[str, str], str]
    auth_headers: Callable[[Optional[str]], Dict[str, str]]
    credential_optional: bool = False
    uses_reasoning_cache: bool = False

    def build(
        self,
        messages: Sequence[CanonicalMessage],
        config: ModelConfig,
        options: Optional[RequestOptions] = None,
        ctx: Optional[BuildContext] = None,
    ) -> Dict[str, Any]:
        return _resolve(self.builder, self.family)(messages, config, options, ctx)

    def new_parser(self, *, reasoning_cache: Any = None, **kwargs: Any) -> StreamParser:
        klass = _resolve(self.parser, self.family)
        if self.uses_reasoning_cache:
            kwargs["reasoning_cache"] = reasoning_cache
        return klass(**kwargs)


def _resolve(path: str, family: ProtocolFamily) -> Any:
    module_path, attr = path.split(":")
    try:
        return getattr(import_module(module_path), attr)
    except (ImportError, AttributeError) as exc:  # pragma: no cover - packaging error
        raise InvalidConfiguration(f"cannot load {path!r} for protocol family {family.value!r}: {exc}") from exc


PROTOCOLS: Mapping[ProtocolFamily, ProtocolBinding] = {
    ProtocolFamily.OPENAI: ProtocolBinding(
        family=ProtocolFamily.OPENAI,
        builder="chatwire.openai.chat_builder:build_chat_completions_body",
        parser="chatwire.openai.chat_stream:ChatCompletionsStreamParser",
        url=_join("/chat/completions"),
        auth_headers=_bearer,
        uses_reasoning_cache=True,
    ),
    ProtocolFamily.OPENAI_RESPONSES: ProtocolBinding(
        family=ProtocolFamily.OPENAI_RESPONSES,
        builder="chatwire.openai.responses_builder:build_responses_body",
        parser="chatwire.openai.responses_stream:ResponsesStreamParser",
        url=_join("/responses"),
        auth_headers=_bearer,
    ),
    ProtocolFamily.ANTHROPIC: ProtocolBinding(
        family=ProtocolFamily.ANTHROPIC,
        builder="chatwire.anthropic.builder:build_messages_body",
        parser="chatwire.anthropic.stream:MessagesStreamParser",
        url=_join("/v1/messages"),
        auth_headers=_anthropic_auth,
    ),
    ProtocolFamily.OLLAMA: ProtocolBinding(
        family=ProtocolFamily.OLLAMA,
        builder="chatwire.ollama.builder:build_chat_body",
        parser="chatwire.ollama.stream:NativeChatStreamParser",
        url=_join("/api/chat"),
        auth_headers=_ollama_auth,
        credential_optional=True,
    ),
    ProtocolFamily.GEMINI: ProtocolBinding(
        family=ProtocolFamily.GEMINI,
        builder="chatwire.gemini.builder:build_generate_content_body",
        parser="chatwire.gemini.stream:GenerateContentStreamParser",
        url=_gemini_url,
        auth_headers=_gemini_auth,
    ),
}


def get_protocol(family: ProtocolFamily | str) -> ProtocolBinding:
    """Binding for ``family``; raises :class:`InvalidConfiguration` when unknown."""
    try:
        key = ProtocolFamily(family.lower().strip()) if isinstance(family, str) else family
        return PROTOCOLS[key]
    except (ValueError, KeyError) as exc:
        raise InvalidConfiguration(f"unknown protocol family {family!r}") from exc


__all__ = ["ProtocolBinding", "PROTOCOLS", "get_protocol"]
