"""Generate-content request body builder and URL helper.

Turns use the roles ``user`` and ``model``; tool results travel as
``functionResponse`` parts on a user turn and name the function through the
earlier ``functionCall`` with the same id. System text is collected into
``systemInstruction``.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Sequence

from ..base.models import BuildContext, CanonicalMessage, ModelConfig, RequestOptions, ToolMode
from ..base.request_parts import (
    allowed_images,
    apply_temperature,
    merge_extra,
    normalize_stop,
    put_if_set,
    required_tool,
    tool_names_by_call_id,
)

FAMILY = "gemini"

_VERSION_SEGMENT = re.compile(r"/v\d+(alpha|beta)?\d*$")


def generate_content_url(base_url: str, model_id: str, stream: bool = True) -> str:
    """``{base}/models/{model}:streamGenerateContent?alt=sse``.

    A base URL without an API version segment gets ``/v1beta``.
    """
    base = base_url.rstrip("/")
    if not _VERSION_SEGMENT.search(base):
        base = f"{base}/v1beta"
    model = model_id[len("models/"):] if model_id.startswith("models/") else model_id
    if stream:
        return f"{base}/models/{model}:streamGenerateContent?alt=sse"
    return f"{base}/models/{model}:generateContent"


def _parts(msg: CanonicalMessage, config: ModelConfig, ctx: BuildContext, names: Dict[str, str]) -> List[Dict[str, Any]]:
    parts: List[Dict[str, Any]] = []
    if msg.role == "assistant" and config.include_reasoning_in_request and msg.thinking.strip():
        parts.append({"text": msg.thinking.strip(), "thought": True})
    if msg.text:
        parts.append({"text": msg.text})
    for img in allowed_images(msg, config, ctx):
        parts.append({"inlineData": {"mimeType": img.mime_type, "data": img.to_base64()}})
    for call in msg.tool_calls:
        parts.append({"functionCall": {"id": call.id, "name": call.name, "args": call.arguments()}})
    for result in msg.tool_results:
        name = names.get(result.call_id)
        if not name:
            ctx.note(f"no earlier tool call matches result id {result.call_id!r}", call_id=result.call_id)
            name = result.call_id
        parts.append(
            {"functionResponse": {"id": result.call_id, "name": name, "response": {"content": result.content}}}
        )
    return parts


def convert_contents(
    messages: Sequence[CanonicalMessage], config: ModelConfig, ctx: BuildContext
) -> tuple[List[Dict[str, Any]], Optional[str]]:
    """Return ``(contents, system instruction text or None)``."""
    names = tool_names_by_call_id(messages)
    contents: List[Dict[str, Any]] = []
    system_parts: List[str] = []
    for msg in messages:
        if msg.role == "system":
            text = msg.text.strip()
            if text:
                system_parts.append(text)
            continue
        parts = _parts(msg, config, ctx, names)
        if not parts:
            continue
        role = "model" if msg.role == "assistant" else "user"
        if contents and contents[-1]["role"] == role and msg.role == "tool":
            contents[-1]["parts"].extend(parts)
            continue
        contents.append({"role": role, "parts": parts})
    return contents, ("\n".join(system_parts) if system_parts else None)


def _thinking_config(config: ModelConfig) -> Optional[Dict[str, Any]]:
    thinking: Dict[str, Any] = {}
    if config.thinking_budget is not None:
        thinking["thinkingBudget"] = config.thinking_budget
    elif config.reasoning is not None and config.reasoning.max_tokens is not None:
        thinking["thinkingBudget"] = config.reasoning.max_tokens
    if config.enable_thinking or (config.reasoning is not None and config.reasoning.enabled):
        thinking["includeThoughts"] = True
    return thinking or None


def build_generate_content_body(
    messages: Sequence[CanonicalMessage],
    config: ModelConfig,
    options: Optional[RequestOptions] = None,
    ctx: Optional[BuildContext] = None,
) -> Dict[str, Any]:
    options = options or RequestOptions()
    ctx = ctx or BuildContext()
    forced = required_tool(options, config, FAMILY)
    contents, system = convert_contents(messages, config, ctx)

    body: Dict[str, Any] = {"contents": contents}
    if system:
        body["systemInstruction"] = {"role": "user", "parts": [{"text": system}]}

    generation: Dict[str, Any] = {}
    apply_temperature(generation, config, options)
    put_if_set(generation, "topP", config.top_p)
    put_if_set(generation, "topK", config.top_k)
    put_if_set(generation, "maxOutputTokens", config.max_tokens)
    put_if_set(generation, "stopSequences", normalize_stop(options.stop))
    put_if_set(generation, "thinkingConfig", _thinking_config(config))
    if generation:
        body["generationConfig"] = generation

    if options.tools:
        body["tools"] = [
            {
                "functionDeclarations": [
                    {"name": tool.name, "description": tool.description, "parameters": tool.schema_or_default()}
                    for tool in options.tools
                ]
            }
        ]
        if options.tool_mode is ToolMode.REQUIRED and forced is not None:
            calling = {"mode": "ANY", "allowedFunctionNames": [forced.name]}
        else:
            calling = {"mode": "AUTO"}
        body["toolConfig"] = {"functionCallingConfig": calling}
    merge_extra(body, config.extra, deep_keys=("generationConfig",))
    return body


__all__ = ["build_generate_content_body", "convert_contents", "generate_content_url"]
