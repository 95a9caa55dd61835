"""Chat-completions request body builder.

Message rules
-------------
- system: ``{"role": "system", "content": text}`` (skipped when empty).
- user: plain string content, or a ``text`` + ``image_url`` (data URL) array
  when images are attached.
- assistant: ``content`` (trimmed text), optional ``reasoning_content`` and
  ``tool_calls``. With ``include_reasoning_in_request`` the reasoning comes
  from the turn's thinking segments, else from the reasoning cache by tool-call
  id, else it is sent as an explicit ``null`` (some providers reject tool-call
  turns without the field).
- tool results (on any turn): ``{"role": "tool", "tool_call_id", "content"}``.

Body fields are added only when configured; ``extra`` is merged last.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..base.constants import REASONING_DEFAULT_MAX_TOKENS
from ..base.models import BuildContext, CanonicalMessage, ModelConfig, RequestOptions, ToolMode
from ..base.request_parts import (
    allowed_images,
    apply_temperature,
    apply_top_p,
    merge_extra,
    normalize_stop,
    put_if_set,
    required_tool,
    sampling_extras,
)

FAMILY = "openai"


def _assistant_message(msg: CanonicalMessage, config: ModelConfig, ctx: BuildContext) -> Optional[Dict[str, Any]]:
    out: Dict[str, Any] = {"role": "assistant"}
    text = msg.text.strip()
    if text:
        out["content"] = text
    if config.include_reasoning_in_request:
        thinking = msg.thinking.strip()
        if thinking:
            out["reasoning_content"] = thinking
        elif msg.tool_calls:
            cached = None
            if ctx.reasoning_cache is not None:
                for call in msg.tool_calls:
                    cached = ctx.reasoning_cache.get(call.id)
                    if cached:
                        break
            out["reasoning_content"] = cached or None
    if msg.tool_calls:
        out["tool_calls"] = [
            {
                "id": call.id,
                "type": "function",
                "function": {"name": call.name, "arguments": call.arguments_json or "{}"},
            }
            for call in msg.tool_calls
        ]
    if "content" in out or "reasoning_content" in out or "tool_calls" in out:
        return out
    return None


def _user_message(msg: CanonicalMessage, config: ModelConfig, ctx: BuildContext) -> Optional[Dict[str, Any]]:
    text = msg.text.strip()
    images = allowed_images(msg, config, ctx)
    if images:
        content: List[Dict[str, Any]] = []
        if text:
            content.append({"type": "text", "text": text})
        content.extend({"type": "image_url", "image_url": {"url": img.to_data_url()}} for img in images)
        return {"role": "user", "content": content}
    return {"role": "user", "content": text} if text else None


def convert_messages(
    messages: Sequence[CanonicalMessage], config: ModelConfig, ctx: BuildContext
) -> List[Dict[str, Any]]:
    """Convert canonical turns to the ``messages`` array."""
    out: List[Dict[str, Any]] = []
    for msg in messages:
        if msg.role == "assistant":
            converted = _assistant_message(msg, config, ctx)
            if converted is not None:
                out.append(converted)
        for result in msg.tool_results:
            out.append({"role": "tool", "tool_call_id": result.call_id, "content": result.content or ""})
        if msg.role == "user":
            converted = _user_message(msg, config, ctx)
            if converted is not None:
                out.append(converted)
        elif msg.role == "system":
            text = msg.text.strip()
            if text:
                out.append({"role": "system", "content": text})
    return out


def _reasoning_block(config: ModelConfig) -> Optional[Dict[str, Any]]:
    reasoning = config.reasoning
    if reasoning is None or reasoning.enabled is False:
        return None
    block: Dict[str, Any] = {}
    if reasoning.effort and reasoning.effort != "auto":
        block["effort"] = reasoning.effort
    else:
        block["max_tokens"] = reasoning.max_tokens or REASONING_DEFAULT_MAX_TOKENS
    if reasoning.exclude is not None:
        block["exclude"] = reasoning.exclude
    return block


def build_chat_completions_body(
    messages: Sequence[CanonicalMessage],
    config: ModelConfig,
    options: Optional[RequestOptions] = None,
    ctx: Optional[BuildContext] = None,
) -> Dict[str, Any]:
    """Build a streaming ``/chat/completions`` request body.

    Raises:
        InvalidToolConstraint: required tool mode without exactly one tool.
    """
    options = options or RequestOptions()
    ctx = ctx or BuildContext()
    forced = required_tool(options, config, FAMILY)

    body: Dict[str, Any] = {
        "model": config.id,
        "messages": convert_messages(messages, config, ctx),
        "stream": True,
        "stream_options": {"include_usage": True},
    }
    apply_temperature(body, config, options)
    apply_top_p(body, config)
    put_if_set(body, "max_tokens", config.max_tokens)
    put_if_set(body, "max_completion_tokens", config.max_completion_tokens)
    put_if_set(body, "reasoning_effort", config.reasoning_effort)
    if config.enable_thinking is not None:
        body["enable_thinking"] = config.enable_thinking
        if config.enable_thinking:
            put_if_set(body, "thinking_budget", config.thinking_budget)
    if config.thinking:
        body["thinking"] = dict(config.thinking)
    reasoning = _reasoning_block(config)
    if reasoning is not None:
        body["reasoning"] = reasoning
    put_if_set(body, "stop", normalize_stop(options.stop))
    if options.tools:
        body["tools"] = [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.schema_or_default(),
                },
            }
            for tool in options.tools
        ]
        if options.tool_mode is ToolMode.REQUIRED and forced is not None:
            body["tool_choice"] = {"type": "function", "function": {"name": forced.name}}
        else:
            body["tool_choice"] = "auto"
    body.update(sampling_extras(config))
    merge_extra(body, config.extra)
    return body


__all__ = ["build_chat_completions_body", "convert_messages"]
