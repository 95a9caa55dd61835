"""Local-native ``/api/chat`` request body builder.

Messages stay flat: ``{role, content, images?, thinking?, tool_calls?,
tool_name?}``. Images are bare base64 strings, tool calls carry argument
objects rather than JSON text, and a tool result names the tool through the
earlier assistant call with the same id.

Sampling lives in ``options`` and reasoning in the ``think`` flag, which is a
level string when a reasoning effort is configured and a boolean otherwise.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

from ..base.models import BuildContext, CanonicalMessage, ModelConfig, RequestOptions
from ..base.request_parts import (
    allowed_images,
    apply_temperature,
    apply_top_p,
    merge_extra,
    normalize_stop,
    put_if_set,
    required_tool,
    tool_names_by_call_id,
)

FAMILY = "ollama"


def _tool_message(call_id: str, content: str, names: Dict[str, str], ctx: BuildContext) -> Dict[str, Any]:
    out: Dict[str, Any] = {"role": "tool", "content": content}
    name = names.get(call_id)
    if name:
        out["tool_name"] = name
    else:
        ctx.note(f"no earlier tool call matches result id {call_id!r}", call_id=call_id)
    return out


def convert_messages(
    messages: Sequence[CanonicalMessage], config: ModelConfig, ctx: BuildContext
) -> List[Dict[str, Any]]:
    names = tool_names_by_call_id(messages)
    out: List[Dict[str, Any]] = []
    for msg in messages:
        if msg.role == "tool":
            result = msg.tool_results[0]
            out.append(_tool_message(result.call_id, result.content, names, ctx))
            continue
        entry: Dict[str, Any] = {"role": msg.role, "content": msg.text}
        images = allowed_images(msg, config, ctx)
        if images:
            entry["images"] = [img.to_base64() for img in images]
        if msg.role == "assistant":
            if config.include_reasoning_in_request and msg.thinking:
                entry["thinking"] = msg.thinking
            if msg.tool_calls:
                entry["tool_calls"] = [
                    {"function": {"name": call.name, "arguments": call.arguments()}} for call in msg.tool_calls
                ]
        if entry["content"] or len(entry) > 2:
            out.append(entry)
        for result in msg.tool_results:
            out.append(_tool_message(result.call_id, result.content, names, ctx))
    return out


def think_value(config: ModelConfig) -> Optional[Union[bool, str]]:
    """``think`` flag: effort level string, else a boolean, else unset."""
    effort = config.reasoning_effort
    if effort is None and config.reasoning is not None:
        effort = config.reasoning.effort
    if effort:
        return effort
    if config.enable_thinking is not None:
        return config.enable_thinking
    if config.reasoning is not None and config.reasoning.enabled is not None:
        return config.reasoning.enabled
    return None


def build_chat_body(
    messages: Sequence[CanonicalMessage],
    config: ModelConfig,
    options: Optional[RequestOptions] = None,
    ctx: Optional[BuildContext] = None,
) -> Dict[str, Any]:
    options = options or RequestOptions()
    ctx = ctx or BuildContext()
    required_tool(options, config, FAMILY)

    body: Dict[str, Any] = {
        "model": config.id,
        "messages": convert_messages(messages, config, ctx),
        "stream": True,
    }
    put_if_set(body, "think", think_value(config))

    model_options: Dict[str, Any] = {}
    apply_temperature(model_options, config, options)
    apply_top_p(model_options, config)
    put_if_set(model_options, "top_k", config.top_k)
    put_if_set(model_options, "min_p", config.min_p)
    put_if_set(model_options, "stop", normalize_stop(options.stop))
    put_if_set(model_options, "num_ctx", config.context_length)
    put_if_set(model_options, "num_predict", config.max_tokens)
    if model_options:
        body["options"] = model_options

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
    merge_extra(body, config.extra, deep_keys=("options",))
    return body


__all__ = ["build_chat_body", "convert_messages", "think_value"]
