"""Structured responses (``/responses``) request body builder.

System text becomes the top-level ``instructions`` string. Every other turn
becomes discrete ``input`` items:

- user: ``{"role": "user", "content": [input_text | input_image]}``
- assistant text (or replayed thinking when no text): an ``output_text``
  message item
- assistant tool calls: ``function_call`` items (``id`` is ``fc_<call id>``)
- tool results: ``function_call_output`` items (skipped without a call id)

The last user item carries ``"status": "incomplete"``; no other item does.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..base.models import BuildContext, CanonicalMessage, ModelConfig, RequestOptions, ToolMode
from ..base.request_parts import (
    allowed_images,
    apply_temperature,
    apply_top_p,
    merge_extra,
    normalize_stop,
    required_tool,
)

FAMILY = "openai-responses"


def convert_input(
    messages: Sequence[CanonicalMessage], config: ModelConfig, ctx: BuildContext
) -> tuple[List[Dict[str, Any]], List[str]]:
    """Return ``(input items, instruction texts)``."""
    items: List[Dict[str, Any]] = []
    instructions: List[str] = []
    for msg in messages:
        text = msg.text.strip()
        if msg.role == "system":
            if text:
                instructions.append(text)
            continue
        if msg.role == "assistant":
            thinking = msg.thinking.strip() if config.include_reasoning_in_request else ""
            visible = text or thinking
            if visible:
                items.append({"role": "assistant", "content": [{"type": "output_text", "text": visible}]})
            for call in msg.tool_calls:
                items.append(
                    {
                        "type": "function_call",
                        "id": f"fc_{call.id}",
                        "call_id": call.id,
                        "name": call.name,
                        "arguments": call.arguments_json or "{}",
                    }
                )
        for result in msg.tool_results:
            if not result.call_id:
                ctx.note("dropped tool result without call id", role=msg.role)
                continue
            items.append({"type": "function_call_output", "call_id": result.call_id, "output": result.content or ""})
        if msg.role == "user":
            content: List[Dict[str, Any]] = []
            if text:
                content.append({"type": "input_text", "text": text})
            content.extend(
                {"type": "input_image", "image_url": img.to_data_url()} for img in allowed_images(msg, config, ctx)
            )
            if content:
                items.append({"role": "user", "content": content})
    for item in reversed(items):
        if item.get("role") == "user":
            item["status"] = "incomplete"
            break
    return items, instructions


def build_responses_body(
    messages: Sequence[CanonicalMessage],
    config: ModelConfig,
    options: Optional[RequestOptions] = None,
    ctx: Optional[BuildContext] = None,
) -> Dict[str, Any]:
    """Build a streaming ``/responses`` request body.

    Raises:
        InvalidToolConstraint: required tool mode without exactly one tool.
    """
    options = options or RequestOptions()
    ctx = ctx or BuildContext()
    forced = required_tool(options, config, FAMILY)
    items, instructions = convert_input(messages, config, ctx)

    body: Dict[str, Any] = {"model": config.id, "input": items, "stream": True}
    if instructions:
        body["instructions"] = "\n".join(instructions)
    apply_temperature(body, config, options)
    apply_top_p(body, config)
    if config.max_completion_tokens is not None:
        body["max_output_tokens"] = config.max_completion_tokens
    elif config.max_tokens is not None:
        body["max_output_tokens"] = config.max_tokens
    if config.reasoning_effort is not None:
        body["reasoning"] = {"effort": config.reasoning_effort}
    stop = normalize_stop(options.stop)
    if stop:
        body["stop"] = stop
    if options.tools:
        body["tools"] = [
            {
                "type": "function",
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.schema_or_default(),
            }
            for tool in options.tools
        ]
        if options.tool_mode is ToolMode.REQUIRED and forced is not None:
            body["tool_choice"] = {"type": "function", "name": forced.name}
        else:
            body["tool_choice"] = "auto"
    merge_extra(body, config.extra)
    return body


__all__ = ["build_responses_body", "convert_input"]
