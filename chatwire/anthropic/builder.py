"""Message-block request body builder (``/v1/messages``).

System text is lifted into the top-level ``system`` string. Every other turn
becomes ``{"role", "content": [blocks]}`` with blocks in this order: text,
images (base64 source), thinking (assistant, only when reasoning replay is
enabled), ``tool_use`` and ``tool_result``.

Tool results are only valid on user turns. ``tool`` role messages are sent
as user turns (adjacent ones share a single turn); results attached to a
system or assistant turn are dropped with a diagnostic while the rest of the
conversation still converts.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..base.constants import ANTHROPIC_DEFAULT_MAX_TOKENS
from ..base.models import BuildContext, CanonicalMessage, ModelConfig, RequestOptions, ToolMode
from ..base.request_parts import (
    allowed_images,
    apply_temperature,
    apply_top_p,
    merge_extra,
    normalize_stop,
    put_if_set,
    required_tool,
)

FAMILY = "anthropic"


def _blocks(msg: CanonicalMessage, config: ModelConfig, ctx: BuildContext) -> List[Dict[str, Any]]:
    blocks: List[Dict[str, Any]] = []
    text = msg.text.strip()
    if text:
        blocks.append({"type": "text", "text": text})
    for img in allowed_images(msg, config, ctx):
        blocks.append(
            {"type": "image", "source": {"type": "base64", "media_type": img.mime_type, "data": img.to_base64()}}
        )
    if msg.role == "assistant" and config.include_reasoning_in_request:
        thinking = msg.thinking.strip()
        if thinking:
            blocks.append({"type": "thinking", "thinking": thinking})
    for call in msg.tool_calls:
        blocks.append({"type": "tool_use", "id": call.id, "name": call.name, "input": call.arguments()})
    if msg.tool_results:
        if msg.role in ("user", "tool"):
            blocks.extend(
                {"type": "tool_result", "tool_use_id": r.call_id, "content": r.content} for r in msg.tool_results
            )
        else:
            ctx.note(
                f"dropped {len(msg.tool_results)} tool result(s) attached to a {msg.role} turn",
                role=msg.role,
                call_ids=[r.call_id for r in msg.tool_results],
            )
    return blocks


def convert_messages(
    messages: Sequence[CanonicalMessage], config: ModelConfig, ctx: BuildContext
) -> tuple[List[Dict[str, Any]], Optional[str]]:
    """Return ``(messages array, system text or None)``."""
    out: List[Dict[str, Any]] = []
    system_parts: List[str] = []
    previous_was_tool = False
    for msg in messages:
        if msg.role == "system":
            text = msg.text.strip()
            if text:
                system_parts.append(text)
            if msg.tool_results:
                _blocks(msg, config, ctx)
            continue
        blocks = _blocks(msg, config, ctx)
        is_tool = msg.role == "tool"
        if not blocks:
            continue
        if is_tool and previous_was_tool and out:
            out[-1]["content"].extend(blocks)
            continue
        out.append({"role": "assistant" if msg.role == "assistant" else "user", "content": blocks})
        previous_was_tool = is_tool
    return out, ("\n".join(system_parts) if system_parts else None)


def _thinking_block(config: ModelConfig) -> Optional[Dict[str, Any]]:
    if config.thinking:
        return dict(config.thinking)
    budget = config.thinking_budget
    if budget is None and config.reasoning is not None and config.reasoning.enabled is not False:
        budget = config.reasoning.max_tokens
    if config.enable_thinking and budget:
        return {"type": "enabled", "budget_tokens": budget}
    return None


def build_messages_body(
    messages: Sequence[CanonicalMessage],
    config: ModelConfig,
    options: Optional[RequestOptions] = None,
    ctx: Optional[BuildContext] = None,
) -> Dict[str, Any]:
    """Build a streaming ``/v1/messages`` request body.

    Raises:
        InvalidToolConstraint: required tool mode without exactly one tool.
    """
    options = options or RequestOptions()
    ctx = ctx or BuildContext()
    forced = required_tool(options, config, FAMILY)
    converted, system = convert_messages(messages, config, ctx)

    body: Dict[str, Any] = {
        "model": config.id,
        "messages": converted,
        "stream": True,
        "max_tokens": config.max_tokens or ANTHROPIC_DEFAULT_MAX_TOKENS,
    }
    if system:
        body["system"] = system
    apply_temperature(body, config, options)
    apply_top_p(body, config)
    put_if_set(body, "top_k", config.top_k)
    thinking = _thinking_block(config)
    if thinking is not None:
        body["thinking"] = thinking
    put_if_set(body, "stop_sequences", normalize_stop(options.stop))
    if options.tools:
        body["tools"] = [
            {"name": tool.name, "description": tool.description, "input_schema": tool.schema_or_default()}
            for tool in options.tools
        ]
        if options.tool_mode is ToolMode.REQUIRED and forced is not None:
            body["tool_choice"] = {"type": "tool", "name": forced.name}
        else:
            body["tool_choice"] = {"type": "auto"}
    merge_extra(body, config.extra, deep_keys=("thinking",))
    return body


__all__ = ["build_messages_body", "convert_messages"]
