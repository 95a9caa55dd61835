"""Message-content and body-merge helpers."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, MutableMapping, Optional, Tuple

from ..models import BuildContext, CanonicalMessage, ImagePart, ModelConfig


def allowed_images(
    message: CanonicalMessage, config: ModelConfig, ctx: Optional[BuildContext] = None
) -> Tuple[ImagePart, ...]:
    """Images of ``message`` that may be sent to this model.

    Unsupported MIME types are skipped, and every image is skipped when the
    model is marked ``vision: false``; each skip is recorded on ``ctx``.
    """
    if not message.image_segments:
        return ()
    if not config.images_allowed:
        if ctx is not None:
            ctx.note(
                f"dropped {len(message.image_segments)} image(s): model {config.id} has vision disabled",
                role=message.role,
            )
        return ()
    kept = message.supported_images()
    if ctx is not None:
        for img in message.image_segments:
            if not img.is_supported:
                ctx.note(f"dropped image with unsupported type {img.mime_type}", role=message.role)
    return kept


def tool_names_by_call_id(messages: Iterable[CanonicalMessage]) -> Dict[str, str]:
    """Map every assistant tool-call id to its tool name."""
    names: Dict[str, str] = {}
    for msg in messages:
        for call in msg.tool_calls:
            names[call.id] = call.name
    return names


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged: Dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def merge_extra(
    body: MutableMapping[str, Any],
    extra: Mapping[str, Any],
    deep_keys: Iterable[str] = ("reasoning",),
) -> None:
    """Merge ``extra`` into ``body`` last.

    Keys shallow-overwrite computed fields, except ``deep_keys`` whose mapping
    values are deep-merged so extra options augment computed sub-fields.
    """
    deep = set(deep_keys)
    for key, value in extra.items():
        current = body.get(key)
        if key in deep and isinstance(current, Mapping) and isinstance(value, Mapping):
            body[key] = deep_merge(current, value)
        else:
            body[key] = value


__all__ = ["allowed_images", "tool_names_by_call_id", "deep_merge", "merge_extra"]
