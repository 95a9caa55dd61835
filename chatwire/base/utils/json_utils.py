"""JSON helpers used by the tool-call assembler and the builders."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional


def try_parse_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Return ``text`` parsed as a JSON object, or ``None``.

    Arrays, primitives, empty strings and malformed JSON all yield ``None``;
    only a complete top-level object counts as valid tool-call arguments.
    """
    if not text:
        return None
    stripped = text.strip()
    if not stripped.startswith("{"):
        return None
    try:
        value = json.loads(stripped)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


__all__ = ["try_parse_json_object"]
