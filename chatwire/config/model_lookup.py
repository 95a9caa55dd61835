"""Model id parsing and configuration lookup.

Hosts address a configured model as ``<id>`` or ``<id>::<config_id>`` when
several entries share the same base id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..base.constants import MODEL_ID_SEPARATOR
from ..base.models import ModelConfig


@dataclass(frozen=True)
class ParsedModelId:
    base_id: str
    config_id: Optional[str] = None


def parse_model_id(model_id: str) -> ParsedModelId:
    """Split on the first ``::``; the config id keeps any further separators."""
    base, sep, rest = model_id.partition(MODEL_ID_SEPARATOR)
    if not sep:
        return ParsedModelId(base_id=model_id)
    return ParsedModelId(base_id=base, config_id=rest)


def find_model_config(models: Iterable[ModelConfig], model_id: str) -> Optional[ModelConfig]:
    """Exact ``id`` + ``config_id`` match first, then the first ``id`` match."""
    parsed = parse_model_id(model_id)
    candidates = [m for m in models if m.id == parsed.base_id]
    for model in candidates:
        if (model.config_id or None) == parsed.config_id:
            return model
    return candidates[0] if candidates else None


__all__ = ["ParsedModelId", "parse_model_id", "find_model_config"]
