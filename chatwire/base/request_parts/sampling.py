"""Sampling-field rules common to every family.

``temperature``: the model value when set; else the host option; else ``0``.
An explicit ``null`` in the model configuration omits the field entirely.
``top_p``: sent only when set to a non-null value.
"""

from __future__ import annotations

from typing import Any, Dict, List, MutableMapping, Optional, Sequence, Union

from ..models import ModelConfig, RequestOptions


def put_if_set(body: MutableMapping[str, Any], key: str, value: Any) -> None:
    if value is not None:
        body[key] = value


def apply_temperature(
    body: MutableMapping[str, Any], config: ModelConfig, options: RequestOptions, key: str = "temperature"
) -> None:
    if config.is_explicit_null("temperature"):
        return
    if config.temperature is not None:
        body[key] = config.temperature
    elif options.temperature is not None:
        body[key] = options.temperature
    else:
        body[key] = 0


def apply_top_p(body: MutableMapping[str, Any], config: ModelConfig, key: str = "top_p") -> None:
    put_if_set(body, key, config.top_p)


def normalize_stop(stop: Optional[Union[str, Sequence[str]]]) -> Optional[List[str]]:
    """Return stop sequences as a non-empty list, or ``None``."""
    if stop is None:
        return None
    if isinstance(stop, str):
        return [stop] if stop else None
    values = [s for s in stop if isinstance(s, str) and s]
    return values or None


def sampling_extras(config: ModelConfig) -> Dict[str, Any]:
    """OpenAI-style optional sampling knobs that are set on the model."""
    out: Dict[str, Any] = {}
    for key in ("top_k", "min_p", "frequency_penalty", "presence_penalty", "repetition_penalty"):
        put_if_set(out, key, getattr(config, key))
    return out


__all__ = ["put_if_set", "apply_temperature", "apply_top_p", "normalize_stop", "sampling_extras"]
