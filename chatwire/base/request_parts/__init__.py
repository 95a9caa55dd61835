"""Helpers shared by the per-family request builders."""

from .sampling import apply_temperature, apply_top_p, normalize_stop, put_if_set, sampling_extras
from .tools import required_tool, validate_tool_mode
from .content import allowed_images, deep_merge, merge_extra, tool_names_by_call_id

__all__ = [
    "apply_temperature",
    "apply_top_p",
    "normalize_stop",
    "put_if_set",
    "sampling_extras",
    "required_tool",
    "validate_tool_mode",
    "allowed_images",
    "deep_merge",
    "merge_extra",
    "tool_names_by_call_id",
]
