"""Small pure helpers shared across protocol families."""

from .json_utils import try_parse_json_object
from .ids import generate_call_id, generate_thinking_id

__all__ = ["try_parse_json_object", "generate_call_id", "generate_thinking_id"]
