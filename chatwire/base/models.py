"""
Provider-agnostic domain models public surface.

Re-exports the one-class-per-file implementations under
``chatwire.base.models_parts``.
"""

from .models_parts.image_part import ImagePart
from .models_parts.tool_call_part import ToolCallPart
from .models_parts.tool_result_part import ToolResultPart
from .models_parts.canonical_message import CanonicalMessage, Role
from .models_parts.protocol_family import ProtocolFamily
from .models_parts.reasoning_config import ReasoningConfig
from .models_parts.model_config import ModelConfig
from .models_parts.tool_spec import ToolMode, ToolSpec
from .models_parts.request_options import RequestOptions
from .models_parts.build_context import BuildContext

__all__ = [
    "ImagePart",
    "ToolCallPart",
    "ToolResultPart",
    "CanonicalMessage",
    "Role",
    "ProtocolFamily",
    "ReasoningConfig",
    "ModelConfig",
    "ToolMode",
    "ToolSpec",
    "RequestOptions",
    "BuildContext",
]
