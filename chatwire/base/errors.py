"""Unified error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``chatwire.base.errors_parts`` so callers use a single stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.classification import classify_exception, classify_status
from .errors_parts.transport_error import TransportError
from .errors_parts.protocol_decode_error import ProtocolDecodeError
from .errors_parts.tool_call_assembly_error import ToolCallAssemblyError
from .errors_parts.invalid_configuration import InvalidConfiguration
from .errors_parts.invalid_tool_constraint import InvalidToolConstraint

__all__ = [
    "ErrorCode",
    "ProviderError",
    "TransportError",
    "ProtocolDecodeError",
    "ToolCallAssemblyError",
    "InvalidConfiguration",
    "InvalidToolConstraint",
    "classify_exception",
    "classify_status",
]
