"""chatwire: canonical chat conversations over streaming LLM wire protocols.

Public API
----------
* :class:`ChatDispatcher` runs one chat turn and yields canonical events.
* Canonical inputs: :class:`CanonicalMessage`, :class:`ModelConfig`,
  :class:`RequestOptions`, :class:`ToolSpec`.
* Canonical events: :class:`TextDelta`, :class:`ThinkingDelta`,
  :class:`ThinkingEnd`, :class:`ToolCall`, :class:`StreamEnd`.
* :func:`load_settings` reads the settings file and environment.
"""

from .version import __version__
from .base.cancellation import CancellationToken, CancelledError
from .base.errors import (
    ErrorCode,
    InvalidConfiguration,
    InvalidToolConstraint,
    ProtocolDecodeError,
    ProviderError,
    ToolCallAssemblyError,
    TransportError,
)
from .base.models import (
    BuildContext,
    CanonicalMessage,
    ImagePart,
    ModelConfig,
    ProtocolFamily,
    RequestOptions,
    ToolCallPart,
    ToolMode,
    ToolResultPart,
    ToolSpec,
)
from .base.streaming import StreamEnd, StreamEvent, TextDelta, ThinkingDelta, ThinkingEnd, ToolCall
from .config import ChatwireSettings, load_settings
from .service.dispatcher import ChatDispatcher

__all__ = [
    "__version__",
    "CancellationToken",
    "CancelledError",
    "ErrorCode",
    "InvalidConfiguration",
    "InvalidToolConstraint",
    "ProtocolDecodeError",
    "ProviderError",
    "ToolCallAssemblyError",
    "TransportError",
    "BuildContext",
    "CanonicalMessage",
    "ImagePart",
    "ModelConfig",
    "ProtocolFamily",
    "RequestOptions",
    "ToolCallPart",
    "ToolMode",
    "ToolResultPart",
    "ToolSpec",
    "StreamEnd",
    "StreamEvent",
    "TextDelta",
    "ThinkingDelta",
    "ThinkingEnd",
    "ToolCall",
    "ChatwireSettings",
    "load_settings",
    "ChatDispatcher",
]
