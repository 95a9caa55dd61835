"""
Image segment of a canonical message.

Holds raw bytes plus MIME type and offers the encodings the families need
(bare base64 for message-block and local-native bodies, data URLs for the
OpenAI-style families).
"""
from __future__ import annotations

import base64
from dataclasses import dataclass

from ..constants import SUPPORTED_IMAGE_MIME_TYPES


@dataclass(frozen=True)
class ImagePart:
    """An inline image attached to a user turn."""

    mime_type: str
    data: bytes

    @property
    def is_supported(self) -> bool:
        """True for the JPEG/PNG/GIF/WEBP types every family accepts."""
        return self.mime_type.lower() in SUPPORTED_IMAGE_MIME_TYPES

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"


__all__ = ["ImagePart"]
