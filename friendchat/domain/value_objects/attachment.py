"""
Attachment value objects.

- AttachmentPayload: raw file sent by the client (base64 or data URI)
- Attachment: descriptor returned by the upload service and embedded in a Message
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AttachmentPayload:
    data: str  # base64 string or "data:<mime>;base64,<...>" URI
    type: Optional[str] = None  # image, video, audio, document, ...
    name: Optional[str] = None
    size: Optional[int] = None

    def __post_init__(self):
        if not self.data:
            raise ValueError("Attachment data cannot be empty")

    @property
    def is_data_uri(self) -> bool:
        return self.data.startswith("data:")

    @property
    def mime_type(self) -> Optional[str]:
        """MIME type declared in a data URI, if any."""
        if not self.is_data_uri:
            return None
        header = self.data[5:].split(",", 1)[0]
        return header.split(";", 1)[0] or None

    def decode(self) -> bytes:
        """Return the raw bytes, accepting both plain base64 and data URIs."""
        encoded = self.data.split(",", 1)[1] if self.is_data_uri else self.data
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Attachment data is not valid base64: {e}") from e


@dataclass(frozen=True)
class Attachment:
    url: str
    type: Optional[str] = None
    name: Optional[str] = None
    size: Optional[int] = None

    def __post_init__(self):
        if not self.url:
            raise ValueError("Attachment url cannot be empty")
