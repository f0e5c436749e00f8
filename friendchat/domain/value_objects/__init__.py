"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Has no identity (compared by value, not by ID)
- Is immutable (frozen dataclass)
- Validates itself on creation
- Pure Python (no framework dependencies)
"""

from friendchat.domain.value_objects.user_id import UserId
from friendchat.domain.value_objects.user_email import UserEmail
from friendchat.domain.value_objects.message_id import MessageId
from friendchat.domain.value_objects.attachment import Attachment, AttachmentPayload

__all__ = [
    "UserId",
    "UserEmail",
    "MessageId",
    "Attachment",
    "AttachmentPayload",
]
