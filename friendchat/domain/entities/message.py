"""
Message Entity - A direct message from one user to another.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional
from friendchat.domain.value_objects.attachment import Attachment
from friendchat.domain.value_objects.message_id import MessageId
from friendchat.domain.value_objects.user_id import UserId


@dataclass(frozen=True)
class Message:
    sender_id: UserId
    receiver_id: UserId
    text: Optional[str] = None
    file: Optional[Attachment] = None
    # Assigned by the message store on insert
    id: Optional[MessageId] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def compose(
        cls,
        sender_id: UserId,
        receiver_id: UserId,
        text: Optional[str] = None,
        file: Optional[Attachment] = None,
    ) -> Message:
        """Factory for a not-yet-persisted message (no id, no timestamps)."""
        return cls(sender_id=sender_id, receiver_id=receiver_id, text=text, file=file)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None and self.created_at is not None

    def persisted(self, id: MessageId, created_at: datetime) -> Message:
        """Return the stored copy of this message with identity and timestamps."""
        return replace(self, id=id, created_at=created_at, updated_at=created_at)

    def involves(self, user_a: UserId, user_b: UserId) -> bool:
        return (self.sender_id, self.receiver_id) in {(user_a, user_b), (user_b, user_a)}
