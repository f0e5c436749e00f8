"""Message DTOs for API responses and live-push payloads."""

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from friendchat.domain.entities.message import Message


class AttachmentDTO(BaseModel):
    url: str
    type: Optional[str] = None
    name: Optional[str] = None
    size: Optional[int] = None


class MessageDTO(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    sender_id: str
    receiver_id: str
    text: Optional[str] = None
    file: Optional[AttachmentDTO] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, message: Message) -> "MessageDTO":
        if not message.is_persisted:
            raise ValueError("Only persisted messages can be serialized")
        file = None
        if message.file:
            file = AttachmentDTO(
                url=message.file.url,
                type=message.file.type,
                name=message.file.name,
                size=message.file.size,
            )
        return cls(
            id=message.id.value,
            sender_id=message.sender_id.value,
            receiver_id=message.receiver_id.value,
            text=message.text,
            file=file,
            created_at=message.created_at,
            updated_at=message.updated_at,
        )

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict in the same shape as the REST response."""
        return self.model_dump(mode="json", by_alias=True)
