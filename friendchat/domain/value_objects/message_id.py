"""
MessageId Value Object - ObjectId wrapper for message identity.
"""

from dataclasses import dataclass

from friendchat.domain.value_objects.user_id import OBJECT_ID_PATTERN


@dataclass(frozen=True)
class MessageId:
    value: str  # message _id, presented as lowercase ObjectId hex string

    def __post_init__(self):
        if not self.value:
            raise ValueError("Message ID cannot be empty")
        if not OBJECT_ID_PATTERN.match(self.value):
            raise ValueError(f"Invalid message id: {self.value}")
        object.__setattr__(self, "value", self.value.lower())

    def __str__(self) -> str:
        return self.value
