"""
ENTITIES - Business objects with identity

Each entity:
- Has a unique identifier
- Has behavior (methods)
- Pure Python dataclasses (no ORM, no Pydantic)
"""

from friendchat.domain.entities.message import Message
from friendchat.domain.entities.user import User, UserWithFriends

__all__ = [
    "Message",
    "User",
    "UserWithFriends",
]
