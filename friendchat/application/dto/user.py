"""User DTOs for API responses (camelCase on the wire, no secret fields)."""

from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from friendchat.domain.entities.user import User


class UserDTO(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    email: str
    full_name: Optional[str] = None
    profile_pic: Optional[str] = None
    friends: list[str] = []

    @classmethod
    def from_entity(cls, user: User) -> "UserDTO":
        return cls(
            id=user.id.value,
            email=user.email.value,
            full_name=user.full_name,
            profile_pic=user.profile_pic,
            friends=[friend.value for friend in user.friends],
        )
