"""
User Entity - A chat user and their friend list.

Secret fields (password hash) are deliberately absent: the store never loads them.
"""

from dataclasses import dataclass, field
from typing import Optional
from friendchat.domain.value_objects.user_id import UserId
from friendchat.domain.value_objects.user_email import UserEmail


@dataclass
class User:
    id: UserId
    email: UserEmail
    full_name: Optional[str] = None
    profile_pic: Optional[str] = None
    friends: list[UserId] = field(default_factory=list)

    def is_friend_with(self, other: UserId) -> bool:
        return other in self.friends


@dataclass
class UserWithFriends:
    """A user with its friend list resolved to full User records."""

    user: User
    friends: list[User]
