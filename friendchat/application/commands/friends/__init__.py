"""Friend commands."""

from .add_friend import AddFriendCommand, AddFriendHandler

__all__ = [
    "AddFriendCommand",
    "AddFriendHandler",
]
