"""Friend-related queries."""

from friendchat.application.queries.friends.list_friends import (
    ListFriendsQuery,
    ListFriendsHandler,
)
from friendchat.application.queries.friends.search_users import (
    SearchUsersQuery,
    SearchUsersHandler,
)

__all__ = [
    "ListFriendsQuery",
    "ListFriendsHandler",
    "SearchUsersQuery",
    "SearchUsersHandler",
]
