"""
AddFriend Command - Link two users as friends (both directions).

Handler:
1. Validate target id (present, well-formed, not the requester)
2. Load target → EntityNotFoundError if absent
3. Load requester → ConflictError if target already in requester.friends
4. Append requester → target, then target → requester
5. Return the target user as stored after the writes

The two appends are independent writes (no cross-document transaction). If the
second one fails the edge is left one-sided: this is logged with both ids and
surfaced as PersistenceError. The other user adding back repairs it: their
list lacks the edge, and the append that already happened is a no-op the
second time.

Maps from: POST /add-friend
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional
from friendchat.application.common.interfaces import Command, CommandHandler
from friendchat.domain.entities.user import User
from friendchat.domain.exceptions import (
    ConflictError,
    DomainValidationError,
    EntityNotFoundError,
    PersistenceError,
)
from friendchat.domain.ports.repositories import UserRepository
from friendchat.domain.value_objects.user_id import UserId
from friendchat.observability import (
    MetricsErrorType,
    increment_error,
    increment_friend_links,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AddFriendCommand(Command[User]):
    requester_id: UserId
    target_id: Optional[str]


class AddFriendHandler(CommandHandler[User]):
    _user_repository: UserRepository

    def __init__(self, user_repository: UserRepository):
        self._user_repository = user_repository

    async def execute(self, command: AddFriendCommand) -> User:
        if not command.target_id:
            raise DomainValidationError("User ID is required")
        try:
            target_id = UserId(command.target_id)
        except ValueError as e:
            raise DomainValidationError(str(e)) from e
        if target_id == command.requester_id:
            raise DomainValidationError("You cannot add yourself as a friend")

        target = await self._user_repository.get_by_id(target_id)
        if not target:
            raise EntityNotFoundError("User not found")

        requester = await self._user_repository.get_by_id(command.requester_id)
        if not requester:
            raise EntityNotFoundError("User not found")
        if requester.is_friend_with(target_id):
            raise ConflictError("User is already a friend")

        await asyncio.shield(
            self._user_repository.append_friend(command.requester_id, target_id)
        )
        try:
            await asyncio.shield(
                self._user_repository.append_friend(target_id, command.requester_id)
            )
        except Exception as e:
            increment_error(MetricsErrorType.FRIEND_LINK_ASYMMETRIC)
            logger.error(
                f"Friend link left one-sided: {command.requester_id} lists {target_id} "
                f"but {target_id} does not list {command.requester_id}: {e}"
            )
            if isinstance(e, PersistenceError):
                raise
            raise PersistenceError(f"Failed to complete friend link: {e}") from e

        increment_friend_links()
        logger.info(f"Users {command.requester_id} and {target_id} are now friends")

        updated = await self._user_repository.get_by_id(target_id)
        return updated or target
