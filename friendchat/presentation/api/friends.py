"""
Friends API Router - friend list, user search and add-friend.

Flow:
  HTTP Request → Router → Query/Command → Handler → UserRepository → MongoDB
                                      ↓
  HTTP Response ← Router ← UserDTO ←

Mounted under /api/messages next to the conversation routes, so it is
included BEFORE the messages router: "/users" and "/search" must not be
captured by "/{user_id}".
"""

from logging import getLogger
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from dishka.integrations.fastapi import FromDishka, inject
from pydantic import BaseModel, Field
from friendchat.application.commands.friends import (
    AddFriendCommand,
    AddFriendHandler,
)
from friendchat.application.queries.friends import (
    ListFriendsQuery,
    ListFriendsHandler,
    SearchUsersQuery,
    SearchUsersHandler,
)
from friendchat.application.dto.user import UserDTO
from friendchat.domain.exceptions import (
    ConflictError,
    DomainValidationError,
    EntityNotFoundError,
    UpstreamError,
)
from friendchat.presentation.dependencies.auth import AuthUser, get_current_user

logger = getLogger(__name__)


# ==================== REQUEST MODELS ====================


class AddFriendRequest(BaseModel):
    """Request body for adding a friend: {"userId": "<ObjectId hex>"}"""

    user_id: Optional[str] = Field(default=None, alias="userId")


# ==================== ROUTER ====================

router = APIRouter(prefix="/api/messages", tags=["friends"])


def _internal_error(action: str, e: Exception) -> HTTPException:
    logger.error(f"{action} failed: {type(e).__name__}: {e}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


# ==================== ENDPOINTS ====================


@router.get("/users", response_model=list[UserDTO], response_model_by_alias=True)
@inject
async def list_friends(
    handler: FromDishka[ListFriendsHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """Friends of the authenticated user (sidebar)."""
    try:
        friends = await handler.execute(ListFriendsQuery(user_id=current_user.id))
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except UpstreamError as e:
        raise _internal_error("List friends", e) from e
    return [UserDTO.from_entity(friend) for friend in friends]


@router.get("/search", response_model=list[UserDTO], response_model_by_alias=True)
@inject
async def search_users(
    handler: FromDishka[SearchUsersHandler],
    email: Optional[str] = None,
    current_user: AuthUser = Depends(get_current_user),
):
    """Case-insensitive email substring search, excluding the caller."""
    try:
        users = await handler.execute(
            SearchUsersQuery(requester_id=current_user.id, email_fragment=email)
        )
    except DomainValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except UpstreamError as e:
        raise _internal_error("Search users", e) from e
    return [UserDTO.from_entity(user) for user in users]


@router.post("/add-friend", response_model=UserDTO, response_model_by_alias=True)
@inject
async def add_friend(
    request: AddFriendRequest,
    handler: FromDishka[AddFriendHandler],
    current_user: AuthUser = Depends(get_current_user),
):
    """
    Link the caller and the target user as friends, both directions.

    Request: {"userId": "..."}
    Response: the target user
    """
    try:
        friend = await handler.execute(
            AddFriendCommand(requester_id=current_user.id, target_id=request.user_id)
        )
    except (DomainValidationError, ConflictError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except UpstreamError as e:
        raise _internal_error("Add friend", e) from e
    return UserDTO.from_entity(friend)
