"""
Dishka DI Container Setup.

- Registers all dependencies (clients, repositories, handlers)
- Maps abstract ports to concrete implementations
- Manages lifecycle (APP = singleton, REQUEST = per-request)

Providers:
- InfrastructureProvider: MongoDB, httpx, attachment uploader, presence
  registry and the repositories on top of them
- RedisCacheProvider:     only when REDIS_CACHE_ENABLED; wraps the message
  repository in CachedMessageRepository (later providers win)
- AppProvider:            command/query handlers, depending on ports only

Tests swap InfrastructureProvider for one that serves in-memory fakes.

Flow:
  Container → provides → MongoMessageRepository → as → MessageRepository
                                    ↓
                         injected into SendMessageHandler
"""

from typing import AsyncIterable

import httpx
from dishka import AsyncContainer, Provider, Scope, make_async_container, provide
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from redis.asyncio import Redis

from friendchat.application.commands.chat import SendMessageHandler
from friendchat.application.commands.friends import AddFriendHandler
from friendchat.application.queries.chat import GetConversationHandler
from friendchat.application.queries.friends import (
    ListFriendsHandler,
    SearchUsersHandler,
)
from friendchat.config.settings import Config
from friendchat.domain.ports.attachment_uploader import AttachmentUploader
from friendchat.domain.ports.presence import PresenceRegistry
from friendchat.domain.ports.repositories import MessageRepository, UserRepository
from friendchat.infrastructure.cache import (
    CachedMessageRepository,
    close_redis_client,
    create_redis_client,
)
from friendchat.infrastructure.persistence import (
    MongoMessageRepository,
    MongoUserRepository,
    create_mongo_client,
)
from friendchat.infrastructure.realtime import ConnectionRegistry
from friendchat.infrastructure.storage import (
    CloudinaryAttachmentUploader,
    LocalAttachmentStorage,
)


class InfrastructureProvider(Provider):
    """Concrete adapters for the domain ports."""

    # ==================== DATABASE ====================

    @provide(scope=Scope.APP)
    async def get_mongo_client(self) -> AsyncIterable[AsyncIOMotorClient]:
        """
        Provide the motor client (singleton, app-scoped).

        Generator provider: code after `yield` runs on container.close()
        """
        client = create_mongo_client()
        yield client
        client.close()

    @provide(scope=Scope.APP)
    def get_database(self, client: AsyncIOMotorClient) -> AsyncIOMotorDatabase:
        return client[Config.MONGO_DB]

    # ==================== HTTP CLIENT ====================

    @provide(scope=Scope.APP)
    async def get_http_client(self) -> AsyncIterable[httpx.AsyncClient]:
        async with httpx.AsyncClient(timeout=Config.UPLOAD_TIMEOUT_SECONDS) as client:
            yield client

    # ==================== ATTACHMENTS ====================

    @provide(scope=Scope.APP)
    def get_attachment_uploader(
        self, http_client: httpx.AsyncClient
    ) -> AttachmentUploader:
        """
        Provide the AttachmentUploader selected by ATTACHMENT_BACKEND.

        - "cloudinary": signed uploads to Cloudinary
        - anything else: local disk, served under UPLOAD_PUBLIC_URL
        """
        if Config.ATTACHMENT_BACKEND == "cloudinary":
            return CloudinaryAttachmentUploader(http_client)
        return LocalAttachmentStorage()

    # ==================== PRESENCE ====================

    @provide(scope=Scope.APP)
    def get_connection_registry(self) -> ConnectionRegistry:
        return ConnectionRegistry()

    @provide(scope=Scope.APP)
    def get_presence_registry(self, registry: ConnectionRegistry) -> PresenceRegistry:
        # Same instance: the WebSocket endpoint writes, the dispatcher reads
        return registry

    # ==================== REPOSITORIES ====================

    @provide(scope=Scope.REQUEST)
    def get_user_repository(self, db: AsyncIOMotorDatabase) -> UserRepository:
        """
        Provide UserRepository implementation.

        - Return type is ABSTRACT (UserRepository)
        - Implementation is CONCRETE (MongoUserRepository)
        - Scope.REQUEST = new instance per HTTP request
        """
        return MongoUserRepository(db)

    @provide(scope=Scope.REQUEST)
    def get_mongo_message_repository(
        self, db: AsyncIOMotorDatabase
    ) -> MongoMessageRepository:
        return MongoMessageRepository(db)

    @provide(scope=Scope.REQUEST)
    def get_message_repository(
        self, mongo_repo: MongoMessageRepository
    ) -> MessageRepository:
        return mongo_repo


class RedisCacheProvider(Provider):
    """Overrides MessageRepository with the Redis read-through cache."""

    @provide(scope=Scope.APP)
    async def get_redis(self) -> AsyncIterable[Redis]:
        client = await create_redis_client()
        yield client
        await close_redis_client(client)

    @provide(scope=Scope.REQUEST)
    def get_message_repository(
        self, mongo_repo: MongoMessageRepository, redis: Redis
    ) -> MessageRepository:
        return CachedMessageRepository(mongo_repo, redis)


class AppProvider(Provider):
    """
    Application dependency provider.

    Handlers only ask for ports; whichever infrastructure provider is
    registered alongside decides the implementation.
    """

    # ==================== HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_send_message_handler(
        self,
        message_repository: MessageRepository,
        presence: PresenceRegistry,
        uploader: AttachmentUploader,
    ) -> SendMessageHandler:
        return SendMessageHandler(
            msg_repo=message_repository,
            presence=presence,
            uploader=uploader,
        )

    @provide(scope=Scope.REQUEST)
    def get_conversation_handler(
        self, message_repository: MessageRepository
    ) -> GetConversationHandler:
        return GetConversationHandler(message_repository)

    @provide(scope=Scope.REQUEST)
    def get_add_friend_handler(
        self, user_repository: UserRepository
    ) -> AddFriendHandler:
        return AddFriendHandler(user_repository)

    @provide(scope=Scope.REQUEST)
    def get_list_friends_handler(
        self, user_repository: UserRepository
    ) -> ListFriendsHandler:
        return ListFriendsHandler(user_repository)

    @provide(scope=Scope.REQUEST)
    def get_search_users_handler(
        self, user_repository: UserRepository
    ) -> SearchUsersHandler:
        return SearchUsersHandler(user_repository)


def build_providers() -> list[Provider]:
    providers: list[Provider] = [InfrastructureProvider(), AppProvider()]
    if Config.REDIS_CACHE_ENABLED:
        providers.append(RedisCacheProvider())
    return providers


def create_container() -> AsyncContainer:
    """
    Create and configure the DI container.

    Call this ONCE at app startup (before setup_dishka).
    """
    return make_async_container(*build_providers())
