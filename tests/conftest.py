import os
import jwt
import time
import pytest
import sys

# Settings are read at import time: pin them before the app is imported
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("SERVICE_AUTH_SECRET", "test-secret-for-friendchat-suite-0123456789")
os.environ["RATELIMIT_ENABLED"] = "false"
os.environ["REDIS_CACHE_ENABLED"] = "false"
os.environ["ATTACHMENT_BACKEND"] = "local"
os.environ.setdefault("LOG_LEVEL", "WARNING")

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__) + '/..'))

from dishka import Provider, Scope, make_async_container, provide
from fastapi.testclient import TestClient

from friendchat.config.settings import Config
from friendchat.domain.ports.attachment_uploader import AttachmentUploader
from friendchat.domain.ports.presence import PresenceRegistry
from friendchat.domain.ports.repositories import MessageRepository, UserRepository
from friendchat.fastapi_app import create_fastapi_app
from friendchat.infrastructure.realtime import ConnectionRegistry
from friendchat.setup.ioc import AppProvider

from tests.fakes import (
    FakeUploader,
    InMemoryMessageRepository,
    InMemoryUserRepository,
    make_user,
)

ALICE_ID = "64b7f0c2a1b2c3d4e5f60001"
BOB_ID = "64b7f0c2a1b2c3d4e5f60002"
CAROL_ID = "64b7f0c2a1b2c3d4e5f60003"
MISSING_ID = "64b7f0c2a1b2c3d4e5f6ffff"


def _service_token(user_id=ALICE_ID, email="alice@example.com", exp_offset=300):
    now = int(time.time())
    return jwt.encode(
        {
            "sub": user_id,
            "email": email,
            "iat": now,
            "exp": now + exp_offset,
            "iss": Config.SERVICE_AUTH_ISSUER,
            "aud": Config.SERVICE_AUTH_AUDIENCE,
        },
        Config.SERVICE_AUTH_SECRET,
        algorithm="HS256",
    )


class FakeInfrastructureProvider(Provider):
    """Serves the in-memory fakes where production wires MongoDB and friends."""

    def __init__(self, users, messages, uploader, registry):
        super().__init__()
        self._users = users
        self._messages = messages
        self._uploader = uploader
        self._registry = registry

    @provide(scope=Scope.APP)
    def get_user_repository(self) -> UserRepository:
        return self._users

    @provide(scope=Scope.APP)
    def get_message_repository(self) -> MessageRepository:
        return self._messages

    @provide(scope=Scope.APP)
    def get_attachment_uploader(self) -> AttachmentUploader:
        return self._uploader

    @provide(scope=Scope.APP)
    def get_connection_registry(self) -> ConnectionRegistry:
        return self._registry

    @provide(scope=Scope.APP)
    def get_presence_registry(self) -> PresenceRegistry:
        return self._registry


@pytest.fixture()
def users():
    return InMemoryUserRepository(
        [
            make_user(ALICE_ID, "alice@example.com", "Alice"),
            make_user(BOB_ID, "bob@example.com", "Bob"),
            make_user(CAROL_ID, "carol.bobson@example.com", "Carol"),
        ]
    )


@pytest.fixture()
def messages():
    return InMemoryMessageRepository()


@pytest.fixture()
def uploader():
    return FakeUploader()


@pytest.fixture()
def registry():
    return ConnectionRegistry()


@pytest.fixture()
def app(users, messages, uploader, registry):
    """Create a FastAPI app wired to in-memory infrastructure for each test."""
    container = make_async_container(
        FakeInfrastructureProvider(users, messages, uploader, registry),
        AppProvider(),
    )
    return create_fastapi_app(container)


@pytest.fixture()
def client(app):
    """A test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture()
def auth_headers():
    """Authentication headers for Alice."""
    return {"Authorization": f"Bearer {_service_token()}"}


@pytest.fixture()
def bob_token():
    return _service_token(BOB_ID, "bob@example.com")
