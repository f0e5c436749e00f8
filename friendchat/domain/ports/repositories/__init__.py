"""
REPOSITORY PORTS - Data persistence interfaces

Each repository port:
- Is an abstract base class (ABC)
- Defines methods the domain needs
- Does NOT specify implementation (MongoDB, Redis, etc.)

Infrastructure layer provides implementations.
"""

from friendchat.domain.ports.repositories.message_repository import MessageRepository
from friendchat.domain.ports.repositories.user_repository import UserRepository

__all__ = [
    "MessageRepository",
    "UserRepository",
]
