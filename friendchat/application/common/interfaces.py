"""
Base interfaces for CQRS pattern.

Usage:
    @dataclass(frozen=True)
    class AddFriendCommand(Command[User]):
        requester_id: UserId
        target_id: Optional[str]

    class AddFriendHandler(CommandHandler[User]):
        def __init__(self, user_repo: UserRepository):
            self._user_repo = user_repo

        async def execute(self, command: AddFriendCommand) -> User:
            ...
"""
from abc import ABC, abstractmethod
from typing import TypeVar, Generic

T = TypeVar("T")
class Command(ABC, Generic[T]):
    """Base class for write operations"""
    pass

class CommandHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, command: Command[T]) -> T:
        """Execute the command and return a result of type T"""
        ...

class Query(ABC, Generic[T]):
    """Base class for read operations"""
    pass

class QueryHandler(ABC, Generic[T]):
    @abstractmethod
    async def execute(self, query: Query[T]) -> T:
        """Execute the query and return a result of type T"""
        ...
