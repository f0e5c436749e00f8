import pytest

from friendchat.application.commands.friends import AddFriendCommand, AddFriendHandler
from friendchat.domain.exceptions import (
    ConflictError,
    DomainValidationError,
    EntityNotFoundError,
    PersistenceError,
)
from friendchat.domain.value_objects.user_id import UserId

from tests.conftest import ALICE_ID, BOB_ID, MISSING_ID
from tests.fakes import InMemoryUserRepository, make_user

ALICE = UserId(ALICE_ID)
BOB = UserId(BOB_ID)


@pytest.fixture()
def repo():
    return InMemoryUserRepository(
        [
            make_user(ALICE_ID, "alice@example.com"),
            make_user(BOB_ID, "bob@example.com"),
        ]
    )


@pytest.mark.asyncio
async def test_add_friend_links_both_directions(repo):
    handler = AddFriendHandler(repo)

    friend = await handler.execute(AddFriendCommand(requester_id=ALICE, target_id=BOB_ID))

    assert friend.id == BOB
    assert repo.users[ALICE].friends == [BOB]
    assert repo.users[BOB].friends == [ALICE]
    assert repo.append_calls == [(ALICE, BOB), (BOB, ALICE)]


@pytest.mark.asyncio
async def test_repeat_add_is_a_conflict(repo):
    handler = AddFriendHandler(repo)
    await handler.execute(AddFriendCommand(requester_id=ALICE, target_id=BOB_ID))

    with pytest.raises(ConflictError, match="User is already a friend"):
        await handler.execute(AddFriendCommand(requester_id=ALICE, target_id=BOB_ID))

    assert repo.users[ALICE].friends == [BOB]
    assert len(repo.append_calls) == 2


@pytest.mark.asyncio
async def test_missing_target_mutates_nothing(repo):
    handler = AddFriendHandler(repo)

    with pytest.raises(EntityNotFoundError, match="User not found"):
        await handler.execute(AddFriendCommand(requester_id=ALICE, target_id=MISSING_ID))

    assert repo.append_calls == []
    assert repo.users[ALICE].friends == []


@pytest.mark.asyncio
@pytest.mark.parametrize("target_id", [None, ""])
async def test_target_id_is_required(repo, target_id):
    with pytest.raises(DomainValidationError, match="User ID is required"):
        await AddFriendHandler(repo).execute(
            AddFriendCommand(requester_id=ALICE, target_id=target_id)
        )


@pytest.mark.asyncio
async def test_malformed_target_id(repo):
    with pytest.raises(DomainValidationError):
        await AddFriendHandler(repo).execute(
            AddFriendCommand(requester_id=ALICE, target_id="not-an-object-id")
        )
    assert repo.append_calls == []


@pytest.mark.asyncio
async def test_cannot_add_self(repo):
    with pytest.raises(DomainValidationError):
        await AddFriendHandler(repo).execute(
            AddFriendCommand(requester_id=ALICE, target_id=ALICE_ID)
        )
    assert repo.append_calls == []


@pytest.mark.asyncio
async def test_second_write_failure_leaves_one_sided_link(repo):
    repo.fail_append_on_call = 2
    handler = AddFriendHandler(repo)

    with pytest.raises(PersistenceError):
        await handler.execute(AddFriendCommand(requester_id=ALICE, target_id=BOB_ID))

    assert repo.users[ALICE].friends == [BOB]
    assert repo.users[BOB].friends == []


@pytest.mark.asyncio
async def test_first_write_failure_links_nobody(repo):
    repo.fail_append_on_call = 1
    handler = AddFriendHandler(repo)

    with pytest.raises(PersistenceError):
        await handler.execute(AddFriendCommand(requester_id=ALICE, target_id=BOB_ID))

    assert repo.users[ALICE].friends == []
    assert repo.users[BOB].friends == []


@pytest.mark.asyncio
async def test_one_sided_link_is_repaired_by_the_other_user(repo):
    repo.fail_append_on_call = 2
    handler = AddFriendHandler(repo)
    with pytest.raises(PersistenceError):
        await handler.execute(AddFriendCommand(requester_id=ALICE, target_id=BOB_ID))

    repo.fail_append_on_call = None
    with pytest.raises(ConflictError):
        await handler.execute(AddFriendCommand(requester_id=ALICE, target_id=BOB_ID))

    friend = await handler.execute(AddFriendCommand(requester_id=BOB, target_id=ALICE_ID))

    assert friend.friends == [BOB]
    assert repo.users[ALICE].friends == [BOB]
    assert repo.users[BOB].friends == [ALICE]


@pytest.mark.asyncio
async def test_uppercase_own_id_is_rejected_as_self(repo):
    handler = AddFriendHandler(repo)

    with pytest.raises(DomainValidationError):
        await handler.execute(
            AddFriendCommand(requester_id=ALICE, target_id=ALICE_ID.upper())
        )
    assert repo.append_calls == []


@pytest.mark.asyncio
async def test_uppercase_id_of_existing_friend_is_a_conflict(repo):
    handler = AddFriendHandler(repo)
    await handler.execute(AddFriendCommand(requester_id=ALICE, target_id=BOB_ID))

    with pytest.raises(ConflictError):
        await handler.execute(
            AddFriendCommand(requester_id=ALICE, target_id=BOB_ID.upper())
        )
    assert repo.users[ALICE].friends == [BOB]
