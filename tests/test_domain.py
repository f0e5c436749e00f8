from datetime import datetime, timezone

import pytest

from friendchat.application.dto.message import MessageDTO
from friendchat.domain.entities.message import Message
from friendchat.domain.value_objects.attachment import AttachmentPayload
from friendchat.domain.value_objects.message_id import MessageId
from friendchat.domain.value_objects.user_email import UserEmail
from friendchat.domain.value_objects.user_id import UserId

from tests.conftest import ALICE_ID, BOB_ID, CAROL_ID

ALICE = UserId(ALICE_ID)
BOB = UserId(BOB_ID)


@pytest.mark.parametrize("raw", ["", "123", "zzzzzzzzzzzzzzzzzzzzzzzz", ALICE_ID + "0"])
def test_user_id_rejects_non_object_ids(raw):
    with pytest.raises(ValueError):
        UserId(raw)


def test_object_ids_are_compared_case_insensitively():
    assert UserId(ALICE_ID.upper()) == ALICE
    assert UserId(ALICE_ID.upper()).value == ALICE_ID
    assert MessageId(CAROL_ID.upper()) == MessageId(CAROL_ID)


def test_user_email_is_normalized():
    assert UserEmail("  Alice@Example.COM ").value == "alice@example.com"


def test_composed_message_is_not_persisted():
    draft = Message.compose(ALICE, BOB, text="hi")
    assert not draft.is_persisted
    with pytest.raises(ValueError):
        MessageDTO.from_entity(draft)


def test_persisted_copy_gets_identity_and_timestamps():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    stored = Message.compose(ALICE, BOB, text="hi").persisted(MessageId(CAROL_ID), now)

    assert stored.is_persisted
    assert stored.created_at == stored.updated_at == now
    assert stored.involves(BOB, ALICE)
    assert not stored.involves(ALICE, UserId(CAROL_ID))

    wire = MessageDTO.from_entity(stored).to_wire()
    assert wire == {
        "id": CAROL_ID,
        "senderId": ALICE_ID,
        "receiverId": BOB_ID,
        "text": "hi",
        "file": None,
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-01T00:00:00Z",
    }


def test_attachment_payload_decodes_data_uri_and_plain_base64():
    assert AttachmentPayload(data="data:image/png;base64,aGk=").decode() == b"hi"
    assert AttachmentPayload(data="data:image/png;base64,aGk=").mime_type == "image/png"
    assert AttachmentPayload(data="aGk=").decode() == b"hi"
    assert AttachmentPayload(data="aGk=").mime_type is None
