import time

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from friendchat.domain.value_objects.user_id import UserId

from tests.conftest import ALICE_ID, BOB_ID


def _wait_until_online(registry, user_id, timeout=2.0):
    deadline = time.monotonic() + timeout
    while registry.lookup(UserId(user_id)) is None:
        assert time.monotonic() < deadline, f"{user_id} never came online"
        time.sleep(0.01)


def _wait_until_offline(registry, user_id, timeout=2.0):
    deadline = time.monotonic() + timeout
    while registry.lookup(UserId(user_id)) is not None:
        assert time.monotonic() < deadline, f"{user_id} never went offline"
        time.sleep(0.01)


def test_send_to_offline_user_returns_persisted_message(client, auth_headers, messages):
    res = client.post(
        f"/api/messages/send/{BOB_ID}", headers=auth_headers, json={"text": "hi"}
    )
    assert res.status_code == 201
    body = res.json()
    assert body["senderId"] == ALICE_ID
    assert body["receiverId"] == BOB_ID
    assert body["text"] == "hi"
    assert body["file"] is None
    assert body["id"]
    assert body["createdAt"]

    history = client.get(f"/api/messages/{BOB_ID}", headers=auth_headers)
    assert history.status_code == 200
    assert history.json() == [body]


def test_conversation_is_visible_to_both_sides(client, auth_headers, bob_token):
    client.post(f"/api/messages/send/{BOB_ID}", headers=auth_headers, json={"text": "one"})
    client.post(
        f"/api/messages/send/{ALICE_ID}",
        headers={"Authorization": f"Bearer {bob_token}"},
        json={"text": "two"},
    )

    res = client.get(
        f"/api/messages/{ALICE_ID}", headers={"Authorization": f"Bearer {bob_token}"}
    )
    assert [m["text"] for m in res.json()] == ["one", "two"]


def test_send_with_attachment(client, auth_headers, uploader):
    res = client.post(
        f"/api/messages/send/{BOB_ID}",
        headers=auth_headers,
        json={
            "file": {
                "data": "data:text/plain;base64,aGVsbG8=",
                "type": "document",
                "name": "hello.txt",
                "size": 5,
            }
        },
    )
    assert res.status_code == 201
    assert res.json()["file"] == {
        "url": "https://files.example.com/hello.txt",
        "type": "document",
        "name": "hello.txt",
        "size": 5,
    }
    assert len(uploader.uploads) == 1


def test_upload_failure_is_500_and_stores_nothing(client, auth_headers, uploader, messages):
    uploader.fail = True
    res = client.post(
        f"/api/messages/send/{BOB_ID}",
        headers=auth_headers,
        json={"text": "see file", "file": {"data": "aGVsbG8=", "name": "a.txt"}},
    )
    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error"}
    assert messages.messages == []

    history = client.get(f"/api/messages/{BOB_ID}", headers=auth_headers)
    assert history.json() == []


def test_invalid_attachment_is_bad_request(client, auth_headers, messages):
    res = client.post(
        f"/api/messages/send/{BOB_ID}",
        headers=auth_headers,
        json={"text": "see file", "file": {"data": "not base64!!", "name": "a.txt"}},
    )
    assert res.status_code == 400
    assert messages.messages == []


def test_store_failure_is_500(client, auth_headers, messages):
    messages.fail_insert = True
    res = client.post(
        f"/api/messages/send/{BOB_ID}", headers=auth_headers, json={"text": "hi"}
    )
    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error"}


def test_empty_message_is_bad_request(client, auth_headers, messages):
    res = client.post(f"/api/messages/send/{BOB_ID}", headers=auth_headers, json={})
    assert res.status_code == 400
    assert messages.messages == []


def test_malformed_receiver_id_is_bad_request(client, auth_headers):
    res = client.post(
        "/api/messages/send/not-an-id", headers=auth_headers, json={"text": "hi"}
    )
    assert res.status_code == 400

    res = client.get("/api/messages/not-an-id", headers=auth_headers)
    assert res.status_code == 400


def test_online_receiver_gets_live_push(app, auth_headers, bob_token, registry):
    with TestClient(app) as client:
        with client.websocket_connect(f"/ws?token={bob_token}") as ws:
            _wait_until_online(registry, BOB_ID)

            res = client.post(
                f"/api/messages/send/{BOB_ID}", headers=auth_headers, json={"text": "live"}
            )
            assert res.status_code == 201

            frame = ws.receive_json()
            assert frame["event"] == "newMessage"
            assert frame["data"] == res.json()

        _wait_until_offline(registry, BOB_ID)


def test_websocket_rejects_bad_token(client):
    with client.websocket_connect("/ws?token=garbage") as ws:
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_json()
    assert exc_info.value.code == 4001


def test_websocket_rejects_missing_token(client):
    with client.websocket_connect("/ws") as ws:
        with pytest.raises(WebSocketDisconnect) as exc_info:
            ws.receive_json()
    assert exc_info.value.code == 4001


def test_health_and_metrics(client):
    assert client.get("/health").json() == {"status": "healthy"}

    res = client.get("/metrics")
    assert res.status_code == 200
    assert "chat_messages_sent_total" in res.text
