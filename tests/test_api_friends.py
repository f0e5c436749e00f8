from friendchat.domain.value_objects.user_id import UserId

from tests.conftest import ALICE_ID, BOB_ID, CAROL_ID, MISSING_ID, _service_token


def test_requests_without_token_are_rejected(client):
    res = client.get("/api/messages/users")
    assert res.status_code in (401, 403)


def test_expired_token_is_rejected(client):
    token = _service_token(exp_offset=-10)
    res = client.get("/api/messages/users", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 401
    assert res.json() == {"error": "Token has expired"}


def test_list_friends_starts_empty(client, auth_headers):
    res = client.get("/api/messages/users", headers=auth_headers)
    assert res.status_code == 200
    assert res.json() == []


def test_add_friend_then_list_both_sides(client, auth_headers, bob_token, users):
    res = client.post(
        "/api/messages/add-friend", headers=auth_headers, json={"userId": BOB_ID}
    )
    assert res.status_code == 200
    body = res.json()
    assert body["id"] == BOB_ID
    assert body["email"] == "bob@example.com"
    assert body["fullName"] == "Bob"
    assert body["friends"] == [ALICE_ID]
    assert "password" not in body

    alice_friends = client.get("/api/messages/users", headers=auth_headers).json()
    assert [friend["id"] for friend in alice_friends] == [BOB_ID]

    bob_friends = client.get(
        "/api/messages/users", headers={"Authorization": f"Bearer {bob_token}"}
    ).json()
    assert [friend["id"] for friend in bob_friends] == [ALICE_ID]


def test_add_friend_twice_is_bad_request(client, auth_headers):
    client.post("/api/messages/add-friend", headers=auth_headers, json={"userId": BOB_ID})
    res = client.post(
        "/api/messages/add-friend", headers=auth_headers, json={"userId": BOB_ID}
    )
    assert res.status_code == 400
    assert res.json() == {"error": "User is already a friend"}


def test_add_friend_requires_user_id(client, auth_headers):
    res = client.post("/api/messages/add-friend", headers=auth_headers, json={})
    assert res.status_code == 400
    assert res.json() == {"error": "User ID is required"}


def test_add_friend_malformed_id(client, auth_headers):
    res = client.post(
        "/api/messages/add-friend", headers=auth_headers, json={"userId": "12345"}
    )
    assert res.status_code == 400


def test_add_self_is_bad_request(client, auth_headers, users):
    res = client.post(
        "/api/messages/add-friend", headers=auth_headers, json={"userId": ALICE_ID}
    )
    assert res.status_code == 400
    assert users.append_calls == []


def test_add_unknown_user_is_not_found(client, auth_headers, users):
    res = client.post(
        "/api/messages/add-friend", headers=auth_headers, json={"userId": MISSING_ID}
    )
    assert res.status_code == 404
    assert res.json() == {"error": "User not found"}
    assert users.users[UserId(ALICE_ID)].friends == []


def test_add_friend_store_failure_is_generic_500(client, auth_headers, users):
    users.fail_append_on_call = 2
    res = client.post(
        "/api/messages/add-friend", headers=auth_headers, json={"userId": BOB_ID}
    )
    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error"}


def test_search_excludes_caller(client, users):
    token = _service_token(CAROL_ID, "carol.bobson@example.com")
    res = client.get(
        "/api/messages/search",
        params={"email": "BOB"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 200
    assert [user["id"] for user in res.json()] == [BOB_ID]


def test_search_finds_substring_matches(client, auth_headers):
    res = client.get("/api/messages/search", params={"email": "bob"}, headers=auth_headers)
    assert res.status_code == 200
    assert {user["id"] for user in res.json()} == {BOB_ID, CAROL_ID}


def test_search_without_email_is_bad_request(client, auth_headers):
    res = client.get("/api/messages/search", headers=auth_headers)
    assert res.status_code == 400
    assert res.json() == {"error": "Email is required for search"}

    res = client.get("/api/messages/search", params={"email": ""}, headers=auth_headers)
    assert res.status_code == 400
