"""Messages API tests — send, view, mark read, and who may do which."""

import pytest

from conftest import bearer, register_user


async def _send(client, token, to_username, body="hi"):
    return await client.post(
        "/api/v1/messages",
        json={"to_username": to_username, "body": body},
        headers=bearer(token),
    )


@pytest.mark.asyncio
async def test_send_message(client):
    alice = await register_user(client, "alice")
    await register_user(client, "bob")

    r = await _send(client, alice, "bob", "hi")
    assert r.status_code == 201
    message = r.json()["message"]
    assert message["from_username"] == "alice"
    assert message["to_username"] == "bob"
    assert message["body"] == "hi"
    assert "sent_at" in message
    assert isinstance(message["id"], int)


@pytest.mark.asyncio
async def test_send_to_unknown_user(client):
    alice = await register_user(client, "alice")

    r = await _send(client, alice, "nobody")
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_send_empty_body(client):
    alice = await register_user(client, "alice")
    await register_user(client, "bob")

    r = await _send(client, alice, "bob", "")
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_get_message_as_participants(client):
    alice = await register_user(client, "alice")
    bob = await register_user(client, "bob")
    message_id = (await _send(client, alice, "bob")).json()["message"]["id"]

    for token in (alice, bob):
        r = await client.get(f"/api/v1/messages/{message_id}", headers=bearer(token))
        assert r.status_code == 200
        message = r.json()["message"]
        assert message["from_user"]["username"] == "alice"
        assert message["to_user"]["username"] == "bob"
        assert message["read_at"] is None


@pytest.mark.asyncio
async def test_get_message_as_outsider_forbidden(client):
    alice = await register_user(client, "alice")
    await register_user(client, "bob")
    carol = await register_user(client, "carol")
    message_id = (await _send(client, alice, "bob")).json()["message"]["id"]

    r = await client.get(f"/api/v1/messages/{message_id}", headers=bearer(carol))
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_get_unknown_message(client):
    alice = await register_user(client, "alice")

    r = await client.get("/api/v1/messages/999", headers=bearer(alice))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_sender_cannot_mark_read(client):
    alice = await register_user(client, "alice")
    await register_user(client, "bob")
    message_id = (await _send(client, alice, "bob")).json()["message"]["id"]

    r = await client.post(f"/api/v1/messages/{message_id}/read", headers=bearer(alice))
    assert r.status_code == 403

    r = await client.get(f"/api/v1/messages/{message_id}", headers=bearer(alice))
    assert r.json()["message"]["read_at"] is None


@pytest.mark.asyncio
async def test_outsider_cannot_mark_read(client):
    alice = await register_user(client, "alice")
    await register_user(client, "bob")
    carol = await register_user(client, "carol")
    message_id = (await _send(client, alice, "bob")).json()["message"]["id"]

    r = await client.post(f"/api/v1/messages/{message_id}/read", headers=bearer(carol))
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_mark_unknown_message_read(client):
    alice = await register_user(client, "alice")

    r = await client.post("/api/v1/messages/999/read", headers=bearer(alice))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_alice_bob_flow(client):
    """Full flow: register, send, recipient reads, sender is refused, read_at sticks."""
    alice = await register_user(client, "alice", password="pw1")
    bob = await register_user(client, "bob", password="pw2")

    message_id = (await _send(client, alice, "bob", "hi")).json()["message"]["id"]

    r = await client.get(f"/api/v1/messages/{message_id}", headers=bearer(bob))
    assert r.status_code == 200
    assert r.json()["message"]["body"] == "hi"

    r = await client.post(f"/api/v1/messages/{message_id}/read", headers=bearer(alice))
    assert r.status_code == 403

    r = await client.post(f"/api/v1/messages/{message_id}/read", headers=bearer(bob))
    assert r.status_code == 200
    receipt = r.json()["message"]
    assert receipt["id"] == message_id
    assert receipt["read_at"] is not None

    for _ in range(2):
        r = await client.post(f"/api/v1/messages/{message_id}/read", headers=bearer(bob))
        assert r.status_code == 200
        assert r.json()["message"]["read_at"] == receipt["read_at"]

    r = await client.get(f"/api/v1/messages/{message_id}", headers=bearer(alice))
    assert r.json()["message"]["read_at"] == receipt["read_at"]


@pytest.mark.asyncio
async def test_send_null_body(client):
    alice = await register_user(client, "alice")
    await register_user(client, "bob")

    r = await client.post(
        "/api/v1/messages",
        json={"to_username": "bob", "body": None},
        headers=bearer(alice),
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_send_null_recipient(client):
    alice = await register_user(client, "alice")

    r = await client.post(
        "/api/v1/messages",
        json={"to_username": None, "body": "hi"},
        headers=bearer(alice),
    )
    assert r.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("message_id", ["0", "2147483648", "99999999999999999999"])
async def test_out_of_range_message_id(client, message_id):
    alice = await register_user(client, "alice")

    r = await client.get(f"/api/v1/messages/{message_id}", headers=bearer(alice))
    assert r.status_code == 404

    r = await client.post(f"/api/v1/messages/{message_id}/read", headers=bearer(alice))
    assert r.status_code == 404
