"""Tests for the notification hub and its WebSocket endpoint."""

import pytest
from starlette.websockets import WebSocketDisconnect

from conftest import FailingWebSocket, FakeWebSocket, auth_headers
from memoria.core.security import create_access_token
from memoria.modules.realtime.hub import RECEIVE_NOTIFICATION, USER_STATUS_CHANGED, NotificationHub


@pytest.mark.asyncio
async def test_publish_reaches_every_connection_of_a_user():
    hub = NotificationHub()
    phone, laptop = FakeWebSocket(), FakeWebSocket()
    await hub.connect(phone, "u1")
    await hub.connect(laptop, "u1")

    delivered = await hub.publish("u1", RECEIVE_NOTIFICATION, {"id": "n1"})

    assert delivered == 2
    assert phone.accepted and laptop.accepted
    assert phone.sent == laptop.sent == [{"event": RECEIVE_NOTIFICATION, "data": {"id": "n1"}}]


@pytest.mark.asyncio
async def test_publish_to_offline_user_is_a_noop():
    hub = NotificationHub()

    assert await hub.publish("nobody", RECEIVE_NOTIFICATION, {"id": "n1"}) == 0
    assert not hub.is_online("nobody")


@pytest.mark.asyncio
async def test_failed_send_drops_only_that_connection():
    hub = NotificationHub()
    healthy, broken = FakeWebSocket(), FailingWebSocket()
    await hub.connect(healthy, "u1")
    await hub.connect(broken, "u1")

    delivered = await hub.publish("u1", RECEIVE_NOTIFICATION, {"id": "n1"})

    assert delivered == 1
    assert hub.active_connections["u1"] == {healthy}


@pytest.mark.asyncio
async def test_disconnect_last_connection_goes_offline():
    hub = NotificationHub()
    socket = FakeWebSocket()
    await hub.connect(socket, "u1")
    assert hub.is_online("u1")

    hub.disconnect(socket, "u1")
    hub.disconnect(socket, "u1")

    assert not hub.is_online("u1")
    assert "u1" not in hub.active_connections


@pytest.mark.asyncio
async def test_broadcast_status_only_reaches_online_friends():
    hub = NotificationHub()
    online_friend = FakeWebSocket()
    await hub.connect(online_friend, "friend-1")

    await hub.broadcast_status("u1", True, ["friend-1", "friend-2"])

    assert online_friend.sent == [
        {"event": USER_STATUS_CHANGED, "data": {"user_id": "u1", "online": True}}
    ]


def test_socket_rejects_missing_or_bad_token(client):
    with pytest.raises(WebSocketDisconnect) as missing:
        with client.websocket_connect("/hubs/notifications"):
            pass
    assert missing.value.code == 1008

    with pytest.raises(WebSocketDisconnect) as bad:
        with client.websocket_connect("/hubs/notifications?access_token=not-a-jwt"):
            pass
    assert bad.value.code == 1008


def test_socket_connects_and_answers_ping(client, make_user, hub):
    alice = make_user("alice")
    token = create_access_token(alice.id)

    with client.websocket_connect(f"/hubs/notifications?access_token={token}") as websocket:
        websocket.send_text("ping")
        assert websocket.receive_json() == {"event": "pong"}

        assert hub.is_online(alice.id)
        assert client.get(f"/users/{alice.id}/online", headers=auth_headers(alice)).json() == {
            "user_id": alice.id,
            "online": True,
        }


def test_socket_announces_presence_to_online_friends(client, make_user, hub):
    alice = make_user("alice")
    bob = make_user("bob")
    friendship_id = client.post(
        "/api/friendships", json={"user_id": alice.id, "friend_id": bob.id}, headers=auth_headers(alice)
    ).json()["id"]
    client.post(f"/api/friendships/{friendship_id}/accept", headers=auth_headers(bob))

    bob_socket = FakeWebSocket()
    hub.active_connections[bob.id].add(bob_socket)

    token = create_access_token(alice.id)
    with client.websocket_connect(f"/hubs/notifications?access_token={token}") as websocket:
        websocket.send_text("ping")
        websocket.receive_json()

    presence = [m["data"] for m in bob_socket.sent if m["event"] == USER_STATUS_CHANGED]
    assert presence[0] == {"user_id": alice.id, "online": True}


def test_offline_status_uses_friends_at_disconnect_time(client, make_user, hub):
    alice = make_user("alice")
    bob = make_user("bob")
    carol = make_user("carol")
    bob_friendship = client.post(
        "/api/friendships", json={"user_id": bob.id, "friend_id": alice.id}, headers=auth_headers(bob)
    ).json()["id"]
    client.post(f"/api/friendships/{bob_friendship}/accept", headers=auth_headers(alice))
    carol_friendship = client.post(
        "/api/friendships", json={"user_id": carol.id, "friend_id": alice.id}, headers=auth_headers(carol)
    ).json()["id"]

    bob_socket, carol_socket = FakeWebSocket(), FakeWebSocket()
    hub.active_connections[bob.id].add(bob_socket)
    hub.active_connections[carol.id].add(carol_socket)

    token = create_access_token(alice.id)
    with client.websocket_connect(f"/hubs/notifications?access_token={token}") as websocket:
        websocket.send_text("ping")
        websocket.receive_json()

        assert client.delete(f"/api/friendships/{bob_friendship}", headers=auth_headers(alice)).status_code == 204
        assert client.post(
            f"/api/friendships/{carol_friendship}/accept", headers=auth_headers(alice)
        ).status_code == 204

    bob_presence = [m["data"] for m in bob_socket.sent if m["event"] == USER_STATUS_CHANGED]
    carol_presence = [m["data"] for m in carol_socket.sent if m["event"] == USER_STATUS_CHANGED]
    assert bob_presence == [{"user_id": alice.id, "online": True}]
    assert carol_presence == [{"user_id": alice.id, "online": False}]



def test_online_status_for_offline_user(client, make_user):
    alice = make_user("alice")
    bob = make_user("bob")

    response = client.get(f"/users/{bob.id}/online", headers=auth_headers(alice))
    assert response.json() == {"user_id": bob.id, "online": False}
