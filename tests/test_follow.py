"""Tests for follow/unfollow and follow request endpoints."""

from conftest import FailingWebSocket, FakeWebSocket, auth_headers
from memoria.modules.notifications.models.notification import Notification, NotificationType
from memoria.modules.relationships.models.follow import Follow, FollowStatus


def test_cannot_follow_self(client, make_user):
    alice = make_user("alice")

    response = client.post(f"/users/{alice.id}/follow", headers=auth_headers(alice))
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot follow yourself"


def test_follow_unknown_user(client, make_user):
    alice = make_user("alice")

    response = client.post("/users/unknown-user/follow", headers=auth_headers(alice))
    assert response.status_code == 404


def test_follow_public_user_pushes_and_persists_notification(client, make_user, hub):
    target = make_user("target", first_name="Tara", last_name="Get")
    follower = make_user("follower", first_name="Finn", last_name="Lower")
    socket = FakeWebSocket()
    hub.active_connections[target.id].add(socket)

    response = client.post(f"/users/{target.id}/follow", headers=auth_headers(follower))
    assert response.status_code == 200
    assert response.json() == {"detail": "Followed", "status": "accepted"}

    assert len(socket.sent) == 1
    assert socket.sent[0]["event"] == "ReceiveNotification"
    pushed = socket.sent[0]["data"]
    assert pushed["type"] == NotificationType.FOLLOW
    assert pushed["user_id"] == target.id
    assert pushed["sender_id"] == follower.id
    assert pushed["sender_full_name"] == "Finn Lower"
    assert pushed["text"] == "Finn Lower started following you"

    polled = client.get("/api/notifications/me", headers=auth_headers(target)).json()
    assert len(polled) == 1
    assert polled[0]["id"] == pushed["id"]
    assert polled[0]["read"] is False


def test_follow_succeeds_when_the_live_push_fails(client, make_user, hub):
    target = make_user("target")
    follower = make_user("follower")
    hub.active_connections[target.id].add(FailingWebSocket())

    response = client.post(f"/users/{target.id}/follow", headers=auth_headers(follower))
    assert response.status_code == 200
    assert response.json()["status"] == "accepted"

    assert not hub.is_online(target.id)
    notifications = client.get("/api/notifications/me", headers=auth_headers(target)).json()
    assert [n["type"] for n in notifications] == [NotificationType.FOLLOW]
    assert notifications[0]["sender_id"] == follower.id


def test_follow_without_live_connection_still_persists(client, make_user, hub):
    target = make_user("target")
    follower = make_user("follower")

    assert client.post(f"/users/{target.id}/follow", headers=auth_headers(follower)).status_code == 200

    assert len(hub.events_for(target.id, "ReceiveNotification")) == 1
    assert len(client.get("/api/notifications/me", headers=auth_headers(target)).json()) == 1


def test_follow_twice_is_rejected(client, make_user):
    target = make_user("target")
    follower = make_user("follower")

    assert client.post(f"/users/{target.id}/follow", headers=auth_headers(follower)).status_code == 200
    again = client.post(f"/users/{target.id}/follow", headers=auth_headers(follower))
    assert again.status_code == 400


def test_unfollow_then_unfollow_again(client, make_user, db_session):
    target = make_user("target")
    follower = make_user("follower")
    client.post(f"/users/{target.id}/follow", headers=auth_headers(follower))

    assert client.delete(f"/users/{target.id}/follow", headers=auth_headers(follower)).status_code == 204
    assert db_session.query(Follow).count() == 0

    again = client.delete(f"/users/{target.id}/follow", headers=auth_headers(follower))
    assert again.status_code == 404
    assert again.json()["detail"] == "Not following this user"


def test_follow_private_user_creates_pending_request(client, make_user, db_session):
    owner = make_user("owner", is_private=True)
    fan = make_user("fan")

    response = client.post(f"/users/{owner.id}/follow", headers=auth_headers(fan))
    assert response.status_code == 200
    assert response.json() == {"detail": "Follow requested", "status": "pending"}

    follow = db_session.query(Follow).one()
    assert follow.status == FollowStatus.PENDING

    notification = db_session.query(Notification).one()
    assert notification.type == NotificationType.FOLLOW_REQUEST
    assert notification.user_id == owner.id
    assert notification.related_id == follow.id

    relationship = client.get(f"/users/{owner.id}/relationship", headers=auth_headers(fan)).json()
    assert relationship["isFollowing"] is True

    requests = client.get("/users/me/follow-requests", headers=auth_headers(owner)).json()
    assert len(requests) == 1
    assert requests[0]["id"] == follow.id
    assert requests[0]["follower"]["username"] == "fan"


def test_accept_follow_request(client, make_user, db_session):
    owner = make_user("owner", is_private=True)
    fan = make_user("fan")
    client.post(f"/users/{owner.id}/follow", headers=auth_headers(fan))
    follow_id = db_session.query(Follow.id).scalar()

    assert client.post(f"/users/follow-requests/{follow_id}/accept", headers=auth_headers(fan)).status_code == 403

    response = client.post(f"/users/follow-requests/{follow_id}/accept", headers=auth_headers(owner))
    assert response.status_code == 204

    db_session.expire_all()
    assert db_session.query(Follow).one().status == FollowStatus.ACCEPTED
    assert db_session.query(Notification).count() == 0
    assert client.get("/users/me/follow-requests", headers=auth_headers(owner)).json() == []

    again = client.post(f"/users/follow-requests/{follow_id}/accept", headers=auth_headers(owner))
    assert again.status_code == 400


def test_decline_follow_request(client, make_user, db_session):
    owner = make_user("owner", is_private=True)
    fan = make_user("fan")
    client.post(f"/users/{owner.id}/follow", headers=auth_headers(fan))
    follow_id = db_session.query(Follow.id).scalar()

    response = client.post(f"/users/follow-requests/{follow_id}/decline", headers=auth_headers(owner))
    assert response.status_code == 204
    assert db_session.query(Follow).count() == 0
    assert db_session.query(Notification).count() == 0

    relationship = client.get(f"/users/{owner.id}/relationship", headers=auth_headers(fan)).json()
    assert relationship["isFollowing"] is False


def test_unfollow_pending_request_removes_notification(client, make_user, db_session):
    owner = make_user("owner", is_private=True)
    fan = make_user("fan")
    client.post(f"/users/{owner.id}/follow", headers=auth_headers(fan))

    assert client.delete(f"/users/{owner.id}/follow", headers=auth_headers(fan)).status_code == 204
    assert db_session.query(Notification).count() == 0


def test_follow_requests_only_for_private_accounts(client, make_user):
    alice = make_user("alice")

    response = client.get("/users/me/follow-requests", headers=auth_headers(alice))
    assert response.status_code == 403


def test_followers_and_following_lists(client, make_user):
    target = make_user("target")
    first = make_user("first")
    second = make_user("second")
    client.post(f"/users/{target.id}/follow", headers=auth_headers(first))
    client.post(f"/users/{target.id}/follow", headers=auth_headers(second))

    followers = client.get(f"/users/{target.id}/followers", headers=auth_headers(target)).json()
    assert {u["username"] for u in followers} == {"first", "second"}

    following = client.get(f"/users/{first.id}/following", headers=auth_headers(target)).json()
    assert [u["username"] for u in following] == ["target"]

    assert client.get("/users/missing/followers", headers=auth_headers(target)).status_code == 404
