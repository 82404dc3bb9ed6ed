"""Tests for notification listing, read state and deletion."""

from conftest import auth_headers


def follow(client, follower, target):
    response = client.post(f"/users/{target.id}/follow", headers=auth_headers(follower))
    assert response.status_code == 200


def test_notifications_are_newest_first(client, make_user):
    target = make_user("target")
    first = make_user("first")
    second = make_user("second")
    follow(client, first, target)
    follow(client, second, target)

    notifications = client.get("/api/notifications/me", headers=auth_headers(target)).json()
    assert [n["sender_username"] for n in notifications] == ["second", "first"]


def test_unread_count_and_mark_as_read(client, make_user):
    target = make_user("target")
    fan = make_user("fan")
    follow(client, fan, target)

    assert client.get("/api/notifications/me/unread-count", headers=auth_headers(target)).json() == {"count": 1}

    notification_id = client.get("/api/notifications/me", headers=auth_headers(target)).json()[0]["id"]
    response = client.put(f"/api/notifications/{notification_id}/read", headers=auth_headers(target))
    assert response.status_code == 204

    assert client.get("/api/notifications/me/unread-count", headers=auth_headers(target)).json() == {"count": 0}
    unread = client.get("/api/notifications/me", params={"unread_only": True}, headers=auth_headers(target)).json()
    assert unread == []


def test_mark_all_as_read(client, make_user):
    target = make_user("target")
    for name in ("one", "two", "three"):
        follow(client, make_user(name), target)

    response = client.put("/api/notifications/mark-all-read", headers=auth_headers(target))
    assert response.status_code == 200
    assert response.json()["count"] == 3

    notifications = client.get("/api/notifications/me", headers=auth_headers(target)).json()
    assert all(n["read"] for n in notifications)


def test_cannot_touch_someone_elses_notification(client, make_user):
    target = make_user("target")
    fan = make_user("fan")
    follow(client, fan, target)
    notification_id = client.get("/api/notifications/me", headers=auth_headers(target)).json()[0]["id"]

    assert client.put(f"/api/notifications/{notification_id}/read", headers=auth_headers(fan)).status_code == 403
    assert client.delete(f"/api/notifications/{notification_id}", headers=auth_headers(fan)).status_code == 403
    assert client.put("/api/notifications/missing/read", headers=auth_headers(fan)).status_code == 404


def test_delete_notifications(client, make_user):
    target = make_user("target")
    for name in ("one", "two"):
        follow(client, make_user(name), target)
    first_id, second_id = [n["id"] for n in client.get("/api/notifications/me", headers=auth_headers(target)).json()]

    assert client.delete(f"/api/notifications/{first_id}", headers=auth_headers(target)).status_code == 204
    remaining = client.get("/api/notifications/me", headers=auth_headers(target)).json()
    assert [n["id"] for n in remaining] == [second_id]

    response = client.delete("/api/notifications/me", headers=auth_headers(target))
    assert response.status_code == 200
    assert response.json()["count"] == 1
    assert client.get("/api/notifications/me", headers=auth_headers(target)).json() == []


def test_sender_snapshot_survives_profile_edit(client, make_user):
    target = make_user("target")
    fan = make_user("fan", first_name="Old", last_name="Name", profile_picture_url="https://cdn.memoria.dev/old.png")
    follow(client, fan, target)

    client.put(
        "/users/me",
        json={"first_name": "New", "profile_picture_url": "https://cdn.memoria.dev/new.png"},
        headers=auth_headers(fan),
    )

    notification = client.get("/api/notifications/me", headers=auth_headers(target)).json()[0]
    assert notification["sender_full_name"] == "Old Name"
    assert notification["sender_avatar_url"] == "https://cdn.memoria.dev/old.png"
    assert notification["text"] == "Old Name started following you"


def test_sender_without_a_name_is_shown_as_unknown(client, make_user):
    target = make_user("target")
    anon = make_user("anon", first_name="", last_name="")
    follow(client, anon, target)

    notification = client.get("/api/notifications/me", headers=auth_headers(target)).json()[0]
    assert notification["sender_full_name"] == "Unknown"
    assert notification["sender_username"] == "anon"
    assert notification["text"] == "Unknown started following you"



def test_notifications_require_auth(client):
    assert client.get("/api/notifications/me").status_code == 401
