from httpx import AsyncClient

from app.services.notification_service import notification_service, NotificationType
from conftest import make_student, token_for


async def test_inbox_and_unread_count(client: AsyncClient, test_user, auth_headers):
    await notification_service.send(test_user["id"], "First")
    await notification_service.send(test_user["id"], "Second")

    response = await client.get("/notifications", headers=auth_headers)
    data = response.json()

    assert response.status_code == 200
    assert data["unread_count"] == 2
    assert {n["message"] for n in data["notifications"]} == {"First", "Second"}

    response = await client.get("/notifications/unread-count", headers=auth_headers)
    assert response.json() == {"unread_count": 2}


async def test_opening_marks_read(client: AsyncClient, test_user, auth_headers):
    notification_id = await notification_service.send(test_user["id"], "Hello")

    response = await client.get(f"/notifications/{notification_id}", headers=auth_headers)

    assert response.json()["is_read"] is True
    assert await notification_service.unread_count(test_user["id"]) == 0


async def test_mark_all_read(client: AsyncClient, test_user, auth_headers):
    for message in ("a", "b", "c"):
        await notification_service.send(test_user["id"], message)

    response = await client.post("/notifications/read-all", headers=auth_headers)

    assert response.json()["message"] == "3 notifications marked as read"
    unread = (await client.get("/notifications", headers=auth_headers, params={"unread_only": True})).json()
    assert unread["notifications"] == []


async def test_cannot_touch_other_users_notifications(client: AsyncClient, test_user):
    notification_id = await notification_service.send(test_user["id"], "Private")
    other = token_for(await make_student())

    assert (await client.get(f"/notifications/{notification_id}", headers=other)).status_code == 404
    assert (await client.post(f"/notifications/{notification_id}/read", headers=other)).status_code == 404
    assert (await client.delete(f"/notifications/{notification_id}", headers=other)).status_code == 404


async def test_delete_notification(client: AsyncClient, test_user, auth_headers):
    notification_id = await notification_service.send(test_user["id"], "Bye")

    response = await client.delete(f"/notifications/{notification_id}", headers=auth_headers)

    assert response.status_code == 200
    assert (await client.get("/notifications", headers=auth_headers)).json()["notifications"] == []


async def test_broadcast_reaches_active_users(client: AsyncClient, test_user, admin_auth_headers):
    await make_student(is_active=False)

    response = await client.post(
        "/notifications/broadcast",
        headers=admin_auth_headers,
        json={"message": "Campus closed on Friday"}
    )

    # test_user plus the admin; the inactive account is skipped
    assert response.json() == {"recipients": 2}

    inbox = await notification_service.list_for_user(test_user["id"])
    assert inbox[0]["type"] == NotificationType.ADMIN

    overview = (await client.get("/notifications/overview", headers=admin_auth_headers)).json()
    assert overview[0]["recipients"] == 2
    assert overview[0]["read_count"] == 0


async def test_broadcast_for_unknown_event(client: AsyncClient, admin_auth_headers):
    response = await client.post(
        "/notifications/broadcast",
        headers=admin_auth_headers,
        json={"message": "Bus leaves at 8", "event_id": "00000000-0000-0000-0000-000000000000"}
    )

    assert response.status_code == 404


async def test_students_cannot_broadcast(client: AsyncClient, auth_headers):
    response = await client.post("/notifications/broadcast", headers=auth_headers, json={"message": "hi"})

    assert response.status_code == 403
