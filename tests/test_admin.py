from httpx import AsyncClient

from app.services.attendance_service import attendance_service
from app.services.registration_service import registration_service
from conftest import STUDENT_PASSWORD, make_event, make_student


async def test_dashboard_statistics(client: AsyncClient, admin_user, admin_auth_headers, test_user):
    event = await make_event(admin_user)
    await make_event(admin_user, days=-3)
    await registration_service.register(str(event["id"]), str(test_user["id"]))
    await attendance_service.mark_attendance(str(event["id"]), str(test_user["id"]), True)

    response = await client.get("/admin/dashboard", headers=admin_auth_headers)
    data = response.json()

    assert response.status_code == 200
    assert data["total_events"] == 2
    assert data["upcoming_events"] == 1
    assert data["past_events"] == 1
    assert data["total_users"] == 2
    assert data["total_registrations"] == 1
    assert data["attendance_rate"] == 100.0
    assert data["average_rating"] == 0.0


async def test_event_report(client: AsyncClient, admin_user, admin_auth_headers):
    event = await make_event(admin_user, max_capacity=1)
    first, second = await make_student(), await make_student()
    await registration_service.register(str(event["id"]), str(first["id"]))
    await registration_service.register(str(event["id"]), str(second["id"]))
    await attendance_service.mark_attendance(str(event["id"]), str(first["id"]), True)

    response = await client.get(f"/admin/reports/events/{event['id']}", headers=admin_auth_headers)
    data = response.json()

    assert data["total_registrations"] == 2
    assert data["confirmed_registrations"] == 1
    assert data["waitlist_count"] == 1
    assert data["total_attendance"] == 1
    assert data["attendance_rate"] == 50.0

    rows = (await client.get("/admin/reports/events", headers=admin_auth_headers)).json()
    assert rows[0]["event_id"] == str(event["id"])


async def test_user_report_filter(client: AsyncClient, admin_auth_headers, test_user):
    response = await client.get("/admin/reports/users", headers=admin_auth_headers, params={"user_type": "Student"})

    assert [u["id"] for u in response.json()] == [str(test_user["id"])]


async def test_admin_creates_user_with_generated_password(client: AsyncClient, admin_auth_headers):
    response = await client.post(
        "/admin/users",
        headers=admin_auth_headers,
        json={
            "email": "new.staff@example.com",
            "first_name": "Lina",
            "last_name": "Saleh",
            "university_id": "S-1001",
            "user_type": "Admin"
        }
    )
    data = response.json()

    assert response.status_code == 201
    assert data["email_confirmed"] is True
    assert len(data["generated_password"]) >= 8

    response = await client.post(
        "/auth/login",
        json={"login": "new.staff@example.com", "password": data["generated_password"]}
    )
    assert response.json()["user_type"] == "Admin"


async def test_list_and_search_users(client: AsyncClient, admin_auth_headers):
    await make_student(first_name="Zeynep")
    await make_student(is_active=False)

    response = await client.get("/admin/users", headers=admin_auth_headers, params={"search": "zeyn"})
    assert [u["first_name"] for u in response.json()["users"]] == ["Zeynep"]

    response = await client.get("/admin/users", headers=admin_auth_headers, params={"status": "inactive"})
    assert response.json()["total"] == 1


async def test_deactivate_user_blocks_login(client: AsyncClient, test_user, admin_auth_headers):
    response = await client.put(
        f"/admin/users/{test_user['id']}",
        headers=admin_auth_headers,
        json={"is_active": False}
    )
    assert response.json()["is_active"] is False

    response = await client.post(
        "/auth/login",
        json={"login": test_user["email"], "password": STUDENT_PASSWORD}
    )
    assert response.status_code == 403


async def test_update_user_duplicate_email(client: AsyncClient, test_user, admin_auth_headers):
    other = await make_student()

    response = await client.put(
        f"/admin/users/{other['id']}",
        headers=admin_auth_headers,
        json={"email": test_user["email"]}
    )

    assert response.status_code == 409


async def test_role_changes(client: AsyncClient, test_user, admin_user, admin_auth_headers):
    response = await client.put(
        f"/admin/users/{test_user['id']}/role",
        headers=admin_auth_headers,
        json={"role": "Admin"}
    )
    assert response.json()["user_type"] == "Admin"

    response = await client.put(
        f"/admin/users/{admin_user['id']}/role",
        headers=admin_auth_headers,
        json={"role": "Student"}
    )
    assert response.status_code == 400


async def test_delete_user_cascades(client: AsyncClient, event, test_user, admin_user, admin_auth_headers):
    await registration_service.register(str(event["id"]), str(test_user["id"]))

    response = await client.delete(f"/admin/users/{test_user['id']}", headers=admin_auth_headers)
    assert response.status_code == 200
    assert (await client.get(f"/admin/users/{test_user['id']}", headers=admin_auth_headers)).status_code == 404
    assert await registration_service.confirmed_count(str(event["id"])) == 0

    response = await client.delete(f"/admin/users/{admin_user['id']}", headers=admin_auth_headers)
    assert response.status_code == 400


async def test_admin_writes_are_audited(client: AsyncClient, admin_user, admin_auth_headers):
    await client.post("/clubs", headers=admin_auth_headers, json={"name": "Debate"})
    await client.post("/notifications/broadcast", headers=admin_auth_headers, json={"message": "Hi"})

    response = await client.get("/admin/activity-logs", headers=admin_auth_headers)
    data = response.json()

    assert data["total"] == 2
    assert {log["action"] for log in data["logs"]} == {"create_club", "broadcast_notification"}
    assert all(log["admin_id"] == str(admin_user["id"]) for log in data["logs"])

    response = await client.get(
        "/admin/activity-logs", headers=admin_auth_headers, params={"action": "create_club"}
    )
    assert response.json()["logs"][0]["details"] == {"name": "Debate"}

    stats = (await client.get("/admin/activity-stats", headers=admin_auth_headers)).json()
    assert stats["total_actions"] == 2


async def test_admin_routes_reject_students(client: AsyncClient, auth_headers):
    for path in ("/admin/dashboard", "/admin/users", "/admin/reports/events", "/admin/activity-logs"):
        assert (await client.get(path, headers=auth_headers)).status_code == 403
