from datetime import timedelta

from httpx import AsyncClient

from app.database import database
from app.services.attendance_service import attendance_service
from app.services.certificate_service import certificate_service
from app.services.registration_service import registration_service
from app.utils.datetime_utils import now_local
from conftest import make_event


async def test_home_overview_is_public(client: AsyncClient, admin_user, test_user):
    await make_event(admin_user, days=2)
    await make_event(admin_user, days=-2)

    response = await client.get("/home")
    data = response.json()

    assert response.status_code == 200
    assert len(data["upcoming_events"]) == 1
    assert data["total_events"] == 2
    assert data["total_students"] == 1


async def test_student_dashboard(client: AsyncClient, admin_user, test_user, auth_headers):
    soon = await make_event(admin_user, days=1, title="Soon")
    await make_event(admin_user, days=4, title="Later")
    await registration_service.register(str(soon["id"]), str(test_user["id"]))

    response = await client.get("/dashboard", headers=auth_headers)
    data = response.json()

    assert response.status_code == 200
    assert data["user"]["id"] == str(test_user["id"])
    assert [r["event_title"] for r in data["upcoming_events"]] == ["Soon"]
    assert data["completed_events"] == 0
    assert data["unread_notifications"] >= 1


async def test_history_shows_attendance_and_certificate(client: AsyncClient, admin_user, test_user, auth_headers):
    event = await make_event(admin_user, days=2, volunteer_hours=4)
    await registration_service.register(str(event["id"]), str(test_user["id"]))
    await attendance_service.mark_attendance(str(event["id"]), str(test_user["id"]), True)
    certificate = await certificate_service.issue_certificate(str(event["id"]), str(test_user["id"]))

    # The event is over by the time the student looks back
    await database.execute(
        "UPDATE events SET event_date = :event_date WHERE id = :id",
        {"event_date": now_local() - timedelta(days=1), "id": str(event["id"])}
    )

    response = await client.get("/dashboard/history", headers=auth_headers)
    entries = response.json()

    assert len(entries) == 1
    assert entries[0]["attended"] is True
    assert entries[0]["certificate_number"] == certificate["certificate_number"]

    dashboard = (await client.get("/dashboard", headers=auth_headers)).json()
    assert dashboard["total_volunteer_hours"] == 4
    assert dashboard["completed_events"] == 1
    assert dashboard["attendance_rate"] == 100


async def test_dashboard_requires_login(client: AsyncClient):
    assert (await client.get("/dashboard")).status_code in (401, 403)
