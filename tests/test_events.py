from datetime import datetime, timedelta, timezone

from httpx import AsyncClient

from app.database import database
from app.schemas.event import CreateEventRequest, EventResponse
from app.utils.datetime_utils import now_local, to_local_naive
from conftest import make_event


def event_payload(**overrides) -> dict:
    data = {
        "title": "Beach Clean-up",
        "description": "Volunteer clean-up at the north beach",
        "event_date": (now_local() + timedelta(days=10)).isoformat(),
        "venue": "North Beach",
        "event_type": "Volunteering",
        "max_capacity": 40,
        "volunteer_hours": 3
    }
    data.update(overrides)
    return data


async def test_admin_creates_approved_event(client: AsyncClient, admin_auth_headers, test_user):
    response = await client.post("/events", headers=admin_auth_headers, json=event_payload())
    data = response.json()

    assert response.status_code == 201
    assert data["is_approved"] is True
    assert data["secret"]

    # Every active user hears about the new event
    count = await database.fetch_val(
        "SELECT COUNT(*) FROM notifications WHERE user_id = :user_id AND type = 'EventCreated'",
        {"user_id": str(test_user["id"])}
    )
    assert count == 1


async def test_student_cannot_create_event(client: AsyncClient, auth_headers):
    response = await client.post("/events", headers=auth_headers, json=event_payload())

    assert response.status_code == 403


async def test_create_event_validates_capacity(client: AsyncClient, admin_auth_headers):
    response = await client.post("/events", headers=admin_auth_headers, json=event_payload(max_capacity=0))

    assert response.status_code == 422


async def test_event_date_with_offset_is_stored_as_local_time(client: AsyncClient, admin_auth_headers):
    payload = event_payload(event_date="2030-01-01T14:00:00+05:00")

    response = await client.post("/events", headers=admin_auth_headers, json=payload)

    assert response.status_code == 201
    expected = datetime(2030, 1, 1, 9, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert datetime.fromisoformat(response.json()["event_date"]) == expected


def test_naive_dates_pass_through_unchanged():
    value = datetime(2030, 1, 1, 14, 0)

    assert to_local_naive(value) == value
    assert to_local_naive(None) is None


def test_event_schemas_use_config_dict():
    assert EventResponse.model_config["from_attributes"] is True
    assert "example" in CreateEventRequest.model_config["json_schema_extra"]


async def test_list_events_search_is_case_insensitive(client: AsyncClient, admin_user):
    await make_event(admin_user, title="Robotics Workshop")
    await make_event(admin_user, title="Blood Drive", event_type="Volunteering")

    response = await client.get("/events", params={"search": "ROBOTICS"})
    data = response.json()

    assert response.status_code == 200
    assert data["total"] == 1
    assert data["events"][0]["title"] == "Robotics Workshop"
    assert "secret" not in data["events"][0]

    response = await client.get("/events", params={"event_type": "Volunteering"})
    assert [e["title"] for e in response.json()["events"]] == ["Blood Drive"]


async def test_unapproved_event_hidden_from_students(client: AsyncClient, admin_user, admin_auth_headers, auth_headers):
    event = await make_event(admin_user)
    await client.put(f"/events/{event['id']}", headers=admin_auth_headers, json={"is_approved": False})

    assert (await client.get("/events")).json()["total"] == 0
    assert (await client.get(f"/events/{event['id']}", headers=auth_headers)).status_code == 404
    assert (await client.get(f"/events/{event['id']}", headers=admin_auth_headers)).status_code == 200

    response = await client.get("/admin/events", headers=admin_auth_headers)
    assert response.json()["total"] == 1


async def test_upcoming_events_excludes_past(client: AsyncClient, admin_user):
    await make_event(admin_user, days=-2, title="Last Week")
    await make_event(admin_user, days=3, title="Later")
    await make_event(admin_user, days=1, title="Soon")

    response = await client.get("/events/upcoming")

    assert [e["title"] for e in response.json()] == ["Soon", "Later"]


async def test_event_details_include_my_registration(client: AsyncClient, event, auth_headers):
    await client.post("/registrations", headers=auth_headers, json={"event_id": str(event["id"])})

    response = await client.get(f"/events/{event['id']}", headers=auth_headers)
    data = response.json()

    assert response.status_code == 200
    assert data["confirmed_count"] == 1
    assert data["available_seats"] == event["max_capacity"] - 1
    assert data["my_registration"]["status"] == "Confirmed"

    anonymous = (await client.get(f"/events/{event['id']}")).json()
    assert anonymous["my_registration"] is None


async def test_update_event_notifies_registrants(client: AsyncClient, event, test_user, auth_headers, admin_auth_headers):
    await client.post("/registrations", headers=auth_headers, json={"event_id": str(event["id"])})

    response = await client.put(
        f"/events/{event['id']}",
        headers=admin_auth_headers,
        json={"venue": "Room 101"}
    )
    assert response.status_code == 200
    assert response.json()["venue"] == "Room 101"

    count = await database.fetch_val(
        "SELECT COUNT(*) FROM notifications WHERE user_id = :user_id AND type = 'EventUpdate'",
        {"user_id": str(test_user["id"])}
    )
    assert count == 1


async def test_delete_event_removes_registrations(client: AsyncClient, event, auth_headers, admin_auth_headers):
    await client.post("/registrations", headers=auth_headers, json={"event_id": str(event["id"])})

    response = await client.delete(f"/events/{event['id']}", headers=admin_auth_headers)
    assert response.status_code == 200

    assert (await client.get(f"/events/{event['id']}")).status_code == 404
    remaining = await database.fetch_val(
        "SELECT COUNT(*) FROM registrations WHERE event_id = :event_id",
        {"event_id": str(event["id"])}
    )
    assert remaining == 0


async def test_event_qr_code(client: AsyncClient, event, admin_auth_headers):
    response = await client.get(f"/events/{event['id']}/qr", headers=admin_auth_headers)
    data = response.json()

    assert response.status_code == 200
    assert data["secret"] == event["secret"]
    assert event["secret"] in data["scan_url"]
    assert data["qr_code_data_url"].startswith("data:image/png;base64,")

    response = await client.get(f"/events/{event['id']}/qr.png", headers=admin_auth_headers)
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")


async def test_unknown_event(client: AsyncClient):
    response = await client.get("/events/00000000-0000-0000-0000-000000000000")

    assert response.status_code == 404
