from httpx import AsyncClient

from app.services.attendance_service import attendance_service
from app.services.registration_service import registration_service
from conftest import make_student, token_for


async def attended(event: dict) -> dict:
    student = await make_student()
    await registration_service.register(str(event["id"]), str(student["id"]))
    await attendance_service.mark_attendance(str(event["id"]), str(student["id"]), True)
    return student


async def test_attendee_rates_event(client: AsyncClient, event, admin_auth_headers):
    first, second = await attended(event), await attended(event)

    response = await client.post(
        "/feedback",
        headers=token_for(first),
        json={"event_id": str(event["id"]), "rating": 5, "comment": "Great"}
    )
    assert response.status_code == 201
    assert response.json()["rating"] == 5

    await client.post("/feedback", headers=token_for(second), json={"event_id": str(event["id"]), "rating": 2})

    summary = (await client.get(f"/events/{event['id']}/feedback", headers=admin_auth_headers)).json()
    assert summary["count"] == 2
    assert summary["average_rating"] == 3.5

    details = (await client.get(f"/events/{event['id']}")).json()
    assert details["average_rating"] == 3.5


async def test_feedback_requires_attendance(client: AsyncClient, event, auth_headers):
    response = await client.post("/feedback", headers=auth_headers, json={"event_id": str(event["id"]), "rating": 4})

    assert response.status_code == 400


async def test_feedback_once_per_event(client: AsyncClient, event):
    student = await attended(event)
    payload = {"event_id": str(event["id"]), "rating": 4}
    await client.post("/feedback", headers=token_for(student), json=payload)

    response = await client.post("/feedback", headers=token_for(student), json=payload)

    assert response.status_code == 409


async def test_rating_out_of_range(client: AsyncClient, event):
    student = await attended(event)

    response = await client.post("/feedback", headers=token_for(student), json={"event_id": str(event["id"]), "rating": 6})

    assert response.status_code == 422


async def test_admin_deletes_feedback(client: AsyncClient, event, admin_auth_headers):
    student = await attended(event)
    feedback = (await client.post(
        "/feedback", headers=token_for(student), json={"event_id": str(event["id"]), "rating": 1}
    )).json()

    response = await client.delete(f"/feedback/{feedback['id']}", headers=admin_auth_headers)

    assert response.status_code == 200
    assert (await client.get("/feedback/me", headers=token_for(student))).json() == []


async def test_contact_form_flow(client: AsyncClient, admin_auth_headers):
    response = await client.post(
        "/contact",
        json={
            "full_name": "Omar Haddad",
            "email": "Omar@Example.com",
            "subject": "Parking",
            "message": "Is there parking near the main hall?"
        }
    )
    assert response.status_code == 201

    open_messages = (await client.get("/contact", headers=admin_auth_headers, params={"resolved": False})).json()
    assert len(open_messages) == 1
    assert open_messages[0]["email"] == "omar@example.com"
    assert open_messages[0]["inquiry_type"] == "General"

    contact_id = open_messages[0]["id"]
    response = await client.post(
        f"/contact/{contact_id}/respond",
        headers=admin_auth_headers,
        json={"response": "Yes, lot B."}
    )
    assert response.json()["is_resolved"] is True
    assert response.json()["admin_response"] == "Yes, lot B."

    assert (await client.get("/contact", headers=admin_auth_headers, params={"resolved": False})).json() == []

    response = await client.delete(f"/contact/{contact_id}", headers=admin_auth_headers)
    assert response.status_code == 200
    assert (await client.get(f"/contact/{contact_id}", headers=admin_auth_headers)).status_code == 404


async def test_contact_inbox_is_admin_only(client: AsyncClient, auth_headers):
    assert (await client.get("/contact", headers=auth_headers)).status_code == 403
