import re

from httpx import AsyncClient

from app.services.attendance_service import attendance_service
from app.services.certificate_service import CertificateService, generate_certificate_number
from app.services.registration_service import registration_service
from app.services.user_service import user_service
from conftest import make_event, make_student, token_for


async def attendee(event: dict) -> dict:
    student = await make_student()
    await registration_service.register(str(event["id"]), str(student["id"]))
    await attendance_service.mark_attendance(str(event["id"]), str(student["id"]), True)
    return student


async def issue(client: AsyncClient, headers: dict, event: dict, student: dict):
    return await client.post(
        "/certificates",
        headers=headers,
        json={"event_id": str(event["id"]), "user_id": str(student["id"])}
    )


def test_certificate_number_format():
    assert re.fullmatch(r"CERT-\d{8}-[0-9A-F]{8}", generate_certificate_number())


async def test_issue_certificate_credits_volunteer_hours(client: AsyncClient, event, admin_auth_headers):
    student = await attendee(event)

    response = await issue(client, admin_auth_headers, event, student)
    data = response.json()

    assert response.status_code == 201
    assert data["user_id"] == str(student["id"])
    assert data["volunteer_hours"] == event["volunteer_hours"]
    assert data["is_downloaded"] is False

    user = await user_service.get_user(str(student["id"]))
    assert user["total_volunteer_hours"] == event["volunteer_hours"]


async def test_issue_twice_conflicts_and_hours_counted_once(client: AsyncClient, event, admin_auth_headers):
    student = await attendee(event)
    await issue(client, admin_auth_headers, event, student)

    response = await issue(client, admin_auth_headers, event, student)

    assert response.status_code == 409
    user = await user_service.get_user(str(student["id"]))
    assert user["total_volunteer_hours"] == event["volunteer_hours"]


async def test_concurrent_issue_conflicts(client: AsyncClient, event, admin_auth_headers, monkeypatch):
    student = await attendee(event)
    await issue(client, admin_auth_headers, event, student)

    # Second request passed the duplicate check before the first one committed
    async def not_found(event_id, user_id):
        return None

    monkeypatch.setattr(CertificateService, "find_certificate", staticmethod(not_found))
    response = await issue(client, admin_auth_headers, event, student)

    assert response.status_code == 409
    user = await user_service.get_user(str(student["id"]))
    assert user["total_volunteer_hours"] == event["volunteer_hours"]


async def test_issue_requires_attendance(client: AsyncClient, event, admin_auth_headers):
    student = await make_student()
    await registration_service.register(str(event["id"]), str(student["id"]))

    response = await issue(client, admin_auth_headers, event, student)

    assert response.status_code == 400


async def test_issue_for_unknown_user(client: AsyncClient, event, admin_auth_headers):
    response = await issue(client, admin_auth_headers, event, {"id": "00000000-0000-0000-0000-000000000000"})

    assert response.status_code == 404


async def test_students_cannot_issue(client: AsyncClient, event, auth_headers):
    student = await attendee(event)

    response = await issue(client, auth_headers, event, student)

    assert response.status_code == 403


async def test_bulk_issue_skips_existing(client: AsyncClient, event, admin_auth_headers):
    first = await attendee(event)
    await attendee(event)
    await issue(client, admin_auth_headers, event, first)

    response = await client.post(f"/events/{event['id']}/certificates", headers=admin_auth_headers)
    data = response.json()

    assert response.status_code == 200
    assert data["issued_count"] == 1
    assert data["skipped_count"] == 1

    response = await client.get("/certificates", headers=admin_auth_headers, params={"event_id": str(event["id"])})
    assert len(response.json()) == 2


async def test_public_verification(client: AsyncClient, event, admin_auth_headers):
    student = await attendee(event)
    certificate = (await issue(client, admin_auth_headers, event, student)).json()

    response = await client.get(f"/certificates/verify/{certificate['certificate_number'].lower()}")
    data = response.json()

    assert response.status_code == 200
    assert data["valid"] is True
    assert data["event_title"] == event["title"]
    assert data["recipient"] == f"{student['first_name']} {student['last_name']}"

    response = await client.get("/certificates/verify/CERT-20000101-DEADBEEF")
    assert response.status_code == 404


async def test_download_pdf(client: AsyncClient, event, admin_auth_headers):
    student = await attendee(event)
    certificate = (await issue(client, admin_auth_headers, event, student)).json()

    response = await client.get(
        f"/certificates/{certificate['id']}/download",
        headers=token_for(student),
        params={"template": "modern"}
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")

    response = await client.get("/certificates/me", headers=token_for(student))
    assert response.json()[0]["is_downloaded"] is True


async def test_download_unknown_template(client: AsyncClient, event, admin_auth_headers):
    student = await attendee(event)
    certificate = (await issue(client, admin_auth_headers, event, student)).json()

    response = await client.get(
        f"/certificates/{certificate['id']}/download",
        headers=token_for(student),
        params={"template": "gothic"}
    )

    assert response.status_code == 400


async def test_other_students_cannot_see_certificate(client: AsyncClient, event, admin_auth_headers):
    student = await attendee(event)
    certificate = (await issue(client, admin_auth_headers, event, student)).json()
    other = await make_student()

    assert (await client.get(f"/certificates/{certificate['id']}", headers=token_for(other))).status_code == 404
    assert (await client.get(f"/certificates/{certificate['id']}/download", headers=token_for(other))).status_code == 404


async def test_eligible_events(client: AsyncClient, admin_user, admin_auth_headers):
    past = await make_event(admin_user, days=-1)
    await make_event(admin_user, days=5)
    student = await make_student()
    await attendance_service.mark_attendance(str(past["id"]), str(student["id"]), True)

    response = await client.get("/certificates/eligible-events", headers=admin_auth_headers)
    data = response.json()

    assert [e["id"] for e in data] == [str(past["id"])]
    assert data[0]["attendee_count"] == 1
    assert data[0]["certificate_count"] == 0
