from datetime import timedelta

import pytest
from fastapi import HTTPException
from httpx import AsyncClient

from app.database import database
from app.services.attendance_service import attendance_service
from app.services.registration_service import registration_service
from app.utils.datetime_utils import as_datetime, now_local
from conftest import make_event, make_student, token_for


async def registered_student(event: dict) -> dict:
    student = await make_student()
    await registration_service.register(str(event["id"]), str(student["id"]))
    return student


async def move_event_start(event: dict, start) -> None:
    await database.execute(
        "UPDATE events SET event_date = :event_date WHERE id = :id",
        {"event_date": start, "id": str(event["id"])}
    )


async def test_check_in_during_event(event):
    student = await registered_student(event)
    start = as_datetime(event["event_date"])

    attendance = await attendance_service.check_in(
        str(event["id"]), str(student["id"]), now=start + timedelta(minutes=15)
    )

    assert attendance["is_present"]
    assert attendance["already_checked_in"] is False
    assert await attendance_service.has_attended(str(event["id"]), str(student["id"]))


async def test_check_in_is_idempotent(event):
    student = await registered_student(event)
    now = as_datetime(event["event_date"]) + timedelta(minutes=5)

    first = await attendance_service.check_in(str(event["id"]), str(student["id"]), now=now)
    second = await attendance_service.check_in(str(event["id"]), str(student["id"]), now=now + timedelta(minutes=1))

    assert second["already_checked_in"] is True
    assert second["id"] == first["id"]
    assert await attendance_service.attendance_count(str(event["id"])) == 1


async def test_check_in_before_start(event):
    student = await registered_student(event)

    with pytest.raises(HTTPException) as exc:
        await attendance_service.check_in(
            str(event["id"]), str(student["id"]),
            now=as_datetime(event["event_date"]) - timedelta(minutes=1)
        )

    assert exc.value.status_code == 400


@pytest.mark.parametrize("minutes_after_start, accepted", [(90, True), (91, False)])
async def test_check_in_deadline(event, minutes_after_start, accepted):
    """Event runs an hour with a thirty minute grace period"""
    student = await registered_student(event)
    now = as_datetime(event["event_date"]) + timedelta(minutes=minutes_after_start)

    if accepted:
        attendance = await attendance_service.check_in(str(event["id"]), str(student["id"]), now=now)
        assert attendance["is_present"]
    else:
        with pytest.raises(HTTPException) as exc:
            await attendance_service.check_in(str(event["id"]), str(student["id"]), now=now)
        assert exc.value.status_code == 400


async def test_check_in_requires_confirmed_registration(event):
    unregistered = await make_student()
    now = as_datetime(event["event_date"]) + timedelta(minutes=5)

    with pytest.raises(HTTPException) as exc:
        await attendance_service.check_in(str(event["id"]), str(unregistered["id"]), now=now)

    assert exc.value.status_code == 400


async def test_waitlisted_user_cannot_check_in(admin_user):
    event = await make_event(admin_user, max_capacity=1)
    await registered_student(event)
    waitlisted = await registered_student(event)

    with pytest.raises(HTTPException) as exc:
        await attendance_service.check_in(
            str(event["id"]), str(waitlisted["id"]),
            now=as_datetime(event["event_date"]) + timedelta(minutes=5)
        )

    assert exc.value.status_code == 400


async def test_scan_qr_secret(client: AsyncClient, event):
    student = await registered_student(event)
    await move_event_start(event, now_local() - timedelta(minutes=10))

    response = await client.get(
        "/attendance/scan",
        headers=token_for(student),
        params={"secret": event["secret"]}
    )
    data = response.json()

    assert response.status_code == 200
    assert data["is_present"] is True
    assert data["event_title"] == event["title"]

    response = await client.get("/attendance/me", headers=token_for(student))
    assert [a["event_id"] for a in response.json()] == [str(event["id"])]


async def test_check_in_with_unknown_secret(client: AsyncClient, auth_headers):
    response = await client.post("/attendance/check-in", headers=auth_headers, json={"secret": "nope"})

    assert response.status_code == 404


async def test_event_check_in_endpoint_before_start(client: AsyncClient, event):
    student = await registered_student(event)

    response = await client.post(f"/events/{event['id']}/check-in", headers=token_for(student))

    assert response.status_code == 400


async def test_admin_marks_attendance_and_rate(client: AsyncClient, event, admin_auth_headers):
    present = await registered_student(event)
    await registered_student(event)

    response = await client.post(
        f"/events/{event['id']}/attendance",
        headers=admin_auth_headers,
        json={"user_id": str(present["id"]), "is_present": True}
    )
    assert response.status_code == 200
    assert response.json()["is_present"] is True

    response = await client.get(f"/events/{event['id']}/attendance-rate", headers=admin_auth_headers)
    data = response.json()
    assert data["confirmed_registrations"] == 2
    assert data["attendance_count"] == 1
    assert data["attendance_rate"] == 50.0

    response = await client.get(f"/events/{event['id']}/attendance", headers=admin_auth_headers)
    assert len(response.json()) == 1


async def test_attendance_rate_without_registrations(event):
    assert await attendance_service.attendance_rate(str(event["id"])) == 0.0
