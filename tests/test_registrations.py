from httpx import AsyncClient

from app.database import database
from app.services.registration_service import registration_service
from conftest import make_event, make_student, token_for


async def register(client: AsyncClient, headers: dict, event_id, **extra):
    return await client.post("/registrations", headers=headers, json={"event_id": str(event_id), **extra})


async def test_register_confirmed(client: AsyncClient, event, auth_headers):
    response = await register(client, auth_headers, event["id"], guest_count=2)
    data = response.json()

    assert response.status_code == 201
    assert data["status"] == "Confirmed"
    assert data["guest_count"] == 2
    assert data["event_title"] == event["title"]


async def test_register_twice_conflicts(client: AsyncClient, event, auth_headers):
    await register(client, auth_headers, event["id"])
    response = await register(client, auth_headers, event["id"])

    assert response.status_code == 409


async def test_register_past_event(client: AsyncClient, admin_user, auth_headers):
    event = await make_event(admin_user, days=-1)
    response = await register(client, auth_headers, event["id"])

    assert response.status_code == 400


async def test_register_unapproved_event(client: AsyncClient, admin_user, auth_headers):
    event = await make_event(admin_user)
    await database.execute(
        "UPDATE events SET is_approved = FALSE WHERE id = :id",
        {"id": str(event["id"])}
    )

    response = await register(client, auth_headers, event["id"])

    assert response.status_code == 400


async def test_register_unknown_event(client: AsyncClient, auth_headers):
    response = await register(client, auth_headers, "00000000-0000-0000-0000-000000000000")

    assert response.status_code == 404


async def test_full_event_goes_to_waitlist(client: AsyncClient, admin_user):
    event = await make_event(admin_user, max_capacity=1)
    first, second = await make_student(), await make_student()

    assert (await register(client, token_for(first), event["id"])).json()["status"] == "Confirmed"
    assert (await register(client, token_for(second), event["id"])).json()["status"] == "Waitlist"

    assert await registration_service.confirmed_count(str(event["id"])) == 1
    assert await registration_service.waitlist_count(str(event["id"])) == 1


async def test_cancel_promotes_waitlisted_user(client: AsyncClient, admin_user, admin_auth_headers):
    event = await make_event(admin_user, max_capacity=1)
    first, second = await make_student(), await make_student()

    first_registration = (await register(client, token_for(first), event["id"])).json()
    await register(client, token_for(second), event["id"])

    response = await client.post(
        f"/registrations/{first_registration['id']}/cancel",
        headers=token_for(first)
    )
    assert response.status_code == 200
    assert response.json()["status"] == "Cancelled"

    promoted = await registration_service.get_user_registration(str(event["id"]), str(second["id"]))
    assert promoted["status"] == "Confirmed"

    response = await client.get(f"/events/{event['id']}/waitlist", headers=admin_auth_headers)
    assert response.json() == []

    notice = await database.fetch_val(
        "SELECT COUNT(*) FROM notifications WHERE user_id = :user_id AND type = 'RegistrationPromoted'",
        {"user_id": str(second["id"])}
    )
    assert notice == 1


async def test_cancel_waitlisted_registration_keeps_seats(client: AsyncClient, admin_user):
    event = await make_event(admin_user, max_capacity=1)
    first, second = await make_student(), await make_student()

    await register(client, token_for(first), event["id"])
    waitlisted = (await register(client, token_for(second), event["id"])).json()

    await client.post(f"/registrations/{waitlisted['id']}/cancel", headers=token_for(second))

    assert await registration_service.confirmed_count(str(event["id"])) == 1
    assert await registration_service.waitlist_count(str(event["id"])) == 0


async def test_cancel_twice(client: AsyncClient, event, auth_headers):
    registration = (await register(client, auth_headers, event["id"])).json()
    await client.post(f"/registrations/{registration['id']}/cancel", headers=auth_headers)

    response = await client.post(f"/registrations/{registration['id']}/cancel", headers=auth_headers)

    assert response.status_code == 400


async def test_cannot_cancel_someone_elses_registration(client: AsyncClient, event, auth_headers):
    registration = (await register(client, auth_headers, event["id"])).json()
    other = await make_student()

    response = await client.post(f"/registrations/{registration['id']}/cancel", headers=token_for(other))

    assert response.status_code == 404


async def test_reregister_after_cancel_reuses_row(client: AsyncClient, event, auth_headers):
    registration = (await register(client, auth_headers, event["id"])).json()
    await client.post(f"/registrations/{registration['id']}/cancel", headers=auth_headers)

    response = await register(client, auth_headers, event["id"])

    assert response.status_code == 201
    assert response.json()["id"] == registration["id"]
    assert response.json()["status"] == "Confirmed"


async def test_my_registrations_hide_cancelled(client: AsyncClient, admin_user, auth_headers):
    kept = await make_event(admin_user, days=3)
    dropped = await make_event(admin_user, days=5)
    await register(client, auth_headers, kept["id"])
    registration = (await register(client, auth_headers, dropped["id"])).json()
    await client.post(f"/registrations/{registration['id']}/cancel", headers=auth_headers)

    response = await client.get("/registrations/me", headers=auth_headers)
    assert [r["event_id"] for r in response.json()] == [str(kept["id"])]

    response = await client.get("/registrations/me", headers=auth_headers, params={"include_cancelled": True})
    assert len(response.json()) == 2


async def test_registration_visible_to_owner_and_admin_only(client: AsyncClient, event, auth_headers, admin_auth_headers):
    registration = (await register(client, auth_headers, event["id"])).json()
    other = await make_student()

    assert (await client.get(f"/registrations/{registration['id']}", headers=auth_headers)).status_code == 200
    assert (await client.get(f"/registrations/{registration['id']}", headers=admin_auth_headers)).status_code == 200
    assert (await client.get(f"/registrations/{registration['id']}", headers=token_for(other))).status_code == 404
