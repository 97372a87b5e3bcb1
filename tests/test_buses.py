from datetime import timedelta

from httpx import AsyncClient

from app.utils.datetime_utils import as_datetime
from conftest import make_student, token_for


async def create_bus(client: AsyncClient, headers: dict, event: dict, capacity: int = 3) -> dict:
    response = await client.post(
        "/buses",
        headers=headers,
        json={
            "event_id": str(event["id"]),
            "bus_number": "B-12",
            "capacity": capacity,
            "departure_time": (as_datetime(event["event_date"]) - timedelta(hours=1)).isoformat(),
            "departure_location": "Main Gate",
            "destination": "North Beach"
        }
    )
    assert response.status_code == 201
    return response.json()


async def test_create_bus_for_unknown_event(client: AsyncClient, admin_auth_headers):
    response = await client.post(
        "/buses",
        headers=admin_auth_headers,
        json={
            "event_id": "00000000-0000-0000-0000-000000000000",
            "bus_number": "B-1",
            "capacity": 10,
            "departure_time": "2030-01-01T08:00:00",
            "departure_location": "Main Gate",
            "destination": "Stadium"
        }
    )

    assert response.status_code == 404


async def test_reserve_counts_seats(client: AsyncClient, event, admin_auth_headers, auth_headers):
    bus = await create_bus(client, admin_auth_headers, event, capacity=3)

    response = await client.post(f"/buses/{bus['id']}/reserve", headers=auth_headers, json={"passenger_count": 2})
    assert response.status_code == 201
    assert response.json()["status"] == "Confirmed"

    bus = (await client.get(f"/buses/{bus['id']}", headers=auth_headers)).json()
    assert bus["current_passengers"] == 2
    assert bus["available_seats"] == 1

    listed = (await client.get(f"/events/{event['id']}/buses", headers=auth_headers)).json()
    assert [b["id"] for b in listed] == [bus["id"]]


async def test_reserve_over_capacity(client: AsyncClient, event, admin_auth_headers):
    bus = await create_bus(client, admin_auth_headers, event, capacity=2)
    first, second = await make_student(), await make_student()

    await client.post(f"/buses/{bus['id']}/reserve", headers=token_for(first), json={"passenger_count": 2})
    response = await client.post(f"/buses/{bus['id']}/reserve", headers=token_for(second), json={})

    assert response.status_code == 400


async def test_duplicate_reservation(client: AsyncClient, event, admin_auth_headers, auth_headers):
    bus = await create_bus(client, admin_auth_headers, event)
    await client.post(f"/buses/{bus['id']}/reserve", headers=auth_headers, json={})

    response = await client.post(f"/buses/{bus['id']}/reserve", headers=auth_headers, json={})

    assert response.status_code == 409


async def test_cancel_reservation_frees_seats(client: AsyncClient, event, admin_auth_headers, auth_headers):
    bus = await create_bus(client, admin_auth_headers, event, capacity=1)
    reservation = (await client.post(f"/buses/{bus['id']}/reserve", headers=auth_headers, json={})).json()

    response = await client.post(f"/buses/reservations/{reservation['id']}/cancel", headers=auth_headers)
    assert response.json()["status"] == "Cancelled"
    assert (await client.get(f"/buses/{bus['id']}", headers=auth_headers)).json()["available_seats"] == 1

    response = await client.post(f"/buses/reservations/{reservation['id']}/cancel", headers=auth_headers)
    assert response.status_code == 400

    # Seat can be taken again after cancelling
    response = await client.post(f"/buses/{bus['id']}/reserve", headers=auth_headers, json={})
    assert response.status_code == 201


async def test_other_user_cannot_cancel(client: AsyncClient, event, admin_auth_headers, auth_headers):
    bus = await create_bus(client, admin_auth_headers, event)
    reservation = (await client.post(f"/buses/{bus['id']}/reserve", headers=auth_headers, json={})).json()
    other = await make_student()

    response = await client.post(f"/buses/reservations/{reservation['id']}/cancel", headers=token_for(other))

    assert response.status_code == 404


async def test_capacity_cannot_drop_below_reserved(client: AsyncClient, event, admin_auth_headers, auth_headers):
    bus = await create_bus(client, admin_auth_headers, event, capacity=5)
    await client.post(f"/buses/{bus['id']}/reserve", headers=auth_headers, json={"passenger_count": 3})

    response = await client.put(f"/buses/{bus['id']}", headers=admin_auth_headers, json={"capacity": 2})
    assert response.status_code == 400

    response = await client.put(f"/buses/{bus['id']}", headers=admin_auth_headers, json={"capacity": 4})
    assert response.json()["available_seats"] == 1


async def test_delete_bus(client: AsyncClient, event, admin_auth_headers, auth_headers):
    bus = await create_bus(client, admin_auth_headers, event)
    await client.post(f"/buses/{bus['id']}/reserve", headers=auth_headers, json={})

    response = await client.delete(f"/buses/{bus['id']}", headers=admin_auth_headers)

    assert response.status_code == 200
    assert (await client.get(f"/buses/{bus['id']}", headers=auth_headers)).status_code == 404
    assert (await client.get("/buses/reservations/me", headers=auth_headers)).json() == []


async def test_students_cannot_manage_buses(client: AsyncClient, auth_headers):
    assert (await client.get("/buses", headers=auth_headers)).status_code == 403
