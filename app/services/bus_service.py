"""
Bus Service
Event transport and seat reservations
"""

import logging
from uuid import uuid4

from fastapi import HTTPException, status

from app.database import database
from app.services.event_service import event_service
from app.utils.datetime_utils import now_local, to_local_naive

logger = logging.getLogger(__name__)

RESERVATION_SELECT = """
    SELECT r.*, b.bus_number, b.departure_time, b.departure_location, b.destination,
           b.event_id, e.title AS event_title
    FROM bus_reservations r
    JOIN buses b ON b.id = r.bus_id
    JOIN events e ON e.id = b.event_id
"""


def _with_seats(row) -> dict:
    bus = dict(row)
    bus["available_seats"] = max(bus["capacity"] - bus["current_passengers"], 0)
    return bus


class BusService:
    """Service for bus operations"""

    @staticmethod
    async def get_bus(bus_id: str) -> dict:
        bus = await database.fetch_one(
            "SELECT * FROM buses WHERE id = :id",
            {"id": str(bus_id)}
        )

        if not bus:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Bus not found"
            )

        return _with_seats(bus)

    @staticmethod
    async def list_for_event(event_id: str) -> list:
        await event_service.get_event(event_id)
        rows = await database.fetch_all(
            "SELECT * FROM buses WHERE event_id = :event_id ORDER BY departure_time ASC, bus_number",
            {"event_id": str(event_id)}
        )
        return [_with_seats(row) for row in rows]

    @staticmethod
    async def list_all() -> list:
        rows = await database.fetch_all("SELECT * FROM buses ORDER BY departure_time DESC")
        return [_with_seats(row) for row in rows]

    @staticmethod
    async def reserved_seats(bus_id: str) -> int:
        total = await database.fetch_val(
            """
            SELECT COALESCE(SUM(passenger_count), 0) FROM bus_reservations
            WHERE bus_id = :bus_id AND status = 'Confirmed'
            """,
            {"bus_id": str(bus_id)}
        )
        return int(total or 0)

    @staticmethod
    async def reserve(bus_id: str, user_id: str, passenger_count: int = 1) -> dict:
        """Reserve seats; one active reservation per user per bus"""
        bus = await BusService.get_bus(bus_id)

        existing = await database.fetch_one(
            """
            SELECT id FROM bus_reservations
            WHERE bus_id = :bus_id AND user_id = :user_id AND status = 'Confirmed'
            """,
            {"bus_id": str(bus_id), "user_id": str(user_id)}
        )
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="You already have a reservation on this bus"
            )

        reservation_id = str(uuid4())

        async with database.transaction():
            reserved = await BusService.reserved_seats(bus_id)
            if reserved + passenger_count > bus["capacity"]:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Only {max(bus['capacity'] - reserved, 0)} seats available"
                )

            await database.execute(
                """
                INSERT INTO bus_reservations (id, bus_id, user_id, passenger_count, status, reservation_date)
                VALUES (:id, :bus_id, :user_id, :passenger_count, 'Confirmed', :now)
                """,
                {
                    "id": reservation_id,
                    "bus_id": str(bus_id),
                    "user_id": str(user_id),
                    "passenger_count": passenger_count,
                    "now": now_local()
                }
            )
            await database.execute(
                "UPDATE buses SET current_passengers = :count WHERE id = :id",
                {"count": reserved + passenger_count, "id": str(bus_id)}
            )

        logger.info(f"User {user_id} reserved {passenger_count} seats on bus {bus_id}")
        return await BusService.get_reservation(reservation_id)

    @staticmethod
    async def get_reservation(reservation_id: str) -> dict:
        row = await database.fetch_one(
            f"{RESERVATION_SELECT} WHERE r.id = :id",
            {"id": str(reservation_id)}
        )

        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Reservation not found"
            )

        return dict(row)

    @staticmethod
    async def cancel_reservation(reservation_id: str, user_id: str) -> dict:
        reservation = await BusService.get_reservation(reservation_id)

        if str(reservation["user_id"]) != str(user_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Reservation not found"
            )

        if reservation["status"] == "Cancelled":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Reservation is already cancelled"
            )

        bus_id = str(reservation["bus_id"])
        async with database.transaction():
            await database.execute(
                "UPDATE bus_reservations SET status = 'Cancelled' WHERE id = :id",
                {"id": str(reservation_id)}
            )
            reserved = await BusService.reserved_seats(bus_id)
            await database.execute(
                "UPDATE buses SET current_passengers = :count WHERE id = :id",
                {"count": reserved, "id": bus_id}
            )

        return await BusService.get_reservation(reservation_id)

    @staticmethod
    async def my_reservations(user_id: str) -> list:
        rows = await database.fetch_all(
            f"{RESERVATION_SELECT} WHERE r.user_id = :user_id AND r.status = 'Confirmed' ORDER BY b.departure_time ASC",
            {"user_id": str(user_id)}
        )
        return [dict(row) for row in rows]

    @staticmethod
    async def bus_reservations(bus_id: str) -> list:
        await BusService.get_bus(bus_id)
        rows = await database.fetch_all(
            f"{RESERVATION_SELECT} WHERE r.bus_id = :bus_id ORDER BY r.reservation_date ASC",
            {"bus_id": str(bus_id)}
        )
        return [dict(row) for row in rows]

    # Admin operations

    @staticmethod
    async def create_bus(data) -> dict:
        await event_service.get_event(data.event_id)
        bus_id = str(uuid4())

        await database.execute(
            """
            INSERT INTO buses (
                id, event_id, bus_number, capacity, current_passengers,
                departure_time, departure_location, destination, created_date
            )
            VALUES (
                :id, :event_id, :bus_number, :capacity, 0,
                :departure_time, :departure_location, :destination, :created_date
            )
            """,
            {
                "id": bus_id,
                "event_id": str(data.event_id),
                "bus_number": data.bus_number,
                "capacity": data.capacity,
                "departure_time": to_local_naive(data.departure_time),
                "departure_location": data.departure_location,
                "destination": data.destination,
                "created_date": now_local()
            }
        )

        return await BusService.get_bus(bus_id)

    @staticmethod
    async def update_bus(bus_id: str, data) -> dict:
        bus = await BusService.get_bus(bus_id)
        fields = data.model_dump(exclude_unset=True, exclude_none=True)

        if "capacity" in fields and fields["capacity"] < bus["current_passengers"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Capacity cannot be lower than the {bus['current_passengers']} seats already reserved"
            )

        if "departure_time" in fields:
            fields["departure_time"] = to_local_naive(fields["departure_time"])

        if fields:
            assignments = ", ".join(f"{name} = :{name}" for name in fields)
            await database.execute(
                f"UPDATE buses SET {assignments} WHERE id = :id",
                {**fields, "id": str(bus_id)}
            )

        return await BusService.get_bus(bus_id)

    @staticmethod
    async def delete_bus(bus_id: str) -> None:
        await BusService.get_bus(bus_id)
        async with database.transaction():
            await database.execute("DELETE FROM bus_reservations WHERE bus_id = :id", {"id": str(bus_id)})
            await database.execute("DELETE FROM buses WHERE id = :id", {"id": str(bus_id)})


bus_service = BusService()
