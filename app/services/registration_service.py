"""
Registration Service
Event sign-up with capacity and waitlist accounting
"""

import logging
from uuid import uuid4
from typing import Optional

from fastapi import HTTPException, status

from app.auth import is_admin
from app.database import database
from app.services.email_service import email_service
from app.services.event_service import event_service
from app.services.notification_service import notification_service, NotificationType
from app.utils.datetime_utils import now_local, as_datetime

logger = logging.getLogger(__name__)

CONFIRMED = "Confirmed"
WAITLIST = "Waitlist"
CANCELLED = "Cancelled"

REGISTRATION_SELECT = """
    SELECT r.*, e.title AS event_title, e.event_date, e.venue,
           u.first_name || ' ' || u.last_name AS user_name, u.email AS user_email
    FROM registrations r
    JOIN events e ON e.id = r.event_id
    JOIN users u ON u.id = r.user_id
"""


class RegistrationService:
    """Service for event registrations"""

    @staticmethod
    async def confirmed_count(event_id: str) -> int:
        count = await database.fetch_val(
            "SELECT COUNT(*) FROM registrations WHERE event_id = :event_id AND status = 'Confirmed'",
            {"event_id": str(event_id)}
        )
        return count or 0

    @staticmethod
    async def waitlist_count(event_id: str) -> int:
        count = await database.fetch_val(
            "SELECT COUNT(*) FROM registrations WHERE event_id = :event_id AND status = 'Waitlist'",
            {"event_id": str(event_id)}
        )
        return count or 0

    @staticmethod
    async def get_registration(registration_id: str) -> dict:
        row = await database.fetch_one(
            f"{REGISTRATION_SELECT} WHERE r.id = :id",
            {"id": str(registration_id)}
        )

        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Registration not found"
            )

        return dict(row)

    @staticmethod
    async def get_user_registration(event_id: str, user_id: str) -> Optional[dict]:
        row = await database.fetch_one(
            "SELECT * FROM registrations WHERE event_id = :event_id AND user_id = :user_id",
            {"event_id": str(event_id), "user_id": str(user_id)}
        )
        return dict(row) if row else None

    @staticmethod
    async def register(event_id: str, user_id: str, guest_count: int = 0) -> dict:
        """
        Register a user for an event

        The registration is confirmed while confirmed seats remain, otherwise
        it joins the waitlist. A cancelled registration is reactivated.
        """
        event = await event_service.get_event(event_id)

        if not event["is_approved"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Event is not open for registration"
            )

        if as_datetime(event["event_date"]) < now_local():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Event has already taken place"
            )

        existing = await RegistrationService.get_user_registration(event_id, user_id)
        if existing and existing["status"] != CANCELLED:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="You are already registered for this event"
            )

        async with database.transaction():
            confirmed = await RegistrationService.confirmed_count(event_id)
            new_status = WAITLIST if confirmed >= event["max_capacity"] else CONFIRMED
            values = {
                "status": new_status,
                "guest_count": guest_count,
                "registration_date": now_local()
            }

            if existing:
                registration_id = str(existing["id"])
                await database.execute(
                    """
                    UPDATE registrations
                    SET status = :status, guest_count = :guest_count, registration_date = :registration_date
                    WHERE id = :id
                    """,
                    {**values, "id": registration_id}
                )
            else:
                registration_id = str(uuid4())
                await database.execute(
                    """
                    INSERT INTO registrations (id, user_id, event_id, status, guest_count, registration_date)
                    VALUES (:id, :user_id, :event_id, :status, :guest_count, :registration_date)
                    """,
                    {**values, "id": registration_id, "user_id": str(user_id), "event_id": str(event_id)}
                )

        if new_status == CONFIRMED:
            message = f"Your registration for '{event['title']}' is confirmed."
            notification_type = NotificationType.REGISTRATION_CONFIRMED
        else:
            message = f"'{event['title']}' is full. You have been added to the waitlist."
            notification_type = NotificationType.REGISTRATION_WAITLISTED

        await notification_service.send(user_id, message, notification_type, event_id)

        registration = await RegistrationService.get_registration(registration_id)
        if new_status == CONFIRMED:
            await email_service.send_registration_email(
                registration["user_email"], registration["user_name"].split(" ")[0], event
            )

        logger.info(f"User {user_id} registered for event {event_id} ({new_status})")
        return registration

    @staticmethod
    async def cancel(registration_id: str, user_id: str) -> dict:
        """Cancel the user's registration; a freed seat goes to the oldest waitlisted user"""
        registration = await RegistrationService.get_registration(registration_id)

        if str(registration["user_id"]) != str(user_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Registration not found"
            )

        if registration["status"] == CANCELLED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Registration is already cancelled"
            )

        event_id = str(registration["event_id"])
        promoted = None

        async with database.transaction():
            await database.execute(
                "UPDATE registrations SET status = 'Cancelled' WHERE id = :id",
                {"id": str(registration_id)}
            )

            if registration["status"] == CONFIRMED:
                promoted = await database.fetch_one(
                    """
                    SELECT id, user_id FROM registrations
                    WHERE event_id = :event_id AND status = 'Waitlist'
                    ORDER BY registration_date ASC, id ASC
                    LIMIT 1
                    """,
                    {"event_id": event_id}
                )
                if promoted:
                    await database.execute(
                        "UPDATE registrations SET status = 'Confirmed' WHERE id = :id",
                        {"id": str(promoted["id"])}
                    )

        await notification_service.send(
            user_id,
            f"Your registration for '{registration['event_title']}' has been cancelled.",
            NotificationType.REGISTRATION_CANCELLED,
            event_id
        )

        if promoted:
            await notification_service.send(
                promoted["user_id"],
                f"A seat opened up. Your registration for '{registration['event_title']}' is now confirmed.",
                NotificationType.REGISTRATION_PROMOTED,
                event_id
            )
            logger.info(f"Registration {promoted['id']} promoted from waitlist for event {event_id}")

        return await RegistrationService.get_registration(registration_id)

    @staticmethod
    async def get_registration_for_viewer(registration_id: str, current_user: dict) -> dict:
        """Owners and admins can see a registration"""
        registration = await RegistrationService.get_registration(registration_id)
        if not is_admin(current_user) and str(registration["user_id"]) != str(current_user["user_id"]):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Registration not found"
            )
        return registration

    @staticmethod
    async def my_registrations(user_id: str, include_cancelled: bool = False) -> list:
        query = f"{REGISTRATION_SELECT} WHERE r.user_id = :user_id"
        if not include_cancelled:
            query += " AND r.status != 'Cancelled'"
        query += " ORDER BY e.event_date DESC"

        rows = await database.fetch_all(query, {"user_id": str(user_id)})
        return [dict(row) for row in rows]

    @staticmethod
    async def event_registrations(event_id: str, status_filter: Optional[str] = None) -> list:
        """All registrations for an event; the waitlist is returned oldest first"""
        await event_service.get_event(event_id)

        query = f"{REGISTRATION_SELECT} WHERE r.event_id = :event_id"
        params = {"event_id": str(event_id)}
        if status_filter:
            query += " AND r.status = :status"
            params["status"] = status_filter
        query += " ORDER BY r.registration_date ASC, r.id ASC"

        rows = await database.fetch_all(query, params)
        return [dict(row) for row in rows]


registration_service = RegistrationService()
