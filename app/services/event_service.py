"""
Event Service
Business logic for the event catalogue and admin event management
"""

import logging
from uuid import uuid4
from typing import Optional

from fastapi import HTTPException, status

from app.auth import is_admin
from app.database import database
from app.schemas.event import CreateEventRequest, UpdateEventRequest
from app.services.notification_service import notification_service, NotificationType
from app.utils.datetime_utils import now_local, to_local_naive

logger = logging.getLogger(__name__)

# Children removed together with an event
EVENT_CHILD_TABLES = ("feedbacks", "certificates", "attendances", "registrations")


def new_event_secret() -> str:
    return uuid4().hex


class EventService:
    """Service for event operations"""

    @staticmethod
    async def get_event(event_id: str) -> dict:
        """Get event by ID"""
        event = await database.fetch_one(
            "SELECT * FROM events WHERE id = :id",
            {"id": str(event_id)}
        )

        if not event:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Event not found"
            )

        return dict(event)

    @staticmethod
    async def get_event_by_secret(secret: str) -> dict:
        """Get event by its QR check-in secret"""
        event = await database.fetch_one(
            "SELECT * FROM events WHERE secret = :secret",
            {"secret": secret}
        ) if secret else None

        if not event:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Event not found"
            )

        return dict(event)

    @staticmethod
    async def get_visible_event(event_id: str, viewer_is_admin: bool) -> dict:
        """Unapproved events are hidden from non-admins"""
        event = await EventService.get_event(event_id)
        if not event["is_approved"] and not viewer_is_admin:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Event not found"
            )
        return event

    @staticmethod
    async def list_events(
        search: Optional[str] = None,
        event_type: Optional[str] = None,
        approved_only: bool = True,
        skip: int = 0,
        limit: int = 50
    ) -> dict:
        """List events, newest event date first"""
        conditions = []
        params = {}

        if approved_only:
            conditions.append("is_approved = TRUE")

        if search:
            conditions.append("(LOWER(title) LIKE :search OR LOWER(COALESCE(description, '')) LIKE :search)")
            params["search"] = f"%{search.strip().lower()}%"

        if event_type:
            conditions.append("event_type = :event_type")
            params["event_type"] = event_type

        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""

        total = await database.fetch_val(f"SELECT COUNT(*) FROM events{where}", params)
        events = await database.fetch_all(
            f"SELECT * FROM events{where} ORDER BY event_date DESC LIMIT :limit OFFSET :skip",
            {**params, "limit": limit, "skip": skip}
        )

        return {
            "total": total or 0,
            "events": [dict(event) for event in events]
        }

    @staticmethod
    async def upcoming_events(limit: int = 10) -> list:
        events = await database.fetch_all(
            """
            SELECT * FROM events
            WHERE is_approved = TRUE AND event_date >= :now
            ORDER BY event_date ASC
            LIMIT :limit
            """,
            {"now": now_local(), "limit": limit}
        )
        return [dict(event) for event in events]

    @staticmethod
    async def get_event_details(event_id: str, current_user: Optional[dict] = None) -> dict:
        """Event with live registration, attendance and rating figures"""
        viewer_is_admin = is_admin(current_user)
        event = await EventService.get_visible_event(event_id, viewer_is_admin)
        params = {"event_id": str(event_id)}

        confirmed = await database.fetch_val(
            "SELECT COUNT(*) FROM registrations WHERE event_id = :event_id AND status = 'Confirmed'", params
        ) or 0
        waitlist = await database.fetch_val(
            "SELECT COUNT(*) FROM registrations WHERE event_id = :event_id AND status = 'Waitlist'", params
        ) or 0
        attendance = await database.fetch_val(
            "SELECT COUNT(*) FROM attendances WHERE event_id = :event_id AND is_present = TRUE", params
        ) or 0
        rating = await database.fetch_one(
            "SELECT COUNT(*) AS count, AVG(rating) AS average FROM feedbacks WHERE event_id = :event_id", params
        )

        my_registration = None
        if current_user:
            row = await database.fetch_one(
                """
                SELECT id, status, guest_count, registration_date FROM registrations
                WHERE event_id = :event_id AND user_id = :user_id
                """,
                {**params, "user_id": str(current_user["user_id"])}
            )
            my_registration = dict(row) if row else None

        average = rating["average"] if rating else None

        return {
            **event,
            "confirmed_count": confirmed,
            "waitlist_count": waitlist,
            "available_seats": max(event["max_capacity"] - confirmed, 0),
            "attendance_count": attendance,
            "feedback_count": rating["count"] if rating else 0,
            "average_rating": round(float(average), 2) if average is not None else None,
            "my_registration": my_registration
        }

    @staticmethod
    async def create_event(data: CreateEventRequest, admin_id: str) -> dict:
        """Create an approved event and announce it to every active user"""
        event_id = str(uuid4())

        await database.execute(
            """
            INSERT INTO events (
                id, title, description, event_date, venue, event_type, image_url,
                max_capacity, volunteer_hours, secret, created_by, is_approved, created_date
            )
            VALUES (
                :id, :title, :description, :event_date, :venue, :event_type, :image_url,
                :max_capacity, :volunteer_hours, :secret, :created_by, TRUE, :created_date
            )
            """,
            {
                "id": event_id,
                "title": data.title.strip(),
                "description": data.description,
                "event_date": to_local_naive(data.event_date),
                "venue": data.venue,
                "event_type": data.event_type,
                "image_url": data.image_url,
                "max_capacity": data.max_capacity,
                "volunteer_hours": data.volunteer_hours,
                "secret": new_event_secret(),
                "created_by": str(admin_id),
                "created_date": now_local()
            }
        )

        await notification_service.send_to_all(
            f"New event: {data.title.strip()}",
            NotificationType.EVENT_CREATED,
            event_id
        )

        logger.info(f"Event {event_id} created by admin {admin_id}")
        return await EventService.get_event(event_id)

    @staticmethod
    async def update_event(event_id: str, data: UpdateEventRequest) -> dict:
        """Update event fields and tell current registrants"""
        event = await EventService.get_event(event_id)
        fields = data.model_dump(exclude_unset=True, exclude_none=True)

        if "event_date" in fields:
            fields["event_date"] = to_local_naive(fields["event_date"])

        if not fields:
            return event

        assignments = ", ".join(f"{name} = :{name}" for name in fields)
        await database.execute(
            f"UPDATE events SET {assignments} WHERE id = :id",
            {**fields, "id": str(event_id)}
        )

        title = fields.get("title", event["title"])
        await notification_service.send_to_event_registrants(
            event_id,
            f"The event '{title}' has been updated. Please review the latest details.",
            NotificationType.EVENT_UPDATE
        )

        return await EventService.get_event(event_id)

    @staticmethod
    async def set_image(event_id: str, image_url: str) -> dict:
        await EventService.get_event(event_id)
        await database.execute(
            "UPDATE events SET image_url = :image_url WHERE id = :id",
            {"image_url": image_url, "id": str(event_id)}
        )
        return await EventService.get_event(event_id)

    @staticmethod
    async def ensure_secret(event_id: str) -> dict:
        """Give the event a check-in secret if it does not have one yet"""
        event = await EventService.get_event(event_id)
        if not event.get("secret"):
            event["secret"] = new_event_secret()
            await database.execute(
                "UPDATE events SET secret = :secret WHERE id = :id",
                {"secret": event["secret"], "id": str(event_id)}
            )
        return event

    @staticmethod
    async def delete_event(event_id: str) -> None:
        """Delete an event with its registrations, attendance, feedback, certificates and buses"""
        await EventService.get_event(event_id)
        params = {"event_id": str(event_id)}

        async with database.transaction():
            for table in EVENT_CHILD_TABLES:
                await database.execute(f"DELETE FROM {table} WHERE event_id = :event_id", params)

            await database.execute(
                "DELETE FROM bus_reservations WHERE bus_id IN (SELECT id FROM buses WHERE event_id = :event_id)",
                params
            )
            await database.execute("DELETE FROM buses WHERE event_id = :event_id", params)
            await database.execute("UPDATE notifications SET event_id = NULL WHERE event_id = :event_id", params)
            await database.execute("DELETE FROM events WHERE id = :event_id", params)

        logger.info(f"Event {event_id} deleted")


# Create singleton instance
event_service = EventService()
