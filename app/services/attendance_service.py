"""
Attendance Service
QR check-in and attendance bookkeeping
"""

import logging
from uuid import uuid4
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException, status

from app.config import settings
from app.database import database
from app.services.event_service import event_service
from app.services.notification_service import notification_service, NotificationType
from app.services.registration_service import registration_service
from app.utils.datetime_utils import now_local, as_datetime

logger = logging.getLogger(__name__)

ATTENDANCE_SELECT = """
    SELECT a.*, e.title AS event_title, e.event_date, e.volunteer_hours,
           u.first_name || ' ' || u.last_name AS user_name, u.email AS user_email,
           u.university_id
    FROM attendances a
    JOIN events e ON e.id = a.event_id
    JOIN users u ON u.id = a.user_id
"""


def check_in_deadline(event_date: datetime) -> datetime:
    """Last moment a check-in is accepted: event end plus the grace period"""
    return event_date + timedelta(
        minutes=settings.EVENT_DURATION_MINUTES + settings.ATTENDANCE_GRACE_MINUTES
    )


class AttendanceService:
    """Service for attendance operations"""

    @staticmethod
    async def get_attendance(event_id: str, user_id: str) -> Optional[dict]:
        row = await database.fetch_one(
            f"{ATTENDANCE_SELECT} WHERE a.event_id = :event_id AND a.user_id = :user_id",
            {"event_id": str(event_id), "user_id": str(user_id)}
        )
        return dict(row) if row else None

    @staticmethod
    async def check_in(event_id: str, user_id: str, now: Optional[datetime] = None) -> dict:
        """
        Record the user's attendance at an event

        Checks run in order: the event exists, the user holds a confirmed
        registration, the event has started and the check-in window
        (event start + duration + grace) has not closed. Checking in twice
        returns the existing record with already_checked_in set.
        """
        now = now or now_local()
        event = await event_service.get_event(event_id)

        registration = await registration_service.get_user_registration(event_id, user_id)
        if not registration or registration["status"] != "Confirmed":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You must have a confirmed registration for this event to check in"
            )

        event_date = as_datetime(event["event_date"])
        if now < event_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot check in before the event starts"
            )

        if now > check_in_deadline(event_date):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="The attendance deadline for this event has passed"
            )

        existing = await AttendanceService.get_attendance(event_id, user_id)
        if existing and existing["is_present"]:
            return {**existing, "already_checked_in": True}

        if existing:
            await database.execute(
                "UPDATE attendances SET is_present = TRUE, check_in_time = :now WHERE id = :id",
                {"now": now, "id": str(existing["id"])}
            )
        else:
            await database.execute(
                """
                INSERT INTO attendances (id, user_id, event_id, check_in_time, qr_code, is_present)
                VALUES (:id, :user_id, :event_id, :now, :qr_code, TRUE)
                """,
                {
                    "id": str(uuid4()),
                    "user_id": str(user_id),
                    "event_id": str(event_id),
                    "now": now,
                    "qr_code": uuid4().hex
                }
            )

        await notification_service.send(
            user_id,
            f"Your attendance at '{event['title']}' has been recorded. "
            f"{event['volunteer_hours']} volunteer hours will be credited when your certificate is issued.",
            NotificationType.ATTENDANCE_CONFIRMED,
            event_id
        )

        logger.info(f"User {user_id} checked in to event {event_id}")
        attendance = await AttendanceService.get_attendance(event_id, user_id)
        return {**attendance, "already_checked_in": False}

    @staticmethod
    async def check_in_by_secret(secret: str, user_id: str, now: Optional[datetime] = None) -> dict:
        """Check in from a scanned event QR code"""
        event = await event_service.get_event_by_secret(secret)
        return await AttendanceService.check_in(str(event["id"]), user_id, now)

    @staticmethod
    async def mark_attendance(event_id: str, user_id: str, is_present: bool) -> dict:
        """Admin override: create or update the user's attendance record"""
        event = await event_service.get_event(event_id)

        user = await database.fetch_one("SELECT id FROM users WHERE id = :id", {"id": str(user_id)})
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

        existing = await AttendanceService.get_attendance(event_id, user_id)
        now = now_local()

        if existing:
            await database.execute(
                "UPDATE attendances SET is_present = :is_present, check_in_time = :now WHERE id = :id",
                {"is_present": is_present, "now": now, "id": str(existing["id"])}
            )
        else:
            await database.execute(
                """
                INSERT INTO attendances (id, user_id, event_id, check_in_time, qr_code, is_present)
                VALUES (:id, :user_id, :event_id, :now, :qr_code, :is_present)
                """,
                {
                    "id": str(uuid4()),
                    "user_id": str(user_id),
                    "event_id": str(event_id),
                    "now": now,
                    "qr_code": uuid4().hex,
                    "is_present": is_present
                }
            )

        if is_present and not (existing and existing["is_present"]):
            await notification_service.send(
                user_id,
                f"Your attendance at '{event['title']}' has been recorded by an administrator.",
                NotificationType.ATTENDANCE_CONFIRMED,
                event_id
            )

        return await AttendanceService.get_attendance(event_id, user_id)

    @staticmethod
    async def event_attendance(event_id: str) -> list:
        await event_service.get_event(event_id)
        rows = await database.fetch_all(
            f"{ATTENDANCE_SELECT} WHERE a.event_id = :event_id ORDER BY a.check_in_time ASC",
            {"event_id": str(event_id)}
        )
        return [dict(row) for row in rows]

    @staticmethod
    async def attendance_count(event_id: str) -> int:
        count = await database.fetch_val(
            "SELECT COUNT(*) FROM attendances WHERE event_id = :event_id AND is_present = TRUE",
            {"event_id": str(event_id)}
        )
        return count or 0

    @staticmethod
    async def attendance_rate(event_id: str) -> float:
        """Present attendees as a percentage of confirmed registrations"""
        confirmed = await registration_service.confirmed_count(event_id)
        if confirmed == 0:
            return 0.0
        present = await AttendanceService.attendance_count(event_id)
        return round(present / confirmed * 100, 2)

    @staticmethod
    async def my_attendance(user_id: str) -> list:
        rows = await database.fetch_all(
            f"{ATTENDANCE_SELECT} WHERE a.user_id = :user_id AND a.is_present = TRUE ORDER BY a.check_in_time DESC",
            {"user_id": str(user_id)}
        )
        return [dict(row) for row in rows]

    @staticmethod
    async def has_attended(event_id: str, user_id: str) -> bool:
        row = await database.fetch_one(
            """
            SELECT id FROM attendances
            WHERE event_id = :event_id AND user_id = :user_id AND is_present = TRUE
            """,
            {"event_id": str(event_id), "user_id": str(user_id)}
        )
        return row is not None


attendance_service = AttendanceService()
