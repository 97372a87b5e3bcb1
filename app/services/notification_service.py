"""
Notification Service
In-app notifications for single users, event registrants and everyone
"""

import logging
from uuid import uuid4
from typing import List, Optional

from fastapi import HTTPException, status

from app.database import database
from app.utils.datetime_utils import now_local

logger = logging.getLogger(__name__)


class NotificationType:
    GENERAL = "General"
    EVENT_CREATED = "EventCreated"
    EVENT_UPDATE = "EventUpdate"
    REGISTRATION_CONFIRMED = "RegistrationConfirmed"
    REGISTRATION_WAITLISTED = "RegistrationWaitlisted"
    REGISTRATION_PROMOTED = "RegistrationPromoted"
    REGISTRATION_CANCELLED = "RegistrationCancelled"
    ATTENDANCE_CONFIRMED = "AttendanceConfirmed"
    CERTIFICATE_ISSUED = "CertificateIssued"
    CLUB_MEMBERSHIP_APPROVED = "ClubMembershipApproved"
    CLUB_MEMBERSHIP_REJECTED = "ClubMembershipRejected"
    ADMIN = "AdminNotification"


INSERT_NOTIFICATION = """
    INSERT INTO notifications (id, user_id, event_id, message, type, is_read, sent_date)
    VALUES (:id, :user_id, :event_id, :message, :type, FALSE, :sent_date)
"""


class NotificationService:
    """Service for notification delivery and inbox operations"""

    @staticmethod
    async def send(
        user_id: str,
        message: str,
        notification_type: str = NotificationType.GENERAL,
        event_id: Optional[str] = None
    ) -> str:
        """Create one notification and return its ID"""
        notification_id = str(uuid4())

        await database.execute(
            INSERT_NOTIFICATION,
            {
                "id": notification_id,
                "user_id": str(user_id),
                "event_id": str(event_id) if event_id else None,
                "message": message,
                "type": notification_type,
                "sent_date": now_local()
            }
        )

        return notification_id

    @staticmethod
    async def send_many(
        user_ids: List[str],
        message: str,
        notification_type: str,
        event_id: Optional[str] = None
    ) -> int:
        """Send the same notification to several users"""
        if not user_ids:
            return 0

        sent_date = now_local()
        await database.execute_many(
            INSERT_NOTIFICATION,
            [
                {
                    "id": str(uuid4()),
                    "user_id": str(user_id),
                    "event_id": str(event_id) if event_id else None,
                    "message": message,
                    "type": notification_type,
                    "sent_date": sent_date
                }
                for user_id in user_ids
            ]
        )

        logger.info(f"Sent {notification_type} notification to {len(user_ids)} users")
        return len(user_ids)

    @staticmethod
    async def send_to_all(
        message: str,
        notification_type: str,
        event_id: Optional[str] = None,
        active_only: bool = True
    ) -> int:
        query = "SELECT id FROM users"
        if active_only:
            query += " WHERE is_active = TRUE"

        rows = await database.fetch_all(query)
        return await NotificationService.send_many(
            [row["id"] for row in rows], message, notification_type, event_id
        )

    @staticmethod
    async def send_to_event_registrants(
        event_id: str,
        message: str,
        notification_type: str = NotificationType.EVENT_UPDATE
    ) -> int:
        """Notify every user with an active registration for the event"""
        rows = await database.fetch_all(
            """
            SELECT DISTINCT user_id FROM registrations
            WHERE event_id = :event_id AND status != 'Cancelled'
            """,
            {"event_id": str(event_id)}
        )
        return await NotificationService.send_many(
            [row["user_id"] for row in rows], message, notification_type, event_id
        )

    @staticmethod
    async def list_for_user(user_id: str, unread_only: bool = False, limit: Optional[int] = None) -> List[dict]:
        query = """
            SELECT n.*, e.title AS event_title
            FROM notifications n
            LEFT JOIN events e ON e.id = n.event_id
            WHERE n.user_id = :user_id
        """
        params = {"user_id": str(user_id)}

        if unread_only:
            query += " AND n.is_read = FALSE"
        query += " ORDER BY n.sent_date DESC, n.id"
        if limit:
            query += " LIMIT :limit"
            params["limit"] = limit

        rows = await database.fetch_all(query, params)
        return [dict(row) for row in rows]

    @staticmethod
    async def unread_count(user_id: str) -> int:
        count = await database.fetch_val(
            "SELECT COUNT(*) FROM notifications WHERE user_id = :user_id AND is_read = FALSE",
            {"user_id": str(user_id)}
        )
        return count or 0

    @staticmethod
    async def get_for_user(notification_id: str, user_id: str) -> dict:
        """Fetch a notification owned by the user"""
        row = await database.fetch_one(
            """
            SELECT n.*, e.title AS event_title
            FROM notifications n
            LEFT JOIN events e ON e.id = n.event_id
            WHERE n.id = :id AND n.user_id = :user_id
            """,
            {"id": str(notification_id), "user_id": str(user_id)}
        )

        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Notification not found"
            )

        return dict(row)

    @staticmethod
    async def open(notification_id: str, user_id: str) -> dict:
        """Details view; opening a notification marks it read"""
        notification = await NotificationService.get_for_user(notification_id, user_id)
        if not notification["is_read"]:
            await NotificationService.mark_read(notification_id, user_id)
            notification["is_read"] = True
        return notification

    @staticmethod
    async def mark_read(notification_id: str, user_id: str) -> None:
        await NotificationService.get_for_user(notification_id, user_id)
        await database.execute(
            "UPDATE notifications SET is_read = TRUE WHERE id = :id",
            {"id": str(notification_id)}
        )

    @staticmethod
    async def mark_all_read(user_id: str) -> int:
        unread = await NotificationService.unread_count(user_id)
        await database.execute(
            "UPDATE notifications SET is_read = TRUE WHERE user_id = :user_id AND is_read = FALSE",
            {"user_id": str(user_id)}
        )
        return unread

    @staticmethod
    async def delete(notification_id: str, user_id: str) -> None:
        await NotificationService.get_for_user(notification_id, user_id)
        await database.execute(
            "DELETE FROM notifications WHERE id = :id",
            {"id": str(notification_id)}
        )

    @staticmethod
    async def broadcast(message: str, event_id: Optional[str] = None) -> int:
        """Admin broadcast to every active user"""
        if event_id:
            event = await database.fetch_one(
                "SELECT id FROM events WHERE id = :id", {"id": str(event_id)}
            )
            if not event:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Event not found"
                )

        return await NotificationService.send_to_all(message, NotificationType.ADMIN, event_id)

    @staticmethod
    async def admin_overview(limit: int = 50) -> List[dict]:
        """Sent notifications grouped by message and send time"""
        rows = await database.fetch_all(
            """
            SELECT
                message,
                type,
                sent_date,
                COUNT(*) AS recipients,
                SUM(CASE WHEN is_read = TRUE THEN 1 ELSE 0 END) AS read_count
            FROM notifications
            GROUP BY message, type, sent_date
            ORDER BY sent_date DESC
            LIMIT :limit
            """,
            {"limit": limit}
        )
        return [dict(row) for row in rows]


notification_service = NotificationService()
