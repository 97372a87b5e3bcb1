"""
Feedback Service
Attendee ratings and comments for events
"""

from uuid import uuid4
from typing import Optional

from fastapi import HTTPException, status

from app.database import database
from app.services.attendance_service import attendance_service
from app.services.event_service import event_service
from app.utils.datetime_utils import now_local

FEEDBACK_SELECT = """
    SELECT f.*, e.title AS event_title,
           u.first_name || ' ' || u.last_name AS user_name
    FROM feedbacks f
    JOIN events e ON e.id = f.event_id
    JOIN users u ON u.id = f.user_id
"""


class FeedbackService:
    """Service for feedback operations"""

    @staticmethod
    async def submit(event_id: str, user_id: str, rating: int, comment: Optional[str] = None) -> dict:
        """Only attendees may rate an event, once each"""
        await event_service.get_event(event_id)

        if not await attendance_service.has_attended(event_id, user_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You must attend the event before rating it"
            )

        existing = await database.fetch_one(
            "SELECT id FROM feedbacks WHERE event_id = :event_id AND user_id = :user_id",
            {"event_id": str(event_id), "user_id": str(user_id)}
        )
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="You have already rated this event"
            )

        feedback_id = str(uuid4())
        await database.execute(
            """
            INSERT INTO feedbacks (id, user_id, event_id, rating, comment, submitted_date)
            VALUES (:id, :user_id, :event_id, :rating, :comment, :now)
            """,
            {
                "id": feedback_id,
                "user_id": str(user_id),
                "event_id": str(event_id),
                "rating": rating,
                "comment": comment,
                "now": now_local()
            }
        )

        return await FeedbackService.get_feedback(feedback_id)

    @staticmethod
    async def get_feedback(feedback_id: str) -> dict:
        row = await database.fetch_one(f"{FEEDBACK_SELECT} WHERE f.id = :id", {"id": str(feedback_id)})

        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Feedback not found"
            )

        return dict(row)

    @staticmethod
    async def event_feedback(event_id: str) -> dict:
        """Feedback for one event with its average rating"""
        event = await event_service.get_event(event_id)
        rows = await database.fetch_all(
            f"{FEEDBACK_SELECT} WHERE f.event_id = :event_id ORDER BY f.submitted_date DESC",
            {"event_id": str(event_id)}
        )
        feedback = [dict(row) for row in rows]
        average = round(sum(f["rating"] for f in feedback) / len(feedback), 2) if feedback else None

        return {
            "event_id": str(event_id),
            "event_title": event["title"],
            "count": len(feedback),
            "average_rating": average,
            "feedback": feedback
        }

    @staticmethod
    async def all_feedback() -> list:
        rows = await database.fetch_all(f"{FEEDBACK_SELECT} ORDER BY f.submitted_date DESC")
        return [dict(row) for row in rows]

    @staticmethod
    async def my_feedback(user_id: str) -> list:
        rows = await database.fetch_all(
            f"{FEEDBACK_SELECT} WHERE f.user_id = :user_id ORDER BY f.submitted_date DESC",
            {"user_id": str(user_id)}
        )
        return [dict(row) for row in rows]

    @staticmethod
    async def delete(feedback_id: str) -> None:
        await FeedbackService.get_feedback(feedback_id)
        await database.execute("DELETE FROM feedbacks WHERE id = :id", {"id": str(feedback_id)})


feedback_service = FeedbackService()
