"""
Report Service
Admin statistics, per-event reports and the student dashboard
"""

from typing import Optional

from app.database import database
from app.services.event_service import event_service
from app.services.notification_service import notification_service
from app.services.registration_service import registration_service
from app.services.user_service import user_service
from app.utils.datetime_utils import now_local, as_datetime


def _rate(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole else 0.0


def _average(value) -> float:
    return round(float(value), 2) if value is not None else 0.0


class ReportService:
    """Service for reporting queries"""

    @staticmethod
    async def dashboard_statistics() -> dict:
        """Platform-wide totals for the admin dashboard"""
        now = {"now": now_local()}

        total_events = await database.fetch_val("SELECT COUNT(*) FROM events") or 0
        approved = await database.fetch_val("SELECT COUNT(*) FROM events WHERE is_approved = TRUE") or 0
        upcoming = await database.fetch_val(
            "SELECT COUNT(*) FROM events WHERE is_approved = TRUE AND event_date >= :now", now
        ) or 0
        past = await database.fetch_val(
            "SELECT COUNT(*) FROM events WHERE is_approved = TRUE AND event_date < :now", now
        ) or 0

        total_users = await database.fetch_val("SELECT COUNT(*) FROM users") or 0
        total_registrations = await database.fetch_val("SELECT COUNT(*) FROM registrations") or 0
        total_attendance = await database.fetch_val(
            "SELECT COUNT(*) FROM attendances WHERE is_present = TRUE"
        ) or 0
        total_certificates = await database.fetch_val("SELECT COUNT(*) FROM certificates") or 0
        feedback = await database.fetch_one("SELECT COUNT(*) AS count, AVG(rating) AS average FROM feedbacks")
        pending_members = await database.fetch_val(
            "SELECT COUNT(*) FROM club_members WHERE status = 'Pending'"
        ) or 0
        open_messages = await database.fetch_val(
            "SELECT COUNT(*) FROM contacts WHERE is_resolved = FALSE"
        ) or 0

        return {
            "total_events": total_events,
            "approved_events": approved,
            "pending_events": total_events - approved,
            "upcoming_events": upcoming,
            "past_events": past,
            "total_users": total_users,
            "total_registrations": total_registrations,
            "total_attendance": total_attendance,
            "attendance_rate": _rate(total_attendance, total_registrations),
            "total_certificates": total_certificates,
            "total_feedback": feedback["count"] if feedback else 0,
            "average_rating": _average(feedback["average"] if feedback else None),
            "pending_memberships": pending_members,
            "open_contact_messages": open_messages
        }

    @staticmethod
    async def event_report(event_id: str) -> dict:
        """Registration, attendance, feedback and certificate figures for one event"""
        event = await event_service.get_event(event_id)
        params = {"event_id": str(event_id)}

        counts = await database.fetch_one(
            """
            SELECT
                COUNT(*) AS total,
                SUM(CASE WHEN status = 'Confirmed' THEN 1 ELSE 0 END) AS confirmed,
                SUM(CASE WHEN status = 'Waitlist' THEN 1 ELSE 0 END) AS waitlist
            FROM registrations WHERE event_id = :event_id
            """,
            params
        )
        attendance = await database.fetch_val(
            "SELECT COUNT(*) FROM attendances WHERE event_id = :event_id AND is_present = TRUE", params
        ) or 0
        feedback = await database.fetch_one(
            "SELECT COUNT(*) AS count, AVG(rating) AS average FROM feedbacks WHERE event_id = :event_id", params
        )
        certificates = await database.fetch_val(
            "SELECT COUNT(*) FROM certificates WHERE event_id = :event_id", params
        ) or 0

        total = counts["total"] or 0

        return {
            "event_id": str(event["id"]),
            "title": event["title"],
            "event_date": event["event_date"],
            "total_registrations": total,
            "confirmed_registrations": counts["confirmed"] or 0,
            "waitlist_count": counts["waitlist"] or 0,
            "total_attendance": attendance,
            "attendance_rate": _rate(attendance, total),
            "total_feedback": feedback["count"] or 0,
            "average_rating": _average(feedback["average"]),
            "certificates_issued": certificates,
            "volunteer_hours": event["volunteer_hours"]
        }

    @staticmethod
    async def event_statistics() -> list:
        """One row of figures per event, newest first"""
        rows = await database.fetch_all(
            """
            SELECT e.id, e.title, e.event_date,
                (SELECT COUNT(*) FROM registrations r WHERE r.event_id = e.id) AS total_registrations,
                (SELECT COUNT(*) FROM attendances a WHERE a.event_id = e.id AND a.is_present = TRUE) AS total_attendance,
                (SELECT COUNT(*) FROM feedbacks f WHERE f.event_id = e.id) AS feedback_count,
                (SELECT AVG(f.rating) FROM feedbacks f WHERE f.event_id = e.id) AS average_rating
            FROM events e
            ORDER BY e.event_date DESC
            """
        )

        return [
            {
                "event_id": str(row["id"]),
                "title": row["title"],
                "event_date": row["event_date"],
                "total_registrations": row["total_registrations"],
                "total_attendance": row["total_attendance"],
                "attendance_rate": _rate(row["total_attendance"], row["total_registrations"]),
                "feedback_count": row["feedback_count"],
                "average_rating": _average(row["average_rating"])
            }
            for row in rows
        ]

    @staticmethod
    async def user_reports(user_type: Optional[str] = None) -> list:
        query = """
            SELECT u.id, u.first_name || ' ' || u.last_name AS full_name, u.email, u.university_id,
                u.user_type, u.total_volunteer_hours, u.join_date,
                (SELECT COUNT(*) FROM registrations r WHERE r.user_id = u.id) AS total_registrations,
                (SELECT COUNT(*) FROM attendances a WHERE a.user_id = u.id AND a.is_present = TRUE) AS total_attendance,
                (SELECT COUNT(*) FROM certificates c WHERE c.user_id = u.id) AS total_certificates
            FROM users u
        """
        params = {}
        if user_type:
            query += " WHERE u.user_type = :user_type"
            params["user_type"] = user_type
        query += " ORDER BY u.total_volunteer_hours DESC, full_name"

        rows = await database.fetch_all(query, params)
        return [dict(row) for row in rows]

    @staticmethod
    async def student_dashboard(user_id: str) -> dict:
        """Everything the student home screen shows"""
        user = await user_service.get_user(user_id)
        now = now_local()

        registrations = await registration_service.my_registrations(user_id, include_cancelled=True)
        upcoming = sorted(
            (r for r in registrations
             if r["status"] != "Cancelled" and as_datetime(r["event_date"]) >= now),
            key=lambda r: as_datetime(r["event_date"])
        )[:3]
        completed = sum(1 for r in registrations if as_datetime(r["event_date"]) < now)

        attended = await database.fetch_val(
            "SELECT COUNT(*) FROM attendances WHERE user_id = :user_id AND is_present = TRUE",
            {"user_id": str(user_id)}
        ) or 0
        attendance_rate = int(attended / len(registrations) * 100) if registrations else 0

        certificates = await database.fetch_all(
            """
            SELECT c.id, c.certificate_number, c.issue_date, e.title AS event_title
            FROM certificates c JOIN events e ON e.id = c.event_id
            WHERE c.user_id = :user_id
            ORDER BY c.issue_date DESC
            """,
            {"user_id": str(user_id)}
        )
        clubs = await database.fetch_all(
            """
            SELECT c.id, c.name, m.status, m.role
            FROM club_members m JOIN clubs c ON c.id = m.club_id
            WHERE m.user_id = :user_id
            ORDER BY c.name
            """,
            {"user_id": str(user_id)}
        )

        return {
            "user": user,
            "total_volunteer_hours": user["total_volunteer_hours"],
            "registrations": registrations,
            "upcoming_events": upcoming,
            "completed_events": completed,
            "attendance_rate": attendance_rate,
            "certificates": [dict(c) for c in certificates],
            "notifications": await notification_service.list_for_user(user_id, limit=5),
            "unread_notifications": await notification_service.unread_count(user_id),
            "clubs": [dict(c) for c in clubs]
        }

    @staticmethod
    async def event_history(user_id: str) -> list:
        """Past events the user registered for, with attendance and certificate state"""
        rows = await database.fetch_all(
            """
            SELECT e.id AS event_id, e.title, e.event_date, e.venue, e.volunteer_hours, r.status,
                a.is_present, a.check_in_time, c.id AS certificate_id, c.certificate_number
            FROM registrations r
            JOIN events e ON e.id = r.event_id
            LEFT JOIN attendances a ON a.event_id = r.event_id AND a.user_id = r.user_id
            LEFT JOIN certificates c ON c.event_id = r.event_id AND c.user_id = r.user_id
            WHERE r.user_id = :user_id AND e.event_date < :now
            ORDER BY e.event_date DESC
            """,
            {"user_id": str(user_id), "now": now_local()}
        )

        return [
            {**dict(row), "attended": bool(row["is_present"])}
            for row in rows
        ]

    @staticmethod
    async def home_overview() -> dict:
        """Public landing data: upcoming events and headline totals"""
        return {
            "upcoming_events": await event_service.upcoming_events(limit=6),
            "total_events": await database.fetch_val(
                "SELECT COUNT(*) FROM events WHERE is_approved = TRUE"
            ) or 0,
            "total_students": await database.fetch_val(
                "SELECT COUNT(*) FROM users WHERE user_type = 'Student'"
            ) or 0,
            "active_clubs": await database.fetch_val(
                "SELECT COUNT(*) FROM clubs WHERE is_active = TRUE"
            ) or 0
        }


report_service = ReportService()
