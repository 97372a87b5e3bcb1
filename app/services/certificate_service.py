"""
Certificate Service
Issuing participation certificates, volunteer-hour credit and PDF downloads
"""

import logging
import secrets
from uuid import uuid4
from typing import Optional, Tuple

from fastapi import HTTPException, status

from app.auth import is_admin
from app.database import database, UNIQUE_VIOLATIONS
from app.services.attendance_service import attendance_service
from app.services.certificate_renderer import render_certificate_pdf, TEMPLATES
from app.services.email_service import email_service
from app.services.event_service import event_service
from app.services.notification_service import notification_service, NotificationType
from app.utils.datetime_utils import now_local

logger = logging.getLogger(__name__)

CERTIFICATE_SELECT = """
    SELECT c.*, e.title AS event_title, e.event_date, e.venue, e.volunteer_hours,
           u.first_name || ' ' || u.last_name AS user_name, u.email AS user_email,
           u.university_id
    FROM certificates c
    JOIN events e ON e.id = c.event_id
    JOIN users u ON u.id = c.user_id
"""


def generate_certificate_number(issued_at=None) -> str:
    """CERT-YYYYMMDD-XXXXXXXX with eight uppercase hex digits"""
    issued_at = issued_at or now_local()
    return f"CERT-{issued_at.strftime('%Y%m%d')}-{secrets.token_hex(4).upper()}"


class CertificateService:
    """Service for certificate operations"""

    @staticmethod
    async def get_certificate(certificate_id: str) -> dict:
        row = await database.fetch_one(
            f"{CERTIFICATE_SELECT} WHERE c.id = :id",
            {"id": str(certificate_id)}
        )

        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Certificate not found"
            )

        return dict(row)

    @staticmethod
    async def get_certificate_for_viewer(certificate_id: str, current_user: dict) -> dict:
        """Owners and admins can open a certificate; anyone else gets 404"""
        certificate = await CertificateService.get_certificate(certificate_id)
        if not is_admin(current_user) and str(certificate["user_id"]) != str(current_user["user_id"]):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Certificate not found"
            )
        return certificate

    @staticmethod
    async def find_certificate(event_id: str, user_id: str) -> Optional[dict]:
        row = await database.fetch_one(
            "SELECT * FROM certificates WHERE event_id = :event_id AND user_id = :user_id",
            {"event_id": str(event_id), "user_id": str(user_id)}
        )
        return dict(row) if row else None

    @staticmethod
    async def issue_certificate(event_id: str, user_id: str) -> dict:
        """
        Issue a certificate to an attendee and credit the event's volunteer hours

        Raises:
            HTTPException: 404 unknown event/user, 400 user did not attend,
                409 certificate already issued
        """
        event = await event_service.get_event(event_id)

        user = await database.fetch_one(
            "SELECT id, email, first_name FROM users WHERE id = :id",
            {"id": str(user_id)}
        )
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

        if not await attendance_service.has_attended(event_id, user_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User did not attend this event"
            )

        if await CertificateService.find_certificate(event_id, user_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Certificate already issued for this event"
            )

        certificate_id = str(uuid4())
        issued_at = now_local()
        certificate_number = generate_certificate_number(issued_at)

        try:
            async with database.transaction():
                await database.execute(
                    """
                    INSERT INTO certificates (id, user_id, event_id, certificate_number, certificate_url, is_downloaded, issue_date)
                    VALUES (:id, :user_id, :event_id, :certificate_number, :certificate_url, FALSE, :issue_date)
                    """,
                    {
                        "id": certificate_id,
                        "user_id": str(user_id),
                        "event_id": str(event_id),
                        "certificate_number": certificate_number,
                        "certificate_url": f"/certificates/{certificate_id}/download",
                        "issue_date": issued_at
                    }
                )
                await database.execute(
                    """
                    UPDATE users SET total_volunteer_hours = total_volunteer_hours + :hours
                    WHERE id = :id
                    """,
                    {"hours": event["volunteer_hours"] or 0, "id": str(user_id)}
                )
        except UNIQUE_VIOLATIONS:
            # Another request issued the same certificate in the meantime
            logger.warning(f"Concurrent certificate issue for user {user_id} event {event_id}")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Certificate already issued for this event"
            )

        await notification_service.send(
            user_id,
            f"Your certificate for '{event['title']}' is ready ({certificate_number}). "
            f"{event['volunteer_hours']} volunteer hours have been added to your record.",
            NotificationType.CERTIFICATE_ISSUED,
            event_id
        )
        await email_service.send_certificate_email(
            user["email"], user["first_name"], event["title"], certificate_number
        )

        logger.info(f"Certificate {certificate_number} issued to user {user_id} for event {event_id}")
        return await CertificateService.get_certificate(certificate_id)

    @staticmethod
    async def issue_for_event(event_id: str) -> dict:
        """Issue certificates to every present attendee who does not have one"""
        await event_service.get_event(event_id)

        rows = await database.fetch_all(
            """
            SELECT a.user_id FROM attendances a
            LEFT JOIN certificates c ON c.event_id = a.event_id AND c.user_id = a.user_id
            WHERE a.event_id = :event_id AND a.is_present = TRUE AND c.id IS NULL
            """,
            {"event_id": str(event_id)}
        )
        already = await database.fetch_val(
            "SELECT COUNT(*) FROM certificates WHERE event_id = :event_id",
            {"event_id": str(event_id)}
        )

        issued = []
        for row in rows:
            certificate = await CertificateService.issue_certificate(event_id, str(row["user_id"]))
            issued.append(certificate)

        return {
            "event_id": str(event_id),
            "issued_count": len(issued),
            "skipped_count": already or 0,
            "certificates": issued
        }

    @staticmethod
    async def my_certificates(user_id: str) -> list:
        rows = await database.fetch_all(
            f"{CERTIFICATE_SELECT} WHERE c.user_id = :user_id ORDER BY c.issue_date DESC",
            {"user_id": str(user_id)}
        )
        return [dict(row) for row in rows]

    @staticmethod
    async def all_certificates(event_id: Optional[str] = None) -> list:
        query = CERTIFICATE_SELECT
        params = {}
        if event_id:
            query += " WHERE c.event_id = :event_id"
            params["event_id"] = str(event_id)
        query += " ORDER BY c.issue_date DESC"

        rows = await database.fetch_all(query, params)
        return [dict(row) for row in rows]

    @staticmethod
    async def eligible_events() -> list:
        """Approved events that have started, with attendee and certificate counts"""
        rows = await database.fetch_all(
            """
            SELECT e.*,
                (SELECT COUNT(*) FROM attendances a WHERE a.event_id = e.id AND a.is_present = TRUE) AS attendee_count,
                (SELECT COUNT(*) FROM certificates c WHERE c.event_id = e.id) AS certificate_count
            FROM events e
            WHERE e.is_approved = TRUE AND e.event_date <= :now
            ORDER BY e.event_date DESC
            """,
            {"now": now_local()}
        )
        return [dict(row) for row in rows]

    @staticmethod
    async def download(certificate_id: str, current_user: dict, template: str = "classic") -> Tuple[bytes, str]:
        """Render the PDF and mark the certificate as downloaded"""
        if template not in TEMPLATES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Template must be one of: {', '.join(TEMPLATES)}"
            )

        certificate = await CertificateService.get_certificate_for_viewer(certificate_id, current_user)
        pdf_bytes = render_certificate_pdf(certificate, template)

        await database.execute(
            "UPDATE certificates SET is_downloaded = TRUE WHERE id = :id",
            {"id": str(certificate_id)}
        )

        filename = f"{certificate['certificate_number']}.pdf"
        return pdf_bytes, filename

    @staticmethod
    async def verify(certificate_number: str) -> dict:
        """Public lookup of a certificate by its number"""
        row = await database.fetch_one(
            f"{CERTIFICATE_SELECT} WHERE c.certificate_number = :number",
            {"number": certificate_number.strip().upper()}
        )

        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No certificate with this number"
            )

        return {
            "valid": True,
            "certificate_number": row["certificate_number"],
            "recipient": row["user_name"],
            "event_title": row["event_title"],
            "event_date": row["event_date"],
            "issue_date": row["issue_date"],
            "volunteer_hours": row["volunteer_hours"]
        }


# Create singleton instance
certificate_service = CertificateService()
