"""
Contact Service
Public contact form and admin follow-up
"""

from uuid import uuid4

from fastapi import HTTPException, status

from app.database import database
from app.utils.datetime_utils import now_local


class ContactService:
    """Service for contact messages"""

    @staticmethod
    async def submit(data) -> dict:
        contact_id = str(uuid4())
        await database.execute(
            """
            INSERT INTO contacts (id, full_name, email, phone, subject, message, inquiry_type, is_resolved, submitted_date)
            VALUES (:id, :full_name, :email, :phone, :subject, :message, :inquiry_type, FALSE, :now)
            """,
            {
                "id": contact_id,
                "full_name": data.full_name.strip(),
                "email": data.email.strip().lower(),
                "phone": data.phone,
                "subject": data.subject.strip(),
                "message": data.message,
                "inquiry_type": data.inquiry_type,
                "now": now_local()
            }
        )
        return await ContactService.get_contact(contact_id)

    @staticmethod
    async def get_contact(contact_id: str) -> dict:
        row = await database.fetch_one("SELECT * FROM contacts WHERE id = :id", {"id": str(contact_id)})

        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Message not found"
            )

        return dict(row)

    @staticmethod
    async def list_contacts(resolved=None) -> list:
        query = "SELECT * FROM contacts"
        params = {}
        if resolved is not None:
            query += " WHERE is_resolved = :resolved"
            params["resolved"] = resolved
        query += " ORDER BY submitted_date DESC"

        rows = await database.fetch_all(query, params)
        return [dict(row) for row in rows]

    @staticmethod
    async def respond(contact_id: str, response: str) -> dict:
        await ContactService.get_contact(contact_id)
        await database.execute(
            """
            UPDATE contacts
            SET admin_response = :response, response_date = :now, is_resolved = TRUE
            WHERE id = :id
            """,
            {"response": response, "now": now_local(), "id": str(contact_id)}
        )
        return await ContactService.get_contact(contact_id)

    @staticmethod
    async def delete(contact_id: str) -> None:
        await ContactService.get_contact(contact_id)
        await database.execute("DELETE FROM contacts WHERE id = :id", {"id": str(contact_id)})


contact_service = ContactService()
