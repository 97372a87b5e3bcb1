"""
Contact Routes
Public contact form and the admin inbox
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from app.auth import get_admin_user
from app.schemas.contact import ContactReplyRequest, ContactRequest, ContactResponse
from app.schemas.user import MessageResponse
from app.services.activity_log_service import activity_log_service, request_ip
from app.services.contact_service import contact_service

router = APIRouter()


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def submit_contact(data: ContactRequest):
    """Public contact form; no account needed"""
    await contact_service.submit(data)
    return {"message": "Thank you for contacting us. We will get back to you soon."}


@router.get("", response_model=List[ContactResponse])
async def list_contacts(
    resolved: Optional[bool] = Query(None, description="Filter by resolved state"),
    current_admin: dict = Depends(get_admin_user)
):
    """Contact messages, newest first (Admin only)"""
    return await contact_service.list_contacts(resolved)


@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(
    contact_id: UUID,
    current_admin: dict = Depends(get_admin_user)
):
    return await contact_service.get_contact(str(contact_id))


@router.post("/{contact_id}/respond", response_model=ContactResponse)
async def respond_to_contact(
    contact_id: UUID,
    data: ContactReplyRequest,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    """Record the admin reply and mark the message resolved"""
    contact = await contact_service.respond(str(contact_id), data.response)

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="respond_contact",
        resource_type="contact",
        resource_id=contact_id,
        ip_address=request_ip(request)
    )
    return contact


@router.delete("/{contact_id}", response_model=MessageResponse)
async def delete_contact(
    contact_id: UUID,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    await contact_service.delete(str(contact_id))

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="delete_contact",
        resource_type="contact",
        resource_id=contact_id,
        ip_address=request_ip(request)
    )
    return {"message": "Contact message deleted"}
