"""
Registration Routes
Event sign-up, cancellation and the caller's registrations
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.auth import get_current_user
from app.schemas.registration import RegisterForEventRequest, RegistrationResponse
from app.services.registration_service import registration_service

router = APIRouter()


@router.post("", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
async def register_for_event(
    data: RegisterForEventRequest,
    current_user: dict = Depends(get_current_user)
):
    """
    Register for an event

    The registration is Confirmed while seats remain, otherwise it joins the
    waitlist. A previously cancelled registration is reactivated.
    """
    return await registration_service.register(
        str(data.event_id),
        current_user["user_id"],
        data.guest_count
    )


@router.get("/me", response_model=List[RegistrationResponse])
async def my_registrations(
    include_cancelled: bool = Query(False, description="Include cancelled registrations"),
    current_user: dict = Depends(get_current_user)
):
    return await registration_service.my_registrations(current_user["user_id"], include_cancelled)


@router.get("/{registration_id}", response_model=RegistrationResponse)
async def get_registration(
    registration_id: UUID,
    current_user: dict = Depends(get_current_user)
):
    """Registration details (owner or admin)"""
    return await registration_service.get_registration_for_viewer(str(registration_id), current_user)


@router.post("/{registration_id}/cancel", response_model=RegistrationResponse)
async def cancel_registration(
    registration_id: UUID,
    current_user: dict = Depends(get_current_user)
):
    """
    Cancel a registration

    Freeing a confirmed seat promotes the oldest waitlisted registration.
    """
    return await registration_service.cancel(str(registration_id), current_user["user_id"])
