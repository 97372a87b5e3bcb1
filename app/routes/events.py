"""
Event Routes
Public catalogue plus admin event management, attendance and QR codes
"""

from io import BytesIO
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile, status
from fastapi.responses import StreamingResponse

from app.auth import get_admin_user, get_current_user, get_optional_user
from app.schemas.attendance import (
    AttendanceRateResponse,
    AttendanceResponse,
    CheckInResponse,
    EventQRResponse,
    MarkAttendanceRequest,
)
from app.schemas.bus import BusResponse
from app.schemas.certificate import BulkIssueResponse
from app.schemas.event import (
    AdminEventResponse,
    CreateEventRequest,
    EventDetailResponse,
    EventListResponse,
    EventResponse,
    UpdateEventRequest,
)
from app.schemas.feedback import EventFeedbackResponse
from app.schemas.registration import RegistrationResponse
from app.schemas.user import MessageResponse
from app.services.activity_log_service import activity_log_service, request_ip
from app.services.attendance_service import attendance_service
from app.services.bus_service import bus_service
from app.services.certificate_service import certificate_service
from app.services.event_service import event_service
from app.services.feedback_service import feedback_service
from app.services.qr_service import qr_service
from app.services.registration_service import registration_service
from app.services.storage_service import storage_service

router = APIRouter()


@router.get("", response_model=EventListResponse)
async def list_events(
    search: Optional[str] = Query(None, description="Search in title and description"),
    event_type: Optional[str] = Query(None, description="Filter by event type"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(50, ge=1, le=100, description="Number of records to return")
):
    """
    List approved events, newest first

    Supports case-insensitive search and an event type filter.
    """
    return await event_service.list_events(
        search=search,
        event_type=event_type,
        approved_only=True,
        skip=skip,
        limit=limit
    )


@router.get("/upcoming", response_model=List[EventResponse])
async def upcoming_events(limit: int = Query(10, ge=1, le=50)):
    return await event_service.upcoming_events(limit=limit)


@router.get("/{event_id}", response_model=EventDetailResponse)
async def get_event(
    event_id: UUID,
    current_user: Optional[dict] = Depends(get_optional_user)
):
    """
    Event details

    Includes registration counts, attendance and rating. Signed-in callers
    also get their own registration, if any.
    """
    return await event_service.get_event_details(str(event_id), current_user)


@router.get("/{event_id}/buses", response_model=List[BusResponse])
async def list_event_buses(
    event_id: UUID,
    current_user: dict = Depends(get_current_user)
):
    return await bus_service.list_for_event(str(event_id))


@router.post("/{event_id}/check-in", response_model=CheckInResponse)
async def check_in(
    event_id: UUID,
    current_user: dict = Depends(get_current_user)
):
    """
    Check in to an event

    Allowed from the event start until the attendance deadline. Checking in
    twice returns the existing record with already_checked_in set.
    """
    return await attendance_service.check_in(str(event_id), current_user["user_id"])


# Admin endpoints

@router.post("", response_model=AdminEventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: CreateEventRequest,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    """
    Create an event (Admin only)

    Admin-created events are approved immediately and announced to all users.
    """
    event = await event_service.create_event(data, current_admin["user_id"])

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="create_event",
        resource_type="event",
        resource_id=event["id"],
        details={"title": event["title"]},
        ip_address=request_ip(request)
    )
    return event


@router.put("/{event_id}", response_model=AdminEventResponse)
async def update_event(
    event_id: UUID,
    data: UpdateEventRequest,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    """Update an event and notify its registrants (Admin only)"""
    event = await event_service.update_event(str(event_id), data)

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="update_event",
        resource_type="event",
        resource_id=event_id,
        details=data.model_dump(exclude_unset=True),
        ip_address=request_ip(request)
    )
    return event


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: UUID,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    """
    Delete an event (Admin only)

    Registrations, attendance, feedback, certificates and buses go with it.
    """
    event = await event_service.get_event(str(event_id))
    await event_service.delete_event(str(event_id))

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="delete_event",
        resource_type="event",
        resource_id=event_id,
        details={"title": event["title"]},
        ip_address=request_ip(request)
    )
    return {"message": "Event deleted"}


@router.post("/{event_id}/image", response_model=AdminEventResponse)
async def upload_event_image(
    event_id: UUID,
    request: Request,
    image: UploadFile = File(...),
    current_admin: dict = Depends(get_admin_user)
):
    """Upload the event banner image (Admin only)"""
    await event_service.get_event(str(event_id))
    image_url = await storage_service.upload_image(image, f"events/{event_id}")
    event = await event_service.set_image(str(event_id), image_url)

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="upload_event_image",
        resource_type="event",
        resource_id=event_id,
        details={"image_url": image_url},
        ip_address=request_ip(request)
    )
    return event


@router.get("/{event_id}/registrations", response_model=List[RegistrationResponse])
async def event_registrations(
    event_id: UUID,
    status_filter: Optional[str] = Query(None, alias="status", description="Confirmed, Waitlist or Cancelled"),
    current_admin: dict = Depends(get_admin_user)
):
    """Registrations for an event, oldest first (Admin only)"""
    return await registration_service.event_registrations(str(event_id), status_filter)


@router.get("/{event_id}/waitlist", response_model=List[RegistrationResponse])
async def event_waitlist(
    event_id: UUID,
    current_admin: dict = Depends(get_admin_user)
):
    return await registration_service.event_registrations(str(event_id), "Waitlist")


@router.get("/{event_id}/attendance", response_model=List[AttendanceResponse])
async def event_attendance(
    event_id: UUID,
    current_admin: dict = Depends(get_admin_user)
):
    return await attendance_service.event_attendance(str(event_id))


@router.post("/{event_id}/attendance", response_model=AttendanceResponse)
async def mark_attendance(
    event_id: UUID,
    data: MarkAttendanceRequest,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    """Mark a registrant present or absent (Admin only)"""
    attendance = await attendance_service.mark_attendance(str(event_id), str(data.user_id), data.is_present)

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="mark_attendance",
        resource_type="event",
        resource_id=event_id,
        details={"user_id": str(data.user_id), "is_present": data.is_present},
        ip_address=request_ip(request)
    )
    return attendance


@router.get("/{event_id}/attendance-rate", response_model=AttendanceRateResponse)
async def attendance_rate(
    event_id: UUID,
    current_admin: dict = Depends(get_admin_user)
):
    await event_service.get_event(str(event_id))
    return {
        "event_id": event_id,
        "confirmed_registrations": await registration_service.confirmed_count(str(event_id)),
        "attendance_count": await attendance_service.attendance_count(str(event_id)),
        "attendance_rate": await attendance_service.attendance_rate(str(event_id))
    }


@router.get("/{event_id}/qr", response_model=EventQRResponse)
async def event_qr(
    event_id: UUID,
    current_admin: dict = Depends(get_admin_user)
):
    """Check-in QR code as base64 and data URL (Admin only)"""
    return await qr_service.event_qr(str(event_id))


@router.get("/{event_id}/qr.png")
async def event_qr_png(
    event_id: UUID,
    current_admin: dict = Depends(get_admin_user)
):
    """Check-in QR code as a PNG download (Admin only)"""
    qr = await qr_service.event_qr(str(event_id))
    return StreamingResponse(
        BytesIO(qr["png"]),
        media_type="image/png",
        headers={"Content-Disposition": f"attachment; filename=event_{event_id}_qr.png"}
    )


@router.get("/{event_id}/feedback", response_model=EventFeedbackResponse)
async def event_feedback(
    event_id: UUID,
    current_admin: dict = Depends(get_admin_user)
):
    return await feedback_service.event_feedback(str(event_id))


@router.post("/{event_id}/certificates", response_model=BulkIssueResponse)
async def issue_event_certificates(
    event_id: UUID,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    """
    Issue certificates to every present attendee (Admin only)

    Attendees who already hold a certificate are skipped.
    """
    result = await certificate_service.issue_for_event(str(event_id))

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="bulk_issue_certificates",
        resource_type="event",
        resource_id=event_id,
        details={"issued": result["issued_count"], "skipped": result["skipped_count"]},
        ip_address=request_ip(request)
    )
    return result
