"""
Certificate Routes
Listing, PDF download, public verification and admin issuing
"""

from io import BytesIO
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import StreamingResponse

from app.auth import get_admin_user, get_current_user
from app.schemas.certificate import (
    CertificateResponse,
    CertificateVerificationResponse,
    EligibleEventResponse,
    IssueCertificateRequest,
)
from app.services.activity_log_service import activity_log_service, request_ip
from app.services.certificate_service import certificate_service

router = APIRouter()


@router.get("/me", response_model=List[CertificateResponse])
async def my_certificates(current_user: dict = Depends(get_current_user)):
    return await certificate_service.my_certificates(current_user["user_id"])


@router.get("/verify/{certificate_number}", response_model=CertificateVerificationResponse)
async def verify_certificate(certificate_number: str):
    """
    Public certificate verification

    Anyone holding a certificate number can confirm it was issued here.
    """
    return await certificate_service.verify(certificate_number)


@router.get("/eligible-events", response_model=List[EligibleEventResponse])
async def eligible_events(current_admin: dict = Depends(get_admin_user)):
    """Approved events that have started, with attendee and certificate counts (Admin only)"""
    return await certificate_service.eligible_events()


@router.get("", response_model=List[CertificateResponse])
async def list_certificates(
    event_id: Optional[UUID] = Query(None, description="Only certificates for this event"),
    current_admin: dict = Depends(get_admin_user)
):
    return await certificate_service.all_certificates(str(event_id) if event_id else None)


@router.post("", response_model=CertificateResponse, status_code=status.HTTP_201_CREATED)
async def issue_certificate(
    data: IssueCertificateRequest,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    """
    Issue a certificate (Admin only)

    The user must have attended the event and may hold only one certificate
    per event. The event's volunteer hours are added to the user's total.
    """
    certificate = await certificate_service.issue_certificate(str(data.event_id), str(data.user_id))

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="issue_certificate",
        resource_type="certificate",
        resource_id=certificate["id"],
        details={"certificate_number": certificate["certificate_number"], "user_id": str(data.user_id)},
        ip_address=request_ip(request)
    )
    return certificate


@router.get("/{certificate_id}", response_model=CertificateResponse)
async def get_certificate(
    certificate_id: UUID,
    current_user: dict = Depends(get_current_user)
):
    """Certificate details (owner or admin)"""
    return await certificate_service.get_certificate_for_viewer(str(certificate_id), current_user)


@router.get("/{certificate_id}/download")
async def download_certificate(
    certificate_id: UUID,
    template: str = Query("classic", description="classic or modern"),
    current_user: dict = Depends(get_current_user)
):
    """Download the certificate as a PDF (owner or admin)"""
    pdf_bytes, filename = await certificate_service.download(str(certificate_id), current_user, template)

    return StreamingResponse(
        BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )
