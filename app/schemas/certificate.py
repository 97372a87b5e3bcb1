"""
Certificate Request/Response Models
"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class IssueCertificateRequest(BaseModel):
    event_id: UUID
    user_id: UUID


class CertificateResponse(BaseModel):
    id: UUID
    certificate_number: str
    event_id: UUID
    event_title: str
    event_date: datetime
    volunteer_hours: int
    user_id: UUID
    user_name: str
    university_id: str
    certificate_url: Optional[str] = None
    is_downloaded: bool
    issue_date: datetime


class BulkIssueResponse(BaseModel):
    event_id: UUID
    issued_count: int
    skipped_count: int
    certificates: List[CertificateResponse]


class CertificateVerificationResponse(BaseModel):
    """Public certificate check"""
    valid: bool
    certificate_number: str
    recipient: str
    event_title: str
    event_date: datetime
    issue_date: datetime
    volunteer_hours: int


class EligibleEventResponse(BaseModel):
    id: UUID
    title: str
    event_date: datetime
    volunteer_hours: int
    attendee_count: int
    certificate_count: int
