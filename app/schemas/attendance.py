"""
Attendance Request/Response Models
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from uuid import UUID


class CheckInRequest(BaseModel):
    """Check in with the secret from the event QR code"""
    secret: str


class MarkAttendanceRequest(BaseModel):
    user_id: UUID
    is_present: bool = True


class AttendanceResponse(BaseModel):
    id: UUID
    event_id: UUID
    event_title: str
    event_date: datetime
    volunteer_hours: int
    user_id: UUID
    user_name: str
    user_email: str
    university_id: str
    check_in_time: Optional[datetime] = None
    qr_code: Optional[str] = None
    is_present: bool


class CheckInResponse(AttendanceResponse):
    already_checked_in: bool


class AttendanceRateResponse(BaseModel):
    event_id: UUID
    confirmed_registrations: int
    attendance_count: int
    attendance_rate: float


class EventQRResponse(BaseModel):
    event_id: UUID
    event_title: str
    secret: str
    scan_url: str
    qr_code_base64: str
    qr_code_data_url: str
