"""
Report Response Models
Admin statistics and the student dashboard
"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from app.schemas.event import EventResponse
from app.schemas.notification import NotificationResponse
from app.schemas.registration import RegistrationResponse
from app.schemas.user import UserResponse


class DashboardStatisticsResponse(BaseModel):
    total_events: int
    approved_events: int
    pending_events: int
    upcoming_events: int
    past_events: int
    total_users: int
    total_registrations: int
    total_attendance: int
    attendance_rate: float
    total_certificates: int
    total_feedback: int
    average_rating: float
    pending_memberships: int
    open_contact_messages: int


class EventReportResponse(BaseModel):
    event_id: UUID
    title: str
    event_date: datetime
    total_registrations: int
    confirmed_registrations: int
    waitlist_count: int
    total_attendance: int
    attendance_rate: float
    total_feedback: int
    average_rating: float
    certificates_issued: int
    volunteer_hours: int


class EventStatisticsResponse(BaseModel):
    event_id: UUID
    title: str
    event_date: datetime
    total_registrations: int
    total_attendance: int
    attendance_rate: float
    feedback_count: int
    average_rating: float


class UserReportResponse(BaseModel):
    id: UUID
    full_name: str
    email: str
    university_id: str
    user_type: str
    total_volunteer_hours: int
    join_date: Optional[datetime] = None
    total_registrations: int
    total_attendance: int
    total_certificates: int


class DashboardCertificate(BaseModel):
    id: UUID
    certificate_number: str
    issue_date: datetime
    event_title: str


class DashboardClub(BaseModel):
    id: UUID
    name: str
    status: str
    role: str


class StudentDashboardResponse(BaseModel):
    user: UserResponse
    total_volunteer_hours: int
    registrations: List[RegistrationResponse]
    upcoming_events: List[RegistrationResponse]
    completed_events: int
    attendance_rate: int
    certificates: List[DashboardCertificate]
    notifications: List[NotificationResponse]
    unread_notifications: int
    clubs: List[DashboardClub]


class EventHistoryEntry(BaseModel):
    event_id: UUID
    title: str
    event_date: datetime
    venue: Optional[str] = None
    volunteer_hours: int
    status: str
    attended: bool
    check_in_time: Optional[datetime] = None
    certificate_id: Optional[UUID] = None
    certificate_number: Optional[str] = None


class HomeOverviewResponse(BaseModel):
    upcoming_events: List[EventResponse]
    total_events: int
    total_students: int
    active_clubs: int
