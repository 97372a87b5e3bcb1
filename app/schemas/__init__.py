"""
Pydantic schemas for request/response validation
"""

from app.schemas.user import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    UserResponse,
)
from app.schemas.event import (
    CreateEventRequest,
    UpdateEventRequest,
    EventResponse,
    EventDetailResponse,
)
from app.schemas.registration import RegisterForEventRequest, RegistrationResponse
from app.schemas.attendance import CheckInRequest, CheckInResponse, AttendanceResponse
from app.schemas.certificate import CertificateResponse, CertificateVerificationResponse
from app.schemas.club import CreateClubRequest, UpdateClubRequest, ClubResponse, ClubDetailResponse
from app.schemas.notification import NotificationResponse, BroadcastRequest
from app.schemas.feedback import SubmitFeedbackRequest, FeedbackResponse
from app.schemas.bus import CreateBusRequest, UpdateBusRequest, BusResponse, BusReservationResponse
from app.schemas.contact import ContactRequest, ContactResponse

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "LoginResponse",
    "UserResponse",
    "CreateEventRequest",
    "UpdateEventRequest",
    "EventResponse",
    "EventDetailResponse",
    "RegisterForEventRequest",
    "RegistrationResponse",
    "CheckInRequest",
    "CheckInResponse",
    "AttendanceResponse",
    "CertificateResponse",
    "CertificateVerificationResponse",
    "CreateClubRequest",
    "UpdateClubRequest",
    "ClubResponse",
    "ClubDetailResponse",
    "NotificationResponse",
    "BroadcastRequest",
    "SubmitFeedbackRequest",
    "FeedbackResponse",
    "CreateBusRequest",
    "UpdateBusRequest",
    "BusResponse",
    "BusReservationResponse",
    "ContactRequest",
    "ContactResponse",
]
