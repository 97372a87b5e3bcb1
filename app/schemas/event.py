"""
Event Request/Response Models
Event catalogue and admin event management
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class CreateEventRequest(BaseModel):
    """Request to create a new event"""
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: datetime = Field(..., description="Local start time")
    venue: Optional[str] = Field(None, max_length=200)
    event_type: Optional[str] = Field(None, max_length=50, description="e.g. Workshop, Seminar, Volunteering")
    max_capacity: int = Field(100, ge=1)
    volunteer_hours: int = Field(0, ge=0)
    image_url: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Beach Clean-up",
                "description": "Volunteer clean-up at the north beach",
                "event_date": "2026-11-20T09:00:00",
                "venue": "North Beach",
                "event_type": "Volunteering",
                "max_capacity": 40,
                "volunteer_hours": 3
            }
        }
    )


class UpdateEventRequest(BaseModel):
    """Request to update event details"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    venue: Optional[str] = Field(None, max_length=200)
    event_type: Optional[str] = Field(None, max_length=50)
    max_capacity: Optional[int] = Field(None, ge=1)
    volunteer_hours: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = None
    is_approved: Optional[bool] = None


class EventResponse(BaseModel):
    """Event details response"""
    id: UUID
    title: str
    description: Optional[str] = None
    event_date: datetime
    venue: Optional[str] = None
    event_type: Optional[str] = None
    image_url: Optional[str] = None
    max_capacity: int
    volunteer_hours: int
    is_approved: bool
    created_by: Optional[UUID] = None
    created_date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AdminEventResponse(EventResponse):
    secret: Optional[str] = None


class EventListResponse(BaseModel):
    total: int
    events: List[EventResponse]


class MyRegistrationSummary(BaseModel):
    id: UUID
    status: str
    guest_count: int
    registration_date: Optional[datetime] = None


class EventDetailResponse(EventResponse):
    """Event with registration and attendance figures"""
    confirmed_count: int
    waitlist_count: int
    available_seats: int
    attendance_count: int
    average_rating: Optional[float] = None
    feedback_count: int
    my_registration: Optional[MyRegistrationSummary] = None


class AdminEventListResponse(BaseModel):
    total: int
    events: List[AdminEventResponse]
