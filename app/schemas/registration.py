"""
Registration Request/Response Models
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID


class RegisterForEventRequest(BaseModel):
    event_id: UUID
    guest_count: int = Field(0, ge=0, le=10)


class RegistrationResponse(BaseModel):
    """Registration with event and attendee names"""
    id: UUID
    event_id: UUID
    event_title: str
    event_date: datetime
    venue: Optional[str] = None
    user_id: UUID
    user_name: str
    user_email: str
    status: str
    guest_count: int
    registration_date: Optional[datetime] = None
