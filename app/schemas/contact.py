"""
Contact Request/Response Models
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from uuid import UUID


class ContactRequest(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=30)
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)
    inquiry_type: str = Field("General", max_length=50)


class ContactReplyRequest(BaseModel):
    response: str = Field(..., min_length=1, max_length=5000)


class ContactResponse(BaseModel):
    id: UUID
    full_name: str
    email: str
    phone: Optional[str] = None
    subject: str
    message: str
    inquiry_type: str
    admin_response: Optional[str] = None
    response_date: Optional[datetime] = None
    is_resolved: bool
    submitted_date: Optional[datetime] = None
