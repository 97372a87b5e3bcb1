"""
Notification Request/Response Models
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class NotificationResponse(BaseModel):
    id: UUID
    message: str
    type: str
    is_read: bool
    sent_date: datetime
    event_id: Optional[UUID] = None
    event_title: Optional[str] = None


class NotificationListResponse(BaseModel):
    unread_count: int
    notifications: List[NotificationResponse]


class BroadcastRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=1000)
    event_id: Optional[UUID] = None


class BroadcastResponse(BaseModel):
    recipients: int


class NotificationGroupResponse(BaseModel):
    """One sent message as seen in the admin overview"""
    message: str
    type: str
    sent_date: datetime
    recipients: int
    read_count: int
