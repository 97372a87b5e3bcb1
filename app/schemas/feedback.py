"""
Feedback Request/Response Models
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class SubmitFeedbackRequest(BaseModel):
    event_id: UUID
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class FeedbackResponse(BaseModel):
    id: UUID
    event_id: UUID
    event_title: str
    user_id: UUID
    user_name: str
    rating: int
    comment: Optional[str] = None
    submitted_date: Optional[datetime] = None


class EventFeedbackResponse(BaseModel):
    event_id: UUID
    event_title: str
    count: int
    average_rating: Optional[float] = None
    feedback: List[FeedbackResponse]
