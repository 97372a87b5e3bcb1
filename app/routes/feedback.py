"""
Feedback Routes
Post-event ratings from attendees
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from app.auth import get_admin_user, get_current_user
from app.schemas.feedback import FeedbackResponse, SubmitFeedbackRequest
from app.schemas.user import MessageResponse
from app.services.activity_log_service import activity_log_service, request_ip
from app.services.feedback_service import feedback_service

router = APIRouter()


@router.post("", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    data: SubmitFeedbackRequest,
    current_user: dict = Depends(get_current_user)
):
    """
    Rate an event (1-5)

    Only attendees who were marked present can leave feedback, once per event.
    """
    return await feedback_service.submit(
        str(data.event_id),
        current_user["user_id"],
        data.rating,
        data.comment
    )


@router.get("/me", response_model=List[FeedbackResponse])
async def my_feedback(current_user: dict = Depends(get_current_user)):
    return await feedback_service.my_feedback(current_user["user_id"])


@router.get("", response_model=List[FeedbackResponse])
async def all_feedback(current_admin: dict = Depends(get_admin_user)):
    return await feedback_service.all_feedback()


@router.delete("/{feedback_id}", response_model=MessageResponse)
async def delete_feedback(
    feedback_id: UUID,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    await feedback_service.delete(str(feedback_id))

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="delete_feedback",
        resource_type="feedback",
        resource_id=feedback_id,
        ip_address=request_ip(request)
    )
    return {"message": "Feedback deleted"}
