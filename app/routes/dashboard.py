"""
Dashboard Routes
Public landing data and the student dashboard
"""

from typing import List

from fastapi import APIRouter, Depends

from app.auth import get_current_user
from app.schemas.report import EventHistoryEntry, HomeOverviewResponse, StudentDashboardResponse
from app.services.report_service import report_service

router = APIRouter()


@router.get("/home", response_model=HomeOverviewResponse)
async def home():
    """Upcoming events and headline totals for the landing page"""
    return await report_service.home_overview()


@router.get("/dashboard", response_model=StudentDashboardResponse)
async def student_dashboard(current_user: dict = Depends(get_current_user)):
    """
    Student dashboard

    Profile, volunteer hours, registrations and the next three registered
    events, certificates, recent notifications and club memberships.
    """
    return await report_service.student_dashboard(current_user["user_id"])


@router.get("/dashboard/history", response_model=List[EventHistoryEntry])
async def event_history(current_user: dict = Depends(get_current_user)):
    """Past events the caller registered for, with attendance and certificate state"""
    return await report_service.event_history(current_user["user_id"])
