"""
Attendance Routes
QR code check-in and the caller's attendance history
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from app.auth import get_current_user
from app.schemas.attendance import AttendanceResponse, CheckInRequest, CheckInResponse
from app.services.attendance_service import attendance_service

router = APIRouter()


@router.get("/scan", response_model=CheckInResponse)
async def scan(
    secret: str = Query(..., min_length=1, description="Secret encoded in the event QR code"),
    current_user: dict = Depends(get_current_user)
):
    """Target of the event QR code: checks the signed-in user in"""
    return await attendance_service.check_in_by_secret(secret, current_user["user_id"])


@router.post("/check-in", response_model=CheckInResponse)
async def check_in(
    data: CheckInRequest,
    current_user: dict = Depends(get_current_user)
):
    return await attendance_service.check_in_by_secret(data.secret, current_user["user_id"])


@router.get("/me", response_model=List[AttendanceResponse])
async def my_attendance(current_user: dict = Depends(get_current_user)):
    """Events the caller was present at, most recent first"""
    return await attendance_service.my_attendance(current_user["user_id"])
