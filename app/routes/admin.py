"""
Admin Routes
Dashboard statistics, reports, user management and the audit trail
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from app.auth import get_admin_user
from app.schemas.activity_log import ActivityLogResponse, ActivityStatsResponse
from app.schemas.event import AdminEventListResponse
from app.schemas.report import (
    DashboardStatisticsResponse,
    EventReportResponse,
    EventStatisticsResponse,
    UserReportResponse,
)
from app.schemas.user import (
    AdminCreateUserRequest,
    AdminCreateUserResponse,
    AdminUpdateUserRequest,
    ChangeRoleRequest,
    MessageResponse,
    UserListResponse,
    UserResponse,
    UserStatisticsResponse,
)
from app.services.activity_log_service import ActivityLogService, request_ip
from app.services.event_service import event_service
from app.services.report_service import report_service
from app.services.user_service import user_service

router = APIRouter()


@router.get("/dashboard", response_model=DashboardStatisticsResponse)
async def get_admin_dashboard(current_admin: dict = Depends(get_admin_user)):
    """
    Admin dashboard stats

    Totals for events, users, registrations, attendance, certificates and
    feedback, plus pending club requests and open contact messages.
    """
    return await report_service.dashboard_statistics()


@router.get("/events", response_model=AdminEventListResponse)
async def list_all_events(
    search: Optional[str] = Query(None, description="Search in title and description"),
    event_type: Optional[str] = Query(None, description="Filter by event type"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(50, ge=1, le=100, description="Number of records to return"),
    current_admin: dict = Depends(get_admin_user)
):
    """Every event including unapproved ones, with check-in secrets (Admin only)"""
    return await event_service.list_events(
        search=search,
        event_type=event_type,
        approved_only=False,
        skip=skip,
        limit=limit
    )


# Reports

@router.get("/reports/events", response_model=List[EventStatisticsResponse])
async def event_statistics(current_admin: dict = Depends(get_admin_user)):
    """One row of registration, attendance and rating figures per event"""
    return await report_service.event_statistics()


@router.get("/reports/events/{event_id}", response_model=EventReportResponse)
async def event_report(
    event_id: UUID,
    current_admin: dict = Depends(get_admin_user)
):
    return await report_service.event_report(str(event_id))


@router.get("/reports/users", response_model=List[UserReportResponse])
async def user_reports(
    user_type: Optional[str] = Query(None, description="Student or Admin"),
    current_admin: dict = Depends(get_admin_user)
):
    """Participation figures per user, most volunteer hours first"""
    return await report_service.user_reports(user_type)


# User management

@router.get("/users", response_model=UserListResponse)
async def list_users(
    search: Optional[str] = Query(None, description="Search name, email or university ID"),
    status_filter: Optional[str] = Query(None, alias="status", description="active or inactive"),
    user_type: Optional[str] = Query(None, description="Student or Admin"),
    from_date: Optional[datetime] = Query(None, description="Joined on or after"),
    to_date: Optional[datetime] = Query(None, description="Joined on or before"),
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(50, ge=1, le=100, description="Number of records to return"),
    current_admin: dict = Depends(get_admin_user)
):
    return await user_service.list_users(
        search=search,
        status_filter=status_filter,
        user_type=user_type,
        from_date=from_date,
        to_date=to_date,
        skip=skip,
        limit=limit
    )


@router.post("/users", response_model=AdminCreateUserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: AdminCreateUserRequest,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    """
    Create an account (Admin only)

    The email is treated as confirmed. When no password is given one is
    generated and returned once in generated_password.
    """
    user = await user_service.admin_create_user(data)

    await ActivityLogService.log_activity(
        admin_id=current_admin["user_id"],
        action="create_user",
        resource_type="user",
        resource_id=user["id"],
        details={"email": user["email"], "user_type": user["user_type"]},
        ip_address=request_ip(request)
    )
    return user


@router.get("/users/{user_id}", response_model=UserStatisticsResponse)
async def get_user(
    user_id: UUID,
    current_admin: dict = Depends(get_admin_user)
):
    return await user_service.get_user_statistics(str(user_id))


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: AdminUpdateUserRequest,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    user = await user_service.admin_update_user(str(user_id), data)

    await ActivityLogService.log_activity(
        admin_id=current_admin["user_id"],
        action="update_user",
        resource_type="user",
        resource_id=user_id,
        details=data.model_dump(exclude_unset=True),
        ip_address=request_ip(request)
    )
    return user


@router.put("/users/{user_id}/role", response_model=UserResponse)
async def change_user_role(
    user_id: UUID,
    data: ChangeRoleRequest,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    """Promote or demote a user; admins cannot demote themselves"""
    user = await user_service.change_role(str(user_id), data.role, current_admin["user_id"])

    await ActivityLogService.log_activity(
        admin_id=current_admin["user_id"],
        action="change_role",
        resource_type="user",
        resource_id=user_id,
        details={"role": data.role},
        ip_address=request_ip(request)
    )
    return user


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: UUID,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    """
    Delete a user (Admin only)

    Removes their registrations, attendance, certificates, feedback,
    notifications, memberships and bus reservations.
    """
    user = await user_service.get_user(str(user_id))
    await user_service.delete_user(str(user_id), current_admin["user_id"])

    await ActivityLogService.log_activity(
        admin_id=current_admin["user_id"],
        action="delete_user",
        resource_type="user",
        resource_id=user_id,
        details={"email": user["email"]},
        ip_address=request_ip(request)
    )
    return {"message": "User deleted"}


# Audit trail

@router.get("/activity-logs", response_model=ActivityLogResponse)
async def get_activity_logs(
    skip: int = Query(0, ge=0, description="Number of records to skip"),
    limit: int = Query(50, ge=1, le=500, description="Number of records to return"),
    action: str = Query(None, description="Filter by action type"),
    days: int = Query(30, ge=1, le=365, description="Number of days to include"),
    current_admin: dict = Depends(get_admin_user)
):
    """
    Get admin activity logs

    Every admin write: event, club, bus and user changes, attendance marks,
    certificate issuing, membership reviews and broadcasts.
    """
    logs, total = await ActivityLogService.get_activity_logs(
        limit=limit,
        offset=skip,
        action_filter=action,
        days=days
    )

    return ActivityLogResponse(
        logs=logs,
        total=total,
        limit=limit,
        offset=skip,
        has_more=(skip + limit) < total
    )


@router.get("/activity-stats", response_model=ActivityStatsResponse)
async def get_activity_stats(
    days: int = Query(7, ge=1, le=365, description="Number of days to analyze"),
    current_admin: dict = Depends(get_admin_user)
):
    """Aggregated counts per action with unique admins and last activity times"""
    stats = await ActivityLogService.get_activity_stats(days=days)
    return ActivityStatsResponse(**stats)
