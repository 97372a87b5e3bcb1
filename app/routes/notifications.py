"""
Notification Routes
The caller's inbox plus admin broadcasts
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from app.auth import get_admin_user, get_current_user
from app.schemas.notification import (
    BroadcastRequest,
    BroadcastResponse,
    NotificationGroupResponse,
    NotificationListResponse,
    NotificationResponse,
)
from app.schemas.user import MessageResponse
from app.services.activity_log_service import activity_log_service, request_ip
from app.services.notification_service import notification_service

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = Query(False, description="Only unread notifications"),
    limit: int = Query(50, ge=1, le=200, description="Number of records to return"),
    current_user: dict = Depends(get_current_user)
):
    """The caller's notifications, newest first"""
    user_id = current_user["user_id"]
    return {
        "unread_count": await notification_service.unread_count(user_id),
        "notifications": await notification_service.list_for_user(user_id, unread_only, limit)
    }


@router.get("/unread-count")
async def unread_count(current_user: dict = Depends(get_current_user)):
    return {"unread_count": await notification_service.unread_count(current_user["user_id"])}


@router.post("/read-all", response_model=MessageResponse)
async def mark_all_read(current_user: dict = Depends(get_current_user)):
    updated = await notification_service.mark_all_read(current_user["user_id"])
    return {"message": f"{updated} notifications marked as read"}


@router.post("/broadcast", response_model=BroadcastResponse)
async def broadcast(
    data: BroadcastRequest,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    """Send a message to every active user (Admin only)"""
    event_id = str(data.event_id) if data.event_id else None
    recipients = await notification_service.broadcast(data.message, event_id)

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="broadcast_notification",
        resource_type="notification",
        resource_id=event_id,
        details={"message": data.message, "recipients": recipients},
        ip_address=request_ip(request)
    )
    return {"recipients": recipients}


@router.get("/overview", response_model=List[NotificationGroupResponse])
async def notification_overview(
    limit: int = Query(50, ge=1, le=200),
    current_admin: dict = Depends(get_admin_user)
):
    """Sent notifications grouped by message with read counts (Admin only)"""
    return await notification_service.admin_overview(limit)


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(
    notification_id: UUID,
    current_user: dict = Depends(get_current_user)
):
    """Notification details; opening it marks it as read"""
    return await notification_service.open(str(notification_id), current_user["user_id"])


@router.post("/{notification_id}/read", response_model=MessageResponse)
async def mark_read(
    notification_id: UUID,
    current_user: dict = Depends(get_current_user)
):
    await notification_service.mark_read(str(notification_id), current_user["user_id"])
    return {"message": "Notification marked as read"}


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: UUID,
    current_user: dict = Depends(get_current_user)
):
    await notification_service.delete(str(notification_id), current_user["user_id"])
    return {"message": "Notification deleted"}
