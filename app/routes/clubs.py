"""
Club Routes
Browsing and joining clubs, plus admin club and membership management
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile, status

from app.auth import get_admin_user, get_current_user
from app.schemas.club import (
    ClubDetailResponse,
    ClubListResponse,
    ClubMemberResponse,
    ClubResponse,
    CreateClubRequest,
    MemberRoleRequest,
    UpdateClubRequest,
)
from app.schemas.user import MessageResponse
from app.services.activity_log_service import activity_log_service, request_ip
from app.services.club_service import club_service
from app.services.storage_service import storage_service

router = APIRouter()


@router.get("", response_model=ClubListResponse)
async def list_clubs(current_user: dict = Depends(get_current_user)):
    """
    List clubs

    Admins get every club. Students get active clubs split into joined and
    available, plus the state of each of their membership requests.
    """
    return await club_service.list_clubs(current_user)


@router.get("/me", response_model=List[ClubMemberResponse])
async def my_clubs(current_user: dict = Depends(get_current_user)):
    """The caller's memberships in any state"""
    return await club_service.my_clubs(current_user["user_id"])


@router.get("/memberships/pending", response_model=List[ClubMemberResponse])
async def pending_memberships(current_admin: dict = Depends(get_admin_user)):
    """Membership requests waiting for review, oldest first (Admin only)"""
    return await club_service.pending_memberships()


@router.post("/memberships/{member_id}/approve", response_model=ClubMemberResponse)
async def approve_membership(
    member_id: UUID,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    membership = await club_service.review_membership(str(member_id), approve=True)

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="approve_member",
        resource_type="club_member",
        resource_id=member_id,
        details={"club": membership["club_name"], "user_id": str(membership["user_id"])},
        ip_address=request_ip(request)
    )
    return membership


@router.post("/memberships/{member_id}/reject", response_model=ClubMemberResponse)
async def reject_membership(
    member_id: UUID,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    membership = await club_service.review_membership(str(member_id), approve=False)

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="reject_member",
        resource_type="club_member",
        resource_id=member_id,
        details={"club": membership["club_name"], "user_id": str(membership["user_id"])},
        ip_address=request_ip(request)
    )
    return membership


@router.put("/memberships/{member_id}/role", response_model=ClubMemberResponse)
async def set_member_role(
    member_id: UUID,
    data: MemberRoleRequest,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    membership = await club_service.set_member_role(str(member_id), data.role)

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="change_member_role",
        resource_type="club_member",
        resource_id=member_id,
        details={"role": data.role},
        ip_address=request_ip(request)
    )
    return membership


@router.get("/{club_id}", response_model=ClubDetailResponse)
async def get_club(
    club_id: UUID,
    current_user: dict = Depends(get_current_user)
):
    """Club details; non-admins only see approved members"""
    return await club_service.get_club_details(str(club_id), current_user)


@router.post("/{club_id}/join", response_model=ClubMemberResponse, status_code=status.HTTP_201_CREATED)
async def join_club(
    club_id: UUID,
    current_user: dict = Depends(get_current_user)
):
    """
    Request to join a club

    The membership starts as Pending until an admin approves it. A rejected
    request may be sent again.
    """
    return await club_service.join_club(str(club_id), current_user)


@router.post("/{club_id}/leave", response_model=MessageResponse)
async def leave_club(
    club_id: UUID,
    current_user: dict = Depends(get_current_user)
):
    await club_service.leave_club(str(club_id), current_user["user_id"])
    return {"message": "You have left the club"}


# Admin endpoints

@router.post("", response_model=ClubResponse, status_code=status.HTTP_201_CREATED)
async def create_club(
    data: CreateClubRequest,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    """
    Create a new club (Admin only)

    - **name**: Club name, unique (required)
    - **description**: What the club is about
    - **logo_url**: Public URL of the logo; a file can be uploaded later instead
    """
    club = await club_service.create_club(data, current_admin["user_id"])

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="create_club",
        resource_type="club",
        resource_id=club["id"],
        details={"name": club["name"]},
        ip_address=request_ip(request)
    )
    return club


@router.put("/{club_id}", response_model=ClubResponse)
async def update_club(
    club_id: UUID,
    data: UpdateClubRequest,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    club = await club_service.update_club(str(club_id), data)

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="update_club",
        resource_type="club",
        resource_id=club_id,
        details=data.model_dump(exclude_unset=True),
        ip_address=request_ip(request)
    )
    return club


@router.delete("/{club_id}", response_model=MessageResponse)
async def delete_club(
    club_id: UUID,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    """Delete a club and all of its memberships (Admin only)"""
    club = await club_service.get_club(str(club_id))
    await club_service.delete_club(str(club_id))

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="delete_club",
        resource_type="club",
        resource_id=club_id,
        details={"name": club["name"]},
        ip_address=request_ip(request)
    )
    return {"message": "Club deleted"}


@router.post("/{club_id}/logo", response_model=ClubResponse)
async def upload_club_logo(
    club_id: UUID,
    request: Request,
    logo: UploadFile = File(...),
    current_admin: dict = Depends(get_admin_user)
):
    await club_service.get_club(str(club_id))
    logo_url = await storage_service.upload_image(logo, f"clubs/{club_id}")
    club = await club_service.set_logo(str(club_id), logo_url)

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="upload_club_logo",
        resource_type="club",
        resource_id=club_id,
        details={"logo_url": logo_url},
        ip_address=request_ip(request)
    )
    return club


@router.get("/{club_id}/members", response_model=List[ClubMemberResponse])
async def club_members(
    club_id: UUID,
    status_filter: Optional[str] = Query(None, alias="status", description="Pending, Approved or Rejected"),
    current_admin: dict = Depends(get_admin_user)
):
    return await club_service.members(str(club_id), status_filter)
