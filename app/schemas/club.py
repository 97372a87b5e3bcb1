"""
Club Request/Response Models
Clubs, memberships and admin club management
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Literal
from datetime import datetime
from uuid import UUID


class CreateClubRequest(BaseModel):
    """Request to create a new club"""
    name: str = Field(..., min_length=1, max_length=100, description="Club name")
    description: Optional[str] = None
    logo_url: Optional[str] = Field(None, description="URL to club logo")
    is_active: bool = True

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Computer Science Club",
                "description": "Talks, hackathons and study groups",
                "logo_url": "https://cdn.example.com/logos/cs.png"
            }
        }
    )


class UpdateClubRequest(BaseModel):
    """Request to update club details"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    logo_url: Optional[str] = None
    is_active: Optional[bool] = None


class ClubResponse(BaseModel):
    """Club details response"""
    id: UUID
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    admin_user_id: Optional[UUID] = None
    is_active: bool
    created_date: Optional[datetime] = None
    member_count: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class ClubMemberResponse(BaseModel):
    id: UUID
    club_id: UUID
    club_name: str
    user_id: UUID
    user_name: str
    user_email: str
    university_id: str
    role: str
    status: str
    join_date: Optional[datetime] = None


class ClubDetailResponse(ClubResponse):
    members: List[ClubMemberResponse]
    my_status: Optional[str] = None


class ClubListResponse(BaseModel):
    """Admins get clubs; students get joined/available plus membership states"""
    total: int
    clubs: Optional[List[ClubResponse]] = None
    joined: Optional[List[ClubResponse]] = None
    available: Optional[List[ClubResponse]] = None
    memberships: Optional[Dict[str, str]] = None


class MemberRoleRequest(BaseModel):
    role: Literal["Member", "Officer", "President"]
