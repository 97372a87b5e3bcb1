"""
Club Service
Business logic for clubs and membership requests
"""

import logging
from typing import Optional
from uuid import uuid4

from fastapi import HTTPException, status

from app.auth import is_admin
from app.database import database
from app.schemas.club import CreateClubRequest, UpdateClubRequest
from app.services.notification_service import notification_service, NotificationType
from app.utils.datetime_utils import now_local

logger = logging.getLogger(__name__)

PENDING = "Pending"
APPROVED = "Approved"
REJECTED = "Rejected"

MEMBER_SELECT = """
    SELECT m.*, u.first_name || ' ' || u.last_name AS user_name, u.email AS user_email,
           u.university_id, c.name AS club_name
    FROM club_members m
    JOIN users u ON u.id = m.user_id
    JOIN clubs c ON c.id = m.club_id
"""


class ClubService:
    """Service for club management operations"""

    @staticmethod
    async def get_club(club_id: str) -> dict:
        """Get club by ID"""
        club = await database.fetch_one(
            "SELECT * FROM clubs WHERE id = :id",
            {"id": str(club_id)}
        )

        if not club:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Club not found"
            )

        return dict(club)

    @staticmethod
    async def _member_counts() -> dict:
        rows = await database.fetch_all(
            "SELECT club_id, COUNT(*) AS count FROM club_members WHERE status = 'Approved' GROUP BY club_id"
        )
        return {str(row["club_id"]): row["count"] for row in rows}

    @staticmethod
    async def list_clubs(current_user: dict) -> dict:
        """
        Admins get every club. Students get active clubs split into the ones
        they belong to and the ones they can join, plus their membership states.
        """
        counts = await ClubService._member_counts()

        def with_count(row) -> dict:
            club = dict(row)
            club["member_count"] = counts.get(str(club["id"]), 0)
            return club

        if current_user["user_type"] == "Admin":
            clubs = await database.fetch_all("SELECT * FROM clubs ORDER BY name")
            return {"total": len(clubs), "clubs": [with_count(c) for c in clubs]}

        clubs = await database.fetch_all("SELECT * FROM clubs WHERE is_active = TRUE ORDER BY name")
        memberships = await database.fetch_all(
            "SELECT club_id, status FROM club_members WHERE user_id = :user_id",
            {"user_id": str(current_user["user_id"])}
        )
        status_by_club = {str(m["club_id"]): m["status"] for m in memberships}

        joined = [with_count(c) for c in clubs if status_by_club.get(str(c["id"])) == APPROVED]
        available = [with_count(c) for c in clubs if status_by_club.get(str(c["id"])) != APPROVED]

        return {
            "total": len(clubs),
            "joined": joined,
            "available": available,
            "memberships": status_by_club
        }

    @staticmethod
    async def get_club_details(club_id: str, current_user: dict) -> dict:
        """Club with members; non-admins only see approved members"""
        club = await ClubService.get_club(club_id)
        viewer_is_admin = is_admin(current_user)

        if not club["is_active"] and not viewer_is_admin:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Club not found"
            )

        query = f"{MEMBER_SELECT} WHERE m.club_id = :club_id"
        if not viewer_is_admin:
            query += " AND m.status = 'Approved'"
        query += " ORDER BY m.join_date ASC"

        members = await database.fetch_all(query, {"club_id": str(club_id)})
        membership = await database.fetch_one(
            "SELECT status, role FROM club_members WHERE club_id = :club_id AND user_id = :user_id",
            {"club_id": str(club_id), "user_id": str(current_user["user_id"])}
        )

        return {
            **club,
            "members": [dict(m) for m in members],
            "member_count": sum(1 for m in members if m["status"] == APPROVED),
            "my_status": membership["status"] if membership else None
        }

    @staticmethod
    async def join_club(club_id: str, current_user: dict) -> dict:
        """Request membership; a rejected request can be sent again"""
        club = await ClubService.get_club(club_id)
        user_id = str(current_user["user_id"])

        if not club["is_active"]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Club is not active"
            )

        if current_user["user_type"] == "Admin" or str(club.get("admin_user_id")) == user_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Club administrators cannot join as members"
            )

        existing = await database.fetch_one(
            "SELECT * FROM club_members WHERE club_id = :club_id AND user_id = :user_id",
            {"club_id": str(club_id), "user_id": user_id}
        )

        if existing and existing["status"] == PENDING:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Your membership request is awaiting approval"
            )

        if existing and existing["status"] == APPROVED:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="You are already a member of this club"
            )

        if existing:
            member_id = str(existing["id"])
            await database.execute(
                "UPDATE club_members SET status = 'Pending', join_date = :now WHERE id = :id",
                {"now": now_local(), "id": member_id}
            )
        else:
            member_id = str(uuid4())
            await database.execute(
                """
                INSERT INTO club_members (id, club_id, user_id, role, status, join_date)
                VALUES (:id, :club_id, :user_id, 'Member', 'Pending', :now)
                """,
                {"id": member_id, "club_id": str(club_id), "user_id": user_id, "now": now_local()}
            )

        return await ClubService.get_membership(member_id)

    @staticmethod
    async def leave_club(club_id: str, user_id: str) -> None:
        result = await database.fetch_one(
            "SELECT id FROM club_members WHERE club_id = :club_id AND user_id = :user_id",
            {"club_id": str(club_id), "user_id": str(user_id)}
        )

        if not result:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="You are not a member of this club"
            )

        await database.execute("DELETE FROM club_members WHERE id = :id", {"id": str(result["id"])})

    @staticmethod
    async def my_clubs(user_id: str) -> list:
        rows = await database.fetch_all(
            f"{MEMBER_SELECT} WHERE m.user_id = :user_id ORDER BY c.name",
            {"user_id": str(user_id)}
        )
        return [dict(row) for row in rows]

    @staticmethod
    async def get_membership(member_id: str) -> dict:
        row = await database.fetch_one(f"{MEMBER_SELECT} WHERE m.id = :id", {"id": str(member_id)})

        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Membership not found"
            )

        return dict(row)

    # Admin operations

    @staticmethod
    async def create_club(data: CreateClubRequest, admin_id: str) -> dict:
        """Create a new club"""
        existing = await database.fetch_one(
            "SELECT id FROM clubs WHERE LOWER(name) = :name",
            {"name": data.name.strip().lower()}
        )

        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Club '{data.name}' already exists"
            )

        club_id = str(uuid4())
        await database.execute(
            """
            INSERT INTO clubs (id, name, description, logo_url, admin_user_id, is_active, created_date)
            VALUES (:id, :name, :description, :logo_url, :admin_user_id, :is_active, :created_date)
            """,
            {
                "id": club_id,
                "name": data.name.strip(),
                "description": data.description,
                "logo_url": data.logo_url,
                "admin_user_id": str(admin_id),
                "is_active": data.is_active,
                "created_date": now_local()
            }
        )

        return await ClubService.get_club(club_id)

    @staticmethod
    async def update_club(club_id: str, data: UpdateClubRequest) -> dict:
        await ClubService.get_club(club_id)
        fields = data.model_dump(exclude_unset=True, exclude_none=True)

        if fields:
            assignments = ", ".join(f"{name} = :{name}" for name in fields)
            await database.execute(
                f"UPDATE clubs SET {assignments} WHERE id = :id",
                {**fields, "id": str(club_id)}
            )

        return await ClubService.get_club(club_id)

    @staticmethod
    async def set_logo(club_id: str, logo_url: str) -> dict:
        await ClubService.get_club(club_id)
        await database.execute(
            "UPDATE clubs SET logo_url = :logo_url WHERE id = :id",
            {"logo_url": logo_url, "id": str(club_id)}
        )
        return await ClubService.get_club(club_id)

    @staticmethod
    async def delete_club(club_id: str) -> None:
        await ClubService.get_club(club_id)
        async with database.transaction():
            await database.execute("DELETE FROM club_members WHERE club_id = :id", {"id": str(club_id)})
            await database.execute("DELETE FROM clubs WHERE id = :id", {"id": str(club_id)})
        logger.info(f"Club {club_id} deleted")

    @staticmethod
    async def members(club_id: str, status_filter: Optional[str] = None) -> list:
        await ClubService.get_club(club_id)
        query = f"{MEMBER_SELECT} WHERE m.club_id = :club_id"
        params = {"club_id": str(club_id)}
        if status_filter:
            query += " AND m.status = :status"
            params["status"] = status_filter
        query += " ORDER BY m.join_date ASC"

        rows = await database.fetch_all(query, params)
        return [dict(row) for row in rows]

    @staticmethod
    async def pending_memberships() -> list:
        rows = await database.fetch_all(
            f"{MEMBER_SELECT} WHERE m.status = 'Pending' ORDER BY m.join_date ASC"
        )
        return [dict(row) for row in rows]

    @staticmethod
    async def review_membership(member_id: str, approve: bool) -> dict:
        """Approve or reject a pending membership request"""
        membership = await ClubService.get_membership(member_id)

        if membership["status"] != PENDING:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Membership is already {membership['status'].lower()}"
            )

        new_status = APPROVED if approve else REJECTED
        await database.execute(
            "UPDATE club_members SET status = :status WHERE id = :id",
            {"status": new_status, "id": str(member_id)}
        )

        if approve:
            message = f"Your request to join {membership['club_name']} has been approved."
            notification_type = NotificationType.CLUB_MEMBERSHIP_APPROVED
        else:
            message = f"Your request to join {membership['club_name']} has been declined."
            notification_type = NotificationType.CLUB_MEMBERSHIP_REJECTED

        await notification_service.send(membership["user_id"], message, notification_type)
        return await ClubService.get_membership(member_id)

    @staticmethod
    async def set_member_role(member_id: str, role: str) -> dict:
        await ClubService.get_membership(member_id)
        await database.execute(
            "UPDATE club_members SET role = :role WHERE id = :id",
            {"role": role, "id": str(member_id)}
        )
        return await ClubService.get_membership(member_id)


# Create singleton instance
club_service = ClubService()
