"""
User Service
Profiles and administrator user management
"""

import logging
from uuid import uuid4
from datetime import datetime
from typing import Optional

from fastapi import HTTPException, status

from app.auth import hash_password, generate_random_password
from app.database import database
from app.utils.datetime_utils import now_local

logger = logging.getLogger(__name__)

USER_TYPES = ("Student", "Admin")

# Rows a user owns that go away with the account
OWNED_TABLES = (
    "registrations",
    "attendances",
    "feedbacks",
    "certificates",
    "notifications",
    "club_members",
    "bus_reservations",
)


def public_user(row) -> dict:
    """User row without the password hash"""
    user = dict(row)
    user.pop("password_hash", None)
    user["full_name"] = f"{user['first_name']} {user['last_name']}"
    return user


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Service for user accounts"""

    @staticmethod
    async def get_user_row(user_id: str) -> dict:
        """Full user row including the password hash (404 if missing)"""
        user = await database.fetch_one(
            "SELECT * FROM users WHERE id = :id",
            {"id": str(user_id)}
        )

        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

        return dict(user)

    @staticmethod
    async def get_user(user_id: str) -> dict:
        return public_user(await UserService.get_user_row(user_id))

    @staticmethod
    async def find_by_email(email: str) -> Optional[dict]:
        user = await database.fetch_one(
            "SELECT * FROM users WHERE email = :email",
            {"email": normalize_email(email)}
        )
        return dict(user) if user else None

    @staticmethod
    async def find_by_login(login: str) -> Optional[dict]:
        """Look a user up by email, or by university ID when there is no '@'"""
        login = login.strip()
        if "@" in login:
            return await UserService.find_by_email(login)

        user = await database.fetch_one(
            "SELECT * FROM users WHERE university_id = :university_id",
            {"university_id": login}
        )
        return dict(user) if user else None

    @staticmethod
    async def ensure_unique(email: str, university_id: str, exclude_id: Optional[str] = None) -> None:
        """Raise 409 when the email or university ID belongs to another account"""
        params = {"email": normalize_email(email), "university_id": university_id.strip()}
        query = "SELECT id, email FROM users WHERE (email = :email OR university_id = :university_id)"
        if exclude_id:
            query += " AND id != :exclude_id"
            params["exclude_id"] = str(exclude_id)

        existing = await database.fetch_one(query, params)
        if existing:
            field = "email" if existing["email"] == params["email"] else "university ID"
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"An account with this {field} already exists"
            )

    @staticmethod
    async def create_user(
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        university_id: str,
        user_type: str = "Student",
        phone_number: Optional[str] = None,
        department: Optional[str] = None,
        email_confirmed: bool = False,
        is_active: bool = True
    ) -> dict:
        """Insert a new account and return it (without the hash)"""
        if user_type not in USER_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"User type must be one of: {', '.join(USER_TYPES)}"
            )

        await UserService.ensure_unique(email, university_id)

        user_id = str(uuid4())
        await database.execute(
            """
            INSERT INTO users (
                id, email, password_hash, phone_number, first_name, last_name,
                university_id, department, user_type, total_volunteer_hours,
                email_confirmed, two_factor_enabled, is_active, join_date
            )
            VALUES (
                :id, :email, :password_hash, :phone_number, :first_name, :last_name,
                :university_id, :department, :user_type, 0,
                :email_confirmed, FALSE, :is_active, :join_date
            )
            """,
            {
                "id": user_id,
                "email": normalize_email(email),
                "password_hash": hash_password(password),
                "phone_number": phone_number,
                "first_name": first_name.strip(),
                "last_name": last_name.strip(),
                "university_id": university_id.strip(),
                "department": department,
                "user_type": user_type,
                "email_confirmed": email_confirmed,
                "is_active": is_active,
                "join_date": now_local()
            }
        )

        logger.info(f"Created {user_type} account {user_id}")
        return await UserService.get_user(user_id)

    @staticmethod
    async def update_profile(user_id: str, updates: dict) -> dict:
        """Apply profile fields; only non-None keys are written"""
        allowed = {"first_name", "last_name", "phone_number", "department"}
        fields = {k: v for k, v in updates.items() if k in allowed and v is not None}

        await UserService.get_user_row(user_id)
        if fields:
            assignments = ", ".join(f"{name} = :{name}" for name in fields)
            await database.execute(
                f"UPDATE users SET {assignments} WHERE id = :id",
                {**fields, "id": str(user_id)}
            )

        return await UserService.get_user(user_id)

    @staticmethod
    async def set_password(user_id: str, new_password: str) -> None:
        await database.execute(
            "UPDATE users SET password_hash = :password_hash WHERE id = :id",
            {"password_hash": hash_password(new_password), "id": str(user_id)}
        )

    @staticmethod
    async def set_password_hash(user_id: str, password_hash: str) -> None:
        await database.execute(
            "UPDATE users SET password_hash = :password_hash WHERE id = :id",
            {"password_hash": password_hash, "id": str(user_id)}
        )

    @staticmethod
    async def set_flag(user_id: str, flag: str, value: bool) -> None:
        """Update one of the boolean account flags"""
        if flag not in ("email_confirmed", "two_factor_enabled", "is_active"):
            raise ValueError(f"Unknown account flag: {flag}")

        await database.execute(
            f"UPDATE users SET {flag} = :value WHERE id = :id",
            {"value": value, "id": str(user_id)}
        )

    @staticmethod
    async def touch_last_login(user_id: str) -> None:
        await database.execute(
            "UPDATE users SET last_login = :now WHERE id = :id",
            {"now": now_local(), "id": str(user_id)}
        )

    # Admin user management

    @staticmethod
    async def list_users(
        search: Optional[str] = None,
        status_filter: Optional[str] = None,
        user_type: Optional[str] = None,
        from_date: Optional[datetime] = None,
        to_date: Optional[datetime] = None,
        skip: int = 0,
        limit: int = 50
    ) -> dict:
        """Filtered, paginated user list"""
        conditions = []
        params = {}

        if search:
            conditions.append(
                "(LOWER(first_name) LIKE :search OR LOWER(last_name) LIKE :search"
                " OR LOWER(email) LIKE :search OR LOWER(university_id) LIKE :search)"
            )
            params["search"] = f"%{search.strip().lower()}%"

        if status_filter == "active":
            conditions.append("is_active = TRUE")
        elif status_filter == "inactive":
            conditions.append("is_active = FALSE")

        if user_type:
            conditions.append("user_type = :user_type")
            params["user_type"] = user_type

        if from_date:
            conditions.append("join_date >= :from_date")
            params["from_date"] = from_date

        if to_date:
            conditions.append("join_date <= :to_date")
            params["to_date"] = to_date

        where = f" WHERE {' AND '.join(conditions)}" if conditions else ""

        total = await database.fetch_val(f"SELECT COUNT(*) FROM users{where}", params)
        rows = await database.fetch_all(
            f"SELECT * FROM users{where} ORDER BY join_date DESC, email LIMIT :limit OFFSET :skip",
            {**params, "limit": limit, "skip": skip}
        )

        return {
            "total": total or 0,
            "skip": skip,
            "limit": limit,
            "users": [public_user(row) for row in rows]
        }

    @staticmethod
    async def get_user_statistics(user_id: str) -> dict:
        """User profile with participation counts"""
        user = await UserService.get_user(user_id)
        params = {"user_id": str(user_id)}

        registrations = await database.fetch_val(
            "SELECT COUNT(*) FROM registrations WHERE user_id = :user_id AND status != 'Cancelled'", params
        )
        attended = await database.fetch_val(
            "SELECT COUNT(*) FROM attendances WHERE user_id = :user_id AND is_present = TRUE", params
        )
        certificates = await database.fetch_val(
            "SELECT COUNT(*) FROM certificates WHERE user_id = :user_id", params
        )
        clubs = await database.fetch_val(
            "SELECT COUNT(*) FROM club_members WHERE user_id = :user_id AND status = 'Approved'", params
        )

        return {
            **user,
            "registration_count": registrations or 0,
            "attended_count": attended or 0,
            "certificate_count": certificates or 0,
            "club_count": clubs or 0
        }

    @staticmethod
    async def admin_create_user(data) -> dict:
        """Admin-created accounts skip email verification"""
        password = data.password or generate_random_password()
        user = await UserService.create_user(
            email=data.email,
            password=password,
            first_name=data.first_name,
            last_name=data.last_name,
            university_id=data.university_id,
            user_type=data.user_type,
            phone_number=data.phone_number,
            department=data.department,
            email_confirmed=True
        )
        if not data.password:
            user["generated_password"] = password
        return user

    @staticmethod
    async def admin_update_user(user_id: str, data) -> dict:
        existing = await UserService.get_user_row(user_id)
        fields = data.model_dump(exclude_unset=True, exclude_none=True)

        if "user_type" in fields and fields["user_type"] not in USER_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"User type must be one of: {', '.join(USER_TYPES)}"
            )

        if "email" in fields or "university_id" in fields:
            fields["email"] = normalize_email(fields.get("email", existing["email"]))
            await UserService.ensure_unique(
                fields["email"],
                fields.get("university_id", existing["university_id"]),
                exclude_id=user_id
            )

        if fields:
            assignments = ", ".join(f"{name} = :{name}" for name in fields)
            await database.execute(
                f"UPDATE users SET {assignments} WHERE id = :id",
                {**fields, "id": str(user_id)}
            )

        return await UserService.get_user(user_id)

    @staticmethod
    async def change_role(user_id: str, role: str, acting_admin_id: str) -> dict:
        if role not in USER_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Role must be one of: {', '.join(USER_TYPES)}"
            )

        if str(user_id) == str(acting_admin_id) and role != "Admin":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot remove your own admin role"
            )

        await UserService.get_user_row(user_id)
        await database.execute(
            "UPDATE users SET user_type = :role WHERE id = :id",
            {"role": role, "id": str(user_id)}
        )
        return await UserService.get_user(user_id)

    @staticmethod
    async def delete_user(user_id: str, acting_admin_id: str) -> None:
        if str(user_id) == str(acting_admin_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot delete your own account"
            )

        await UserService.get_user_row(user_id)
        params = {"user_id": str(user_id)}

        async with database.transaction():
            # Release seats held by the user's confirmed bus reservations
            reservations = await database.fetch_all(
                """
                SELECT bus_id, passenger_count FROM bus_reservations
                WHERE user_id = :user_id AND status = 'Confirmed'
                """,
                params
            )
            for reservation in reservations:
                await database.execute(
                    """
                    UPDATE buses SET current_passengers = current_passengers - :count
                    WHERE id = :bus_id
                    """,
                    {"count": reservation["passenger_count"], "bus_id": reservation["bus_id"]}
                )

            for table in OWNED_TABLES:
                await database.execute(f"DELETE FROM {table} WHERE user_id = :user_id", params)

            await database.execute("UPDATE events SET created_by = NULL WHERE created_by = :user_id", params)
            await database.execute("UPDATE clubs SET admin_user_id = NULL WHERE admin_user_id = :user_id", params)
            await database.execute("UPDATE activity_logs SET admin_id = NULL WHERE admin_id = :user_id", params)
            await database.execute("DELETE FROM users WHERE id = :user_id", params)

        logger.info(f"Deleted user {user_id}")


user_service = UserService()
