"""
User Model
Students and administrators share one accounts table
"""

from sqlalchemy import Column, String, Boolean, DateTime, Integer, func
from sqlalchemy.dialects.postgresql import UUID
import uuid
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    phone_number = Column(String(30), nullable=True)

    # Profile
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    university_id = Column(String(20), unique=True, nullable=False, index=True)
    department = Column(String(100), nullable=True)
    user_type = Column(String(20), nullable=False, default="Student")  # Student | Admin
    total_volunteer_hours = Column(Integer, nullable=False, default=0)

    # Status
    email_confirmed = Column(Boolean, default=False)
    two_factor_enabled = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    last_login = Column(DateTime, nullable=True)
    join_date = Column(DateTime, server_default=func.now())
