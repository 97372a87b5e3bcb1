"""
Event Models
Events with their registrations, attendance records and feedback
"""

from sqlalchemy import (
    Column, String, Boolean, DateTime, Integer, Text, ForeignKey,
    UniqueConstraint, CheckConstraint, func
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from app.database import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    event_date = Column(DateTime, nullable=False, index=True)
    venue = Column(String(200), nullable=True)
    event_type = Column(String(50), nullable=True)
    image_url = Column(String, nullable=True)
    max_capacity = Column(Integer, nullable=False, default=100)
    volunteer_hours = Column(Integer, nullable=False, default=0)

    # QR check-in secret
    secret = Column(String(64), unique=True, nullable=True, index=True)

    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    is_approved = Column(Boolean, default=False)
    created_date = Column(DateTime, server_default=func.now())

    creator = relationship("User", backref="created_events")


class Registration(Base):
    __tablename__ = "registrations"
    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_registration_user_event"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="Confirmed")  # Confirmed | Waitlist | Cancelled
    guest_count = Column(Integer, nullable=False, default=0)
    registration_date = Column(DateTime, server_default=func.now())

    event = relationship("Event", backref="registrations")
    user = relationship("User", backref="registrations")


class Attendance(Base):
    __tablename__ = "attendances"
    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_attendance_user_event"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    check_in_time = Column(DateTime, server_default=func.now())
    qr_code = Column(String(64), nullable=True)
    is_present = Column(Boolean, default=True)

    event = relationship("Event", backref="attendances")
    user = relationship("User", backref="attendances")


class Feedback(Base):
    __tablename__ = "feedbacks"
    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_feedback_user_event"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_feedback_rating"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    submitted_date = Column(DateTime, server_default=func.now())
