"""
Notification Model
In-app messages delivered to users
"""

from sqlalchemy import Column, String, Boolean, DateTime, Text, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID
import uuid
from app.database import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.id", ondelete="SET NULL"), nullable=True)
    message = Column(Text, nullable=False)
    type = Column(String(50), nullable=False, default="General")
    is_read = Column(Boolean, default=False)
    sent_date = Column(DateTime, server_default=func.now(), index=True)
