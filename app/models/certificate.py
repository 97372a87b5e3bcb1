"""
Certificate Model
Participation certificates issued to attendees
"""

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from app.database import Base


class Certificate(Base):
    __tablename__ = "certificates"
    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_certificate_user_event"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    certificate_number = Column(String(50), unique=True, nullable=False, index=True)
    certificate_url = Column(String, nullable=True)
    is_downloaded = Column(Boolean, default=False)
    issue_date = Column(DateTime, server_default=func.now())

    event = relationship("Event", backref="certificates")
    user = relationship("User", backref="certificates")
