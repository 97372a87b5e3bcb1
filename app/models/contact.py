"""
Contact Model
Messages submitted through the public contact form
"""

from sqlalchemy import Column, String, Boolean, DateTime, Text, func
from sqlalchemy.dialects.postgresql import UUID
import uuid
from app.database import Base


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    full_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=True)
    subject = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    inquiry_type = Column(String(50), nullable=False, default="General")

    # Admin handling
    admin_response = Column(Text, nullable=True)
    response_date = Column(DateTime, nullable=True)
    is_resolved = Column(Boolean, default=False)
    submitted_date = Column(DateTime, server_default=func.now())
