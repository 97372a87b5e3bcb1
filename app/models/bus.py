"""
Bus Models
Event transport and seat reservations
"""

from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from app.database import Base


class Bus(Base):
    __tablename__ = "buses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_id = Column(UUID(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    bus_number = Column(String(50), nullable=False)
    capacity = Column(Integer, nullable=False)
    current_passengers = Column(Integer, nullable=False, default=0)
    departure_time = Column(DateTime, nullable=False)
    departure_location = Column(String(200), nullable=False)
    destination = Column(String(200), nullable=False)
    created_date = Column(DateTime, server_default=func.now())

    event = relationship("Event", backref="buses")


class BusReservation(Base):
    __tablename__ = "bus_reservations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    bus_id = Column(UUID(as_uuid=True), ForeignKey("buses.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    passenger_count = Column(Integer, nullable=False, default=1)
    status = Column(String(20), nullable=False, default="Confirmed")  # Confirmed | Cancelled
    reservation_date = Column(DateTime, server_default=func.now())

    bus = relationship("Bus", backref="reservations")
