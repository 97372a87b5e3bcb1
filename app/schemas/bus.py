"""
Bus Request/Response Models
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID


class CreateBusRequest(BaseModel):
    event_id: UUID
    bus_number: str = Field(..., min_length=1, max_length=50)
    capacity: int = Field(..., ge=1, le=200)
    departure_time: datetime
    departure_location: str = Field(..., min_length=1, max_length=200)
    destination: str = Field(..., min_length=1, max_length=200)


class UpdateBusRequest(BaseModel):
    bus_number: Optional[str] = Field(None, min_length=1, max_length=50)
    capacity: Optional[int] = Field(None, ge=1, le=200)
    departure_time: Optional[datetime] = None
    departure_location: Optional[str] = Field(None, min_length=1, max_length=200)
    destination: Optional[str] = Field(None, min_length=1, max_length=200)


class BusResponse(BaseModel):
    id: UUID
    event_id: UUID
    bus_number: str
    capacity: int
    current_passengers: int
    available_seats: int
    departure_time: datetime
    departure_location: str
    destination: str


class ReserveBusRequest(BaseModel):
    passenger_count: int = Field(1, ge=1, le=10)


class BusReservationResponse(BaseModel):
    id: UUID
    bus_id: UUID
    user_id: UUID
    event_id: UUID
    event_title: str
    bus_number: str
    departure_time: datetime
    departure_location: str
    destination: str
    passenger_count: int
    status: str
    reservation_date: Optional[datetime] = None
