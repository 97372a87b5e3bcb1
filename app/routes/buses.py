"""
Bus Routes
Seat reservations and admin fleet management
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from app.auth import get_admin_user, get_current_user
from app.schemas.bus import (
    BusReservationResponse,
    BusResponse,
    CreateBusRequest,
    ReserveBusRequest,
    UpdateBusRequest,
)
from app.schemas.user import MessageResponse
from app.services.activity_log_service import activity_log_service, request_ip
from app.services.bus_service import bus_service

router = APIRouter()


@router.get("/reservations/me", response_model=List[BusReservationResponse])
async def my_reservations(current_user: dict = Depends(get_current_user)):
    """The caller's confirmed reservations, next departure first"""
    return await bus_service.my_reservations(current_user["user_id"])


@router.post("/reservations/{reservation_id}/cancel", response_model=BusReservationResponse)
async def cancel_reservation(
    reservation_id: UUID,
    current_user: dict = Depends(get_current_user)
):
    return await bus_service.cancel_reservation(str(reservation_id), current_user["user_id"])


@router.get("/{bus_id}", response_model=BusResponse)
async def get_bus(
    bus_id: UUID,
    current_user: dict = Depends(get_current_user)
):
    return await bus_service.get_bus(str(bus_id))


@router.post("/{bus_id}/reserve", response_model=BusReservationResponse, status_code=status.HTTP_201_CREATED)
async def reserve_seats(
    bus_id: UUID,
    data: ReserveBusRequest,
    current_user: dict = Depends(get_current_user)
):
    """
    Reserve seats on a bus

    One confirmed reservation per user per bus; fails when the bus does not
    have enough free seats.
    """
    return await bus_service.reserve(str(bus_id), current_user["user_id"], data.passenger_count)


# Admin endpoints

@router.get("", response_model=List[BusResponse])
async def list_buses(current_admin: dict = Depends(get_admin_user)):
    return await bus_service.list_all()


@router.post("", response_model=BusResponse, status_code=status.HTTP_201_CREATED)
async def create_bus(
    data: CreateBusRequest,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    bus = await bus_service.create_bus(data)

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="create_bus",
        resource_type="bus",
        resource_id=bus["id"],
        details={"bus_number": bus["bus_number"], "event_id": str(data.event_id)},
        ip_address=request_ip(request)
    )
    return bus


@router.put("/{bus_id}", response_model=BusResponse)
async def update_bus(
    bus_id: UUID,
    data: UpdateBusRequest,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    """Update a bus; capacity cannot drop below the seats already reserved (Admin only)"""
    bus = await bus_service.update_bus(str(bus_id), data)

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="update_bus",
        resource_type="bus",
        resource_id=bus_id,
        details=data.model_dump(exclude_unset=True),
        ip_address=request_ip(request)
    )
    return bus


@router.delete("/{bus_id}", response_model=MessageResponse)
async def delete_bus(
    bus_id: UUID,
    request: Request,
    current_admin: dict = Depends(get_admin_user)
):
    await bus_service.delete_bus(str(bus_id))

    await activity_log_service.log_activity(
        admin_id=current_admin["user_id"],
        action="delete_bus",
        resource_type="bus",
        resource_id=bus_id,
        ip_address=request_ip(request)
    )
    return {"message": "Bus deleted"}


@router.get("/{bus_id}/reservations", response_model=List[BusReservationResponse])
async def bus_reservations(
    bus_id: UUID,
    current_admin: dict = Depends(get_admin_user)
):
    return await bus_service.bus_reservations(str(bus_id))
