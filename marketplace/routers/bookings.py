"""Bookings API router."""
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from marketplace.dependencies import get_booking_service, get_current_user_id
from marketplace.errors import ValidationError
from marketplace.schemas import Booking, CreateBookingRequest
from marketplace.services.booking_service import BookingService

router = APIRouter(prefix="/api/bookings", tags=["bookings"])


@router.post("", response_model=Booking, status_code=201)
async def create_booking(
    request: CreateBookingRequest,
    user_id: str = Depends(get_current_user_id),
    booking_service: BookingService = Depends(get_booking_service)
):
    """Book a provider."""
    try:
        return booking_service.create_booking(
            user_id=user_id,
            provider_id=request.provider_id,
            service_description=request.service_description,
            scheduled_date=request.scheduled_date,
            total_cost=request.total_cost
        )
    except ValidationError as e:
        return JSONResponse(status_code=400, content=e.to_dict())


@router.get("", response_model=List[Booking])
async def get_bookings(
    user_id: str = Depends(get_current_user_id),
    booking_service: BookingService = Depends(get_booking_service)
):
    """Get user's bookings."""
    return booking_service.list_bookings(user_id)
