"""
Guest booking endpoints.
"""

from fastapi import APIRouter, Depends, Query, Path, status
from typing import Optional
from datetime import date
from uuid import UUID

from keyhost.config import settings
from keyhost.models.booking import BookingStatus
from keyhost.models.user import User
from keyhost.services.booking import BookingService
from keyhost.schemas.booking import (
    AvailabilityResponse,
    BookingCancelRequest,
    BookingCreate,
    BookingResponse,
)
from keyhost.schemas.common import ApiResponse, Page
from keyhost.utils.dependencies import get_booking_service, get_current_user
from keyhost.utils.responses import paginate, success_response


router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post(
    "",
    response_model=ApiResponse[BookingResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Book a property"
)
async def create_booking(
    data: BookingCreate,
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service)
):
    booking = await booking_service.create_booking(data, current_user)
    return success_response(
        data=BookingResponse.from_booking(booking),
        message="Booking created successfully"
    )


@router.get(
    "/availability/{property_id}",
    response_model=ApiResponse[AvailabilityResponse],
    summary="Check availability"
)
async def check_availability(
    property_id: UUID = Path(...),
    check_in: date = Query(..., description="Check-in date (YYYY-MM-DD)"),
    check_out: date = Query(..., description="Check-out date (YYYY-MM-DD)"),
    booking_service: BookingService = Depends(get_booking_service)
):
    available = await booking_service.check_availability(property_id, check_in, check_out)
    return success_response(
        data=AvailabilityResponse(
            property_id=property_id,
            check_in_date=check_in,
            check_out_date=check_out,
            available=available,
        ),
        message="Property is available" if available else "Property is not available"
    )


@router.get(
    "/my-bookings",
    response_model=ApiResponse[Page[BookingResponse]],
    summary="Your bookings"
)
async def my_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=settings.max_page_size),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service)
):
    bookings, total = await booking_service.list_guest_bookings(
        current_user, status=status_filter, page=page, limit=limit
    )
    return success_response(
        data={
            "items": [BookingResponse.from_booking(b) for b in bookings],
            "pagination": paginate(page, limit, total),
        },
        message="Bookings retrieved successfully"
    )


@router.get(
    "/{booking_id}",
    response_model=ApiResponse[BookingResponse],
    summary="Get a booking"
)
async def get_booking(
    booking_id: UUID = Path(...),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service)
):
    booking = await booking_service.get_booking(booking_id, current_user)
    return success_response(
        data=BookingResponse.from_booking(booking),
        message="Booking retrieved successfully"
    )


@router.patch(
    "/{booking_id}/cancel",
    response_model=ApiResponse[BookingResponse],
    summary="Cancel your booking"
)
async def cancel_booking(
    data: Optional[BookingCancelRequest] = None,
    booking_id: UUID = Path(...),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service)
):
    booking = await booking_service.cancel_booking(
        booking_id, current_user, reason=data.reason if data else None
    )
    return success_response(
        data=BookingResponse.from_booking(booking),
        message="Booking cancelled successfully"
    )
