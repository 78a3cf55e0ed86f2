"""
Property owner endpoints: manage own listings and the bookings made on them.
"""

from fastapi import APIRouter, Depends, Query, Path, status
from typing import Optional
from uuid import UUID

from keyhost.config import settings
from keyhost.models.booking import BookingStatus
from keyhost.models.property import PropertyStatus
from keyhost.models.user import User
from keyhost.services.booking import BookingService
from keyhost.services.property import PropertyService
from keyhost.schemas.booking import BookingResponse, BookingStatusUpdate
from keyhost.schemas.common import ApiResponse, Page
from keyhost.schemas.property import PropertyCreate, PropertyResponse, PropertyUpdate
from keyhost.utils.dependencies import get_booking_service, get_property_service, require_property_owner
from keyhost.utils.responses import paginate, success_response


router = APIRouter(prefix="/property-owner", tags=["Property Owner"])


@router.get(
    "/properties",
    response_model=ApiResponse[Page[PropertyResponse]],
    summary="List own properties"
)
async def list_own_properties(
    status_filter: Optional[PropertyStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    owner: User = Depends(require_property_owner),
    property_service: PropertyService = Depends(get_property_service)
):
    properties, total = await property_service.list_owner_properties(
        owner, status=status_filter, page=page, limit=limit
    )
    return success_response(
        data={
            "items": [PropertyResponse.model_validate(p) for p in properties],
            "pagination": paginate(page, limit, total),
        },
        message="Properties retrieved successfully"
    )


@router.get(
    "/properties/{property_id}",
    response_model=ApiResponse[PropertyResponse],
    summary="Get one of your properties"
)
async def get_own_property(
    property_id: UUID = Path(...),
    owner: User = Depends(require_property_owner),
    property_service: PropertyService = Depends(get_property_service)
):
    property_obj = await property_service.get_owner_property(property_id, owner)
    return success_response(
        data=PropertyResponse.model_validate(property_obj),
        message="Property retrieved successfully"
    )


@router.post(
    "/properties",
    response_model=ApiResponse[PropertyResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create property",
    description="Create a listing pending admin approval. Images are base64 data URLs; the first is the main image."
)
async def create_property(
    data: PropertyCreate,
    owner: User = Depends(require_property_owner),
    property_service: PropertyService = Depends(get_property_service)
):
    property_obj = await property_service.create_property(data, owner)
    return success_response(
        data=PropertyResponse.model_validate(property_obj),
        message="Property created successfully"
    )


@router.put(
    "/properties/{property_id}",
    response_model=ApiResponse[PropertyResponse],
    summary="Update property",
    description="Partial update. Omit images to keep the gallery, send a list to replace it."
)
async def update_property(
    data: PropertyUpdate,
    property_id: UUID = Path(...),
    owner: User = Depends(require_property_owner),
    property_service: PropertyService = Depends(get_property_service)
):
    property_obj = await property_service.update_property(property_id, data, owner)
    return success_response(
        data=PropertyResponse.model_validate(property_obj),
        message="Property updated successfully"
    )


@router.delete(
    "/properties/{property_id}",
    response_model=ApiResponse[PropertyResponse],
    summary="Deactivate property"
)
async def delete_property(
    property_id: UUID = Path(...),
    owner: User = Depends(require_property_owner),
    property_service: PropertyService = Depends(get_property_service)
):
    property_obj = await property_service.delete_property(property_id, owner)
    return success_response(
        data=PropertyResponse.model_validate(property_obj),
        message="Property deleted successfully"
    )


@router.get(
    "/bookings",
    response_model=ApiResponse[Page[BookingResponse]],
    summary="Bookings on your properties"
)
async def list_owner_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=settings.max_page_size),
    owner: User = Depends(require_property_owner),
    booking_service: BookingService = Depends(get_booking_service)
):
    bookings, total = await booking_service.list_owner_bookings(
        owner, status=status_filter, page=page, limit=limit
    )
    return success_response(
        data={
            "items": [BookingResponse.from_booking(b) for b in bookings],
            "pagination": paginate(page, limit, total),
        },
        message="Bookings retrieved successfully"
    )


@router.patch(
    "/bookings/{booking_id}/status",
    response_model=ApiResponse[BookingResponse],
    summary="Confirm, check in, check out or cancel a booking"
)
async def update_booking_status(
    data: BookingStatusUpdate,
    booking_id: UUID = Path(...),
    owner: User = Depends(require_property_owner),
    booking_service: BookingService = Depends(get_booking_service)
):
    booking = await booking_service.update_status(booking_id, data.status, owner, reason=data.reason)
    return success_response(
        data=BookingResponse.from_booking(booking),
        message="Booking status updated"
    )
