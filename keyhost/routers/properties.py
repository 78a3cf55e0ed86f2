"""
Public property endpoints: search active listings and view one listing.
"""

from fastapi import APIRouter, Depends, Query, Path
from typing import Optional
from decimal import Decimal
from uuid import UUID

from keyhost.config import settings
from keyhost.repositories.property import PropertySearchFilters
from keyhost.services.property import PropertyService
from keyhost.schemas.common import ApiResponse, Page
from keyhost.schemas.property import PropertyResponse, PropertySummary
from keyhost.utils.dependencies import get_property_service
from keyhost.utils.responses import paginate, success_response


router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get(
    "",
    response_model=ApiResponse[Page[PropertySummary]],
    summary="List active properties",
    description="Paginated public listing with optional search filters"
)
async def list_properties(
    city: Optional[str] = Query(None, description="City contains"),
    property_type: Optional[str] = Query(None, description="Exact property type, e.g. apartment"),
    min_price: Optional[Decimal] = Query(None, ge=0, description="Minimum nightly price"),
    max_price: Optional[Decimal] = Query(None, ge=0, description="Maximum nightly price"),
    guests: Optional[int] = Query(None, ge=1, description="Number of guests to host"),
    search: Optional[str] = Query(None, description="Search title, description and city"),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    property_service: PropertyService = Depends(get_property_service)
):
    filters = PropertySearchFilters(
        city=city,
        property_type=property_type,
        min_price=min_price,
        max_price=max_price,
        guests=guests,
        search_text=search,
    )
    properties, total = await property_service.search_properties(filters, page=page, limit=limit)
    return success_response(
        data={
            "items": [PropertySummary.from_property(p) for p in properties],
            "pagination": paginate(page, limit, total),
        },
        message="Properties retrieved successfully"
    )


@router.get(
    "/{property_id}",
    response_model=ApiResponse[PropertyResponse],
    summary="Get an active property"
)
async def get_property(
    property_id: UUID = Path(..., description="Property ID"),
    property_service: PropertyService = Depends(get_property_service)
):
    property_obj = await property_service.get_public_property(property_id)
    return success_response(
        data=PropertyResponse.model_validate(property_obj),
        message="Property retrieved successfully"
    )
