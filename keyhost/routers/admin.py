"""
Admin endpoints: dashboard, platform settings, moderation and user management.
"""

from fastapi import APIRouter, Depends, Query, Path
from typing import Any, Dict, Optional
from uuid import UUID

from keyhost.config import settings
from keyhost.models.user import User, UserType
from keyhost.services.admin import AdminService
from keyhost.services.property import PropertyService
from keyhost.services.review import ReviewService
from keyhost.services.settings import SettingsService
from keyhost.schemas.admin import DashboardResponse
from keyhost.schemas.booking import BookingResponse
from keyhost.schemas.common import ApiResponse, Page
from keyhost.schemas.property import PropertyResponse, PropertyStatusUpdate
from keyhost.schemas.review import ReviewResponse, ReviewStatusUpdate
from keyhost.schemas.setting import SettingsUpdateRequest
from keyhost.schemas.user import UserResponse, UserStatusUpdate
from keyhost.utils.dependencies import (
    get_admin_service,
    get_current_admin_user,
    get_property_service,
    get_review_service,
    get_settings_service,
)
from keyhost.utils.responses import paginate, success_response


router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get(
    "/dashboard",
    response_model=ApiResponse[DashboardResponse],
    summary="Platform dashboard"
)
async def get_dashboard(
    admin: User = Depends(get_current_admin_user),
    admin_service: AdminService = Depends(get_admin_service)
):
    dashboard = await admin_service.dashboard()
    return success_response(
        data=DashboardResponse(
            stats=dashboard["stats"],
            recent_bookings=[BookingResponse.from_booking(b) for b in dashboard["recent_bookings"]],
            pending_reviews=[ReviewResponse.model_validate(r) for r in dashboard["pending_reviews"]],
            daily_stats=dashboard["daily_stats"],
        ),
        message="Dashboard data retrieved successfully"
    )


@router.get(
    "/settings",
    response_model=ApiResponse[Dict[str, Dict[str, Any]]],
    summary="All settings with metadata"
)
async def get_settings(
    admin: User = Depends(get_current_admin_user),
    settings_service: SettingsService = Depends(get_settings_service)
):
    return success_response(
        data=await settings_service.list_all(),
        message="Settings retrieved successfully"
    )


@router.put(
    "/settings",
    response_model=ApiResponse[Dict[str, Dict[str, Any]]],
    summary="Create or update settings"
)
async def update_settings(
    data: SettingsUpdateRequest,
    admin: User = Depends(get_current_admin_user),
    settings_service: SettingsService = Depends(get_settings_service)
):
    return success_response(
        data=await settings_service.update_many(data.settings),
        message="Settings updated successfully"
    )


@router.patch(
    "/properties/{property_id}/status",
    response_model=ApiResponse[PropertyResponse],
    summary="Approve, reject or deactivate a listing"
)
async def update_property_status(
    data: PropertyStatusUpdate,
    property_id: UUID = Path(...),
    admin: User = Depends(get_current_admin_user),
    property_service: PropertyService = Depends(get_property_service)
):
    property_obj = await property_service.set_status(property_id, data.status)
    return success_response(
        data=PropertyResponse.model_validate(property_obj),
        message="Property status updated"
    )


@router.patch(
    "/reviews/{review_id}/status",
    response_model=ApiResponse[ReviewResponse],
    summary="Approve or reject a review"
)
async def update_review_status(
    data: ReviewStatusUpdate,
    review_id: UUID = Path(...),
    admin: User = Depends(get_current_admin_user),
    review_service: ReviewService = Depends(get_review_service)
):
    review = await review_service.set_status(review_id, data.status)
    return success_response(
        data=ReviewResponse.model_validate(review),
        message="Review status updated"
    )


@router.get(
    "/users",
    response_model=ApiResponse[Page[UserResponse]],
    summary="List users"
)
async def list_users(
    user_type: Optional[UserType] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=settings.max_page_size),
    admin: User = Depends(get_current_admin_user),
    admin_service: AdminService = Depends(get_admin_service)
):
    users, total = await admin_service.list_users(page=page, limit=limit, user_type=user_type)
    return success_response(
        data={
            "items": [UserResponse.model_validate(u) for u in users],
            "pagination": paginate(page, limit, total),
        },
        message="Users retrieved successfully"
    )


@router.patch(
    "/users/{user_id}/status",
    response_model=ApiResponse[UserResponse],
    summary="Activate or deactivate a user"
)
async def update_user_status(
    data: UserStatusUpdate,
    user_id: UUID = Path(...),
    admin: User = Depends(get_current_admin_user),
    admin_service: AdminService = Depends(get_admin_service)
):
    user = await admin_service.set_user_status(user_id, data.is_active, admin)
    return success_response(
        data=UserResponse.model_validate(user),
        message="User status updated"
    )
