"""
Review endpoints.
"""

from fastapi import APIRouter, Depends, Path, status
from typing import List
from uuid import UUID

from keyhost.models.user import User
from keyhost.services.review import ReviewService
from keyhost.schemas.common import ApiResponse
from keyhost.schemas.review import PropertyReviews, ReviewCreate, ReviewResponse
from keyhost.utils.dependencies import get_current_user, get_review_service
from keyhost.utils.responses import success_response


router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post(
    "",
    response_model=ApiResponse[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Review a completed stay"
)
async def create_review(
    data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
):
    review = await review_service.create_review(data, current_user)
    return success_response(
        data=ReviewResponse.model_validate(review),
        message="Review submitted for moderation"
    )


@router.get(
    "/property/{property_id}",
    response_model=ApiResponse[PropertyReviews],
    summary="Published reviews of a property"
)
async def property_reviews(
    property_id: UUID = Path(...),
    review_service: ReviewService = Depends(get_review_service)
):
    reviews, average = await review_service.property_reviews(property_id)
    return success_response(
        data=PropertyReviews(
            reviews=[ReviewResponse.model_validate(r) for r in reviews],
            average_rating=average,
            total_reviews=len(reviews),
        ),
        message="Reviews retrieved successfully"
    )


@router.get(
    "/my-reviews",
    response_model=ApiResponse[List[ReviewResponse]],
    summary="Your reviews"
)
async def my_reviews(
    current_user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service)
):
    reviews = await review_service.guest_reviews(current_user)
    return success_response(
        data=[ReviewResponse.model_validate(r) for r in reviews],
        message="Reviews retrieved successfully"
    )
