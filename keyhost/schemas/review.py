"""
Pydantic schemas for guest reviews.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from keyhost.models.review import ReviewStatus
from keyhost.schemas.user import UserSummary


class ReviewCreate(BaseModel):
    booking_id: UUID
    rating: int = Field(..., ge=1, le=5)
    cleanliness_rating: Optional[int] = Field(None, ge=1, le=5)
    communication_rating: Optional[int] = Field(None, ge=1, le=5)
    location_rating: Optional[int] = Field(None, ge=1, le=5)
    value_rating: Optional[int] = Field(None, ge=1, le=5)
    title: Optional[str] = Field(None, max_length=255)
    comment: Optional[str] = Field(None, max_length=5000)


class ReviewStatusUpdate(BaseModel):
    status: ReviewStatus


class ReviewResponse(BaseModel):
    id: UUID
    booking_id: UUID
    property_id: UUID
    guest_id: UUID
    guest: Optional[UserSummary] = None
    rating: int
    cleanliness_rating: Optional[int] = None
    communication_rating: Optional[int] = None
    location_rating: Optional[int] = None
    value_rating: Optional[int] = None
    title: Optional[str] = None
    comment: Optional[str] = None
    status: ReviewStatus
    is_public: bool
    host_response: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PropertyReviews(BaseModel):
    reviews: List[ReviewResponse]
    average_rating: Optional[float] = None
    total_reviews: int
