"""
Review service: guests review completed stays, admins moderate.
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from keyhost.repositories.review import ReviewRepository
from keyhost.repositories.booking import BookingRepository
from keyhost.models.booking import BookingStatus
from keyhost.models.review import Review, ReviewStatus
from keyhost.models.user import User
from keyhost.schemas.review import ReviewCreate
from keyhost.utils.exceptions import APIException, BadRequestError, DuplicateResourceError, NotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.review_repo = ReviewRepository(db_session)
        self.booking_repo = BookingRepository(db_session)

    async def create_review(self, data: ReviewCreate, guest: User) -> Review:
        """
        Review a checked-out stay. Reviews start pending moderation.

        Raises:
            NotFoundError: If the booking is not the guest's
            BadRequestError: If the stay is not completed
            DuplicateResourceError: If the booking was already reviewed
        """
        booking = await self.booking_repo.get_by_id(data.booking_id)
        if booking is None or booking.guest_id != guest.id:
            raise NotFoundError("Booking", str(data.booking_id))
        if booking.status != BookingStatus.CHECKED_OUT:
            raise BadRequestError("Only completed stays can be reviewed")
        if await self.review_repo.get_by_booking(booking.id):
            raise DuplicateResourceError("Review for booking", booking.booking_reference)

        try:
            review = await self.review_repo.create({
                **data.model_dump(),
                "property_id": booking.property_id,
                "guest_id": guest.id,
                "status": ReviewStatus.PENDING,
            })
        except APIException:
            raise
        except Exception as e:
            raise BadRequestError(f"Failed to create review: {str(e)}")

        logger.info(f"Review {review.id} submitted by {guest.email} for booking {booking.booking_reference}")
        return await self.review_repo.get_by_id(review.id)

    async def property_reviews(self, property_id: uuid.UUID) -> Tuple[List[Review], Optional[float]]:
        """Approved public reviews and the average rating."""
        return await self.review_repo.published_for_property(property_id)

    async def guest_reviews(self, guest: User) -> List[Review]:
        return await self.review_repo.list_for_guest(guest.id)

    async def set_status(self, review_id: uuid.UUID, status: ReviewStatus) -> Review:
        """
        Admin moderation.

        Raises:
            NotFoundError: If the review does not exist
        """
        updated = await self.review_repo.update(review_id, {"status": status})
        if updated is None:
            raise NotFoundError("Review", str(review_id))
        logger.info(f"Review {review_id} moved to {status.value}")
        return updated
