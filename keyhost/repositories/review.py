"""
Review repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from keyhost.repositories.base import BaseRepository
from keyhost.models.review import Review, ReviewStatus
from typing import List, Optional, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class ReviewRepository(BaseRepository[Review]):
    """
    Repository for guest reviews.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Review, db)

    async def get_by_booking(self, booking_id: uuid.UUID) -> Optional[Review]:
        return await self.get_by_field("booking_id", booking_id)

    async def published_for_property(self, property_id: uuid.UUID) -> Tuple[List[Review], Optional[float]]:
        """
        Approved public reviews of a property and their average rating.

        Returns:
            Tuple of (reviews newest first, average rating or None)
        """
        conditions = (
            Review.property_id == property_id,
            Review.status == ReviewStatus.APPROVED,
            Review.is_public.is_(True),
        )
        reviews = list((await self.db.execute(
            select(Review).where(*conditions).order_by(Review.created_at.desc())
        )).scalars().all())
        average = (await self.db.execute(select(func.avg(Review.rating)).where(*conditions))).scalar()
        return reviews, (round(float(average), 2) if average is not None else None)

    async def list_for_guest(self, guest_id: uuid.UUID) -> List[Review]:
        query = select(Review).where(Review.guest_id == guest_id).order_by(Review.created_at.desc())
        return list((await self.db.execute(query)).scalars().all())

    async def pending(self, limit: int = 5) -> List[Review]:
        query = (
            select(Review)
            .where(Review.status == ReviewStatus.PENDING)
            .order_by(Review.created_at.desc())
            .limit(limit)
        )
        return list((await self.db.execute(query)).scalars().all())
