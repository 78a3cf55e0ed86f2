"""
Booking repository: calendar conflicts, guest and owner listings, revenue figures.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from keyhost.repositories.base import BaseRepository
from keyhost.models.booking import Booking, BookingStatus, PaymentStatus, BLOCKING_STATUSES
from keyhost.models.property import Property
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """
    Repository for bookings.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Booking, db)

    async def has_conflict(
        self,
        property_id: uuid.UUID,
        check_in: date,
        check_out: date,
        exclude_booking_id: Optional[uuid.UUID] = None,
    ) -> bool:
        """
        Whether a calendar-blocking booking overlaps [check_in, check_out).

        Two stays overlap when each starts before the other ends.
        """
        query = select(func.count(Booking.id)).where(
            Booking.property_id == property_id,
            Booking.status.in_(BLOCKING_STATUSES),
            Booking.check_in_date < check_out,
            Booking.check_out_date > check_in,
        )
        if exclude_booking_id is not None:
            query = query.where(Booking.id != exclude_booking_id)
        return ((await self.db.execute(query)).scalar() or 0) > 0

    async def reference_exists(self, reference: str) -> bool:
        query = select(func.count(Booking.id)).where(Booking.booking_reference == reference)
        return ((await self.db.execute(query)).scalar() or 0) > 0

    async def list_for_guest(
        self,
        guest_id: uuid.UUID,
        status: Optional[BookingStatus] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Booking], int]:
        filters = {"guest_id": guest_id}
        if status:
            filters["status"] = status
        return await self.get_page(page=page, limit=limit, filters=filters)

    async def list_for_owner(
        self,
        owner_id: uuid.UUID,
        status: Optional[BookingStatus] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Booking], int]:
        """Bookings on any property owned by the given user."""
        conditions = [Property.owner_id == owner_id]
        if status:
            conditions.append(Booking.status == status)

        base = select(Booking).join(Property, Booking.property_id == Property.id).where(*conditions)
        total_query = (
            select(func.count(Booking.id))
            .join(Property, Booking.property_id == Property.id)
            .where(*conditions)
        )
        total = (await self.db.execute(total_query)).scalar() or 0

        result = await self.db.execute(
            base.order_by(Booking.created_at.desc()).offset((page - 1) * limit).limit(limit)
        )
        return list(result.scalars().all()), total

    async def count_active(self) -> int:
        """Bookings that were not cancelled."""
        query = select(func.count(Booking.id)).where(Booking.status != BookingStatus.CANCELLED)
        return (await self.db.execute(query)).scalar() or 0

    async def total_revenue(self) -> Decimal:
        """Sum of totals for paid, non-cancelled bookings."""
        query = select(func.coalesce(func.sum(Booking.total_amount), 0)).where(
            Booking.payment_status == PaymentStatus.PAID,
            Booking.status != BookingStatus.CANCELLED,
        )
        return Decimal(str((await self.db.execute(query)).scalar() or 0))

    async def recent(self, limit: int = 10) -> List[Booking]:
        query = select(Booking).order_by(Booking.created_at.desc()).limit(limit)
        return list((await self.db.execute(query)).scalars().all())

    async def created_since(self, since: datetime) -> List[Booking]:
        query = select(Booking).where(Booking.created_at >= since)
        return list((await self.db.execute(query)).scalars().all())
