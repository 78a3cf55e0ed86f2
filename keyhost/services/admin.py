"""
Admin service: platform dashboard and user management.
"""

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from keyhost.repositories.user import UserRepository
from keyhost.repositories.property import PropertyRepository
from keyhost.repositories.booking import BookingRepository
from keyhost.repositories.review import ReviewRepository
from keyhost.repositories.report import ReportRepository
from keyhost.models.booking import BookingStatus
from keyhost.models.property import PropertyStatus
from keyhost.models.report import ReportStatus
from keyhost.models.user import User, UserType
from keyhost.utils.exceptions import BadRequestError, NotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)

DASHBOARD_DAYS = 7


class AdminService:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.property_repo = PropertyRepository(db_session)
        self.booking_repo = BookingRepository(db_session)
        self.review_repo = ReviewRepository(db_session)
        self.report_repo = ReportRepository(db_session)

    async def dashboard(self, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Platform totals, recent activity and the last week of bookings.

        Args:
            today: Last day of the daily series, defaults to the current UTC date

        Returns:
            Dict shaped like ``DashboardResponse``
        """
        stats = {
            "total_users": await self.user_repo.count({"is_active": True}),
            "total_properties": await self.property_repo.count({"status": PropertyStatus.ACTIVE}),
            "total_bookings": await self.booking_repo.count_active(),
            "total_revenue": await self.booking_repo.total_revenue(),
            "pending_properties": await self.property_repo.count({"status": PropertyStatus.PENDING_APPROVAL}),
            "pending_reports": await self.report_repo.count({"status": ReportStatus.PENDING}),
        }

        return {
            "stats": stats,
            "recent_bookings": await self.booking_repo.recent(limit=10),
            "pending_reviews": await self.review_repo.pending(limit=5),
            "daily_stats": await self._daily_stats(today or datetime.now(timezone.utc).date()),
        }

    async def _daily_stats(self, today: date) -> List[Dict[str, Any]]:
        first_day = today - timedelta(days=DASHBOARD_DAYS - 1)
        since = datetime.combine(first_day, time.min, tzinfo=timezone.utc)

        days = {
            first_day + timedelta(days=offset): {"bookings": 0, "revenue": Decimal("0")}
            for offset in range(DASHBOARD_DAYS)
        }
        for booking in await self.booking_repo.created_since(since):
            bucket = days.get(booking.created_at.date())
            if bucket is None:
                continue
            bucket["bookings"] += 1
            if booking.status != BookingStatus.CANCELLED:
                bucket["revenue"] += Decimal(booking.total_amount)

        return [{"day": day, **values} for day, values in sorted(days.items())]

    async def list_users(
        self,
        page: int = 1,
        limit: int = 20,
        user_type: Optional[UserType] = None,
    ) -> Tuple[List[User], int]:
        return await self.user_repo.list_users(page=page, limit=limit, user_type=user_type)

    async def set_user_status(self, user_id: uuid.UUID, is_active: bool, admin: User) -> User:
        """
        Activate or deactivate an account.

        Raises:
            BadRequestError: When an admin tries to deactivate themselves
            NotFoundError: If the user does not exist
        """
        if user_id == admin.id and not is_active:
            raise BadRequestError("You cannot deactivate your own account")

        updated = await self.user_repo.update(user_id, {"is_active": is_active})
        if updated is None:
            raise NotFoundError("User", str(user_id))
        logger.info(f"User {updated.email} {'activated' if is_active else 'deactivated'} by {admin.email}")
        return updated
