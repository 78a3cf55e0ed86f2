"""
Booking service: availability, pricing, reservation and status workflow.
"""

from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from keyhost.config import settings
from keyhost.repositories.booking import BookingRepository
from keyhost.repositories.property import PropertyRepository
from keyhost.models.booking import Booking, BookingStatus
from keyhost.models.property import Property, PropertyStatus
from keyhost.models.user import User
from keyhost.schemas.booking import BookingCreate
from keyhost.utils.exceptions import (
    APIException,
    BadRequestError,
    BusinessRuleViolationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    PropertyNotFoundError,
)
import random
import string
import uuid
import logging

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# Owner-driven status changes
ALLOWED_TRANSITIONS: Dict[BookingStatus, Tuple[BookingStatus, ...]] = {
    BookingStatus.PENDING: (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
    BookingStatus.CONFIRMED: (BookingStatus.CHECKED_IN, BookingStatus.CANCELLED),
    BookingStatus.CHECKED_IN: (BookingStatus.CHECKED_OUT,),
}

GUEST_CANCELLABLE = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


def generate_booking_reference() -> str:
    """``KH`` followed by six digits and three uppercase letters or digits."""
    digits = "".join(random.choices(string.digits, k=6))
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=3))
    return f"KH{digits}{suffix}"


def calculate_price(property_obj: Property, nights: int, guests: int) -> Dict[str, Decimal]:
    """
    Price breakdown for a stay.

    Service fee and tax are charged on the nightly total only. Extra guest
    fees apply per night to every guest after the first.

    Args:
        property_obj: Listing being booked
        nights: Number of nights
        guests: Number of guests

    Returns:
        Dict with base_amount, cleaning_fee, security_deposit,
        extra_guest_fee, service_fee, tax_amount and total_amount
    """
    base_amount = (Decimal(property_obj.base_price) * nights).quantize(CENT, ROUND_HALF_UP)
    cleaning_fee = Decimal(property_obj.cleaning_fee or 0).quantize(CENT, ROUND_HALF_UP)
    security_deposit = Decimal(property_obj.security_deposit or 0).quantize(CENT, ROUND_HALF_UP)
    extra_guest_fee = (
        Decimal(property_obj.extra_guest_fee or 0) * max(0, guests - 1) * nights
    ).quantize(CENT, ROUND_HALF_UP)
    service_fee = (base_amount * Decimal(str(settings.service_fee_rate))).quantize(CENT, ROUND_HALF_UP)
    tax_amount = (base_amount * Decimal(str(settings.tax_rate))).quantize(CENT, ROUND_HALF_UP)
    total_amount = base_amount + cleaning_fee + extra_guest_fee + service_fee + tax_amount

    return {
        "base_amount": base_amount,
        "cleaning_fee": cleaning_fee,
        "security_deposit": security_deposit,
        "extra_guest_fee": extra_guest_fee,
        "service_fee": service_fee,
        "tax_amount": tax_amount,
        "total_amount": total_amount,
    }


class BookingService:
    """
    Booking service for guests and property owners.

    A stay occupies ``[check_in_date, check_out_date)``; pending, confirmed
    and checked-in bookings block the calendar.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.booking_repo = BookingRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    async def _new_reference(self) -> str:
        for _ in range(10):
            reference = generate_booking_reference()
            if not await self.booking_repo.reference_exists(reference):
                return reference
        raise ConflictError("Could not allocate a booking reference, please retry")

    async def check_availability(self, property_id: uuid.UUID, check_in: date, check_out: date) -> bool:
        """
        Whether the property is free for the date range.

        Raises:
            BadRequestError: If check-out is not after check-in
            PropertyNotFoundError: If the property does not exist
        """
        if check_out <= check_in:
            raise BadRequestError("Check-out date must be after check-in date")
        if await self.property_repo.get_by_id(property_id) is None:
            raise PropertyNotFoundError(str(property_id))
        return not await self.booking_repo.has_conflict(property_id, check_in, check_out)

    async def create_booking(self, data: BookingCreate, guest: User) -> Booking:
        """
        Reserve a property.

        Args:
            data: Booking request
            guest: Booking user

        Returns:
            Created booking, confirmed immediately for instant-book listings

        Raises:
            BadRequestError: If dates or guest count break listing rules
            PropertyNotFoundError: If the property is missing or not active
            ConflictError: If the dates overlap another stay
        """
        if data.check_in_date < date.today():
            raise BadRequestError("Check-in date cannot be in the past")

        property_obj = await self.property_repo.get_by_id(data.property_id)
        if property_obj is None or property_obj.status != PropertyStatus.ACTIVE:
            raise PropertyNotFoundError(str(data.property_id))

        if property_obj.owner_id == guest.id:
            raise BusinessRuleViolationError("own_property", "You cannot book your own property")

        if data.number_of_guests > property_obj.max_guests:
            raise BadRequestError(f"This property allows at most {property_obj.max_guests} guests")

        nights = (data.check_out_date - data.check_in_date).days
        if nights < property_obj.minimum_stay:
            raise BadRequestError(f"Minimum stay is {property_obj.minimum_stay} nights")
        if property_obj.maximum_stay and nights > property_obj.maximum_stay:
            raise BadRequestError(f"Maximum stay is {property_obj.maximum_stay} nights")

        if await self.booking_repo.has_conflict(property_obj.id, data.check_in_date, data.check_out_date):
            raise ConflictError("Property is not available for the selected dates")

        booking_data = {
            "booking_reference": await self._new_reference(),
            "property_id": property_obj.id,
            "guest_id": guest.id,
            "check_in_date": data.check_in_date,
            "check_out_date": data.check_out_date,
            "number_of_guests": data.number_of_guests,
            "nights": nights,
            "special_requests": data.special_requests,
            "status": BookingStatus.CONFIRMED if property_obj.is_instant_book else BookingStatus.PENDING,
            **calculate_price(property_obj, nights, data.number_of_guests),
        }

        try:
            booking = await self.booking_repo.create(booking_data)
            booking = await self.booking_repo.get_by_id(booking.id)
        except APIException:
            raise
        except Exception as e:
            raise BadRequestError(f"Failed to create booking: {str(e)}")

        logger.info(
            f"Booking {booking.booking_reference} created by {guest.email} "
            f"for property {property_obj.id} ({nights} nights, {booking.status.value})"
        )
        return booking

    async def get_booking(self, booking_id: uuid.UUID, user: User) -> Booking:
        """
        A booking visible to its guest, the property owner or an admin.

        Raises:
            NotFoundError: If missing
            ForbiddenError: If the user is not involved
        """
        booking = await self.booking_repo.get_by_id(booking_id)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        if booking.guest_id != user.id and not user.can_manage_property(booking.property_rel.owner_id):
            raise ForbiddenError("You do not have access to this booking")
        return booking

    async def list_guest_bookings(
        self,
        guest: User,
        status: Optional[BookingStatus] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Booking], int]:
        return await self.booking_repo.list_for_guest(guest.id, status=status, page=page, limit=limit)

    async def list_owner_bookings(
        self,
        owner: User,
        status: Optional[BookingStatus] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Booking], int]:
        return await self.booking_repo.list_for_owner(owner.id, status=status, page=page, limit=limit)

    async def cancel_booking(self, booking_id: uuid.UUID, guest: User, reason: Optional[str] = None) -> Booking:
        """
        Guest cancellation of a pending or confirmed booking.

        Raises:
            NotFoundError: If the booking is not the guest's
            BadRequestError: If the booking can no longer be cancelled
        """
        booking = await self.booking_repo.get_by_id(booking_id)
        if booking is None or booking.guest_id != guest.id:
            raise NotFoundError("Booking", str(booking_id))
        if booking.status not in GUEST_CANCELLABLE:
            raise BadRequestError(f"Cannot cancel a booking that is {booking.status.value}")

        updated = await self.booking_repo.update(booking_id, {
            "status": BookingStatus.CANCELLED,
            "cancelled_at": datetime.now(timezone.utc),
            "cancellation_reason": reason,
        })
        logger.info(f"Booking {booking.booking_reference} cancelled by guest {guest.email}")
        return updated

    async def update_status(
        self,
        booking_id: uuid.UUID,
        new_status: BookingStatus,
        owner: User,
        reason: Optional[str] = None,
    ) -> Booking:
        """
        Owner-driven status change.

        Raises:
            NotFoundError: If the booking is not on one of the owner's properties
            BadRequestError: If the transition is not allowed
        """
        booking = await self.booking_repo.get_by_id(booking_id)
        if booking is None or not owner.can_manage_property(booking.property_rel.owner_id):
            raise NotFoundError("Booking", str(booking_id))

        if new_status not in ALLOWED_TRANSITIONS.get(booking.status, ()):
            raise BadRequestError(
                f"Cannot change booking status from {booking.status.value} to {new_status.value}"
            )

        previous = booking.status
        changes = {"status": new_status}
        if new_status == BookingStatus.CANCELLED:
            changes["cancelled_at"] = datetime.now(timezone.utc)
            changes["cancellation_reason"] = reason

        updated = await self.booking_repo.update(booking_id, changes)
        logger.info(
            f"Booking {booking.booking_reference} moved from {previous.value} "
            f"to {new_status.value} by {owner.email}"
        )
        return updated
