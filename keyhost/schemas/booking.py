"""
Pydantic schemas for bookings and availability checks.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
from keyhost.models.booking import BookingStatus, PaymentStatus


class BookingCreate(BaseModel):
    property_id: UUID
    check_in_date: date
    check_out_date: date
    number_of_guests: int = Field(1, ge=1, le=100)
    special_requests: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def validate_dates(self):
        if self.check_out_date <= self.check_in_date:
            raise ValueError("Check-out date must be after check-in date")
        return self


class BookingStatusUpdate(BaseModel):
    status: BookingStatus
    reason: Optional[str] = Field(None, max_length=1000)


class BookingCancelRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)


class AvailabilityResponse(BaseModel):
    property_id: UUID
    check_in_date: date
    check_out_date: date
    available: bool


class BookingResponse(BaseModel):
    id: UUID
    booking_reference: str
    property_id: UUID
    property_title: Optional[str] = None
    guest_id: UUID
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    nights: int
    base_amount: Decimal
    cleaning_fee: Decimal
    security_deposit: Decimal
    extra_guest_fee: Decimal
    service_fee: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    special_requests: Optional[str] = None
    status: BookingStatus
    payment_status: PaymentStatus
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_booking(cls, booking) -> "BookingResponse":
        response = cls.model_validate(booking)
        if booking.property_rel is not None:
            response.property_title = booking.property_rel.title
        return response
