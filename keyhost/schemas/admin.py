"""
Pydantic schemas for the admin dashboard.
"""

from pydantic import BaseModel
from typing import List
from datetime import date
from decimal import Decimal
from keyhost.schemas.booking import BookingResponse
from keyhost.schemas.review import ReviewResponse


class DashboardTotals(BaseModel):
    total_users: int
    total_properties: int
    total_bookings: int
    total_revenue: Decimal
    pending_properties: int
    pending_reports: int


class DailyBookingStats(BaseModel):
    day: date
    bookings: int
    revenue: Decimal


class DashboardResponse(BaseModel):
    stats: DashboardTotals
    recent_bookings: List[BookingResponse]
    pending_reviews: List[ReviewResponse]
    daily_stats: List[DailyBookingStats]
