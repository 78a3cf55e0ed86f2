"""
Pydantic schemas for request/response validation.
"""

# Envelope schemas
from .common import Pagination, Page, ApiResponse

# Authentication schemas
from .auth import (
    RegisterRequest,
    LoginRequest,
    RefreshTokenRequest,
    AuthResponse
)

# User schemas
from .user import UserSummary, UserResponse, ProfileUpdate, UserStatusUpdate

# Property schemas
from .property import (
    PropertyImageResponse,
    PropertyCreate,
    PropertyUpdate,
    PropertyStatusUpdate,
    PropertySummary,
    PropertyResponse
)

# Booking, review and messaging schemas
from .booking import (
    BookingCreate,
    BookingStatusUpdate,
    BookingCancelRequest,
    AvailabilityResponse,
    BookingResponse
)
from .review import ReviewCreate, ReviewStatusUpdate, ReviewResponse, PropertyReviews
from .messaging import (
    StartConversationRequest,
    ReplyRequest,
    MessageResponse,
    ConversationSummary,
    ConversationDetail
)

# Moderation and platform schemas
from .report import ReportCreate, ReportStatusUpdate, ReportResponse
from .setting import SettingEntry, SettingsUpdateRequest
from .admin import DashboardTotals, DailyBookingStats, DashboardResponse

__all__ = [
    # Envelope
    "Pagination",
    "Page",
    "ApiResponse",

    # Authentication
    "RegisterRequest",
    "LoginRequest",
    "RefreshTokenRequest",
    "AuthResponse",

    # User
    "UserSummary",
    "UserResponse",
    "ProfileUpdate",
    "UserStatusUpdate",

    # Property
    "PropertyImageResponse",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyStatusUpdate",
    "PropertySummary",
    "PropertyResponse",

    # Booking
    "BookingCreate",
    "BookingStatusUpdate",
    "BookingCancelRequest",
    "AvailabilityResponse",
    "BookingResponse",

    # Review
    "ReviewCreate",
    "ReviewStatusUpdate",
    "ReviewResponse",
    "PropertyReviews",

    # Messaging
    "StartConversationRequest",
    "ReplyRequest",
    "MessageResponse",
    "ConversationSummary",
    "ConversationDetail",

    # Reports
    "ReportCreate",
    "ReportStatusUpdate",
    "ReportResponse",

    # Settings
    "SettingEntry",
    "SettingsUpdateRequest",

    # Admin
    "DashboardTotals",
    "DailyBookingStats",
    "DashboardResponse",
]
