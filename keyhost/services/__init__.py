"""
Service layer for business logic implementation.
Contains services for settings, authentication, listings, bookings, reviews,
messaging, reports, the admin dashboard and error handling.
"""

from .settings import SettingsService, DEFAULT_SETTINGS
from .auth import AuthService
from .property import PropertyService
from .booking import BookingService
from .review import ReviewService
from .messaging import MessagingService
from .report import ReportService
from .admin import AdminService
from .error_handler import ErrorHandlerService

__all__ = [
    "SettingsService",
    "DEFAULT_SETTINGS",
    "AuthService",
    "PropertyService",
    "BookingService",
    "ReviewService",
    "MessagingService",
    "ReportService",
    "AdminService",
    "ErrorHandlerService"
]
