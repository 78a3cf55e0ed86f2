"""
API route handlers for the Keyhost booking API.
"""

from .auth import router as auth_router
from .properties import router as properties_router
from .owner import router as owner_router
from .settings import router as settings_router
from .bookings import router as bookings_router
from .reviews import router as reviews_router
from .messages import router as messages_router
from .reports import router as reports_router
from .admin import router as admin_router

__all__ = [
    "auth_router",
    "properties_router",
    "owner_router",
    "settings_router",
    "bookings_router",
    "reviews_router",
    "messages_router",
    "reports_router",
    "admin_router",
]
