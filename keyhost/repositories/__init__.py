"""
Repository layer for data access operations.
"""

from keyhost.repositories.base import BaseRepository
from keyhost.repositories.user import UserRepository
from keyhost.repositories.property import PropertyRepository, PropertySearchFilters
from keyhost.repositories.setting import SettingRepository
from keyhost.repositories.messaging import ConversationRepository, MessageRepository
from keyhost.repositories.report import ReportRepository
from keyhost.repositories.booking import BookingRepository
from keyhost.repositories.review import ReviewRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "PropertyRepository",
    "PropertySearchFilters",
    "SettingRepository",
    "ConversationRepository",
    "MessageRepository",
    "ReportRepository",
    "BookingRepository",
    "ReviewRepository",
]
