"""
Database models for the Keyhost booking platform.
Importing this package registers every table on ``Base.metadata``.
"""

from keyhost.models.user import User, UserType
from keyhost.models.property import Property, PropertyStatus
from keyhost.models.image import PropertyImage, ImageType
from keyhost.models.setting import SystemSetting, SettingType
from keyhost.models.messaging import Conversation, Message
from keyhost.models.report import PropertyReport, ReportStatus
from keyhost.models.booking import Booking, BookingStatus, PaymentStatus
from keyhost.models.review import Review, ReviewStatus

__all__ = [
    "User",
    "UserType",
    "Property",
    "PropertyStatus",
    "PropertyImage",
    "ImageType",
    "SystemSetting",
    "SettingType",
    "Conversation",
    "Message",
    "PropertyReport",
    "ReportStatus",
    "Booking",
    "BookingStatus",
    "PaymentStatus",
    "Review",
    "ReviewStatus",
]
