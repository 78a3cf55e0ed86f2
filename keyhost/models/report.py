"""
PropertyReport model: user-submitted moderation flags on listings.
"""

from sqlalchemy import String, Text, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from keyhost.database import Base, value_enum
import enum
import uuid
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from keyhost.models.user import User
    from keyhost.models.property import Property


class ReportStatus(str, enum.Enum):
    PENDING = "pending"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class PropertyReport(Base):
    """A report filed against a property, optionally by a signed-in user."""

    __tablename__ = "property_reports"

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    reporter_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    reason: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[ReportStatus] = mapped_column(
        value_enum(ReportStatus, "report_status"),
        nullable=False,
        default=ReportStatus.PENDING,
        index=True
    )

    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    property_rel: Mapped["Property"] = relationship("Property", lazy="selectin")
    reporter: Mapped[Optional["User"]] = relationship("User", lazy="selectin")
