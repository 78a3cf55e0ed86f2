"""
Property model for rental listings.
Handles listing data with location, pricing, stay rules, and moderation status.
"""

from sqlalchemy import String, Text, Integer, Numeric, Boolean, Time, Index, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from keyhost.database import Base, value_enum
from datetime import time
from decimal import Decimal
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from keyhost.models.user import User
    from keyhost.models.image import PropertyImage


class PropertyStatus(str, enum.Enum):
    """Listing lifecycle: owners submit, admins approve, owners retire."""
    PENDING_APPROVAL = "pending_approval"
    ACTIVE = "active"
    INACTIVE = "inactive"
    REJECTED = "rejected"


class Property(Base):
    """
    Property model for managing rental listings.
    Includes property details, location data, pricing and stay rules.
    """

    __tablename__ = "properties"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the user who owns this property"
    )

    # Basic property information
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Property listing title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Detailed property description"
    )

    property_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="apartment",
        index=True,
        comment="Property type, e.g. apartment, house, villa, room"
    )

    # Location information
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    latitude: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=10, scale=8),
        nullable=True,
        comment="Property latitude coordinate"
    )

    longitude: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=11, scale=8),
        nullable=True,
        comment="Property longitude coordinate"
    )

    # Property specifications
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    max_guests: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    size_sqft: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Pricing information
    base_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=False,
        index=True,
        comment="Nightly price in local currency"
    )
    cleaning_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    security_deposit: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    extra_guest_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)

    # Stay rules
    check_in_time: Mapped[time] = mapped_column(Time, nullable=False, default=time(15, 0))
    check_out_time: Mapped[time] = mapped_column(Time, nullable=False, default=time(11, 0))
    minimum_stay: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    maximum_stay: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_instant_book: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Status
    status: Mapped[PropertyStatus] = mapped_column(
        value_enum(PropertyStatus, "property_status"),
        nullable=False,
        default=PropertyStatus.PENDING_APPROVAL,
        index=True,
        comment="Listing moderation status"
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Relationships
    owner: Mapped["User"] = relationship(
        "User",
        back_populates="properties",
        lazy="selectin"
    )

    images: Mapped[List["PropertyImage"]] = relationship(
        "PropertyImage",
        back_populates="property_rel",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="PropertyImage.sort_order"
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}..., base_price={self.base_price})>"

    @property
    def main_image(self) -> Optional["PropertyImage"]:
        """Get the main image for this property."""
        for image in self.images:
            if image.image_type.value == "main":
                return image
        return self.images[0] if self.images else None

    def validate_price(self) -> None:
        """
        Validate nightly price.

        Raises:
            ValueError: If price is invalid
        """
        if self.base_price is None or self.base_price <= 0:
            raise ValueError("Base price must be greater than 0")

        if self.base_price > Decimal('99999999.99'):
            raise ValueError("Base price exceeds maximum allowed value")

    def validate_coordinates(self) -> None:
        """
        Validate latitude and longitude coordinates.

        Raises:
            ValueError: If coordinates are invalid
        """
        if self.latitude is not None:
            if not (-90 <= self.latitude <= 90):
                raise ValueError("Latitude must be between -90 and 90 degrees")

        if self.longitude is not None:
            if not (-180 <= self.longitude <= 180):
                raise ValueError("Longitude must be between -180 and 180 degrees")

    def validate_stay_rules(self) -> None:
        if self.minimum_stay is not None and self.minimum_stay < 1:
            raise ValueError("Minimum stay must be at least 1 night")
        if self.maximum_stay is not None and self.maximum_stay < (self.minimum_stay or 1):
            raise ValueError("Maximum stay cannot be shorter than minimum stay")

    def validate_all(self) -> None:
        """
        Run all validation checks on the property.

        Raises:
            ValueError: If any validation fails
        """
        self.validate_price()
        self.validate_coordinates()
        self.validate_stay_rules()


# Composite index for the public search page
city_status_price_index = Index(
    'idx_properties_city_status_price',
    Property.city,
    Property.status,
    Property.base_price
)

# Composite index for the owner dashboard
owner_status_index = Index(
    'idx_properties_owner_status',
    Property.owner_id,
    Property.status
)
