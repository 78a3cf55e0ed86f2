"""
Pydantic schemas for property requests and responses.
Handles owner CRUD payloads, public listing cards and inline images.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime, time
from decimal import Decimal
from uuid import UUID
from keyhost.models.image import ImageType
from keyhost.models.property import PropertyStatus
from keyhost.schemas.user import UserSummary


def _drop_blank_values(data):
    """Treat "" and null like an omitted field so defaults and skips apply."""
    if isinstance(data, dict):
        return {key: value for key, value in data.items() if value is not None and value != ""}
    return data


# Optional columns an owner may clear by sending null on update
CLEARABLE_FIELDS = {"postal_code", "latitude", "longitude", "size_sqft", "maximum_stay"}


def _drop_blank_updates(data):
    """Skip "" everywhere and null on fields that cannot be cleared."""
    if isinstance(data, dict):
        return {
            key: value for key, value in data.items()
            if value != "" and (value is not None or key in CLEARABLE_FIELDS or key == "images")
        }
    return data


class PropertyImageResponse(BaseModel):
    """Stored image, payload returned verbatim."""

    id: UUID
    image_url: str
    image_type: ImageType
    alt_text: Optional[str] = None
    sort_order: int

    model_config = ConfigDict(from_attributes=True)


class PropertyCreate(BaseModel):
    """
    Payload posted by the owner property form.

    Blank optional fields fall back to the listing defaults: 1 bedroom,
    1 bathroom, 2 guests, no fees, 15:00 check-in, 11:00 check-out and a
    one night minimum stay.
    """

    title: str = Field(..., min_length=1, max_length=255, examples=["Lakeside cottage in Gulshan"])
    description: str = Field(..., min_length=1, max_length=10000)
    property_type: str = Field("apartment", max_length=50, examples=["apartment"])

    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100, examples=["Dhaka"])
    state: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100, examples=["Bangladesh"])
    postal_code: Optional[str] = Field(None, max_length=20)
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)

    bedrooms: int = Field(1, ge=0, le=50)
    bathrooms: int = Field(1, ge=0, le=50)
    max_guests: int = Field(2, ge=1, le=100)
    size_sqft: Optional[int] = Field(None, gt=0)

    base_price: Decimal = Field(..., gt=0, description="Nightly price", examples=[4500])
    cleaning_fee: Decimal = Field(Decimal("0"), ge=0)
    security_deposit: Decimal = Field(Decimal("0"), ge=0)
    extra_guest_fee: Decimal = Field(Decimal("0"), ge=0)

    check_in_time: time = Field(time(15, 0))
    check_out_time: time = Field(time(11, 0))
    minimum_stay: int = Field(1, ge=1)
    maximum_stay: Optional[int] = Field(None, ge=1)
    is_instant_book: bool = False

    images: List[str] = Field(
        default_factory=list,
        description="Base64 data URLs, first one becomes the main image"
    )

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data):
        return _drop_blank_values(data)

    @field_validator("title", "description", "address", "city", "state", "country")
    @classmethod
    def strip_required_text(cls, v):
        """Required text fields cannot be whitespace only."""
        if not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("images")
    @classmethod
    def drop_empty_images(cls, v):
        return [image for image in v if image]

    @model_validator(mode="after")
    def validate_stay_range(self):
        if self.maximum_stay is not None and self.maximum_stay < self.minimum_stay:
            raise ValueError("maximum_stay cannot be shorter than minimum_stay")
        return self


class PropertyUpdate(BaseModel):
    """
    Partial update from the owner edit form.

    Blank strings are skipped rather than written. null clears the optional
    fields in ``CLEARABLE_FIELDS`` and is skipped everywhere else. ``images``
    left out (or null) keeps the current gallery; a list replaces it.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1, max_length=10000)
    property_type: Optional[str] = Field(None, max_length=50)

    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)

    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[int] = Field(None, ge=0, le=50)
    max_guests: Optional[int] = Field(None, ge=1, le=100)
    size_sqft: Optional[int] = Field(None, gt=0)

    base_price: Optional[Decimal] = Field(None, gt=0)
    cleaning_fee: Optional[Decimal] = Field(None, ge=0)
    security_deposit: Optional[Decimal] = Field(None, ge=0)
    extra_guest_fee: Optional[Decimal] = Field(None, ge=0)

    check_in_time: Optional[time] = None
    check_out_time: Optional[time] = None
    minimum_stay: Optional[int] = Field(None, ge=1)
    maximum_stay: Optional[int] = Field(None, ge=1)
    is_instant_book: Optional[bool] = None

    images: Optional[List[str]] = None

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data):
        return _drop_blank_updates(data)

    @field_validator("images")
    @classmethod
    def drop_empty_images(cls, v):
        if v is None:
            return v
        return [image for image in v if image]

    def field_changes(self) -> dict:
        """Column values to write, excluding the image gallery."""
        return self.model_dump(exclude_unset=True, exclude={"images"})


class PropertyStatusUpdate(BaseModel):
    """Admin moderation of a listing."""

    status: PropertyStatus


class PropertySummary(BaseModel):
    """Listing card used by search results and dashboards."""

    id: UUID
    title: str
    property_type: str
    city: str
    state: str
    country: str
    base_price: Decimal
    bedrooms: int
    bathrooms: int
    max_guests: int
    status: PropertyStatus
    is_featured: bool
    main_image: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_property(cls, property_obj) -> "PropertySummary":
        main_image = property_obj.main_image
        return cls(
            id=property_obj.id,
            title=property_obj.title,
            property_type=property_obj.property_type,
            city=property_obj.city,
            state=property_obj.state,
            country=property_obj.country,
            base_price=property_obj.base_price,
            bedrooms=property_obj.bedrooms,
            bathrooms=property_obj.bathrooms,
            max_guests=property_obj.max_guests,
            status=property_obj.status,
            is_featured=property_obj.is_featured,
            main_image=main_image.image_url if main_image else None,
            created_at=property_obj.created_at,
        )


class PropertyResponse(BaseModel):
    """Full property detail including the inline image gallery."""

    id: UUID
    owner_id: UUID
    title: str
    description: str
    property_type: str
    address: str
    city: str
    state: str
    country: str
    postal_code: Optional[str] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    bedrooms: int
    bathrooms: int
    max_guests: int
    size_sqft: Optional[int] = None
    base_price: Decimal
    cleaning_fee: Decimal
    security_deposit: Decimal
    extra_guest_fee: Decimal
    check_in_time: time
    check_out_time: time
    minimum_stay: int
    maximum_stay: Optional[int] = None
    is_instant_book: bool
    status: PropertyStatus
    is_featured: bool
    owner: Optional[UserSummary] = None
    images: List[PropertyImageResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
