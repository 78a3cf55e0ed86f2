"""
PropertyImage model.
Images are stored inline as base64 data URLs in an unbounded text column.
"""

from sqlalchemy import String, Integer, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from keyhost.database import Base, long_text, value_enum
import enum
import uuid
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from keyhost.models.property import Property


class ImageType(str, enum.Enum):
    MAIN = "main"
    GALLERY = "gallery"


class PropertyImage(Base):
    """
    Image attached to a property.

    ``image_url`` holds whatever string the client sent, normally a
    ``data:image/...;base64,...`` URL, and is returned unchanged on read.
    The column must stay unbounded so large payloads are never truncated.
    """

    __tablename__ = "property_images"

    property_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the property this image belongs to"
    )

    image_url: Mapped[str] = mapped_column(
        long_text(),
        nullable=False,
        comment="Image payload (base64 data URL) or external URL"
    )

    image_type: Mapped[ImageType] = mapped_column(
        value_enum(ImageType, "image_type"),
        nullable=False,
        default=ImageType.GALLERY
    )

    alt_text: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    sort_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Display order within the property gallery"
    )

    property_rel: Mapped["Property"] = relationship(
        "Property",
        back_populates="images",
        lazy="noload"
    )

    def __repr__(self) -> str:
        return (
            f"<PropertyImage(id={self.id}, property_id={self.property_id}, "
            f"type={self.image_type}, size={len(self.image_url or '')})>"
        )

    @property
    def is_inline(self) -> bool:
        """Whether the payload is an inline data URL rather than a link."""
        return (self.image_url or "").startswith("data:")


property_sort_index = Index(
    'idx_property_images_property_sort',
    PropertyImage.property_id,
    PropertyImage.sort_order
)
