"""
Property repository for listings, their inline image galleries and search.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from keyhost.repositories.base import BaseRepository
from keyhost.models.property import Property, PropertyStatus
from keyhost.models.image import PropertyImage, ImageType
from keyhost.models.booking import Booking, ACTIVE_STAY_STATUSES
from typing import Optional, List, Dict, Any, Tuple
from decimal import Decimal
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertySearchFilters:
    """Data class for public property search filters."""

    def __init__(
        self,
        city: Optional[str] = None,
        property_type: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        guests: Optional[int] = None,
        search_text: Optional[str] = None,
        owner_id: Optional[uuid.UUID] = None,
        status: Optional[PropertyStatus] = PropertyStatus.ACTIVE,
    ):
        self.city = city
        self.property_type = property_type
        self.min_price = min_price
        self.max_price = max_price
        self.guests = guests
        self.search_text = search_text
        self.owner_id = owner_id
        self.status = status


def build_image_rows(property_id: uuid.UUID, images: List[str]) -> List[PropertyImage]:
    """
    Turn an ordered list of image payloads into gallery rows.

    The first image is the main image; ``sort_order`` follows list order.
    Payloads are stored exactly as received.
    """
    return [
        PropertyImage(
            property_id=property_id,
            image_url=image_url,
            image_type=ImageType.MAIN if index == 0 else ImageType.GALLERY,
            alt_text=f"Property image {index + 1}",
            sort_order=index,
        )
        for index, image_url in enumerate(images)
    ]


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_with_images(self, property_data: Dict[str, Any], images: List[str]) -> Property:
        """
        Create a property and its gallery in one transaction.

        Args:
            property_data: Column values for the property
            images: Ordered image payloads; may be empty

        Returns:
            Created property with owner and images loaded

        Raises:
            ValueError: If model validation fails
        """
        try:
            property_obj = Property(**property_data)
            property_obj.validate_all()
            self.db.add(property_obj)
            await self.db.flush()

            self.db.add_all(build_image_rows(property_obj.id, images))
            await self.db.commit()

            logger.info(
                f"Created property: {property_obj.title} (ID: {property_obj.id}) with {len(images)} images"
            )
            return await self.get_by_id(property_obj.id)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create property: {e}")
            raise

    async def update_with_images(
        self,
        property_id: uuid.UUID,
        changes: Dict[str, Any],
        images: Optional[List[str]] = None,
    ) -> Optional[Property]:
        """
        Apply column changes and optionally replace the gallery.

        Args:
            property_id: UUID of the property
            changes: Column values to write
            images: None keeps the gallery, a list replaces it

        Returns:
            Updated property or None if not found
        """
        try:
            property_obj = await self.get_by_id(property_id)
            if property_obj is None:
                return None

            for field, value in changes.items():
                setattr(property_obj, field, value)
            property_obj.validate_all()

            if images is not None:
                # delete-orphan cascade removes the old rows on flush
                property_obj.images.clear()
                property_obj.images.extend(build_image_rows(property_id, images))

            await self.db.commit()
            logger.info(f"Updated property {property_id}: fields={sorted(changes)} images_replaced={images is not None}")
            return await self.get_by_id(property_id)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update property {property_id}: {e}")
            raise

    async def get_owned(self, property_id: uuid.UUID, owner_id: uuid.UUID) -> Optional[Property]:
        """Property by id, only if it belongs to the given owner."""
        property_obj = await self.get_by_id(property_id)
        if property_obj is None or property_obj.owner_id != owner_id:
            return None
        return property_obj

    async def search(
        self,
        filters: PropertySearchFilters,
        page: int = 1,
        limit: int = 12,
    ) -> Tuple[List[Property], int]:
        """
        Search properties with filters and pagination.

        Args:
            filters: Search filters
            page: Page number, starting at 1
            limit: Page size

        Returns:
            Tuple of (properties, total count)
        """
        try:
            conditions = []
            if filters.status is not None:
                conditions.append(Property.status == filters.status)
            if filters.owner_id is not None:
                conditions.append(Property.owner_id == filters.owner_id)
            if filters.city:
                conditions.append(func.lower(Property.city).contains(filters.city.strip().lower()))
            if filters.property_type:
                conditions.append(Property.property_type == filters.property_type)
            if filters.min_price is not None:
                conditions.append(Property.base_price >= filters.min_price)
            if filters.max_price is not None:
                conditions.append(Property.base_price <= filters.max_price)
            if filters.guests:
                conditions.append(Property.max_guests >= filters.guests)
            if filters.search_text:
                term = f"%{filters.search_text.strip().lower()}%"
                conditions.append(or_(
                    func.lower(Property.title).like(term),
                    func.lower(Property.description).like(term),
                    func.lower(Property.city).like(term),
                ))

            count_query = select(func.count(Property.id)).where(*conditions)
            total = (await self.db.execute(count_query)).scalar() or 0

            query = (
                select(Property)
                .where(*conditions)
                .order_by(Property.is_featured.desc(), Property.created_at.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            result = await self.db.execute(query)
            properties = list(result.scalars().all())

            logger.debug(f"Property search returned {len(properties)} of {total}")
            return properties, total
        except Exception as e:
            logger.error(f"Property search failed: {e}")
            raise

    async def has_active_stays(self, property_id: uuid.UUID) -> bool:
        """Whether any confirmed or checked-in booking exists for the property."""
        query = select(func.count(Booking.id)).where(
            Booking.property_id == property_id,
            Booking.status.in_(ACTIVE_STAY_STATUSES),
        )
        return ((await self.db.execute(query)).scalar() or 0) > 0

    async def count_images(self, property_id: uuid.UUID) -> int:
        query = select(func.count(PropertyImage.id)).where(PropertyImage.property_id == property_id)
        return (await self.db.execute(query)).scalar() or 0
