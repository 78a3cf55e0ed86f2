"""
Property service for managing rental listings with business logic validation.
Handles owner CRUD, inline image galleries, public search and admin moderation.
"""

from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from keyhost.config import settings
from keyhost.repositories.property import PropertyRepository, PropertySearchFilters
from keyhost.models.property import Property, PropertyStatus
from keyhost.models.user import User
from keyhost.schemas.property import PropertyCreate, PropertyUpdate
from keyhost.utils.exceptions import (
    APIException,
    BadRequestError,
    InsufficientPermissionsError,
    PropertyNotFoundError,
    ResourceLimitExceededError,
    ValidationError,
)
import uuid
import logging

logger = logging.getLogger(__name__)


class PropertyService:
    """
    Property service for listings and their galleries.

    New listings start as ``pending_approval``; only ``active`` listings are
    visible to the public. Deleting a listing retires it (``inactive``)
    instead of removing rows.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)

    def _check_image_limit(self, images: Optional[List[str]]) -> None:
        if images is not None and len(images) > settings.max_images_per_property:
            raise ResourceLimitExceededError("images per property", settings.max_images_per_property)

    async def create_property(self, data: PropertyCreate, owner: User) -> Property:
        """
        Create a listing for the current owner.

        Args:
            data: Validated form payload
            owner: Property owner or admin creating the listing

        Returns:
            Created property with images

        Raises:
            InsufficientPermissionsError: If the user cannot own listings
            ResourceLimitExceededError: If too many images were sent
            ValidationError: If model rules fail
        """
        if not (owner.is_property_owner or owner.is_admin):
            raise InsufficientPermissionsError("create properties")
        self._check_image_limit(data.images)

        property_data = data.model_dump(exclude={"images"})
        property_data["owner_id"] = owner.id
        property_data["status"] = PropertyStatus.PENDING_APPROVAL

        try:
            property_obj = await self.property_repo.create_with_images(property_data, data.images)
        except ValueError as e:
            raise ValidationError(str(e))
        except APIException:
            raise
        except Exception as e:
            raise BadRequestError(f"Failed to create property: {str(e)}")

        logger.info(
            f"Property created by {owner.email}: {property_obj.title} "
            f"(ID: {property_obj.id}, images: {len(data.images)})"
        )
        return property_obj

    async def list_owner_properties(
        self,
        owner: User,
        status: Optional[PropertyStatus] = None,
        page: int = 1,
        limit: int = 12,
    ) -> Tuple[List[Property], int]:
        """Listings belonging to the owner, any status unless filtered."""
        filters = {"owner_id": owner.id}
        if status is not None:
            filters["status"] = status
        return await self.property_repo.get_page(page=page, limit=limit, filters=filters)

    async def get_owner_property(self, property_id: uuid.UUID, owner: User) -> Property:
        """
        One listing owned by the caller.

        Raises:
            PropertyNotFoundError: If missing or owned by someone else
        """
        property_obj = await self.property_repo.get_owned(property_id, owner.id)
        if property_obj is None:
            raise PropertyNotFoundError(str(property_id))
        return property_obj

    async def update_property(self, property_id: uuid.UUID, data: PropertyUpdate, owner: User) -> Property:
        """
        Apply a partial update from the edit form.

        ``images`` omitted keeps the gallery; a list, even an empty one,
        replaces it.

        Raises:
            PropertyNotFoundError: If the listing is not owned by the caller
            BadRequestError: If there is nothing to update
            ValidationError: If the result breaks model rules
        """
        await self.get_owner_property(property_id, owner)

        changes = data.field_changes()
        if not changes and data.images is None:
            raise BadRequestError("No fields to update")
        self._check_image_limit(data.images)

        try:
            updated = await self.property_repo.update_with_images(property_id, changes, data.images)
        except ValueError as e:
            raise ValidationError(str(e))
        except APIException:
            raise
        except Exception as e:
            raise BadRequestError(f"Failed to update property: {str(e)}")

        if updated is None:
            raise PropertyNotFoundError(str(property_id))
        logger.info(f"Property {property_id} updated by {owner.email}")
        return updated

    async def delete_property(self, property_id: uuid.UUID, owner: User) -> Property:
        """
        Retire a listing by setting it inactive.

        Raises:
            PropertyNotFoundError: If the listing is not owned by the caller
            BadRequestError: While confirmed or checked-in stays exist
        """
        await self.get_owner_property(property_id, owner)

        if await self.property_repo.has_active_stays(property_id):
            raise BadRequestError("Cannot delete a property with active bookings")

        updated = await self.property_repo.update(property_id, {"status": PropertyStatus.INACTIVE})
        logger.info(f"Property {property_id} deactivated by {owner.email}")
        return updated

    async def search_properties(
        self,
        filters: PropertySearchFilters,
        page: int = 1,
        limit: int = 12,
    ) -> Tuple[List[Property], int]:
        """Public search over active listings."""
        filters.status = PropertyStatus.ACTIVE
        filters.owner_id = None
        return await self.property_repo.search(filters, page=page, limit=limit)

    async def get_public_property(self, property_id: uuid.UUID) -> Property:
        """
        An active listing.

        Raises:
            PropertyNotFoundError: If missing or not active
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if property_obj is None or property_obj.status != PropertyStatus.ACTIVE:
            raise PropertyNotFoundError(str(property_id))
        return property_obj

    async def set_status(self, property_id: uuid.UUID, status: PropertyStatus) -> Property:
        """Admin moderation of any listing."""
        updated = await self.property_repo.update(property_id, {"status": status})
        if updated is None:
            raise PropertyNotFoundError(str(property_id))
        logger.info(f"Property {property_id} moved to {status.value}")
        return updated
