"""
User repository for account lookup, creation and admin listing.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from keyhost.repositories.base import BaseRepository
from keyhost.models.user import User, UserType
from typing import Optional, List, Dict, Any, Tuple
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user accounts.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with a hashed password.

        Args:
            user_data: User fields plus a plain ``password``

        Returns:
            Created user instance

        Raises:
            ValueError: If email or password is invalid
        """
        data = dict(user_data)
        password = data.pop("password")
        data["email"] = User.validate_email_format(data["email"])
        data["hashed_password"] = User.hash_password(password)

        user = await self.create(data)
        logger.info(f"Created user: {user.email} ({user.user_type.value})")
        return user

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address (case-insensitive).

        Args:
            email: Email address to search for

        Returns:
            User if found, None otherwise
        """
        try:
            query = select(User).where(func.lower(User.email) == email.strip().lower())
            result = await self.db.execute(query)
            return result.scalars().first()
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

    async def list_users(
        self,
        page: int = 1,
        limit: int = 20,
        user_type: Optional[UserType] = None,
    ) -> Tuple[List[User], int]:
        """Admin user list, newest first."""
        filters = {"user_type": user_type} if user_type else None
        return await self.get_page(page=page, limit=limit, filters=filters)

    async def first_admin(self) -> Optional[User]:
        """Oldest active admin account, if any."""
        query = (
            select(User)
            .where(User.user_type == UserType.ADMIN, User.is_active.is_(True))
            .order_by(User.created_at.asc())
            .limit(1)
        )
        result = await self.db.execute(query)
        return result.scalars().first()
