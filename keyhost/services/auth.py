"""
Authentication service for registration, login with lockout, and token management.
"""

from datetime import datetime, timedelta, timezone
from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from keyhost.config import settings
from keyhost.repositories.user import UserRepository
from keyhost.models.user import User
from keyhost.schemas.auth import RegisterRequest
from keyhost.schemas.user import ProfileUpdate
from keyhost.services.settings import SettingsService
from keyhost.utils.auth import create_access_token, create_refresh_token, verify_token
from keyhost.utils.exceptions import (
    APIException,
    AccountLockedError,
    BadRequestError,
    DuplicateResourceError,
    ForbiddenError,
    InactiveUserError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    ValidationError,
)
from jose import ExpiredSignatureError, JWTError
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for accounts and tokens.

    Failed logins are counted per account; reaching the configured limit
    locks the account for a fixed window, during which even the right
    password is refused with 423.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def register(self, data: RegisterRequest) -> Tuple[User, str, str]:
        """
        Create a guest or property owner account and sign it in.

        Args:
            data: Registration payload

        Returns:
            Tuple of (user, access_token, refresh_token)

        Raises:
            ForbiddenError: If registrations are disabled
            DuplicateResourceError: If the email is already registered
            ValidationError: If email or password is invalid
        """
        registration_enabled = await SettingsService(self.db).get("registration_enabled", True)
        if not registration_enabled:
            raise ForbiddenError("Registration is currently disabled")

        if await self.user_repo.get_by_email(data.email):
            raise DuplicateResourceError("User", data.email)

        try:
            user = await self.user_repo.create_user({
                "email": data.email,
                "password": data.password,
                "first_name": data.first_name,
                "last_name": data.last_name,
                "phone": data.phone,
                "user_type": data.user_type,
            })
        except ValueError as e:
            raise ValidationError(str(e))

        access_token, refresh_token = self.create_tokens(user)
        return user, access_token, refresh_token

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Check credentials, applying lockout rules.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            Authenticated User object

        Raises:
            InvalidCredentialsError: If credentials are invalid (401)
            InactiveUserError: If the account is deactivated (403)
            AccountLockedError: If the account is locked (423)
        """
        user = await self.user_repo.get_by_email(email)
        if not user:
            logger.warning(f"Login attempt for unknown email: {email}")
            raise InvalidCredentialsError()

        if user.is_locked():
            logger.warning(f"Login attempt on locked account: {user.email}")
            raise AccountLockedError()

        if not user.is_active:
            raise InactiveUserError()

        if not user.verify_password(password):
            await self._record_failed_login(user)
            raise InvalidCredentialsError()

        user.login_attempts = 0
        user.locked_until = None
        user.last_login = datetime.now(timezone.utc)
        await self.user_repo.save(user)

        logger.info(f"User authenticated successfully: {user.email}")
        return user

    async def _record_failed_login(self, user: User) -> None:
        user.login_attempts = (user.login_attempts or 0) + 1
        if user.login_attempts >= settings.max_login_attempts:
            user.locked_until = datetime.now(timezone.utc) + timedelta(minutes=settings.lockout_minutes)
            user.login_attempts = 0
            logger.warning(f"Account locked after repeated failed logins: {user.email}")
        await self.user_repo.save(user)

    def create_tokens(self, user: User) -> Tuple[str, str]:
        """
        Create access and refresh tokens for user.

        Returns:
            Tuple of (access_token, refresh_token)
        """
        access_token = create_access_token(user_id=user.id, email=user.email, user_type=user.user_type)
        refresh_token = create_refresh_token(user_id=user.id, email=user.email)
        return access_token, refresh_token

    async def login(self, email: str, password: str) -> Tuple[User, str, str]:
        """
        Authenticate user and create tokens.

        Returns:
            Tuple of (user, access_token, refresh_token)
        """
        user = await self.authenticate_user(email, password)
        access_token, refresh_token = self.create_tokens(user)
        return user, access_token, refresh_token

    async def refresh_tokens(self, refresh_token: str) -> Tuple[User, str, str]:
        """
        Exchange a refresh token for a new token pair.

        Raises:
            TokenExpiredError: If the refresh token expired
            InvalidTokenError: If the refresh token is invalid or the user is gone
            InactiveUserError: If the account was deactivated
        """
        user = await self._user_from_token(refresh_token, token_type="refresh")
        access_token, new_refresh_token = self.create_tokens(user)
        return user, access_token, new_refresh_token

    async def get_current_user(self, token: str) -> User:
        """
        Get current user from access token.

        Raises:
            InvalidTokenError: If token is invalid
            TokenExpiredError: If token is expired
            InactiveUserError: If user account is inactive
        """
        return await self._user_from_token(token, token_type="access")

    async def _user_from_token(self, token: str, token_type: str) -> User:
        try:
            payload = verify_token(token, token_type=token_type)
            user_id = uuid.UUID(payload.user_id)
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except (JWTError, ValueError) as e:
            raise InvalidTokenError(f"Invalid token: {str(e)}")

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise InvalidTokenError("User no longer exists")
        if not user.is_active:
            raise InactiveUserError()
        return user

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        """
        Update the caller's own profile fields.

        Raises:
            BadRequestError: If nothing was provided
        """
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise BadRequestError("No fields to update")

        try:
            updated = await self.user_repo.update(user.id, changes)
            logger.info(f"Profile updated for {user.email}: {sorted(changes)}")
            return updated
        except APIException:
            raise
        except Exception as e:
            raise BadRequestError(f"Failed to update profile: {str(e)}")
