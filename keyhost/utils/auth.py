"""
Authentication utilities for JWT token management.
Access tokens are signed with JWT_SECRET and refresh tokens with
JWT_REFRESH_SECRET, so one can never be replayed as the other.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from keyhost.config import settings
from keyhost.models.user import UserType
import uuid


class TokenPayload:
    """JWT token payload structure."""

    def __init__(self, user_id: str, email: str, user_type: Optional[str], exp: datetime):
        self.user_id = user_id
        self.email = email
        self.user_type = user_type
        self.exp = exp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from dictionary."""
        return cls(
            user_id=data["sub"],
            email=data["email"],
            user_type=data.get("user_type"),  # Absent from refresh tokens
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc)
        )


def _secret_for(token_type: str) -> str:
    return settings.jwt_refresh_secret if token_type == "refresh" else settings.jwt_secret


def create_access_token(
    user_id: uuid.UUID,
    email: str,
    user_type: UserType,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create JWT access token with user claims.

    Args:
        user_id: User's UUID
        email: User's email address
        user_type: guest, property_owner or admin
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))

    to_encode = {
        "sub": str(user_id),
        "email": email,
        "user_type": UserType(user_type).value,
        "exp": expire,
        "iat": now,
        "type": "access"
    }

    return jwt.encode(to_encode, _secret_for("access"), algorithm=settings.jwt_algorithm)


def create_refresh_token(
    user_id: uuid.UUID,
    email: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create JWT refresh token.

    Args:
        user_id: User's UUID
        email: User's email address
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT refresh token string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.refresh_token_expire_days))

    to_encode = {
        "sub": str(user_id),
        "email": email,
        "exp": expire,
        "iat": now,
        "type": "refresh"
    }

    return jwt.encode(to_encode, _secret_for("refresh"), algorithm=settings.jwt_algorithm)


def verify_token(token: str, token_type: str = "access") -> TokenPayload:
    """
    Verify and decode JWT token.

    Args:
        token: JWT token string
        token_type: Expected token type ("access" or "refresh")

    Returns:
        TokenPayload if valid

    Raises:
        ExpiredSignatureError: If the token has expired (a JWTError subclass)
        JWTError: If token is invalid
    """
    payload = jwt.decode(
        token,
        _secret_for(token_type),
        algorithms=[settings.jwt_algorithm]
    )

    if payload.get("type") != token_type:
        raise JWTError(f"Invalid token type. Expected {token_type}")

    if not payload.get("sub") or not payload.get("email"):
        raise JWTError("Invalid token payload")

    return TokenPayload.from_dict(payload)
