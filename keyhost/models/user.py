"""
User model with authentication, lockout tracking and host profile fields.
Covers guests, property owners and administrators.
"""

from sqlalchemy import String, Boolean, Integer, Text, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from keyhost.database import Base, value_enum
from passlib.context import CryptContext
from email_validator import validate_email, EmailNotValidError
from datetime import datetime, timezone
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from keyhost.models.property import Property

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserType(str, enum.Enum):
    """User type enumeration for role-based access control."""
    GUEST = "guest"
    PROPERTY_OWNER = "property_owner"
    ADMIN = "admin"


class User(Base):
    """
    User model for authentication and authorization.
    Profile fields (bio, work, school, is_superhost, languages) are display-only.
    """

    __tablename__ = "users"

    # User identification and authentication
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="User email address - must be unique and valid"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Role and status
    user_type: Mapped[UserType] = mapped_column(
        value_enum(UserType, "user_type"),
        nullable=False,
        default=UserType.GUEST,
        index=True,
        comment="User type for access control"
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Whether the user account is active"
    )

    # Login lockout tracking
    login_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    locked_until: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Profile fields
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    work: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    school: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_superhost: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    languages: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)

    # Relationships
    properties: Mapped[List["Property"]] = relationship(
        "Property",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload"
    )

    def __repr__(self) -> str:
        """String representation of the user."""
        return f"<User(id={self.id}, email={self.email}, user_type={self.user_type})>"

    @classmethod
    def validate_email_format(cls, email: str) -> str:
        """
        Validate email format using email-validator.

        Args:
            email: Email address to validate

        Returns:
            Normalized email address

        Raises:
            ValueError: If email format is invalid
        """
        try:
            valid_email = validate_email(email, check_deliverability=False)
            return valid_email.normalized.lower()
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")

    @classmethod
    def hash_password(cls, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        if not password or len(password) < 8:
            raise ValueError("Password must be at least 8 characters long")

        return pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        return pwd_context.verify(password, self.hashed_password)

    def set_password(self, password: str) -> None:
        """Set a new password for the user."""
        self.hashed_password = self.hash_password(password)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        """Check if user has admin role."""
        return self.user_type == UserType.ADMIN

    @property
    def is_property_owner(self) -> bool:
        """Check if user is a property owner."""
        return self.user_type == UserType.PROPERTY_OWNER

    def is_locked(self, now: Optional[datetime] = None) -> bool:
        """
        Check whether the account is inside a lockout window.

        SQLite hands back naive datetimes, so a naive value is read as UTC.
        """
        if not self.locked_until:
            return False
        locked_until = self.locked_until
        if locked_until.tzinfo is None:
            locked_until = locked_until.replace(tzinfo=timezone.utc)
        return locked_until > (now or datetime.now(timezone.utc))

    def can_manage_property(self, property_owner_id: uuid.UUID) -> bool:
        """
        Check if user can manage a specific property.

        Args:
            property_owner_id: UUID of the property's owner

        Returns:
            True if user can manage the property, False otherwise
        """
        if self.is_admin:
            return True

        return self.id == property_owner_id

    def to_dict(self) -> dict:
        """
        Convert user to dictionary (excluding sensitive data).

        Returns:
            Dictionary representation of user
        """
        return {
            "id": str(self.id),
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone": self.phone,
            "user_type": self.user_type.value,
            "is_active": self.is_active,
            "bio": self.bio,
            "work": self.work,
            "school": self.school,
            "is_superhost": self.is_superhost,
            "languages": self.languages or [],
            "last_login": self.last_login.isoformat() if self.last_login else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
