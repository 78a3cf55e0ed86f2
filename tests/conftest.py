"""
Test configuration and fixtures for the Keyhost booking API.
Provides database fixtures, test data factories, and common test utilities.
"""

import os

os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import uuid
from datetime import date, timedelta
from decimal import Decimal
from typing import AsyncGenerator, Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import keyhost.models  # noqa: F401
from keyhost.database import Base, get_db
from keyhost.main import app
from keyhost.models.booking import Booking, BookingStatus
from keyhost.models.property import Property, PropertyStatus
from keyhost.models.user import User, UserType
from keyhost.repositories.booking import BookingRepository
from keyhost.repositories.property import PropertyRepository
from keyhost.repositories.user import UserRepository
from keyhost.services.booking import calculate_price, generate_booking_reference
from keyhost.utils.auth import create_access_token

TEST_PASSWORD = "testpassword123"

# A 1x1 PNG, small enough to inline in payloads
PNG_DATA_URL = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8/5+hHgAHggJ/PchI7wAAAABJRU5ErkJggg=="
)


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async test client with the database session override."""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# Test data factories
class UserFactory:
    """Factory for creating test users."""

    @staticmethod
    async def create_user(
        session: AsyncSession,
        email: Optional[str] = None,
        password: str = TEST_PASSWORD,
        user_type: UserType = UserType.GUEST,
        is_active: bool = True,
        first_name: str = "Test",
        last_name: str = "User",
    ) -> User:
        return await UserRepository(session).create_user({
            "email": email or f"user{uuid.uuid4().hex[:8]}@example.com",
            "password": password,
            "first_name": first_name,
            "last_name": last_name,
            "user_type": user_type,
            "is_active": is_active,
        })


class PropertyFactory:
    """Factory for creating test properties."""

    @staticmethod
    def create_property_data(owner_id: uuid.UUID, **overrides) -> dict:
        data = {
            "owner_id": owner_id,
            "title": "Lakeside cottage",
            "description": "Two bedroom cottage by the lake",
            "property_type": "house",
            "address": "12 Lake Road",
            "city": "Dhaka",
            "state": "Dhaka Division",
            "country": "Bangladesh",
            "bedrooms": 2,
            "bathrooms": 1,
            "max_guests": 4,
            "base_price": Decimal("100.00"),
            "cleaning_fee": Decimal("20.00"),
            "security_deposit": Decimal("0"),
            "extra_guest_fee": Decimal("10.00"),
            "minimum_stay": 1,
            "status": PropertyStatus.ACTIVE,
        }
        data.update(overrides)
        return data

    @staticmethod
    async def create_property(
        session: AsyncSession,
        owner: User,
        images: Optional[List[str]] = None,
        **overrides,
    ) -> Property:
        data = PropertyFactory.create_property_data(owner.id, **overrides)
        return await PropertyRepository(session).create_with_images(data, images or [])


class BookingFactory:
    """Factory for bookings inserted directly, bypassing the date checks."""

    @staticmethod
    async def create_booking(
        session: AsyncSession,
        property_obj: Property,
        guest: User,
        check_in: Optional[date] = None,
        nights: int = 2,
        guests: int = 1,
        status: BookingStatus = BookingStatus.CONFIRMED,
    ) -> Booking:
        check_in = check_in or date.today() + timedelta(days=10)
        price = calculate_price(property_obj, nights, guests)
        booking = Booking(
            booking_reference=generate_booking_reference(),
            property_id=property_obj.id,
            guest_id=guest.id,
            check_in_date=check_in,
            check_out_date=check_in + timedelta(days=nights),
            number_of_guests=guests,
            nights=nights,
            status=status,
            **price,
        )
        session.add(booking)
        await session.commit()
        return await BookingRepository(session).get_by_id(booking.id)


def auth_headers(user: User) -> Dict[str, str]:
    """Bearer header for the given user."""
    token = create_access_token(user.id, user.email, user.user_type)
    return {"Authorization": f"Bearer {token}"}


# Common test fixtures
@pytest.fixture
async def guest_user(db_session: AsyncSession) -> User:
    return await UserFactory.create_user(db_session, email="guest@example.com", first_name="Guest")


@pytest.fixture
async def owner_user(db_session: AsyncSession) -> User:
    return await UserFactory.create_user(
        db_session, email="owner@example.com", user_type=UserType.PROPERTY_OWNER, first_name="Owner"
    )


@pytest.fixture
async def other_owner(db_session: AsyncSession) -> User:
    return await UserFactory.create_user(
        db_session, email="other.owner@example.com", user_type=UserType.PROPERTY_OWNER, first_name="Other"
    )


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await UserFactory.create_user(
        db_session, email="admin@example.com", user_type=UserType.ADMIN, first_name="Admin"
    )


@pytest.fixture
async def active_property(db_session: AsyncSession, owner_user: User) -> Property:
    return await PropertyFactory.create_property(db_session, owner_user, images=[PNG_DATA_URL])


@pytest.fixture
def guest_headers(guest_user: User) -> Dict[str, str]:
    return auth_headers(guest_user)


@pytest.fixture
def owner_headers(owner_user: User) -> Dict[str, str]:
    return auth_headers(owner_user)


@pytest.fixture
def admin_headers(admin_user: User) -> Dict[str, str]:
    return auth_headers(admin_user)
