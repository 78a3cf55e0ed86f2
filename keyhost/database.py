"""
Database connection and session management.
Handles async database operations with SQLAlchemy and connection pooling.
"""

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import text, DateTime, Text, Uuid, Enum as SQLEnum, func
from sqlalchemy.dialects import mysql
from keyhost.config import settings
import enum
import logging
import uuid
from datetime import datetime
from typing import Any, AsyncIterator, Dict, Type

logger = logging.getLogger(__name__)


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    Connection pool options for the given database URL.

    SQLite connections are not pooled the way server databases are, so the
    pool sizing arguments only apply to PostgreSQL.
    """
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    return {
        "pool_size": 10,  # Number of connections to maintain in the pool
        "max_overflow": 20,  # Additional connections that can be created on demand
        "pool_pre_ping": True,  # Validate connections before use
        "pool_recycle": 3600,  # Recycle connections after 1 hour
        "pool_timeout": 30,  # Timeout for getting connection from pool
        "connect_args": {
            "server_settings": {
                "application_name": "keyhost_booking_api",
            }
        },
    }


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for the given URL."""
    return create_async_engine(database_url, echo=echo, **engine_options(database_url))


engine = build_engine(settings.database_url, echo=settings.debug)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def value_enum(enum_cls: Type[enum.Enum], name: str) -> SQLEnum:
    """
    Enum column type that stores member values ("property_owner") rather
    than member names, so raw SQL and other clients see the same strings.
    """
    return SQLEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


def long_text() -> Text:
    """
    Unbounded text. MySQL and MariaDB cap plain TEXT at 64KB, so they get
    LONGTEXT; other dialects already store TEXT without a length limit.
    """
    return Text().with_variant(mysql.LONGTEXT(), "mysql", "mariadb")


class Base(DeclarativeBase):
    """
    Base class for all database models.
    Includes common fields: id, created_at, updated_at.
    """

    # Primary key with UUID
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True
    )

    # Timestamp fields with automatic management
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    # Fetch server generated timestamps as part of the flush
    __mapper_args__ = {"eager_defaults": True}

    def __repr__(self) -> str:
        """String representation of the model."""
        return f"<{self.__class__.__name__}(id={self.id})>"


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Dependency to get database session.
    Yields an async database session and ensures it's closed after use.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def check_database_connection(session: AsyncSession) -> bool:
    """
    Run a trivial query on the given session.
    Returns True if the database answered, False otherwise.
    """
    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
        logger.debug("Database connection successful")
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False


async def test_database_connection() -> bool:
    """
    Test database connectivity using a fresh session from the global factory.
    Returns True if connection is successful, False otherwise.
    """
    async with AsyncSessionLocal() as session:
        return await check_database_connection(session)


async def create_tables(target_engine: AsyncEngine = None):
    """
    Create all database tables directly from the models.
    Used for local development; deployed databases go through Alembic.
    """
    import keyhost.models  # noqa: F401  registers every model on Base.metadata

    async with (target_engine or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")


async def drop_tables(target_engine: AsyncEngine = None):
    """
    Drop all database tables.
    This should only be used in testing or development.
    """
    if settings.is_production:
        raise RuntimeError("Cannot drop tables in production environment")

    import keyhost.models  # noqa: F401

    async with (target_engine or engine).begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database tables dropped successfully")


async def close_db_connection():
    """
    Close database connection.
    This should be called during application shutdown.
    """
    await engine.dispose()
    logger.info("Database connections closed")
