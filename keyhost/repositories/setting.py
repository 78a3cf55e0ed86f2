"""
Setting repository: keyed reads and single-statement upserts on system_settings.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.dialects import mysql, postgresql, sqlite
from keyhost.repositories.base import BaseRepository
from keyhost.models.setting import SystemSetting, SettingType
from typing import Any, Dict, List, Optional
import uuid
import logging

logger = logging.getLogger(__name__)


def build_setting_upsert(
    dialect_name: str,
    key: str,
    value: Optional[str],
    setting_type: SettingType,
    description: Optional[str] = None,
    is_public: Optional[bool] = None,
):
    """
    Build an INSERT that updates the existing row when ``setting_key`` exists.

    Value and type are always overwritten. Description and visibility are
    only overwritten when given, and default to empty/private on insert.

    Args:
        dialect_name: Name of the bound dialect (postgresql, sqlite or mysql)
        key: Setting key
        value: Text value to store
        setting_type: Declared type
        description: Optional description
        is_public: Optional visibility flag

    Returns:
        Executable insert statement

    Raises:
        ValueError: If the dialect has no native upsert
    """
    table = SystemSetting.__table__
    row = {
        "id": uuid.uuid4(),
        "setting_key": key,
        "setting_value": value,
        "setting_type": setting_type,
        "description": description,
        "is_public": bool(is_public),
    }

    changed = ["setting_value", "setting_type"]
    if description is not None:
        changed.append("description")
    if is_public is not None:
        changed.append("is_public")

    if dialect_name in ("postgresql", "sqlite"):
        dialect_insert = postgresql.insert if dialect_name == "postgresql" else sqlite.insert
        stmt = dialect_insert(table).values(**row)
        updates = {column: stmt.excluded[column] for column in changed}
        updates["updated_at"] = func.now()
        return stmt.on_conflict_do_update(index_elements=[table.c.setting_key], set_=updates)

    if dialect_name in ("mysql", "mariadb"):
        stmt = mysql.insert(table).values(**row)
        updates = {column: stmt.inserted[column] for column in changed}
        updates["updated_at"] = func.now()
        return stmt.on_duplicate_key_update(**updates)

    raise ValueError(f"Upsert is not supported for dialect '{dialect_name}'")


class SettingRepository(BaseRepository[SystemSetting]):
    """
    Repository for platform settings.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(SystemSetting, db)

    @property
    def dialect_name(self) -> str:
        return self.db.get_bind().dialect.name

    async def get_by_key(self, key: str) -> Optional[SystemSetting]:
        """Setting row by key, freshly read from the database."""
        query = (
            select(SystemSetting)
            .where(SystemSetting.setting_key == key)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_settings(self, public_only: bool = False) -> List[SystemSetting]:
        """
        All settings ordered by key.

        Args:
            public_only: Restrict to rows with ``is_public`` set
        """
        query = select(SystemSetting).order_by(SystemSetting.setting_key)
        if public_only:
            query = query.where(SystemSetting.is_public.is_(True))
        result = await self.db.execute(query.execution_options(populate_existing=True))
        return list(result.scalars().all())

    async def upsert(
        self,
        key: str,
        value: Optional[str],
        setting_type: SettingType,
        description: Optional[str] = None,
        is_public: Optional[bool] = None,
        commit: bool = True,
    ) -> None:
        """
        Insert the setting or update it in place.

        Raises:
            Exception: If database operation fails
        """
        try:
            stmt = build_setting_upsert(
                self.dialect_name, key, value, setting_type, description, is_public
            )
            await self.db.execute(stmt)
            if commit:
                await self.db.commit()
            logger.debug(f"Upserted setting {key}")
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to upsert setting {key}: {e}")
            raise

    async def insert_missing(self, rows: List[Dict[str, Any]]) -> int:
        """
        Insert settings whose key does not exist yet.

        Args:
            rows: Dicts with setting_key, setting_value, setting_type,
                description and is_public

        Returns:
            Number of rows inserted
        """
        try:
            existing = set((await self.db.execute(select(SystemSetting.setting_key))).scalars().all())
            missing = [row for row in rows if row["setting_key"] not in existing]
            self.db.add_all(SystemSetting(**row) for row in missing)
            await self.db.commit()
            logger.debug(f"Inserted {len(missing)} missing settings")
            return len(missing)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to insert default settings: {e}")
            raise
