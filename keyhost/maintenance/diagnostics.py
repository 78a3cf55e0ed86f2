"""
Schema and settings health checks.
"""

from typing import Any, Dict, List

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession

from keyhost.database import Base
from keyhost.models.setting import SystemSetting
from keyhost.repositories.setting import SettingRepository
from keyhost.services.settings import DEFAULT_SETTINGS


def compare_schema(sync_connection) -> Dict[str, Any]:
    """Synchronous schema comparison for an engine or connection."""
    inspector = inspect(sync_connection)
    existing_tables = set(inspector.get_table_names())

    missing_tables: List[str] = []
    missing_columns: Dict[str, List[str]] = {}

    for table in Base.metadata.sorted_tables:
        if table.name not in existing_tables:
            missing_tables.append(table.name)
            continue
        present = {column["name"] for column in inspector.get_columns(table.name)}
        absent = [column.name for column in table.columns if column.name not in present]
        if absent:
            missing_columns[table.name] = absent

    return {
        "missing_tables": missing_tables,
        "missing_columns": missing_columns,
        "ok": not missing_tables and not missing_columns,
    }


async def check_schema(connection: AsyncConnection) -> Dict[str, Any]:
    """
    Compare the live database with the models.

    Returns:
        ``missing_tables``, ``missing_columns`` (table to column names) and
        ``ok``
    """
    import keyhost.models  # noqa: F401

    return await connection.run_sync(compare_schema)


async def check_settings(session: AsyncSession) -> Dict[str, Any]:
    """Which default settings are missing and how many rows are public."""
    rows: List[SystemSetting] = await SettingRepository(session).list_settings()
    stored = {row.setting_key for row in rows}
    missing = [entry["setting_key"] for entry in DEFAULT_SETTINGS if entry["setting_key"] not in stored]

    return {
        "total": len(rows),
        "public": sum(1 for row in rows if row.is_public),
        "missing_defaults": missing,
        "ok": not missing,
    }
