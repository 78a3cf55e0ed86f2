"""
Repair of property text that was stored through a Latin-1 connection.
"""

import logging
from typing import Any, Dict, List, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from keyhost.models.property import Property
from keyhost.utils.text import TextUtils

logger = logging.getLogger(__name__)

ENCODING_COLUMNS = ("title", "description", "address", "city", "state", "country")


async def fix_property_encoding(
    session: AsyncSession,
    columns: Sequence[str] = ENCODING_COLUMNS,
    dry_run: bool = False,
) -> List[Dict[str, Any]]:
    """
    Repair mojibake in property text columns.

    Args:
        session: Database session
        columns: Property attributes to inspect
        dry_run: Report the repairs without writing them

    Returns:
        One entry per changed value with ``property_id``, ``column``,
        ``before`` and ``after``
    """
    result = await session.execute(select(Property).order_by(Property.created_at))
    changes = []

    for prop in result.scalars().all():
        for column in columns:
            value = getattr(prop, column)
            repaired = TextUtils.repair_mojibake(value)
            if repaired == value:
                continue
            changes.append({
                "property_id": prop.id,
                "column": column,
                "before": value,
                "after": repaired,
            })
            if not dry_run:
                setattr(prop, column, repaired)

    if changes and not dry_run:
        await session.commit()
        logger.info(f"Repaired {len(changes)} property text values")
    elif changes:
        logger.info(f"Dry run: {len(changes)} property text values need repair")

    return changes
