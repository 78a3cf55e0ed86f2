"""
Foreign key integrity checks and owner reassignment for orphaned listings.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from keyhost.database import Base
from keyhost.models.property import Property
from keyhost.models.user import User
from keyhost.repositories.user import UserRepository

logger = logging.getLogger(__name__)


async def find_orphans(session: AsyncSession) -> List[Dict[str, Any]]:
    """
    Count rows whose non-null foreign key points at a missing parent row.

    Every foreign key on ``Base.metadata`` is checked.

    Returns:
        One entry per foreign key with ``table``, ``column``, ``references``
        and ``count``
    """
    import keyhost.models  # noqa: F401

    report = []
    for table in Base.metadata.sorted_tables:
        for fk in sorted(table.foreign_keys, key=lambda key: key.parent.name):
            child, parent = fk.parent, fk.column
            query = (
                select(func.count())
                .select_from(table)
                .where(child.isnot(None), child.not_in(select(parent)))
            )
            count = (await session.execute(query)).scalar_one()
            report.append({
                "table": table.name,
                "column": child.name,
                "references": f"{parent.table.name}.{parent.name}",
                "count": count,
            })
    return report


async def resolve_fallback_owner(session: AsyncSession, owner_email: Optional[str] = None) -> Optional[User]:
    """
    Pick the account that receives orphaned listings.

    The account named by ``owner_email`` wins, then the first admin, then
    the oldest active user.
    """
    user_repo = UserRepository(session)

    if owner_email:
        owner = await user_repo.get_by_email(owner_email)
        if owner:
            return owner
        logger.warning(f"Fallback owner {owner_email} not found")

    admin = await user_repo.first_admin()
    if admin:
        return admin

    result = await session.execute(
        select(User).where(User.is_active.is_(True)).order_by(User.created_at.asc()).limit(1)
    )
    return result.scalars().first()


async def fix_orphan_properties(session: AsyncSession, owner_email: Optional[str] = None) -> int:
    """
    Reassign properties whose owner no longer exists.

    Args:
        session: Database session
        owner_email: Preferred fallback owner

    Returns:
        Number of properties reassigned; 0 when there is no user to take them
    """
    fallback = await resolve_fallback_owner(session, owner_email)
    if fallback is None:
        logger.warning("No users exist, orphaned properties left unchanged")
        return 0

    result = await session.execute(
        update(Property)
        .where(Property.owner_id.not_in(select(User.id)))
        .values(owner_id=fallback.id)
        .execution_options(synchronize_session=False)
    )
    await session.commit()

    fixed = result.rowcount or 0
    if fixed:
        logger.info(f"Reassigned {fixed} orphaned properties to {fallback.email}")
    return fixed
