"""
Property report repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from keyhost.repositories.base import BaseRepository
from keyhost.models.report import PropertyReport, ReportStatus
from typing import List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class ReportRepository(BaseRepository[PropertyReport]):
    """
    Repository for moderation reports.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(PropertyReport, db)

    async def list_reports(
        self,
        status: Optional[ReportStatus] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[PropertyReport], int]:
        """Reports newest first, optionally filtered by status."""
        filters = {"status": status} if status else None
        return await self.get_page(page=page, limit=limit, filters=filters)
