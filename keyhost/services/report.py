"""
Report service: anyone may flag a property, admins work the queue.
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from keyhost.repositories.report import ReportRepository
from keyhost.repositories.property import PropertyRepository
from keyhost.models.report import PropertyReport, ReportStatus
from keyhost.models.user import User
from keyhost.schemas.report import ReportCreate
from keyhost.utils.exceptions import BadRequestError, NotFoundError, PropertyNotFoundError
import uuid
import logging

logger = logging.getLogger(__name__)


def parse_report_status(value: str) -> ReportStatus:
    """
    Raises:
        BadRequestError: If ``value`` is not a report status
    """
    try:
        return ReportStatus(value)
    except ValueError:
        allowed = ", ".join(status.value for status in ReportStatus)
        raise BadRequestError(f"Invalid status '{value}'. Must be one of: {allowed}")


class ReportService:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.report_repo = ReportRepository(db_session)
        self.property_repo = PropertyRepository(db_session)

    async def create_report(self, data: ReportCreate, reporter: Optional[User] = None) -> PropertyReport:
        """
        File a report. Anonymous reports have no reporter.

        Raises:
            PropertyNotFoundError: If the property does not exist
        """
        if await self.property_repo.get_by_id(data.property_id) is None:
            raise PropertyNotFoundError(str(data.property_id))

        report = await self.report_repo.create({
            "property_id": data.property_id,
            "reporter_id": reporter.id if reporter else None,
            "reason": data.reason.strip(),
            "description": data.description,
            "status": ReportStatus.PENDING,
        })
        logger.info(f"Report {report.id} filed against property {data.property_id}: {report.reason}")
        return await self.report_repo.get_by_id(report.id)

    async def list_reports(
        self,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[PropertyReport], int]:
        parsed = parse_report_status(status) if status else None
        return await self.report_repo.list_reports(status=parsed, page=page, limit=limit)

    async def update_status(self, report_id: uuid.UUID, status: str, admin_notes: Optional[str] = None) -> PropertyReport:
        """
        Move a report through the moderation workflow.

        Raises:
            BadRequestError: If the status is unknown
            NotFoundError: If the report does not exist
        """
        changes = {"status": parse_report_status(status)}
        if admin_notes is not None:
            changes["admin_notes"] = admin_notes

        updated = await self.report_repo.update(report_id, changes)
        if updated is None:
            raise NotFoundError("Report", str(report_id))
        logger.info(f"Report {report_id} moved to {changes['status'].value}")
        return updated
