"""
Property report endpoints: anyone may report, admins triage.
"""

from fastapi import APIRouter, Depends, Query, Path, status
from typing import Optional
from uuid import UUID

from keyhost.config import settings
from keyhost.models.user import User
from keyhost.services.report import ReportService
from keyhost.schemas.common import ApiResponse, Page
from keyhost.schemas.report import ReportCreate, ReportResponse, ReportStatusUpdate
from keyhost.utils.dependencies import (
    get_current_admin_user,
    get_optional_current_user,
    get_report_service,
)
from keyhost.utils.responses import paginate, success_response


router = APIRouter(prefix="/reports", tags=["Reports"])


@router.post(
    "",
    response_model=ApiResponse[ReportResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Report a property"
)
async def create_report(
    data: ReportCreate,
    current_user: Optional[User] = Depends(get_optional_current_user),
    report_service: ReportService = Depends(get_report_service)
):
    report = await report_service.create_report(data, reporter=current_user)
    return success_response(
        data=ReportResponse.from_report(report),
        message="Report submitted successfully"
    )


@router.get(
    "",
    response_model=ApiResponse[Page[ReportResponse]],
    summary="List reports"
)
async def list_reports(
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=settings.max_page_size),
    admin: User = Depends(get_current_admin_user),
    report_service: ReportService = Depends(get_report_service)
):
    reports, total = await report_service.list_reports(status=status_filter, page=page, limit=limit)
    return success_response(
        data={
            "items": [ReportResponse.from_report(r) for r in reports],
            "pagination": paginate(page, limit, total),
        },
        message="Reports retrieved successfully"
    )


@router.patch(
    "/{report_id}/status",
    response_model=ApiResponse[ReportResponse],
    summary="Update report status"
)
async def update_report_status(
    data: ReportStatusUpdate,
    report_id: UUID = Path(...),
    admin: User = Depends(get_current_admin_user),
    report_service: ReportService = Depends(get_report_service)
):
    report = await report_service.update_status(report_id, data.status, data.admin_notes)
    return success_response(
        data=ReportResponse.from_report(report),
        message="Report status updated"
    )
