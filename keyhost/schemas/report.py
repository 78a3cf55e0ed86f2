"""
Pydantic schemas for property reports.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from uuid import UUID
from keyhost.models.report import ReportStatus


class ReportCreate(BaseModel):
    property_id: UUID
    reason: str = Field(..., min_length=1, max_length=100, examples=["misleading_photos"])
    description: Optional[str] = Field(None, max_length=5000)


class ReportStatusUpdate(BaseModel):
    # Plain string so an unknown status is answered with 400, not 422
    status: str = Field(..., examples=["investigating"])
    admin_notes: Optional[str] = Field(None, max_length=5000)


class ReportResponse(BaseModel):
    id: UUID
    property_id: UUID
    property_title: Optional[str] = None
    reporter_id: Optional[UUID] = None
    reason: str
    description: Optional[str] = None
    status: ReportStatus
    admin_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_report(cls, report) -> "ReportResponse":
        response = cls.model_validate(report)
        if report.property_rel is not None:
            response.property_title = report.property_rel.title
        return response
