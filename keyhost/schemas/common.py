"""
Response envelope and pagination schemas shared by all routers.
"""

from pydantic import BaseModel, Field
from typing import Generic, List, Optional, TypeVar

DataT = TypeVar("DataT")


class Pagination(BaseModel):
    """Pagination block attached to list responses."""

    current_page: int = Field(..., description="Current page number (starts from 1)")
    total_pages: int = Field(..., description="Total number of pages")
    total_items: int = Field(..., description="Total number of matching items")
    items_per_page: int = Field(..., description="Items per page")
    has_next_page: bool
    has_prev_page: bool
    next_page: Optional[int] = None
    prev_page: Optional[int] = None


class Page(BaseModel, Generic[DataT]):
    """A page of items with its pagination block."""

    items: List[DataT]
    pagination: Pagination


class ApiResponse(BaseModel, Generic[DataT]):
    """Success envelope returned by every endpoint."""

    success: bool = Field(True, description="Always true for successful responses")
    message: str = Field(..., examples=["Properties retrieved successfully"])
    timestamp: str = Field(..., description="UTC timestamp in ISO format")
    data: Optional[DataT] = None
