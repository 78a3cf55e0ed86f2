"""
Success envelope shared by every endpoint:
``{"success": true, "message": ..., "timestamp": ..., "data": ...}``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


def utc_timestamp() -> str:
    """Current UTC time in ISO format with a Z suffix."""
    return datetime.now(timezone.utc).replace(tzinfo=None).isoformat() + "Z"


def success_response(data: Any = None, message: str = "Success") -> Dict[str, Any]:
    """
    Build a successful response body.

    Args:
        data: Payload placed under ``data``; omitted when None
        message: Human-readable message

    Returns:
        Response dictionary matching ``ApiResponse``
    """
    response: Dict[str, Any] = {
        "success": True,
        "message": message,
        "timestamp": utc_timestamp(),
    }
    if data is not None:
        response["data"] = data
    return response


def paginate(page: int, limit: int, total: int) -> Dict[str, Optional[int]]:
    """
    Pagination block for list responses.

    Args:
        page: Current page, starting at 1
        limit: Items per page
        total: Total number of matching items

    Returns:
        Dictionary matching ``Pagination``
    """
    total_pages = (total + limit - 1) // limit if limit > 0 else 0
    has_next = page < total_pages
    has_prev = page > 1
    return {
        "current_page": page,
        "total_pages": total_pages,
        "total_items": total,
        "items_per_page": limit,
        "has_next_page": has_next,
        "has_prev_page": has_prev,
        "next_page": page + 1 if has_next else None,
        "prev_page": page - 1 if has_prev else None,
    }
