"""
Public settings endpoint used by the frontend to brand and configure itself.
"""

from fastapi import APIRouter, Depends
from typing import Any, Dict

from keyhost.services.settings import SettingsService
from keyhost.schemas.common import ApiResponse
from keyhost.utils.dependencies import get_settings_service
from keyhost.utils.responses import success_response


router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get(
    "/public",
    response_model=ApiResponse[Dict[str, Any]],
    summary="Public settings",
    description="Typed values of every setting marked public. No authentication required."
)
async def get_public_settings(settings_service: SettingsService = Depends(get_settings_service)):
    return success_response(
        data=await settings_service.list_public(),
        message="Settings retrieved successfully"
    )
