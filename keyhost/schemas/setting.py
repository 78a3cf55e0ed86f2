"""
Pydantic schemas for the platform settings endpoints.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from keyhost.models.setting import SettingType


class SettingEntry(BaseModel):
    """One setting as shown to and written by administrators."""

    value: Any = Field(None, examples=["Keyhost Homes"])
    type: Optional[SettingType] = Field(None, description="Inferred from the value when omitted")
    description: Optional[str] = None
    is_public: Optional[bool] = None


class SettingsUpdateRequest(BaseModel):
    """Bulk admin update: ``{"settings": {key: {value, type, description, is_public}}}``."""

    settings: Dict[str, SettingEntry] = Field(..., min_length=1)
