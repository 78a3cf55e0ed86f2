"""
SystemSetting model: platform configuration stored as typed key-value rows.
"""

from sqlalchemy import String, Text, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from keyhost.database import Base, long_text, value_enum
import enum
import json
from typing import Any, Optional


class SettingType(str, enum.Enum):
    """How a stored text value is interpreted on read."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    JSON = "json"


class SystemSetting(Base):
    """
    A single platform setting.

    Values are always stored as text; ``setting_type`` decides how they are
    coerced when read. Only rows with ``is_public`` set are exposed to
    anonymous clients.
    """

    __tablename__ = "system_settings"

    setting_key: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
        comment="Unique setting name"
    )

    setting_value: Mapped[Optional[str]] = mapped_column(long_text(), nullable=True)

    setting_type: Mapped[SettingType] = mapped_column(
        value_enum(SettingType, "setting_type"),
        nullable=False,
        default=SettingType.STRING
    )

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    is_public: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
        comment="Whether the setting is visible without authentication"
    )

    def __repr__(self) -> str:
        return f"<SystemSetting(key={self.setting_key}, type={self.setting_type})>"

    @property
    def typed_value(self) -> Any:
        return coerce_setting_value(self.setting_value, self.setting_type)


def coerce_setting_value(raw: Optional[str], setting_type: SettingType) -> Any:
    """
    Convert a stored text value to its typed form.

    Args:
        raw: Stored text value
        setting_type: Declared setting type

    Returns:
        float for numbers, bool for booleans, parsed JSON for json
        (the raw text when it does not parse), the raw text otherwise
    """
    if raw is None:
        return None

    setting_type = SettingType(setting_type)
    if setting_type == SettingType.NUMBER:
        try:
            return float(raw)
        except ValueError:
            return raw
    if setting_type == SettingType.BOOLEAN:
        return raw == "true"
    if setting_type == SettingType.JSON:
        try:
            return json.loads(raw)
        except ValueError:
            return raw
    return raw


def serialize_setting_value(value: Any) -> Optional[str]:
    """Render a Python value as the text stored in ``setting_value``."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def infer_setting_type(value: Any) -> SettingType:
    """Guess the setting type of a Python value."""
    if isinstance(value, bool):
        return SettingType.BOOLEAN
    if isinstance(value, (int, float)):
        return SettingType.NUMBER
    if isinstance(value, (dict, list)):
        return SettingType.JSON
    return SettingType.STRING
