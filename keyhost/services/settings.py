"""
Settings service: the typed key-value store behind platform configuration.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from keyhost.repositories.setting import SettingRepository
from keyhost.models.setting import (
    SettingType,
    serialize_setting_value,
    infer_setting_type,
)
from keyhost.schemas.setting import SettingEntry
from keyhost.utils.exceptions import APIException, BadRequestError, ValidationError
import logging

logger = logging.getLogger(__name__)


def _setting(key, value, setting_type, description, is_public):
    return {
        "setting_key": key,
        "setting_value": value,
        "setting_type": setting_type,
        "description": description,
        "is_public": is_public,
    }


# Seeded on first migration and by `keyhost-migrate seed-settings`
DEFAULT_SETTINGS: List[Dict[str, Any]] = [
    _setting("platform_name", "Keyhost Homes", SettingType.STRING, "Platform display name", True),
    _setting("site_name", "Keyhost Homes", SettingType.STRING, "Website name", True),
    _setting("site_description", "Find and book unique homes across Bangladesh", SettingType.STRING, "Website tagline", True),
    _setting("logo_url", "", SettingType.STRING, "Platform logo URL", True),
    _setting("favicon_url", "", SettingType.STRING, "Platform favicon URL", True),
    _setting("contact_email", "info@keyhosthomes.com", SettingType.STRING, "Public contact email", True),
    _setting("contact_phone", "+880 1234-567890", SettingType.STRING, "Public contact phone", True),
    _setting("support_email", "support@keyhosthomes.com", SettingType.STRING, "Support email", True),
    _setting("timezone", "Asia/Dhaka", SettingType.STRING, "Default timezone", True),
    _setting("currency", "BDT", SettingType.STRING, "Default currency code", True),
    _setting("maintenance_mode", "false", SettingType.BOOLEAN, "Show the maintenance page to visitors", True),
    _setting("registration_enabled", "true", SettingType.BOOLEAN, "Allow new user sign-ups", True),
    _setting("email_verification_required", "true", SettingType.BOOLEAN, "Require email verification", True),
    _setting("phone_verification_required", "false", SettingType.BOOLEAN, "Require phone verification", True),
    _setting("commission_rate", "10", SettingType.NUMBER, "Platform commission in percent", False),
    _setting("max_properties_per_owner", "50", SettingType.NUMBER, "Listing limit per owner", False),
    _setting("max_guests_per_booking", "20", SettingType.NUMBER, "Guest limit per booking", True),
    _setting("seo_title", "Keyhost Homes - Book unique stays", SettingType.STRING, "Default page title", True),
    _setting("seo_description", "Vacation rentals, apartments and rooms across Bangladesh", SettingType.STRING, "Default meta description", True),
    _setting("seo_keywords", "vacation rental, bangladesh, homestay", SettingType.STRING, "Default meta keywords", True),
    _setting("cancellation_policy", "Free cancellation up to 48 hours before check-in.", SettingType.STRING, "Cancellation policy text", True),
    _setting("terms_of_service", "", SettingType.STRING, "Terms of service text", True),
    _setting("privacy_policy", "", SettingType.STRING, "Privacy policy text", True),
    _setting("refund_policy", "", SettingType.STRING, "Refund policy text", True),
]


class SettingsService:
    """
    Typed access to system settings.

    Reads coerce stored text by the row's type; writes are upserts keyed on
    ``setting_key`` so repeating a write never duplicates a row.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.setting_repo = SettingRepository(db_session)

    async def get(self, key: str, default: Any = None) -> Any:
        """
        Typed value of a setting.

        Args:
            key: Setting key
            default: Returned when the key does not exist

        Returns:
            Coerced value or ``default``
        """
        setting = await self.setting_repo.get_by_key(key)
        if setting is None:
            return default
        return setting.typed_value

    async def set(
        self,
        key: str,
        value: Any,
        setting_type: Optional[SettingType] = None,
        description: Optional[str] = None,
        is_public: Optional[bool] = None,
        commit: bool = True,
    ) -> None:
        """
        Insert or update a setting.

        Args:
            key: Setting key
            value: Python value; stored as text
            setting_type: Declared type, inferred from ``value`` when omitted
            description: New description, unchanged when omitted
            is_public: New visibility, unchanged when omitted (private on insert)
            commit: Commit immediately

        Raises:
            ValidationError: If the key is empty
        """
        if not key or not key.strip():
            raise ValidationError("Setting key is required")

        resolved_type = SettingType(setting_type) if setting_type else infer_setting_type(value)
        await self.setting_repo.upsert(
            key=key.strip(),
            value=serialize_setting_value(value),
            setting_type=resolved_type,
            description=description,
            is_public=is_public,
            commit=commit,
        )
        logger.info(f"Setting '{key}' saved as {resolved_type.value}")

    async def list_public(self) -> Dict[str, Any]:
        """Typed values of every public setting, keyed by setting key."""
        settings = await self.setting_repo.list_settings(public_only=True)
        return {setting.setting_key: setting.typed_value for setting in settings}

    async def list_all(self) -> Dict[str, Dict[str, Any]]:
        """Admin view of every setting with its metadata."""
        settings = await self.setting_repo.list_settings()
        return {
            setting.setting_key: {
                "value": setting.typed_value,
                "type": setting.setting_type.value,
                "description": setting.description,
                "is_public": setting.is_public,
            }
            for setting in settings
        }

    async def update_many(self, entries: Dict[str, SettingEntry]) -> Dict[str, Dict[str, Any]]:
        """
        Apply an admin bulk update, one upsert per key, in one transaction.

        Returns:
            The full admin view after the update

        Raises:
            BadRequestError: If the update cannot be applied
        """
        try:
            for key, entry in entries.items():
                await self.set(
                    key,
                    entry.value,
                    setting_type=entry.type,
                    description=entry.description,
                    is_public=entry.is_public,
                    commit=False,
                )
            await self.db.commit()
            logger.info(f"Updated {len(entries)} settings")
            return await self.list_all()
        except APIException:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update settings: {e}")
            raise BadRequestError(f"Failed to update settings: {str(e)}")

    async def seed_defaults(self, overwrite: bool = False) -> int:
        """
        Write the default settings.

        Args:
            overwrite: Upsert every default, replacing current values.
                Otherwise only missing keys are inserted.

        Returns:
            Number of settings written
        """
        if not overwrite:
            inserted = await self.setting_repo.insert_missing(DEFAULT_SETTINGS)
            logger.info(f"Seeded {inserted} missing default settings")
            return inserted

        for row in DEFAULT_SETTINGS:
            await self.setting_repo.upsert(
                key=row["setting_key"],
                value=row["setting_value"],
                setting_type=row["setting_type"],
                description=row["description"],
                is_public=row["is_public"],
                commit=False,
            )
        await self.db.commit()
        logger.info(f"Reset {len(DEFAULT_SETTINGS)} default settings")
        return len(DEFAULT_SETTINGS)
