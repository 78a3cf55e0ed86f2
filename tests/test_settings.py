"""
Tests for the settings store and its endpoints.
"""

import pytest
from sqlalchemy import func, select

from keyhost.models.setting import SettingType, SystemSetting
from keyhost.services.settings import DEFAULT_SETTINGS, SettingsService
from keyhost.utils.exceptions import ValidationError


async def _count_rows(db_session, key: str) -> int:
    result = await db_session.execute(
        select(func.count()).select_from(SystemSetting).where(SystemSetting.setting_key == key)
    )
    return result.scalar_one()


class TestSettingsService:
    """Test SettingsService functionality."""

    async def test_set_then_get_typed_values(self, db_session):
        service = SettingsService(db_session)

        await service.set("max_guests_per_booking", 12)
        await service.set("maintenance_mode", True)
        await service.set("featured_cities", ["Dhaka", "Sylhet"])
        await service.set("site_name", "Keyhost Homes")

        assert await service.get("max_guests_per_booking") == 12.0
        assert await service.get("maintenance_mode") is True
        assert await service.get("featured_cities") == ["Dhaka", "Sylhet"]
        assert await service.get("site_name") == "Keyhost Homes"

    async def test_get_missing_key_returns_default(self, db_session):
        service = SettingsService(db_session)
        assert await service.get("does_not_exist") is None
        assert await service.get("does_not_exist", "fallback") == "fallback"

    async def test_upsert_existing_key_does_not_duplicate(self, db_session):
        service = SettingsService(db_session)

        await service.set("currency", "BDT", description="Currency", is_public=True)
        await service.set("currency", "USD", setting_type=SettingType.STRING, description="Default currency")

        assert await _count_rows(db_session, "currency") == 1
        assert await service.get("currency") == "USD"

        view = await service.list_all()
        assert view["currency"]["description"] == "Default currency"
        assert view["currency"]["is_public"] is True

    async def test_json_setting_with_invalid_text_returns_raw(self, db_session):
        service = SettingsService(db_session)
        await service.set("broken_json", "{not json", setting_type=SettingType.JSON)
        assert await service.get("broken_json") == "{not json"

    async def test_private_settings_never_listed_publicly(self, db_session):
        service = SettingsService(db_session)
        await service.set("site_name", "Keyhost Homes", is_public=True)
        await service.set("commission_rate", 12, is_public=False)
        await service.set("internal_note", "hidden")

        public = await service.list_public()

        assert public == {"site_name": "Keyhost Homes"}

    async def test_empty_key_rejected(self, db_session):
        with pytest.raises(ValidationError):
            await SettingsService(db_session).set("  ", "value")

    async def test_seed_defaults_inserts_missing_only(self, db_session):
        service = SettingsService(db_session)
        await service.set("platform_name", "Custom Name", is_public=True)

        inserted = await service.seed_defaults()

        assert inserted == len(DEFAULT_SETTINGS) - 1
        assert await service.get("platform_name") == "Custom Name"
        assert await service.get("timezone") == "Asia/Dhaka"
        assert await service.seed_defaults() == 0

    async def test_seed_defaults_overwrite(self, db_session):
        service = SettingsService(db_session)
        await service.set("platform_name", "Custom Name", is_public=True)

        written = await service.seed_defaults(overwrite=True)

        assert written == len(DEFAULT_SETTINGS)
        assert await service.get("platform_name") == "Keyhost Homes"
        assert await _count_rows(db_session, "platform_name") == 1


class TestSettingsEndpoints:
    """Test the public and admin settings endpoints."""

    async def test_public_settings_filters_private_rows(self, async_client, db_session):
        await SettingsService(db_session).seed_defaults()

        response = await async_client.get("/api/settings/public")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert data["platform_name"] == "Keyhost Homes"
        assert data["currency"] == "BDT"
        assert data["registration_enabled"] is True
        assert "commission_rate" not in data
        assert "max_properties_per_owner" not in data

    async def test_admin_bulk_update(self, async_client, admin_headers, db_session):
        payload = {
            "settings": {
                "site_name": {"value": "Keyhost", "type": "string", "is_public": True},
                "commission_rate": {"value": 15, "type": "number", "is_public": False},
            }
        }

        response = await async_client.put("/api/admin/settings", json=payload, headers=admin_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["site_name"]["value"] == "Keyhost"
        assert data["commission_rate"] == {
            "value": 15.0,
            "type": "number",
            "description": None,
            "is_public": False,
        }

        again = await async_client.put("/api/admin/settings", json=payload, headers=admin_headers)
        assert again.status_code == 200
        assert await _count_rows(db_session, "site_name") == 1

    async def test_admin_settings_require_admin(self, async_client, guest_headers):
        response = await async_client.get("/api/admin/settings", headers=guest_headers)
        assert response.status_code == 403
        assert response.json()["success"] is False

    async def test_admin_settings_require_token(self, async_client):
        response = await async_client.get("/api/admin/settings")
        assert response.status_code == 401
