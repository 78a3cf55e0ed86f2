"""
Tests for the data maintenance routines.
"""

import uuid

import pytest
from sqlalchemy import update

from keyhost.maintenance import (
    check_schema,
    check_settings,
    find_orphans,
    fix_orphan_properties,
    fix_property_encoding,
    resolve_fallback_owner,
)
from keyhost.models.property import Property
from keyhost.models.user import UserType
from keyhost.repositories.property import PropertyRepository
from keyhost.services.settings import DEFAULT_SETTINGS, SettingsService
from keyhost.utils.text import TextUtils
from tests.conftest import PropertyFactory, UserFactory


class TestRepairMojibake:
    """Tests for TextUtils.repair_mojibake."""

    @pytest.mark.parametrize("broken, fixed", [
        ("CafÃ©", "Café"),
        ("Itâ€™s", "It’s"),
        ("à¦¢à¦¾à¦•à¦¾", "ঢাকা"),
    ])
    def test_repairs_double_encoded_text(self, broken, fixed):
        assert TextUtils.repair_mojibake(broken) == fixed
        assert TextUtils.needs_encoding_repair(broken) is True

    @pytest.mark.parametrize("clean", ["Café", "ঢাকা", "Beach house 🏖", "plain ascii", "", None])
    def test_clean_text_is_untouched(self, clean):
        assert TextUtils.repair_mojibake(clean) == clean
        assert TextUtils.needs_encoding_repair(clean) is False

    def test_sanitize_keeps_other_scripts(self):
        assert TextUtils.sanitize_text("ঢাকা <b>flat</b>; 2 beds!") == "ঢাকা bflat/b 2 beds!"


class TestFixPropertyEncoding:
    """Tests for the property text repair."""

    async def test_dry_run_reports_without_writing(self, db_session, owner_user):
        prop = await PropertyFactory.create_property(db_session, owner_user, title="CafÃ© loft", city="Dhaka")

        changes = await fix_property_encoding(db_session, dry_run=True)

        assert changes == [{
            "property_id": prop.id,
            "column": "title",
            "before": "CafÃ© loft",
            "after": "Café loft",
        }]
        stored = await PropertyRepository(db_session).get_by_id(prop.id)
        assert stored.title == "CafÃ© loft"

    async def test_repair_writes_fixed_values(self, db_session, owner_user):
        prop = await PropertyFactory.create_property(
            db_session, owner_user, title="Itâ€™s cosy", city="à¦¢à¦¾à¦•à¦¾"
        )

        changes = await fix_property_encoding(db_session)

        assert {change["column"] for change in changes} == {"title", "city"}
        stored = await PropertyRepository(db_session).get_by_id(prop.id)
        assert stored.title == "It’s cosy"
        assert stored.city == "ঢাকা"

    async def test_clean_rows_produce_no_changes(self, db_session, active_property):
        assert await fix_property_encoding(db_session) == []


async def orphan_property(db_session, owner):
    prop = await PropertyFactory.create_property(db_session, owner)
    # SQLite does not enforce foreign keys without the pragma
    await db_session.execute(update(Property).where(Property.id == prop.id).values(owner_id=uuid.uuid4()))
    await db_session.commit()
    return prop


class TestOrphans:
    """Tests for orphan detection and owner reassignment."""

    async def test_find_orphans_counts_missing_owner(self, db_session, owner_user):
        await orphan_property(db_session, owner_user)

        report = await find_orphans(db_session)

        by_key = {(entry["table"], entry["column"]): entry for entry in report}
        assert by_key[("properties", "owner_id")]["count"] == 1
        assert by_key[("properties", "owner_id")]["references"] == "users.id"
        assert by_key[("property_images", "property_id")]["count"] == 0

    async def test_clean_database_has_no_orphans(self, db_session, active_property):
        assert all(entry["count"] == 0 for entry in await find_orphans(db_session))

    async def test_fix_assigns_named_owner(self, db_session, owner_user, admin_user, other_owner):
        prop = await orphan_property(db_session, owner_user)

        fixed = await fix_orphan_properties(db_session, owner_email=other_owner.email)

        assert fixed == 1
        stored = await PropertyRepository(db_session).get_by_id(prop.id)
        assert stored.owner_id == other_owner.id

    async def test_unknown_email_falls_back_to_admin(self, db_session, owner_user, admin_user):
        prop = await orphan_property(db_session, owner_user)

        assert await fix_orphan_properties(db_session, owner_email="nobody@example.com") == 1

        stored = await PropertyRepository(db_session).get_by_id(prop.id)
        assert stored.owner_id == admin_user.id
        assert [e["count"] for e in await find_orphans(db_session) if e["table"] == "properties"] == [0]

    async def test_oldest_user_when_no_admin(self, db_session, guest_user):
        owner = await resolve_fallback_owner(db_session)
        assert owner.id == guest_user.id

    async def test_inactive_admin_is_skipped(self, db_session, guest_user):
        await UserFactory.create_user(db_session, user_type=UserType.ADMIN, is_active=False)

        owner = await resolve_fallback_owner(db_session)
        assert owner.id == guest_user.id

    async def test_no_users_leaves_rows(self, db_session):
        assert await resolve_fallback_owner(db_session) is None
        assert await fix_orphan_properties(db_session) == 0


class TestDiagnostics:
    """Tests for the schema and settings checks."""

    async def test_schema_matches_models(self, db_engine):
        async with db_engine.connect() as conn:
            result = await check_schema(conn)

        assert result == {"missing_tables": [], "missing_columns": {}, "ok": True}

    async def test_missing_defaults_reported(self, db_session):
        result = await check_settings(db_session)
        assert result["ok"] is False
        assert len(result["missing_defaults"]) == len(DEFAULT_SETTINGS)

        await SettingsService(db_session).seed_defaults()

        result = await check_settings(db_session)
        assert result["ok"] is True
        assert result["total"] == len(DEFAULT_SETTINGS)
        assert result["public"] == sum(1 for entry in DEFAULT_SETTINGS if entry["is_public"])
