"""
Tests for the Alembic revision chain.
"""

import pytest
import sqlalchemy as sa
from alembic import command
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.schema import CreateTable

from keyhost.database import Base
from keyhost.maintenance import compare_schema
from keyhost.migrations import get_alembic_config
from keyhost.migrations.helpers import is_long_text
from keyhost.models.image import PropertyImage
from keyhost.models.setting import SystemSetting
from keyhost.services.settings import DEFAULT_SETTINGS
import keyhost.models  # noqa: F401

HEAD = "0006_widen_image_url"


@pytest.fixture
def sync_engine(tmp_path):
    engine = sa.create_engine(f"sqlite:///{tmp_path / 'keyhost.db'}")
    yield engine
    engine.dispose()


def run(engine, action, revision):
    with engine.begin() as conn:
        action(get_alembic_config(str(engine.url), connection=conn), revision)


def current_revision(engine):
    with engine.connect() as conn:
        return conn.execute(sa.text("SELECT version_num FROM alembic_version")).scalar()


def settings_count(engine):
    with engine.connect() as conn:
        return conn.execute(sa.text("SELECT COUNT(*) FROM system_settings")).scalar()


class TestUpgrade:
    """Tests for upgrading fresh and existing databases."""

    def test_upgrade_builds_full_schema(self, sync_engine):
        run(sync_engine, command.upgrade, "head")

        assert current_revision(sync_engine) == HEAD
        assert compare_schema(sync_engine)["ok"] is True
        assert settings_count(sync_engine) == len(DEFAULT_SETTINGS)

    def test_upgrade_twice_is_noop(self, sync_engine):
        run(sync_engine, command.upgrade, "head")
        run(sync_engine, command.upgrade, "head")

        assert current_revision(sync_engine) == HEAD
        assert settings_count(sync_engine) == len(DEFAULT_SETTINGS)

    def test_rerun_after_stamp_base(self, sync_engine):
        run(sync_engine, command.upgrade, "head")
        run(sync_engine, command.stamp, "base")
        run(sync_engine, command.upgrade, "head")

        assert current_revision(sync_engine) == HEAD
        assert settings_count(sync_engine) == len(DEFAULT_SETTINGS)

    def test_upgrade_over_schema_created_from_models(self, sync_engine):
        Base.metadata.create_all(sync_engine)

        run(sync_engine, command.upgrade, "head")

        assert current_revision(sync_engine) == HEAD
        assert settings_count(sync_engine) == len(DEFAULT_SETTINGS)

    def test_image_url_is_unbounded_text(self, sync_engine):
        run(sync_engine, command.upgrade, "head")

        columns = {c["name"]: c["type"] for c in sa.inspect(sync_engine).get_columns("property_images")}
        assert isinstance(columns["image_url"], sa.Text)

    def test_seed_keeps_existing_values(self, sync_engine):
        run(sync_engine, command.upgrade, "0002_system_settings")
        with sync_engine.begin() as conn:
            conn.execute(sa.text(
                "UPDATE system_settings SET setting_value = 'Renamed' WHERE setting_key = 'site_name'"
            ))
        run(sync_engine, command.stamp, "base")
        run(sync_engine, command.upgrade, "head")

        with sync_engine.connect() as conn:
            value = conn.execute(sa.text(
                "SELECT setting_value FROM system_settings WHERE setting_key = 'site_name'"
            )).scalar()
        assert value == "Renamed"


class TestDowngrade:
    """Tests for walking the chain back down."""

    def test_downgrade_to_base_drops_tables(self, sync_engine):
        run(sync_engine, command.upgrade, "head")
        run(sync_engine, command.downgrade, "base")

        tables = set(sa.inspect(sync_engine).get_table_names())
        assert "properties" not in tables
        assert "system_settings" not in tables


class TestLongTextColumns:
    """Tests for the column type that holds inline image payloads."""

    @pytest.mark.parametrize("model, column", [
        (PropertyImage, "image_url"),
        (SystemSetting, "setting_value"),
    ])
    def test_mysql_ddl_uses_longtext(self, model, column):
        ddl = str(CreateTable(model.__table__).compile(dialect=mysql.dialect()))

        line = next(line for line in ddl.splitlines() if line.strip().startswith(column))
        assert "LONGTEXT" in line

    @pytest.mark.parametrize("dialect", [postgresql.dialect(), sqlite.dialect()])
    def test_other_dialects_use_text(self, dialect):
        ddl = str(CreateTable(PropertyImage.__table__).compile(dialect=dialect))

        line = next(line for line in ddl.splitlines() if line.strip().startswith("image_url"))
        assert "TEXT" in line
        assert "LONGTEXT" not in line

    @pytest.mark.parametrize("dialect_name, column_type, expected", [
        ("mysql", mysql.TEXT(), False),
        ("mariadb", mysql.MEDIUMTEXT(), False),
        ("mysql", mysql.VARCHAR(500), False),
        ("mysql", mysql.LONGTEXT(), True),
        ("postgresql", sa.Text(), True),
        ("postgresql", sa.String(500), False),
        ("sqlite", sa.Text(), True),
    ])
    def test_widening_decision(self, dialect_name, column_type, expected):
        assert is_long_text(dialect_name, column_type) is expected
