"""system settings table and default settings

Revision ID: 0002_system_settings
Revises: 0001_core_tables
Create Date: 2024-03-08 09:30:00.000000

"""
from alembic import op
import sqlalchemy as sa
import uuid

from keyhost.migrations.helpers import (
    create_index_if_missing,
    create_table_if_missing,
    drop_enum_types,
    drop_table_if_exists,
    enum_type,
    id_column,
    long_text,
    timestamp_columns,
)
from keyhost.services.settings import DEFAULT_SETTINGS

# revision identifiers, used by Alembic.
revision = '0002_system_settings'
down_revision = '0001_core_tables'
branch_labels = None
depends_on = None

SETTING_TYPES = ('string', 'number', 'boolean', 'json')


def upgrade() -> None:
    create_table_if_missing(
        'system_settings',
        id_column(),
        sa.Column('setting_key', sa.String(length=100), nullable=False),
        sa.Column('setting_value', long_text(), nullable=True),
        sa.Column('setting_type', enum_type('setting_type', *SETTING_TYPES), nullable=False, server_default='string'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.false()),
        *timestamp_columns(),
    )
    create_index_if_missing('ix_system_settings_setting_key', 'system_settings', ['setting_key'], unique=True)
    create_index_if_missing('ix_system_settings_is_public', 'system_settings', ['is_public'])

    # Only keys that are missing; values an admin already changed stay put
    existing = set(op.get_bind().execute(sa.text('SELECT setting_key FROM system_settings')).scalars())
    settings_table = sa.table(
        'system_settings',
        sa.column('id', sa.Uuid()),
        sa.column('setting_key', sa.String()),
        sa.column('setting_value', sa.Text()),
        sa.column('setting_type', enum_type('setting_type', *SETTING_TYPES)),
        sa.column('description', sa.Text()),
        sa.column('is_public', sa.Boolean()),
    )
    rows = [
        {
            'id': uuid.uuid4(),
            'setting_key': row['setting_key'],
            'setting_value': row['setting_value'],
            'setting_type': row['setting_type'].value,
            'description': row['description'],
            'is_public': row['is_public'],
        }
        for row in DEFAULT_SETTINGS
        if row['setting_key'] not in existing
    ]
    if rows:
        op.bulk_insert(settings_table, rows)


def downgrade() -> None:
    drop_table_if_exists('system_settings')
    drop_enum_types('setting_type')
