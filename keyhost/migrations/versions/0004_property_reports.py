"""property reports

Revision ID: 0004_property_reports
Revises: 0003_messaging
Create Date: 2024-04-20 11:45:00.000000

"""
from alembic import op
import sqlalchemy as sa

from keyhost.migrations.helpers import (
    create_index_if_missing,
    create_table_if_missing,
    drop_enum_types,
    drop_table_if_exists,
    enum_type,
    id_column,
    timestamp_columns,
)

# revision identifiers, used by Alembic.
revision = '0004_property_reports'
down_revision = '0003_messaging'
branch_labels = None
depends_on = None


def upgrade() -> None:
    create_table_if_missing(
        'property_reports',
        id_column(),
        sa.Column('property_id', sa.Uuid(), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
        sa.Column('reporter_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reason', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', enum_type('report_status', 'pending', 'investigating', 'resolved', 'dismissed'),
                  nullable=False, server_default='pending'),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        *timestamp_columns(),
    )
    create_index_if_missing('ix_property_reports_property_id', 'property_reports', ['property_id'])
    create_index_if_missing('ix_property_reports_status', 'property_reports', ['status'])


def downgrade() -> None:
    drop_table_if_exists('property_reports')
    drop_enum_types('report_status')
