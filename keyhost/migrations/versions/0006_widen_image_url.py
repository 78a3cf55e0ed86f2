"""widen property_images.image_url to unbounded text

Inline base64 data URLs are far longer than 500 characters. On MySQL the
column becomes LONGTEXT, and system_settings.setting_value is widened the
same way.

Revision ID: 0006_widen_image_url
Revises: 0005_user_profile_fields
Create Date: 2024-05-28 08:05:00.000000

"""
from alembic import op
import sqlalchemy as sa

from keyhost.migrations.helpers import column_type, is_long_text, long_text

# revision identifiers, used by Alembic.
revision = '0006_widen_image_url'
down_revision = '0005_user_profile_fields'
branch_labels = None
depends_on = None

# table, column, nullable
WIDE_COLUMNS = (
    ('property_images', 'image_url', False),
    ('system_settings', 'setting_value', True),
)


def upgrade() -> None:
    dialect_name = op.get_bind().dialect.name
    for table, column, nullable in WIDE_COLUMNS:
        current = column_type(table, column)
        if current is None or is_long_text(dialect_name, current):
            continue
        with op.batch_alter_table(table) as batch_op:
            batch_op.alter_column(
                column,
                existing_type=current,
                type_=long_text(),
                existing_nullable=nullable,
            )


def downgrade() -> None:
    # Rows longer than 500 characters would not fit back
    current = column_type('property_images', 'image_url')
    if current is None or not isinstance(current, sa.Text):
        return
    with op.batch_alter_table('property_images') as batch_op:
        batch_op.alter_column(
            'image_url',
            existing_type=current,
            type_=sa.String(length=500),
            existing_nullable=False,
        )
