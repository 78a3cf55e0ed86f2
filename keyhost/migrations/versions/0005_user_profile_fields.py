"""user profile fields

Revision ID: 0005_user_profile_fields
Revises: 0004_property_reports
Create Date: 2024-05-06 16:20:00.000000

"""
from alembic import op
import sqlalchemy as sa

from keyhost.migrations.helpers import column_names

# revision identifiers, used by Alembic.
revision = '0005_user_profile_fields'
down_revision = '0004_property_reports'
branch_labels = None
depends_on = None

PROFILE_COLUMNS = (
    ('bio', lambda: sa.Column('bio', sa.Text(), nullable=True)),
    ('work', lambda: sa.Column('work', sa.String(length=255), nullable=True)),
    ('school', lambda: sa.Column('school', sa.String(length=255), nullable=True)),
    ('is_superhost', lambda: sa.Column('is_superhost', sa.Boolean(), nullable=False, server_default=sa.false())),
    ('languages', lambda: sa.Column('languages', sa.JSON(), nullable=True)),
)


def upgrade() -> None:
    existing = column_names('users')
    missing = [build for name, build in PROFILE_COLUMNS if name not in existing]
    if not missing:
        return
    with op.batch_alter_table('users') as batch_op:
        for build in missing:
            batch_op.add_column(build())


def downgrade() -> None:
    existing = column_names('users')
    present = [name for name, _ in PROFILE_COLUMNS if name in existing]
    if not present:
        return
    with op.batch_alter_table('users') as batch_op:
        for name in reversed(present):
            batch_op.drop_column(name)
