"""conversations and messages

Revision ID: 0003_messaging
Revises: 0002_system_settings
Create Date: 2024-04-02 14:10:00.000000

"""
from alembic import op
import sqlalchemy as sa

from keyhost.migrations.helpers import (
    create_index_if_missing,
    create_table_if_missing,
    drop_table_if_exists,
    id_column,
    timestamp_columns,
)

# revision identifiers, used by Alembic.
revision = '0003_messaging'
down_revision = '0002_system_settings'
branch_labels = None
depends_on = None


def upgrade() -> None:
    create_table_if_missing(
        'conversations',
        id_column(),
        sa.Column('guest_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('host_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('property_id', sa.Uuid(), sa.ForeignKey('properties.id', ondelete='SET NULL'), nullable=True),
        sa.Column('last_message_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        *timestamp_columns(),
    )
    create_index_if_missing('idx_conversations_participants', 'conversations', ['guest_id', 'host_id', 'property_id'])
    create_index_if_missing('ix_conversations_host_id', 'conversations', ['host_id'])
    create_index_if_missing('ix_conversations_last_message_at', 'conversations', ['last_message_at'])

    create_table_if_missing(
        'messages',
        id_column(),
        sa.Column('conversation_id', sa.Uuid(), sa.ForeignKey('conversations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sender_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        *timestamp_columns(),
    )
    create_index_if_missing('ix_messages_conversation_id', 'messages', ['conversation_id'])
    create_index_if_missing('ix_messages_sender_id', 'messages', ['sender_id'])


def downgrade() -> None:
    drop_table_if_exists('messages')
    drop_table_if_exists('conversations')
