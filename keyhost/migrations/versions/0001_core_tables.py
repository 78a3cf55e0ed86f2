"""core tables: users, properties, property images, bookings, reviews

Revision ID: 0001_core_tables
Revises:
Create Date: 2024-03-01 10:00:00.000000

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
revision = '0001_core_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    create_table_if_missing(
        'users',
        id_column(),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('user_type', enum_type('user_type', 'guest', 'property_owner', 'admin'),
                  nullable=False, server_default='guest'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('login_attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('locked_until', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *timestamp_columns(),
    )
    create_index_if_missing('ix_users_email', 'users', ['email'], unique=True)
    create_index_if_missing('ix_users_user_type', 'users', ['user_type'])

    create_table_if_missing(
        'properties',
        id_column(),
        sa.Column('owner_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('property_type', sa.String(length=50), nullable=False, server_default='apartment'),
        sa.Column('address', sa.String(length=500), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('state', sa.String(length=100), nullable=False),
        sa.Column('country', sa.String(length=100), nullable=False),
        sa.Column('postal_code', sa.String(length=20), nullable=True),
        sa.Column('latitude', sa.Numeric(10, 8), nullable=True),
        sa.Column('longitude', sa.Numeric(11, 8), nullable=True),
        sa.Column('bedrooms', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('bathrooms', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('max_guests', sa.Integer(), nullable=False, server_default='2'),
        sa.Column('size_sqft', sa.Integer(), nullable=True),
        sa.Column('base_price', sa.Numeric(10, 2), nullable=False),
        sa.Column('cleaning_fee', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('security_deposit', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('extra_guest_fee', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('check_in_time', sa.Time(), nullable=False, server_default='15:00:00'),
        sa.Column('check_out_time', sa.Time(), nullable=False, server_default='11:00:00'),
        sa.Column('minimum_stay', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('maximum_stay', sa.Integer(), nullable=True),
        sa.Column('is_instant_book', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('status', enum_type('property_status', 'pending_approval', 'active', 'inactive', 'rejected'),
                  nullable=False, server_default='pending_approval'),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        *timestamp_columns(),
    )
    create_index_if_missing('ix_properties_owner_id', 'properties', ['owner_id'])
    create_index_if_missing('ix_properties_status', 'properties', ['status'])
    create_index_if_missing('idx_properties_city_status_price', 'properties', ['city', 'status', 'base_price'])
    create_index_if_missing('idx_properties_owner_status', 'properties', ['owner_id', 'status'])

    # image_url starts bounded; 0006 widens it for inline base64 payloads
    create_table_if_missing(
        'property_images',
        id_column(),
        sa.Column('property_id', sa.Uuid(), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
        sa.Column('image_url', sa.String(length=500), nullable=False),
        sa.Column('image_type', enum_type('image_type', 'main', 'gallery'), nullable=False, server_default='gallery'),
        sa.Column('alt_text', sa.String(length=255), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        *timestamp_columns(),
    )
    create_index_if_missing('idx_property_images_property_sort', 'property_images', ['property_id', 'sort_order'])

    create_table_if_missing(
        'bookings',
        id_column(),
        sa.Column('booking_reference', sa.String(length=20), nullable=False),
        sa.Column('property_id', sa.Uuid(), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
        sa.Column('guest_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('check_in_date', sa.Date(), nullable=False),
        sa.Column('check_out_date', sa.Date(), nullable=False),
        sa.Column('number_of_guests', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('nights', sa.Integer(), nullable=False),
        sa.Column('base_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('cleaning_fee', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('security_deposit', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('extra_guest_fee', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('service_fee', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('tax_amount', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('total_amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('special_requests', sa.Text(), nullable=True),
        sa.Column('status', enum_type('booking_status', 'pending', 'confirmed', 'checked_in', 'checked_out', 'cancelled'),
                  nullable=False, server_default='pending'),
        sa.Column('payment_status', enum_type('payment_status', 'pending', 'paid', 'refunded'),
                  nullable=False, server_default='pending'),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        *timestamp_columns(),
    )
    create_index_if_missing('ix_bookings_booking_reference', 'bookings', ['booking_reference'], unique=True)
    create_index_if_missing('ix_bookings_guest_id', 'bookings', ['guest_id'])
    create_index_if_missing('idx_bookings_property_dates', 'bookings', ['property_id', 'check_in_date', 'check_out_date'])

    create_table_if_missing(
        'reviews',
        id_column(),
        sa.Column('booking_id', sa.Uuid(), sa.ForeignKey('bookings.id', ondelete='CASCADE'), nullable=False),
        sa.Column('property_id', sa.Uuid(), sa.ForeignKey('properties.id', ondelete='CASCADE'), nullable=False),
        sa.Column('guest_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('cleanliness_rating', sa.Integer(), nullable=True),
        sa.Column('communication_rating', sa.Integer(), nullable=True),
        sa.Column('location_rating', sa.Integer(), nullable=True),
        sa.Column('value_rating', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('status', enum_type('review_status', 'pending', 'approved', 'rejected'),
                  nullable=False, server_default='pending'),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('host_response', sa.Text(), nullable=True),
        *timestamp_columns(),
        sa.UniqueConstraint('booking_id', name='uq_reviews_booking_id'),
        sa.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_reviews_rating_range'),
    )
    create_index_if_missing('ix_reviews_property_id', 'reviews', ['property_id'])


def downgrade() -> None:
    for table in ('reviews', 'bookings', 'property_images', 'properties', 'users'):
        drop_table_if_exists(table)
    drop_enum_types('review_status', 'payment_status', 'booking_status', 'image_type', 'property_status', 'user_type')
