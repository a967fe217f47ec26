"""initial_schema

Revision ID: 000000000000
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '000000000000'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False, comment='Timestamp when record was created'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False, comment='Timestamp when record was last updated'),
    ]


def upgrade() -> None:
    # Create properties table
    op.create_table(
        'properties',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('property_type', sa.String(length=100), nullable=False, comment='Apartment, Villa, Townhouse, Penthouse, Studio...'),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False, comment='Area within the city'),
        sa.Column('property_status', sa.String(length=20), nullable=False, comment='Rent, Buy or Off-Plan'),
        sa.Column('starting_price', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('bhk_count', sa.Integer(), nullable=False),
        sa.Column('bath_count', sa.Integer(), nullable=False),
        sa.Column('total_area', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('developer', sa.String(length=255), nullable=False),
        sa.Column('usp', sa.Text(), nullable=False, comment='Unique selling points'),
        sa.Column('construction_status', sa.String(length=40), nullable=False),
        sa.Column('handover', sa.String(length=50), nullable=False, comment='e.g. Q2 2028'),
        sa.Column('floors', sa.Integer(), nullable=False),
        sa.Column('elevation', sa.String(length=100), nullable=False, comment='e.g. G+2P+17+R'),
        sa.Column('payment_plan', sa.String(length=255), nullable=False),
        sa.Column('total_units', sa.Integer(), nullable=False),
        sa.Column('views', sa.String(length=255), nullable=False),
        sa.Column('unit_types', sa.JSON(), nullable=False, comment='[{type, total_area_start, total_area_end, price}]'),
        sa.Column('highlights', sa.JSON(), nullable=False),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('is_on_home_page', sa.Boolean(), server_default=sa.text('FALSE'), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('starting_price >= 0', name='check_starting_price_non_negative'),
        sa.CheckConstraint('bhk_count >= 0', name='check_bhk_count_non_negative'),
        sa.CheckConstraint('bath_count >= 0', name='check_bath_count_non_negative'),
        sa.CheckConstraint('total_area >= 0', name='check_total_area_non_negative')
    )
    op.create_index('idx_properties_city', 'properties', ['city'], unique=False)
    op.create_index('idx_properties_location', 'properties', ['location'], unique=False)
    op.create_index('idx_properties_property_type', 'properties', ['property_type'], unique=False)
    op.create_index('idx_properties_property_status', 'properties', ['property_status'], unique=False)
    op.create_index('idx_properties_starting_price', 'properties', ['starting_price'], unique=False)
    op.create_index('idx_properties_developer', 'properties', ['developer'], unique=False)
    op.create_index('idx_properties_bhk_count', 'properties', ['bhk_count'], unique=False)
    op.create_index('idx_properties_construction_status', 'properties', ['construction_status'], unique=False)
    op.create_index('ix_properties_is_on_home_page', 'properties', ['is_on_home_page'], unique=False)
    op.create_index('ix_properties_created_at', 'properties', ['created_at'], unique=False)

    # Create property_amenities table
    op.create_table(
        'property_amenities',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_property_amenities_property_id', 'property_amenities', ['property_id'], unique=False)
    op.create_index('ix_property_amenities_name', 'property_amenities', ['name'], unique=False)

    # Create blogs table
    op.create_table(
        'blogs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('image_url', sa.String(length=500), nullable=False),
        sa.Column('date', sa.String(length=10), nullable=False, comment='DD-MM-YYYY'),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('is_on_home_page', sa.Boolean(), server_default=sa.text('FALSE'), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_blogs_category', 'blogs', ['category'], unique=False)
    op.create_index('ix_blogs_is_on_home_page', 'blogs', ['is_on_home_page'], unique=False)
    op.create_index('ix_blogs_created_at', 'blogs', ['created_at'], unique=False)

    # Create blog_tags table
    op.create_table(
        'blog_tags',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('blog_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.ForeignKeyConstraint(['blog_id'], ['blogs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_blog_tags_blog_id', 'blog_tags', ['blog_id'], unique=False)
    op.create_index('ix_blog_tags_name', 'blog_tags', ['name'], unique=False)

    # Create admins table
    op.create_table(
        'admins',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), server_default='admin', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('TRUE'), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    op.create_index('ix_admins_created_at', 'admins', ['created_at'], unique=False)

    # Create contacts table
    op.create_table(
        'contacts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('full_name', sa.String(length=150), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), server_default=sa.text('FALSE'), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_contacts_email', 'contacts', ['email'], unique=False)
    op.create_index('ix_contacts_created_at', 'contacts', ['created_at'], unique=False)

    # Create callback_requests table
    op.create_table(
        'callback_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=True, comment='Null once the listing has been deleted'),
        sa.Column('property_title', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=False),
        sa.Column('message', sa.String(length=500), server_default='', nullable=False),
        sa.Column('preferred_time', sa.String(length=20), server_default='Anytime', nullable=False),
        sa.Column('status', sa.String(length=20), server_default='Pending', nullable=False),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_callback_requests_property_id', 'callback_requests', ['property_id'], unique=False)
    op.create_index('ix_callback_requests_email', 'callback_requests', ['email'], unique=False)
    op.create_index('ix_callback_requests_status', 'callback_requests', ['status'], unique=False)
    op.create_index('ix_callback_requests_created_at', 'callback_requests', ['created_at'], unique=False)

    # Create newsletter_subscriptions table
    op.create_table(
        'newsletter_subscriptions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('subscribed_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('TRUE'), nullable=False),
        sa.Column('source', sa.String(length=20), server_default='footer', nullable=False),
        sa.Column('ip_address', sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    op.create_index('ix_newsletter_subscriptions_created_at', 'newsletter_subscriptions', ['created_at'], unique=False)

    # Create guide_leads table
    op.create_table(
        'guide_leads',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('guide', sa.String(length=20), nullable=False, comment='blunders or strategies'),
        sa.Column('name', sa.String(length=150), server_default='', nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_guide_leads_guide', 'guide_leads', ['guide'], unique=False)
    op.create_index('ix_guide_leads_email', 'guide_leads', ['email'], unique=False)
    op.create_index('ix_guide_leads_created_at', 'guide_leads', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_table('guide_leads')
    op.drop_table('newsletter_subscriptions')
    op.drop_table('callback_requests')
    op.drop_table('contacts')
    op.drop_table('admins')
    op.drop_table('blog_tags')
    op.drop_table('blogs')
    op.drop_table('property_amenities')
    op.drop_table('properties')
