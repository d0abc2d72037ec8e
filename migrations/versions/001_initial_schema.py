"""Initial schema for users, restaurants, items, menus and displays

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Create restaurants table
    op.create_table(
        'restaurants',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('owner_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_restaurants_owner_id', 'restaurants', ['owner_id'])

    # Create items table
    op.create_table(
        'items',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('restaurant_id', sa.Uuid(), sa.ForeignKey('restaurants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
    )
    op.create_index('ix_items_restaurant_id', 'items', ['restaurant_id'])

    # Create menus table
    op.create_table(
        'menus',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('restaurant_id', sa.Uuid(), sa.ForeignKey('restaurants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
    )
    op.create_index('ix_menus_restaurant_id', 'menus', ['restaurant_id'])

    # Ordered menu contents
    op.create_table(
        'menu_entries',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('menu_id', sa.Uuid(), sa.ForeignKey('menus.id', ondelete='CASCADE'), nullable=False),
        sa.Column('item_id', sa.Uuid(), sa.ForeignKey('items.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_menu_entries_menu_id', 'menu_entries', ['menu_id'])
    op.create_index('ix_menu_entries_item_id', 'menu_entries', ['item_id'])

    # Create displays table
    op.create_table(
        'displays',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('restaurant_id', sa.Uuid(), sa.ForeignKey('restaurants.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('pairing_code', sa.String(16), nullable=False),
        sa.Column('current_menu_id', sa.Uuid(), sa.ForeignKey('menus.id', ondelete='SET NULL'), nullable=True),
        sa.Column('media_url', sa.String(500), nullable=True),
        sa.Column('media_type', sa.String(10), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.CheckConstraint(
            "media_type IS NULL OR media_type IN ('image', 'video')",
            name='ck_displays_media_type',
        ),
    )
    op.create_index('ix_displays_restaurant_id', 'displays', ['restaurant_id'])
    op.create_index('ix_displays_pairing_code', 'displays', ['pairing_code'], unique=True)


def downgrade() -> None:
    op.drop_table('displays')
    op.drop_table('menu_entries')
    op.drop_table('menus')
    op.drop_table('items')
    op.drop_table('restaurants')
    op.drop_table('users')
