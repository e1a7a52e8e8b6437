"""create_initial_tables

Revision ID: 0001
Revises:
Create Date: 2025-06-01 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'categories',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('slug', sa.String(length=191), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)

    op.create_table(
        'brands',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('slug', sa.String(length=191), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_brands_name', 'brands', ['name'])
    op.create_index('ix_brands_slug', 'brands', ['slug'], unique=True)

    op.create_table(
        'products',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('slug', sa.String(length=191), nullable=False),
        sa.Column('main_image', sa.String(length=1000), nullable=False, server_default=''),
        sa.Column('images', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('amazon_url', sa.String(length=2000), nullable=True),
        sa.Column('bullet_points', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('show_buy_on_amazon', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('show_add_to_cart', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('category_id', sa.String(length=32), sa.ForeignKey('categories.id'), nullable=False),
        sa.Column('brand_id', sa.String(length=32), sa.ForeignKey('brands.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_products_slug', 'products', ['slug'], unique=True)
    op.create_index('ix_products_category_id', 'products', ['category_id'])
    op.create_index('ix_products_brand_id', 'products', ['brand_id'])
    op.create_index('idx_product_category_active', 'products', ['category_id', 'active'])

    op.create_table(
        'messages',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('subject', sa.String(length=500), nullable=False, server_default=''),
        sa.Column('country', sa.String(length=120), nullable=False, server_default=''),
        sa.Column('order_no', sa.String(length=120), nullable=False, server_default=''),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_messages_created_at', 'messages', ['created_at'])

    op.create_table(
        'site_settings',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('key', sa.String(length=120), nullable=False),
        sa.Column('value', sa.Text(), nullable=False, server_default=''),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_site_settings_key', 'site_settings', ['key'], unique=True)

    op.create_table(
        'images',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('filename', sa.String(length=255), nullable=False),
        sa.Column('content_type', sa.String(length=120), nullable=False),
        sa.Column('size', sa.Integer(), nullable=False),
        sa.Column('data', sa.LargeBinary(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'admin_users',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('username', sa.String(length=150), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_admin_users_username', 'admin_users', ['username'], unique=True)


def downgrade() -> None:
    op.drop_table('admin_users')
    op.drop_table('images')
    op.drop_table('site_settings')
    op.drop_table('messages')
    op.drop_table('products')
    op.drop_table('brands')
    op.drop_table('categories')
