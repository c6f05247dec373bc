"""Initial schema for suppliers, products, and price_list_entries

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-01-06

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
    # Create suppliers table
    op.create_table(
        'suppliers',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('preferred', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('lead_time_days', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), onupdate=sa.func.now(), nullable=True),
    )

    # Create products table
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('sku', sa.String(50), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('unit_of_measure', sa.String(10), nullable=False, server_default='EA'),
        sa.Column('hazard_class', sa.String(50), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), onupdate=sa.func.now(), nullable=True),
    )
    op.create_index('ix_products_sku', 'products', ['sku'], unique=True)

    # Create price_list_entries table
    op.create_table(
        'price_list_entries',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('supplier_id', sa.Integer(), sa.ForeignKey('suppliers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sku', sa.String(50), nullable=False),
        sa.Column('valid_from', sa.Date(), nullable=False),
        sa.Column('valid_to', sa.Date(), nullable=True),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('price_per_uom', sa.Numeric(18, 4), nullable=False),
        sa.Column('min_qty', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
    )
    op.create_index('ix_price_list_entries_sku', 'price_list_entries', ['sku'])
    op.create_index('ix_price_list_entries_supplier_sku', 'price_list_entries', ['supplier_id', 'sku'])


def downgrade() -> None:
    op.drop_table('price_list_entries')
    op.drop_table('products')
    op.drop_table('suppliers')
