"""create_inventory_tables

Revision ID: 3b1f9c2d7a10
Revises:
Create Date: 2026-10-16 09:12:40.118203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b1f9c2d7a10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema - Create users, catalogue, purchase order and ledger tables."""

    conn = op.get_bind()
    inspector = sa.inspect(conn)

    def table_exists(name):
        return inspector.has_table(name)

    if not table_exists('users'):
        op.create_table(
            'users',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('username', sa.String(length=50), nullable=False),
            sa.Column('email', sa.String(length=100), nullable=False),
            sa.Column('password_hash', sa.String(length=255), nullable=False),
            sa.Column('first_name', sa.String(length=100), nullable=True),
            sa.Column('last_name', sa.String(length=100), nullable=True),
            sa.Column('role', sa.String(length=20), nullable=False, server_default='STAFF'),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('status_reason', sa.String(length=50), nullable=True),
            sa.Column('last_login_date', sa.DateTime(), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('username'),
            sa.UniqueConstraint('email')
        )

    if not table_exists('categories'):
        op.create_table(
            'categories',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('name', sa.String(length=100), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('name')
        )

    if not table_exists('suppliers'):
        op.create_table(
            'suppliers',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('contact_person', sa.String(length=255), nullable=True),
            sa.Column('email', sa.String(length=255), nullable=True),
            sa.Column('phone', sa.String(length=50), nullable=True),
            sa.Column('address', sa.Text(), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('name')
        )

    if not table_exists('products'):
        op.create_table(
            'products',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('sku', sa.String(length=100), nullable=True),
            sa.Column('barcode', sa.String(length=100), nullable=True),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('category_id', sa.Integer(), nullable=True),
            sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('reorder_level', sa.Integer(), nullable=False, server_default='5'),
            sa.Column('unit_price', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
            sa.Column('cost_price', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
            sa.Column('image_url', sa.String(length=500), nullable=True),
            sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['category_id'], ['categories.id']),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('sku')
        )
        op.create_index('ix_products_barcode', 'products', ['barcode'])

    if not table_exists('purchase_orders'):
        op.create_table(
            'purchase_orders',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('order_number', sa.String(length=50), nullable=False),
            sa.Column('supplier_id', sa.Integer(), nullable=False),
            sa.Column('status', sa.String(length=20), nullable=False, server_default='PENDING'),
            sa.Column('order_date', sa.DateTime(), nullable=False),
            sa.Column('expected_delivery_date', sa.DateTime(), nullable=True),
            sa.Column('total_amount', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('created_by_id', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['supplier_id'], ['suppliers.id']),
            sa.ForeignKeyConstraint(['created_by_id'], ['users.id']),
            sa.PrimaryKeyConstraint('id')
        )
        # Unique: concurrent creates that pick the same number collide here and retry
        op.create_index('ix_purchase_orders_order_number', 'purchase_orders', ['order_number'], unique=True)
        op.create_index('ix_purchase_orders_supplier_id', 'purchase_orders', ['supplier_id'])
        op.create_index('ix_purchase_orders_status', 'purchase_orders', ['status'])
        op.create_index('ix_purchase_orders_order_date', 'purchase_orders', ['order_date'])
        op.create_index('ix_purchase_orders_created_by_id', 'purchase_orders', ['created_by_id'])

    if not table_exists('purchase_order_items'):
        op.create_table(
            'purchase_order_items',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('order_id', sa.Integer(), nullable=False),
            sa.Column('product_id', sa.Integer(), nullable=False),
            sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('unit_price', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
            sa.Column('received_quantity', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.ForeignKeyConstraint(['order_id'], ['purchase_orders.id']),
            sa.ForeignKeyConstraint(['product_id'], ['products.id']),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_purchase_order_items_order_id', 'purchase_order_items', ['order_id'])
        op.create_index('ix_purchase_order_items_product_id', 'purchase_order_items', ['product_id'])

    if not table_exists('inventory_transactions'):
        op.create_table(
            'inventory_transactions',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('product_id', sa.Integer(), nullable=False),
            sa.Column('user_id', sa.Integer(), nullable=False),
            sa.Column('transaction_type', sa.String(length=20), nullable=False),
            sa.Column('quantity', sa.Integer(), nullable=False),
            sa.Column('reference_number', sa.String(length=100), nullable=True),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.Column('transaction_date', sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(['product_id'], ['products.id']),
            sa.ForeignKeyConstraint(['user_id'], ['users.id']),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index('ix_inventory_transactions_product_id', 'inventory_transactions', ['product_id'])
        op.create_index('ix_inventory_transactions_transaction_type', 'inventory_transactions', ['transaction_type'])
        op.create_index('ix_inventory_transactions_reference_number', 'inventory_transactions', ['reference_number'])
        op.create_index('ix_inventory_transactions_transaction_date', 'inventory_transactions', ['transaction_date'])


def downgrade() -> None:
    """Downgrade schema - Drop all inventory tables."""
    op.drop_table('inventory_transactions')
    op.drop_table('purchase_order_items')
    op.drop_table('purchase_orders')
    op.drop_table('products')
    op.drop_table('suppliers')
    op.drop_table('categories')
    op.drop_table('users')
