"""vendors, inventory items and purchase orders

Revision ID: 0002_purchasing
Revises: 0001_initial_schema
Create Date: 2024-07-15
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

revision = '0002_purchasing'
down_revision = '0001_initial_schema'
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('vendors',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=150), nullable=False, unique=True),
        sa.Column('contact_name', sa.String(length=150)),
        sa.Column('email', sa.String(length=150)),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('address', sa.String(length=255)),
        sa.Column('city', sa.String(length=100)),
        sa.Column('state', sa.String(length=64)),
        sa.Column('zip_code', sa.String(length=16)),
        sa.Column('country', sa.String(length=2), nullable=False, server_default='US'),
        sa.Column('rating', sa.Float(), nullable=False, server_default='0'),
        sa.Column('delivery_time_avg', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('payment_terms', sa.String(length=64)),
        sa.Column('tax_id', sa.String(length=64)),
        sa.Column('website', sa.String(length=255)),
        sa.Column('notes', sa.Text()),
        sa.Column('categories', sa.JSON(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_vendors_name', 'vendors', ['name'])
    op.create_index('ix_vendors_email', 'vendors', ['email'])
    op.create_index('ix_vendors_is_active', 'vendors', ['is_active'])

    op.create_table('inventory_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('location_id', sa.Integer(), sa.ForeignKey('locations.id'), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('category', sa.String(length=64), nullable=False),
        sa.Column('current_stock', sa.Float(), nullable=False, server_default='0'),
        sa.Column('unit', sa.String(length=16), nullable=False),
        sa.Column('reorder_point', sa.Float(), nullable=False, server_default='0'),
        sa.Column('reorder_quantity', sa.Float(), nullable=False, server_default='0'),
        sa.Column('cost_per_unit', sa.Float(), nullable=False, server_default='0'),
        sa.Column('expiration_date', sa.Date(), nullable=True),
        sa.Column('barcode', sa.String(length=64)),
        sa.Column('sku', sa.String(length=64)),
        sa.Column('supplier_id', sa.Integer(), sa.ForeignKey('vendors.id'), nullable=True),
        sa.Column('notes', sa.Text()),
        sa.Column('updated_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_inventory_items_location_id', 'inventory_items', ['location_id'])
    op.create_index('ix_inventory_items_name', 'inventory_items', ['name'])
    op.create_index('ix_inventory_items_category', 'inventory_items', ['category'])
    op.create_index('ix_inventory_items_barcode', 'inventory_items', ['barcode'])
    op.create_index('ix_inventory_items_sku', 'inventory_items', ['sku'])
    op.create_index('ix_inventory_items_supplier_id', 'inventory_items', ['supplier_id'])

    op.create_table('purchase_orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('po_number', sa.String(length=16), nullable=False, unique=True),
        sa.Column('vendor_id', sa.Integer(), sa.ForeignKey('vendors.id'), nullable=False),
        sa.Column('location_id', sa.Integer(), sa.ForeignKey('locations.id'), nullable=False),
        sa.Column('status', sa.String(length=32), nullable=False, server_default='draft'),
        sa.Column('order_date', sa.Date(), nullable=False),
        sa.Column('expected_delivery_date', sa.Date(), nullable=True),
        sa.Column('actual_delivery_date', sa.Date(), nullable=True),
        sa.Column('subtotal', sa.Float(), nullable=False, server_default='0'),
        sa.Column('tax', sa.Float(), nullable=False, server_default='0'),
        sa.Column('shipping', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total', sa.Float(), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text()),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('approved_by', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_purchase_orders_po_number', 'purchase_orders', ['po_number'])
    op.create_index('ix_purchase_orders_vendor_id', 'purchase_orders', ['vendor_id'])
    op.create_index('ix_purchase_orders_location_id', 'purchase_orders', ['location_id'])
    op.create_index('ix_purchase_orders_status', 'purchase_orders', ['status'])

    op.create_table('purchase_order_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('po_id', sa.Integer(), sa.ForeignKey('purchase_orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('inventory_item_id', sa.Integer(), sa.ForeignKey('inventory_items.id'), nullable=True),
        sa.Column('item_name', sa.String(length=150), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('unit', sa.String(length=16), nullable=False),
        sa.Column('unit_price', sa.Float(), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('received_quantity', sa.Float(), nullable=False, server_default='0'),
        sa.Column('notes', sa.Text()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_purchase_order_items_po_id', 'purchase_order_items', ['po_id'])


def downgrade():
    for table in ('purchase_order_items', 'purchase_orders', 'inventory_items', 'vendors'):
        op.drop_table(table)
