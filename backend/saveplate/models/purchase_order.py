from __future__ import annotations
from datetime import date
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates
from sqlalchemy import Integer, String, Float, Text, Date, ForeignKey, DateTime, func
from typing import Optional, List

from .user import Base
from saveplate.utils.validation import require_choice, require_non_negative, require_text


class PurchaseOrder(Base):
    __tablename__ = 'purchase_orders'
    # Status constants
    STATUS_DRAFT = 'draft'
    STATUS_PENDING_MANAGER = 'pending_manager'
    STATUS_PENDING_ADMIN = 'pending_admin'
    STATUS_APPROVED = 'approved'
    STATUS_ORDERED = 'ordered'
    STATUS_RECEIVED = 'received'
    STATUS_CANCELLED = 'cancelled'
    ALL_STATUSES = (
        STATUS_DRAFT, STATUS_PENDING_MANAGER, STATUS_PENDING_ADMIN, STATUS_APPROVED,
        STATUS_ORDERED, STATUS_RECEIVED, STATUS_CANCELLED,
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    po_number: Mapped[str] = mapped_column(String(16), nullable=False, unique=True, index=True)
    vendor_id: Mapped[int] = mapped_column(ForeignKey('vendors.id'), nullable=False, index=True)
    location_id: Mapped[int] = mapped_column(ForeignKey('locations.id'), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=STATUS_DRAFT, index=True)
    order_date: Mapped[date] = mapped_column(Date, nullable=False)
    expected_delivery_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    actual_delivery_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    subtotal: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    tax: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    shipping: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    total: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_by: Mapped[int] = mapped_column(ForeignKey('users.id'), nullable=False)
    approved_by: Mapped[Optional[int]] = mapped_column(ForeignKey('users.id'), nullable=True)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    items: Mapped[List['PurchaseOrderItem']] = relationship(
        'PurchaseOrderItem', back_populates='purchase_order', cascade='all, delete-orphan',
        order_by='PurchaseOrderItem.id',
    )

    @validates('status')
    def _check_status(self, key, value):
        return require_choice(value, self.ALL_STATUSES, 'status')


class PurchaseOrderItem(Base):
    __tablename__ = 'purchase_order_items'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    po_id: Mapped[int] = mapped_column(ForeignKey('purchase_orders.id', ondelete='CASCADE'), nullable=False, index=True)
    inventory_item_id: Mapped[Optional[int]] = mapped_column(ForeignKey('inventory_items.id'), nullable=True)
    item_name: Mapped[str] = mapped_column(String(150), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(16), nullable=False)
    unit_price: Mapped[float] = mapped_column(Float, nullable=False)
    total_price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    received_quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())

    purchase_order: Mapped[PurchaseOrder] = relationship('PurchaseOrder', back_populates='items')

    @validates('item_name', 'unit')
    def _check_text(self, key, value):
        return require_text(value, key)

    @validates('quantity', 'unit_price', 'received_quantity')
    def _check_amounts(self, key, value):
        return require_non_negative(value, key)

__all__ = ["PurchaseOrder", "PurchaseOrderItem"]
