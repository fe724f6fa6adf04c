from __future__ import annotations
from datetime import date
from sqlalchemy.orm import Mapped, mapped_column, validates
from sqlalchemy import Integer, String, Float, Text, Date, ForeignKey, DateTime, func
from typing import Optional

from .user import Base
from saveplate.utils.validation import require_non_negative, require_text


class InventoryItem(Base):
    __tablename__ = 'inventory_items'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    location_id: Mapped[int] = mapped_column(ForeignKey('locations.id'), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    current_stock: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    unit: Mapped[str] = mapped_column(String(16), nullable=False)
    reorder_point: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    reorder_quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    cost_per_unit: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    expiration_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    barcode: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    sku: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    supplier_id: Mapped[Optional[int]] = mapped_column(ForeignKey('vendors.id'), nullable=True, index=True)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    updated_by: Mapped[Optional[int]] = mapped_column(ForeignKey('users.id'), nullable=True)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @validates('name', 'category', 'unit')
    def _check_text(self, key, value):
        return require_text(value, key)

    @validates('current_stock', 'reorder_point', 'reorder_quantity', 'cost_per_unit')
    def _check_amounts(self, key, value):
        return require_non_negative(value, key)

    @property
    def is_low_stock(self) -> bool:
        return (self.current_stock or 0) < (self.reorder_point or 0)

__all__ = ["InventoryItem"]
