from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column, validates
from sqlalchemy import Integer, String, Boolean, Float, Text, JSON, ForeignKey, DateTime, func
from typing import Optional, List

from .user import Base
from saveplate.utils.validation import require_non_negative, require_text


class Vendor(Base):
    """Supplier a location buys from. Vendors are shared across locations."""
    __tablename__ = 'vendors'

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False, unique=True, index=True)
    contact_name: Mapped[Optional[str]] = mapped_column(String(150))
    email: Mapped[Optional[str]] = mapped_column(String(150), index=True)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(255))
    city: Mapped[Optional[str]] = mapped_column(String(100))
    state: Mapped[Optional[str]] = mapped_column(String(64))
    zip_code: Mapped[Optional[str]] = mapped_column(String(16))
    country: Mapped[str] = mapped_column(String(2), nullable=False, default='US')
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    # average days from order to delivery
    delivery_time_avg: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    payment_terms: Mapped[Optional[str]] = mapped_column(String(64))
    tax_id: Mapped[Optional[str]] = mapped_column(String(64))
    website: Mapped[Optional[str]] = mapped_column(String(255))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    categories: Mapped[List[str]] = mapped_column(JSON, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_by: Mapped[Optional[int]] = mapped_column(ForeignKey('users.id'), nullable=True)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @validates('name')
    def _check_name(self, key, value):
        return require_text(value, 'name')

    @validates('phone')
    def _check_phone(self, key, value):
        return require_text(value, 'phone')

    @validates('rating')
    def _check_rating(self, key, value):
        return require_non_negative(value, 'rating')

    @validates('delivery_time_avg')
    def _check_delivery_time(self, key, value):
        return require_non_negative(value, 'delivery_time_avg')

__all__ = ["Vendor"]
