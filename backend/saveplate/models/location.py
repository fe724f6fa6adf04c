from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Boolean, Float, JSON, DateTime, func
from typing import Optional, Dict, Any

from .user import Base


class Location(Base):
    __tablename__ = 'locations'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    restaurant_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    location_name: Mapped[str] = mapped_column(String(150), nullable=False, index=True)
    address: Mapped[Optional[str]] = mapped_column(String(255))
    city: Mapped[Optional[str]] = mapped_column(String(100))
    state: Mapped[Optional[str]] = mapped_column(String(64))
    zip_code: Mapped[Optional[str]] = mapped_column(String(16))
    country: Mapped[str] = mapped_column(String(2), nullable=False, default='US')
    phone: Mapped[Optional[str]] = mapped_column(String(32))
    email: Mapped[Optional[str]] = mapped_column(String(150))
    manager_contact: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    monthly_target_waste_percentage: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

__all__ = ["Location"]
