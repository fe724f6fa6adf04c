from __future__ import annotations
from datetime import date
from sqlalchemy.orm import Mapped, mapped_column, validates
from sqlalchemy import Integer, String, Float, Date, JSON, Text, ForeignKey, DateTime, func
from typing import Optional, Dict, Any, List

from .user import Base
from saveplate.utils.validation import require_choice


class ESGReport(Base):
    """Externally computed ESG summary; read-only through the API."""
    __tablename__ = 'esg_reports'
    TYPE_MONTHLY = 'monthly'
    TYPE_QUARTERLY = 'quarterly'
    TYPE_ANNUAL = 'annual'
    ALL_TYPES = (TYPE_MONTHLY, TYPE_QUARTERLY, TYPE_ANNUAL)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    restaurant_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    location_id: Mapped[Optional[int]] = mapped_column(ForeignKey('locations.id'), nullable=True, index=True)
    report_type: Mapped[str] = mapped_column(String(16), nullable=False, default=TYPE_MONTHLY)
    report_period_start: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    report_period_end: Mapped[date] = mapped_column(Date, nullable=False)
    food_waste_kg: Mapped[Optional[float]] = mapped_column(Float)
    food_waste_cost: Mapped[Optional[float]] = mapped_column(Float)
    total_waste_reduction_percentage: Mapped[Optional[float]] = mapped_column(Float)
    carbon_impact_kg: Mapped[Optional[float]] = mapped_column(Float)
    report_data: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    generated_by: Mapped[Optional[int]] = mapped_column(ForeignKey('users.id'), nullable=True)
    generated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())

    @validates('report_type')
    def _check_type(self, key, value):
        return require_choice(value, self.ALL_TYPES, 'report_type')


class Benchmark(Base):
    __tablename__ = 'benchmarks'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    location_id: Mapped[int] = mapped_column(ForeignKey('locations.id'), nullable=False, index=True)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    total_waste_lbs: Mapped[Optional[float]] = mapped_column(Float)
    total_waste_cost: Mapped[Optional[float]] = mapped_column(Float)
    waste_percentage_of_sales: Mapped[Optional[float]] = mapped_column(Float)
    top_wasted_items: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())

__all__ = ["ESGReport", "Benchmark"]
