from __future__ import annotations
from datetime import datetime, timezone
from sqlalchemy.orm import Mapped, mapped_column, validates
from sqlalchemy import Integer, String, Float, Text, ForeignKey, DateTime, event, func
from typing import Optional

from .user import Base
from saveplate.constants.waste import WASTE_CATEGORIES, ROOT_CAUSES, UNITS
from saveplate.utils.validation import ValidationError, require_choice, require_non_negative, require_text


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WasteLog(Base):
    """A single recorded food-waste event.

    Enumerated fields and quantities are checked on assignment, so an invalid
    WasteLog cannot be constructed. Rows are write-once: see _reject_updates.
    """
    __tablename__ = 'waste_logs'
    CATEGORIES = WASTE_CATEGORIES
    ROOT_CAUSES = ROOT_CAUSES
    UNITS = UNITS

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    location_id: Mapped[int] = mapped_column(ForeignKey('locations.id'), nullable=False, index=True)
    logged_by: Mapped[int] = mapped_column(ForeignKey('users.id'), nullable=False, index=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    waste_category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    food_item: Mapped[str] = mapped_column(String(150), nullable=False, index=True)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(8), nullable=False)
    estimated_cost: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    photo_url: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    root_cause: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    @validates('waste_category')
    def _check_category(self, key, value):
        return require_choice(value, WASTE_CATEGORIES, 'waste_category')

    @validates('unit')
    def _check_unit(self, key, value):
        return require_choice(value, UNITS, 'unit')

    @validates('root_cause')
    def _check_root_cause(self, key, value):
        return require_choice(value, ROOT_CAUSES, 'root_cause', optional=True)

    @validates('quantity')
    def _check_quantity(self, key, value):
        return require_non_negative(value, 'quantity')

    @validates('estimated_cost')
    def _check_cost(self, key, value):
        return require_non_negative(value, 'estimated_cost', optional=True)

    @validates('food_item')
    def _check_food_item(self, key, value):
        return require_text(value, 'food_item')


@event.listens_for(WasteLog, 'before_update')
def _reject_updates(mapper, connection, target):
    raise ValidationError('waste logs are immutable once recorded')


__all__ = ["WasteLog"]
