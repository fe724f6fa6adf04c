from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Boolean, ForeignKey, DateTime, func
from typing import Optional

from .user import Base


class CookieConsentRecord(Base):
    """Append-only audit trail of consent choices (one row per save)."""
    __tablename__ = 'cookie_consents'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey('users.id'), nullable=True, index=True)
    session_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    necessary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    analytics: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    marketing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    third_party: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64))
    user_agent: Mapped[Optional[str]] = mapped_column(String(512))
    consent_date: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())

__all__ = ["CookieConsentRecord"]
