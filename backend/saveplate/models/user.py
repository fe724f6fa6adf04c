from __future__ import annotations
from sqlalchemy.orm import declarative_base, Mapped, mapped_column, validates
from sqlalchemy import String, Integer, Boolean, ForeignKey, DateTime, text
from typing import Optional

from saveplate.constants.roles import ROLES, DEFAULT_ROLE
from saveplate.utils.validation import require_choice

Base = declarative_base()


class User(Base):
    __tablename__ = 'users'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(128), unique=True, index=True, nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String(128))
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=DEFAULT_ROLE)
    location_id: Mapped[Optional[int]] = mapped_column(ForeignKey('locations.id'), nullable=True, index=True)
    restaurant_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'))
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=text('CURRENT_TIMESTAMP'), server_onupdate=text('CURRENT_TIMESTAMP'))

    @validates('role')
    def _check_role(self, key, value):
        return require_choice(value, ROLES, 'role')

    @validates('email')
    def _normalize_email(self, key, value):
        return value.strip().lower() if value else value

    def set_password(self, raw: str):
        from werkzeug.security import generate_password_hash
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        from werkzeug.security import check_password_hash
        return check_password_hash(self.password_hash, raw)

__all__ = ["Base", "User"]
