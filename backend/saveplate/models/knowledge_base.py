from __future__ import annotations
from sqlalchemy.orm import Mapped, mapped_column, validates
from sqlalchemy import Integer, String, Boolean, Text, JSON, ForeignKey, DateTime, UniqueConstraint, func
from typing import Optional, List

from .user import Base
from saveplate.constants.knowledge_base import KB_CATEGORY_IDS
from saveplate.utils.validation import require_choice


class KBArticle(Base):
    __tablename__ = 'kb_articles'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True, index=True)
    summary: Mapped[str] = mapped_column(String(500), nullable=False, default='')
    content: Mapped[str] = mapped_column(Text, nullable=False, default='')
    video_url: Mapped[Optional[str]] = mapped_column(String(512))
    helpful_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    not_helpful_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    search_keywords: Mapped[List[str]] = mapped_column(JSON, default=list)
    related_articles: Mapped[List[str]] = mapped_column(JSON, default=list)
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @validates('category')
    def _check_category(self, key, value):
        return require_choice(value, KB_CATEGORY_IDS, 'category')


class KBFeedback(Base):
    __tablename__ = 'kb_feedback'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    article_id: Mapped[int] = mapped_column(ForeignKey('kb_articles.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    helpful: Mapped[bool] = mapped_column(Boolean, nullable=False)
    feedback_text: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[str] = mapped_column(DateTime(timezone=True), server_default=func.now())
    __table_args__ = (UniqueConstraint('article_id', 'user_id', name='uq_kb_feedback_user'),)

__all__ = ["KBArticle", "KBFeedback"]
