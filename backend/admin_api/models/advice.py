"""
Advice Models: AdviceArticleCategory, AdviceArticle, AdviceFaq.

Every text field is translated ({"fr": ..., "en": ...}).
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import JSON, Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import PublicationState
from .base import AuditMixin, Base, IdType


class AdviceArticleCategory(AuditMixin, Base):
    __tablename__ = "advice_article_categories"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    title: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    short_title: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    articles: Mapped[list["AdviceArticle"]] = relationship(back_populates="category")


class AdviceArticle(AuditMixin, Base):
    """Markdown article shown in the app's advice tab."""

    __tablename__ = "advice_articles"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    title: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    content: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    publication_state: Mapped[str] = mapped_column(
        String(16), default=PublicationState.DRAFT, nullable=False, index=True
    )
    category_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("advice_article_categories.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    cover_url: Mapped[Optional[str]] = mapped_column(Text)

    category: Mapped["AdviceArticleCategory"] = relationship(back_populates="articles")


class AdviceFaq(AuditMixin, Base):
    __tablename__ = "advice_faq"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    question: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    answer: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
