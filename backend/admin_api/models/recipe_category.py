"""
Recipe Category Models: RecipeCategory, RecipeCategoryPivot.

Categories appear in the app as chips, as home sections, or both.
chip_order and section_order are 1..n within their zone and 0 outside it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType

if TYPE_CHECKING:
    from .recipe import Recipe


class RecipeCategory(AuditMixin, Base):
    __tablename__ = "recipe_categories"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    emoji: Mapped[Optional[str]] = mapped_column(Text)
    color: Mapped[Optional[str]] = mapped_column(Text)
    is_pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    display_as_chip: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    display_as_section: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    chip_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    section_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # Dynamic categories have their recipes computed by the app
    is_dynamic: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    dynamic_type: Mapped[Optional[str]] = mapped_column(Text)

    recipe_pivots: Mapped[list["RecipeCategoryPivot"]] = relationship(
        back_populates="category", cascade="all, delete-orphan"
    )


class RecipeCategoryPivot(AuditMixin, Base):
    """Recipe membership in a category, ordered by position (1..n)."""

    __tablename__ = "recipe_category_pivots"
    __table_args__ = (
        UniqueConstraint("recipe_id", "category_id", name="uq_recipe_category"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    recipe_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("recipe_categories.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    recipe: Mapped["Recipe"] = relationship(back_populates="category_pivots")
    category: Mapped["RecipeCategory"] = relationship(back_populates="recipe_pivots")
