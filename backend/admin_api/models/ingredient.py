"""
Ingredient Models: IngredientCategory, Ingredient, IngredientRelation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType

if TYPE_CHECKING:
    from .recipe import IngredientRecipePivot


class IngredientCategory(AuditMixin, Base):
    """Grouping shown in the ingredient picker (vegetables, dairy, ...)."""

    __tablename__ = "ingredient_categories"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    title: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    emoji: Mapped[Optional[str]] = mapped_column(Text)

    ingredients: Mapped[list["Ingredient"]] = relationship(back_populates="category")


class Ingredient(AuditMixin, Base):
    """
    Ingredient catalog entry.
    name and suffixes are translated ({"fr": ..., "en": ...}).
    search_namespace_mask holds one bit per IngredientSearchNamespace.
    """

    __tablename__ = "ingredients"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    suffix_singular: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    suffix_plural: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    category_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("ingredient_categories.id", ondelete="SET NULL"), index=True
    )
    img_path: Mapped[Optional[str]] = mapped_column(Text)
    is_basic: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    search_namespace_mask: Mapped[int] = mapped_column(
        Integer, default=0, server_default=text("0"), nullable=False
    )

    # Relationships
    category: Mapped[Optional["IngredientCategory"]] = relationship(back_populates="ingredients")
    recipe_pivots: Mapped[list["IngredientRecipePivot"]] = relationship(back_populates="ingredient")


class IngredientRelation(AuditMixin, Base):
    """
    Directed relation between two ingredients.
    family: ingredient is the parent of related_ingredient.
    substitute: related_ingredient can replace ingredient.
    """

    __tablename__ = "ingredient_relations"
    __table_args__ = (
        UniqueConstraint(
            "ingredient_id", "related_ingredient_id", "relation_type",
            name="uq_ingredient_relation",
        ),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    ingredient_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    related_ingredient_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    relation_type: Mapped[str] = mapped_column(Text, nullable=False, index=True)

    ingredient: Mapped["Ingredient"] = relationship(foreign_keys=[ingredient_id])
    related_ingredient: Mapped["Ingredient"] = relationship(foreign_keys=[related_ingredient_id])
