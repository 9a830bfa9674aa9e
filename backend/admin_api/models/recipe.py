"""
Recipe Models: Recipe, IngredientRecipePivot.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType

if TYPE_CHECKING:
    from .ingredient import Ingredient
    from .recipe_category import RecipeCategoryPivot


class Recipe(AuditMixin, Base):
    """
    Batch-cooking recipe.

    The four masks are NULL when never set and 0 when explicitly emptied;
    both read as "no items". They are recomputed wholesale on every edit.
    """

    __tablename__ = "recipes"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    # French names of the structured ingredients, kept for search
    ingredients_name: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    img_path: Mapped[Optional[str]] = mapped_column(Text)

    allergy_mask: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    diet_mask: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    kitchen_equipments_mask: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    seasonality_mask: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    instructions: Mapped[Optional[str]] = mapped_column(Text)
    # 1 starter, 2 main, 3 dessert
    dish_type: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    # 1 per person, 2 per unit
    quantification_type: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_folklore: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_visible: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    base_servings: Mapped[Optional[int]] = mapped_column(Integer)

    # Relationships
    ingredient_pivots: Mapped[list["IngredientRecipePivot"]] = relationship(
        back_populates="recipe", cascade="all, delete-orphan"
    )
    category_pivots: Mapped[list["RecipeCategoryPivot"]] = relationship(
        back_populates="recipe", cascade="all, delete-orphan"
    )


class IngredientRecipePivot(AuditMixin, Base):
    """Structured ingredient line of a recipe."""

    __tablename__ = "ingredient_recipe_pivots"
    __table_args__ = (
        UniqueConstraint("recipe_id", "ingredient_id", name="uq_recipe_ingredient"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    recipe_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ingredient_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("ingredients.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    quantity: Mapped[Optional[float]] = mapped_column(Float)
    unit: Mapped[Optional[str]] = mapped_column(Text)
    is_optional: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    recipe: Mapped["Recipe"] = relationship(back_populates="ingredient_pivots")
    ingredient: Mapped["Ingredient"] = relationship(back_populates="recipe_pivots")
