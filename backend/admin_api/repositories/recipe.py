"""
Recipe Repository - Data access for recipes and their ingredient lines.

Mask filters run in SQL through mask_contains_all / mask_contains_none.
A required mask of None means the request named an unknown reference
item and nothing can match.
"""

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import Select, delete, false, select
from sqlalchemy.orm import Session, selectinload

from admin_api.models import Ingredient, IngredientRecipePivot, Recipe
from shared.utils.validators import escape_like_pattern
from .base import BaseRepository, RepositoryFilters, mask_contains_all, mask_contains_none


@dataclass
class RecipeFilters(RepositoryFilters):
    """Filters specific to recipes."""

    no_image: bool = False
    dish_type: int | None = None
    quantification_type: int | None = None
    is_visible: bool | None = None
    is_folklore: bool | None = None
    # Bits every recipe must carry; None when a requested id is unknown
    diet_mask: int | None = 0
    kitchen_equipments_mask: int | None = 0
    # Bits no recipe may carry
    excluded_allergy_mask: int = 0


class RecipeRepository(BaseRepository[Recipe]):
    """Repository for Recipe entities, ordered by title."""

    @property
    def model(self) -> type[Recipe]:
        return Recipe

    def _base_query(self) -> Select:
        return select(Recipe).order_by(Recipe.title, Recipe.id)

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, RecipeFilters):
            filters = RecipeFilters(**filters.__dict__)

        if filters.search:
            pattern = f"%{escape_like_pattern(filters.search)}%"
            query = query.where(Recipe.title.ilike(pattern, escape="\\"))

        if filters.no_image:
            query = query.where(Recipe.img_path.is_(None))

        if filters.dish_type is not None:
            query = query.where(Recipe.dish_type == filters.dish_type)

        if filters.quantification_type is not None:
            query = query.where(Recipe.quantification_type == filters.quantification_type)

        if filters.is_visible is not None:
            query = query.where(Recipe.is_visible.is_(filters.is_visible))

        if filters.is_folklore is not None:
            query = query.where(Recipe.is_folklore.is_(filters.is_folklore))

        if filters.diet_mask is None or filters.kitchen_equipments_mask is None:
            return query.where(false())

        query = query.where(
            mask_contains_all(Recipe.diet_mask, filters.diet_mask),
            mask_contains_all(Recipe.kitchen_equipments_mask, filters.kitchen_equipments_mask),
            mask_contains_none(Recipe.allergy_mask, filters.excluded_allergy_mask),
        )

        return query

    def find_ordered_ids(self, filters: RecipeFilters) -> list[int]:
        query = self._apply_filters(select(Recipe.id).order_by(Recipe.title, Recipe.id), filters)
        return list(self._db.execute(query).scalars())

    # =========================================================================
    # Ingredient lines
    # =========================================================================

    def find_ingredient_lines(self, recipe_id: int) -> Sequence[IngredientRecipePivot]:
        query = (
            select(IngredientRecipePivot)
            .where(IngredientRecipePivot.recipe_id == recipe_id)
            .options(selectinload(IngredientRecipePivot.ingredient))
            .order_by(IngredientRecipePivot.id)
        )
        return self._db.execute(query).scalars().all()

    def replace_ingredient_lines(self, recipe_id: int, lines: list[dict]) -> None:
        """Delete every line of the recipe and insert ``lines`` in order."""
        self._db.execute(
            delete(IngredientRecipePivot)
            .where(IngredientRecipePivot.recipe_id == recipe_id)
            .execution_options(synchronize_session="fetch")
        )
        for line in lines:
            self._db.add(IngredientRecipePivot(recipe_id=recipe_id, **line))
        self._db.flush()

    def find_ingredients(self, ingredient_ids: list[int]) -> dict[int, Ingredient]:
        if not ingredient_ids:
            return {}
        rows = self._db.execute(select(Ingredient).where(Ingredient.id.in_(ingredient_ids))).scalars()
        return {ingredient.id: ingredient for ingredient in rows}


def get_recipe_repository(db: Session) -> RecipeRepository:
    return RecipeRepository(db)
