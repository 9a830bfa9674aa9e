"""
Ingredient Repository - Data access for ingredients and their categories.

Namespace membership is changed with single UPDATE statements that
combine the stored mask with a bit in SQL, so two toggles on the same
ingredient never overwrite each other.
"""

from dataclasses import dataclass, field
from typing import Sequence

from sqlalchemy import Select, select, update
from sqlalchemy.orm import Session

from admin_api.models import Ingredient, IngredientCategory
from shared.utils.validators import escape_like_pattern
from .base import BaseRepository, RepositoryFilters, mask_contains_all


def french_name(column):
    """Expression for the French entry of a translated JSON column."""
    return column["fr"].as_string()


@dataclass
class IngredientFilters(RepositoryFilters):
    """Filters specific to ingredients."""

    no_image: bool = False
    category_ids: list[int] = field(default_factory=list)
    namespace_mask: int = 0


class IngredientRepository(BaseRepository[Ingredient]):
    """Repository for Ingredient entities, ordered by French name."""

    @property
    def model(self) -> type[Ingredient]:
        return Ingredient

    def _base_query(self) -> Select:
        return select(Ingredient).order_by(french_name(Ingredient.name), Ingredient.id)

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, IngredientFilters):
            filters = IngredientFilters(**filters.__dict__)

        if filters.search:
            pattern = f"%{escape_like_pattern(filters.search)}%"
            query = query.where(french_name(Ingredient.name).ilike(pattern, escape="\\"))

        if filters.no_image:
            query = query.where(Ingredient.img_path.is_(None))

        if filters.category_ids:
            query = query.where(Ingredient.category_id.in_(filters.category_ids))

        if filters.namespace_mask:
            query = query.where(
                mask_contains_all(Ingredient.search_namespace_mask, filters.namespace_mask)
            )

        return query

    def find_ordered_ids(self, filters: IngredientFilters) -> list[int]:
        query = self._apply_filters(
            select(Ingredient.id).order_by(french_name(Ingredient.name), Ingredient.id),
            filters,
        )
        return list(self._db.execute(query).scalars())

    def find_with_namespace_masks(self) -> Sequence[tuple[int, dict, int]]:
        """(id, name, search_namespace_mask) for every ingredient, by French name."""
        query = select(
            Ingredient.id, Ingredient.name, Ingredient.search_namespace_mask
        ).order_by(french_name(Ingredient.name), Ingredient.id)
        return self._db.execute(query).all()

    def get_namespace_mask(self, ingredient_id: int) -> int | None:
        return self._db.scalar(
            select(Ingredient.search_namespace_mask).where(Ingredient.id == ingredient_id)
        )

    # =========================================================================
    # Atomic mask updates
    # =========================================================================

    def set_namespace_bits(self, ingredient_id: int, bits: int) -> bool:
        """``mask = mask | bits`` in one statement. False when no such ingredient."""
        result = self._db.execute(
            update(Ingredient)
            .where(Ingredient.id == ingredient_id)
            .values(search_namespace_mask=Ingredient.search_namespace_mask.bitwise_or(bits))
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount > 0

    def clear_namespace_bits(self, ingredient_id: int, bits: int) -> bool:
        """``mask = mask & ~bits`` in one statement. False when no such ingredient."""
        result = self._db.execute(
            update(Ingredient)
            .where(Ingredient.id == ingredient_id)
            .values(search_namespace_mask=Ingredient.search_namespace_mask.bitwise_and(~bits))
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount > 0


class IngredientCategoryRepository(BaseRepository[IngredientCategory]):
    @property
    def model(self) -> type[IngredientCategory]:
        return IngredientCategory

    def _base_query(self) -> Select:
        return select(IngredientCategory).order_by(
            french_name(IngredientCategory.title), IngredientCategory.id
        )

    def count_ingredients(self, category_id: int) -> int:
        return IngredientRepository(self._db).count(IngredientFilters(category_ids=[category_id]))


def get_ingredient_repository(db: Session) -> IngredientRepository:
    return IngredientRepository(db)


def get_ingredient_category_repository(db: Session) -> IngredientCategoryRepository:
    return IngredientCategoryRepository(db)
