"""
Recipe Category Repository - categories, layout zones and recipe membership.
"""

from typing import Sequence

from sqlalchemy import Select, delete, func, select
from sqlalchemy.orm import Session

from admin_api.models import Recipe, RecipeCategory, RecipeCategoryPivot
from shared.config.constants import CategoryZone
from .base import BaseRepository
from .ingredient import french_name


def zone_columns(zone: str):
    """(display flag, order column) of a layout zone."""
    if zone == CategoryZone.CHIPS:
        return RecipeCategory.display_as_chip, RecipeCategory.chip_order
    return RecipeCategory.display_as_section, RecipeCategory.section_order


class RecipeCategoryRepository(BaseRepository[RecipeCategory]):
    """Repository for RecipeCategory entities, ordered by French name."""

    @property
    def model(self) -> type[RecipeCategory]:
        return RecipeCategory

    def _base_query(self) -> Select:
        return select(RecipeCategory).order_by(french_name(RecipeCategory.name), RecipeCategory.id)

    def find_in_zone(self, zone: str) -> Sequence[RecipeCategory]:
        flag, order = zone_columns(zone)
        query = select(RecipeCategory).where(flag.is_(True)).order_by(order, RecipeCategory.id)
        return self._db.execute(query).scalars().all()

    def find_outside_zone(self, zone: str) -> Sequence[RecipeCategory]:
        flag, _ = zone_columns(zone)
        query = self._base_query().where(flag.is_(False))
        return self._db.execute(query).scalars().all()

    def max_zone_order(self, zone: str) -> int:
        flag, order = zone_columns(zone)
        return self._db.scalar(select(func.max(order)).where(flag.is_(True))) or 0

    # =========================================================================
    # Recipe membership
    # =========================================================================

    def find_recipes_ordered(self, category_id: int) -> Sequence[tuple[int, str, str | None, int]]:
        """(id, title, img_path, position) of the category's recipes."""
        query = (
            select(Recipe.id, Recipe.title, Recipe.img_path, RecipeCategoryPivot.position)
            .join(RecipeCategoryPivot, RecipeCategoryPivot.recipe_id == Recipe.id)
            .where(RecipeCategoryPivot.category_id == category_id)
            .order_by(RecipeCategoryPivot.position, RecipeCategoryPivot.id)
        )
        return self._db.execute(query).all()

    def find_pivots(self, category_id: int) -> Sequence[RecipeCategoryPivot]:
        query = (
            select(RecipeCategoryPivot)
            .where(RecipeCategoryPivot.category_id == category_id)
            .order_by(RecipeCategoryPivot.position, RecipeCategoryPivot.id)
        )
        return self._db.execute(query).scalars().all()

    def find_pivot(self, category_id: int, recipe_id: int) -> RecipeCategoryPivot | None:
        return self._db.scalar(
            select(RecipeCategoryPivot).where(
                RecipeCategoryPivot.category_id == category_id,
                RecipeCategoryPivot.recipe_id == recipe_id,
            )
        )

    def max_position(self, category_id: int) -> int:
        return self._db.scalar(
            select(func.max(RecipeCategoryPivot.position)).where(
                RecipeCategoryPivot.category_id == category_id
            )
        ) or 0

    def add_recipe(self, category_id: int, recipe_id: int) -> RecipeCategoryPivot:
        pivot = RecipeCategoryPivot(
            category_id=category_id,
            recipe_id=recipe_id,
            position=self.max_position(category_id) + 1,
        )
        return self.save(pivot)

    def category_ids_for_recipe(self, recipe_id: int) -> list[int]:
        query = (
            select(RecipeCategoryPivot.category_id)
            .where(RecipeCategoryPivot.recipe_id == recipe_id)
            .order_by(RecipeCategoryPivot.category_id)
        )
        return list(self._db.execute(query).scalars())

    def remove_recipe_from_all(self, recipe_id: int) -> None:
        self._db.execute(
            delete(RecipeCategoryPivot)
            .where(RecipeCategoryPivot.recipe_id == recipe_id)
            .execution_options(synchronize_session="fetch")
        )
        self._db.flush()


def get_recipe_category_repository(db: Session) -> RecipeCategoryRepository:
    return RecipeCategoryRepository(db)
