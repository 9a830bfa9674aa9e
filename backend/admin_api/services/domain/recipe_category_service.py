"""
Recipe Category Service - categories, home layout zones and recipe order.

A category can be shown as a chip, as a home section, or both. Orders are
1..n inside a zone and 0 outside it; every write below keeps them
contiguous.

Usage:
    from admin_api.services.domain import RecipeCategoryService

    service = RecipeCategoryService(db)
    layout = service.move(category_id=4, from_zone="chips", to_zone="sections")
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from admin_api.models import Recipe, RecipeCategory
from admin_api.repositories import RecipeCategoryRepository
from admin_api.repositories.recipe_category import zone_columns
from admin_api.services.base_service import BaseCRUDService
from shared.config.constants import CategoryZone
from shared.config.logging import get_logger
from shared.utils.admin_schemas import (
    CategoryLayoutOutput,
    CategoryRecipeItem,
    RecipeCategoryOutput,
)
from shared.utils.exceptions import ConflictError, NotFoundError, ValidationError
from shared.utils.i18n import clean_translations

logger = get_logger(__name__)


class RecipeCategoryService(BaseCRUDService[RecipeCategory, RecipeCategoryOutput]):
    """
    Service for recipe categories.

    Business rules:
    - name.fr is required
    - a category joining a zone goes last
    - leaving a zone compacts the orders left behind
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=RecipeCategoryRepository(db),
            output_schema=RecipeCategoryOutput,
            entity_name="Recipe category",
        )

    # =========================================================================
    # Zone helpers
    # =========================================================================

    @staticmethod
    def _in_zone(category: RecipeCategory, zone: str) -> bool:
        flag, _ = zone_columns(zone)
        return bool(getattr(category, flag.key))

    def _join_zone(self, category: RecipeCategory, zone: str) -> None:
        flag, order = zone_columns(zone)
        setattr(category, order.key, self._repo.max_zone_order(zone) + 1)
        setattr(category, flag.key, True)

    def _leave_zone(self, category: RecipeCategory, zone: str) -> None:
        flag, order = zone_columns(zone)
        setattr(category, flag.key, False)
        setattr(category, order.key, 0)

    def _compact_zone(self, zone: str) -> None:
        """Renumber the zone 1..n in its current order."""
        self._db.flush()
        _, order = zone_columns(zone)
        for position, category in enumerate(self._repo.find_in_zone(zone), start=1):
            setattr(category, order.key, position)

    # =========================================================================
    # Layout
    # =========================================================================

    def layout(self) -> CategoryLayoutOutput:
        return CategoryLayoutOutput(
            chips=[self.to_output(c) for c in self._repo.find_in_zone(CategoryZone.CHIPS)],
            sections=[self.to_output(c) for c in self._repo.find_in_zone(CategoryZone.SECTIONS)],
            available_for_chips=[self.to_output(c) for c in self._repo.find_outside_zone(CategoryZone.CHIPS)],
            available_for_sections=[self.to_output(c) for c in self._repo.find_outside_zone(CategoryZone.SECTIONS)],
        )

    def reorder(self, zone: str, category_ids: list[int], user_email: str | None = None) -> CategoryLayoutOutput:
        """Rewrite a zone's order; ``category_ids`` must be exactly its members."""
        members = {c.id: c for c in self._repo.find_in_zone(zone)}
        if len(set(category_ids)) != len(category_ids) or set(category_ids) != set(members):
            raise ValidationError(
                f"category_ids must list every {zone} category exactly once",
                zone=zone,
                expected=sorted(members),
                received=category_ids,
            )

        _, order = zone_columns(zone)
        for position, category_id in enumerate(category_ids, start=1):
            setattr(members[category_id], order.key, position)
            members[category_id].set_updated_by(user_email)

        self._commit("reorder recipe categories", zone=zone)
        logger.info("Recipe categories reordered", zone=zone, category_ids=category_ids)
        return self.layout()

    def move(
        self,
        category_id: int,
        from_zone: str | None,
        to_zone: str | None,
        user_email: str | None = None,
    ) -> CategoryLayoutOutput:
        """
        Drag a category between zones.

        from_zone None adds it from the available list; to_zone None drops
        it back there.
        """
        if from_zone == to_zone:
            raise ValidationError("from_zone and to_zone must differ", category_id=category_id)

        category = self.get_entity(category_id)

        if from_zone is not None and not self._in_zone(category, from_zone):
            raise ValidationError(
                f"Recipe category {category_id} is not in {from_zone}",
                category_id=category_id,
            )
        if to_zone is not None and self._in_zone(category, to_zone):
            raise ConflictError(
                f"Recipe category {category_id} is already in {to_zone}",
                category_id=category_id,
            )

        if to_zone is not None:
            self._join_zone(category, to_zone)
        if from_zone is not None:
            self._leave_zone(category, from_zone)
            self._compact_zone(from_zone)
        category.set_updated_by(user_email)

        self._commit("move recipe category", category_id=category_id)
        logger.info("Recipe category moved", category_id=category_id, from_zone=from_zone, to_zone=to_zone)
        return self.layout()

    # =========================================================================
    # Validation Hooks
    # =========================================================================

    def _validate_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data["name"] = clean_translations(data.get("name"))
        if not data["name"].get("fr"):
            raise ValidationError("name.fr is required")

        for zone in CategoryZone.ALL:
            flag, order = zone_columns(zone)
            if data.get(flag.key):
                data[order.key] = self._repo.max_zone_order(zone) + 1
        return data

    def _validate_update(self, entity: RecipeCategory, data: dict[str, Any]) -> dict[str, Any]:
        for field_name in ("name", "is_pinned", "is_dynamic"):
            if field_name in data and data[field_name] is None:
                data.pop(field_name)
        if "name" in data:
            data["name"] = clean_translations(data["name"])
            if not data["name"].get("fr"):
                raise ValidationError("name.fr is required")
        return data

    def delete(self, entity_id: int, user_email: str | None = None) -> None:
        category = self.get_entity(entity_id)
        zones = [zone for zone in CategoryZone.ALL if self._in_zone(category, zone)]

        self._repo.delete(category)
        for zone in zones:
            self._compact_zone(zone)
        self._commit("delete recipe category", entity_id=entity_id)

        logger.info("Recipe category deleted", entity_id=entity_id, zones=zones, admin=user_email)

    # =========================================================================
    # Recipes in a category
    # =========================================================================

    def recipes(self, category_id: int) -> list[CategoryRecipeItem]:
        self.get_entity(category_id)
        return [
            CategoryRecipeItem(id=recipe_id, title=title, img_path=img_path, position=position)
            for recipe_id, title, img_path, position in self._repo.find_recipes_ordered(category_id)
        ]

    def add_recipe(self, category_id: int, recipe_id: int) -> list[CategoryRecipeItem]:
        self.get_entity(category_id)
        if self._db.get(Recipe, recipe_id) is None:
            raise NotFoundError("Recipe", recipe_id)
        if self._repo.find_pivot(category_id, recipe_id) is not None:
            raise ConflictError(
                f"Recipe {recipe_id} is already in category {category_id}",
                category_id=category_id,
                recipe_id=recipe_id,
            )

        self._repo.add_recipe(category_id, recipe_id)
        self._commit("add recipe to category", category_id=category_id, recipe_id=recipe_id)
        return self.recipes(category_id)

    def remove_recipe(self, category_id: int, recipe_id: int) -> list[CategoryRecipeItem]:
        pivot = self._repo.find_pivot(category_id, recipe_id)
        if pivot is None:
            raise NotFoundError("Recipe in category", recipe_id, category_id=category_id)

        self._repo.delete(pivot)
        for position, remaining in enumerate(self._repo.find_pivots(category_id), start=1):
            remaining.position = position
        self._commit("remove recipe from category", category_id=category_id, recipe_id=recipe_id)
        return self.recipes(category_id)

    def reorder_recipes(self, category_id: int, recipe_ids: list[int]) -> list[CategoryRecipeItem]:
        """Rewrite positions 1..n; ``recipe_ids`` must equal the membership."""
        self.get_entity(category_id)
        pivots = {pivot.recipe_id: pivot for pivot in self._repo.find_pivots(category_id)}
        if len(set(recipe_ids)) != len(recipe_ids) or set(recipe_ids) != set(pivots):
            raise ValidationError(
                "recipe_ids must list every recipe of the category exactly once",
                category_id=category_id,
            )

        for position, recipe_id in enumerate(recipe_ids, start=1):
            pivots[recipe_id].position = position
        self._commit("reorder category recipes", category_id=category_id)
        return self.recipes(category_id)


def get_recipe_category_service(db: Session) -> RecipeCategoryService:
    return RecipeCategoryService(db)
