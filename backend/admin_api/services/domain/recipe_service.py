"""
Recipe Service - recipes, their attribute masks, categories and ingredients.

CLEAN-ARCH: Handles all recipe-related business logic including:
- CRUD with masks given raw or as reference id lists
- filtered listing (diets AND equipment, excluded allergies) in SQL
- decoded attribute view
- category membership and structured ingredient sync

Usage:
    from admin_api.services.domain import RecipeService

    service = RecipeService(db)
    filters = service.build_filters(diet_ids=[1, 4], exclude_allergy_ids=[2])
    recipes, total = service.list_page(filters)
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from admin_api.models import Recipe
from admin_api.repositories import (
    RecipeCategoryRepository,
    RecipeFilters,
    RecipeRepository,
)
from admin_api.services.base_service import BaseCRUDService
from shared.config.constants import ReferenceTables
from shared.config.logging import get_logger, masks_logger
from shared.utils.admin_schemas import (
    AdjacentOutput,
    AttributeDimension,
    RecipeAttributesOutput,
    RecipeCategoryOutput,
    RecipeIngredientOutput,
    RecipeOutput,
)
from shared.utils.exceptions import MaskError, ValidationError, to_http_error
from shared.utils.i18n import text_for
from shared.utils.masks import count_set_bits, decode, encode, required_mask
from .ingredient_service import adjacent
from .reference_service import reference_items, summarize

logger = get_logger(__name__)

# (id list field, mask column, reference table)
MASK_DIMENSIONS = [
    ("allergy_ids", "allergy_mask", ReferenceTables.ALLERGIES),
    ("diet_ids", "diet_mask", ReferenceTables.DIETS),
    ("kitchen_equipment_ids", "kitchen_equipments_mask", ReferenceTables.KITCHEN_EQUIPMENTS),
    ("season_months", "seasonality_mask", ReferenceTables.SEASONALITY),
]


class RecipeService(BaseCRUDService[Recipe, RecipeOutput]):
    """
    Service for recipes.

    Business rules:
    - an id list replaces the whole mask of its dimension
    - a mask left out stays NULL; an empty id list stores 0
    - unknown reference ids are ignored when encoding
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=RecipeRepository(db),
            output_schema=RecipeOutput,
            entity_name="Recipe",
        )
        self._categories = RecipeCategoryRepository(db)

    # =========================================================================
    # Query Methods
    # =========================================================================

    def build_filters(
        self,
        *,
        diet_ids: list[int] | None = None,
        kitchen_equipment_ids: list[int] | None = None,
        exclude_allergy_ids: list[int] | None = None,
        **options: Any,
    ) -> RecipeFilters:
        """RecipeFilters with reference id lists turned into masks."""
        try:
            diet_mask = required_mask(diet_ids or [], reference_items(self._db, ReferenceTables.DIETS))
            equipment_mask = required_mask(
                kitchen_equipment_ids or [],
                reference_items(self._db, ReferenceTables.KITCHEN_EQUIPMENTS),
            )
            excluded = encode(exclude_allergy_ids or [], reference_items(self._db, ReferenceTables.ALLERGIES))
        except MaskError as e:
            raise to_http_error(e)

        return RecipeFilters(
            diet_mask=diet_mask,
            kitchen_equipments_mask=equipment_mask,
            excluded_allergy_mask=excluded,
            **options,
        )

    def list_page(self, filters: RecipeFilters) -> tuple[list[RecipeOutput], int]:
        rows = self._repo.find_all(filters)
        return [self.to_output(row) for row in rows], self._repo.count(filters)

    def navigation(self, recipe_id: int, filters: RecipeFilters) -> AdjacentOutput:
        self.get_entity(recipe_id)
        return adjacent(self._repo.find_ordered_ids(filters), recipe_id)

    def attributes(self, recipe_id: int) -> RecipeAttributesOutput:
        """Every mask of the recipe decoded against its reference table."""
        recipe = self.get_entity(recipe_id)
        dimensions = {}
        for _, mask_field, table in MASK_DIMENSIONS:
            mask = getattr(recipe, mask_field)
            try:
                items = decode(mask, reference_items(self._db, table))
                count = count_set_bits(mask)
            except MaskError as e:
                raise to_http_error(e, recipe_id=recipe_id, table=table)
            dimensions[table] = AttributeDimension(mask=mask, count=count, items=summarize(items, table))

        return RecipeAttributesOutput(
            recipe_id=recipe_id,
            allergies=dimensions[ReferenceTables.ALLERGIES],
            diets=dimensions[ReferenceTables.DIETS],
            kitchen_equipments=dimensions[ReferenceTables.KITCHEN_EQUIPMENTS],
            seasonality=dimensions[ReferenceTables.SEASONALITY],
        )

    # =========================================================================
    # Validation Hooks
    # =========================================================================

    def _encode_id_lists(self, data: dict[str, Any]) -> dict[str, Any]:
        for ids_field, mask_field, table in MASK_DIMENSIONS:
            if ids_field not in data:
                continue
            ids = data.pop(ids_field)
            if ids is None:
                continue
            items = reference_items(self._db, table)
            try:
                data[mask_field] = encode(ids, items)
            except MaskError as e:
                raise to_http_error(e, table=table)
        return data

    def _validate_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data["title"] = data["title"].strip()
        if not data["title"]:
            raise ValidationError("title is required")
        return self._encode_id_lists(data)

    def _validate_update(self, entity: Recipe, data: dict[str, Any]) -> dict[str, Any]:
        for field_name in ("title", "dish_type", "quantification_type", "is_folklore", "is_visible"):
            if field_name in data and data[field_name] is None:
                data.pop(field_name)
        if "title" in data:
            data["title"] = data["title"].strip()
            if not data["title"]:
                raise ValidationError("title is required")
        return self._encode_id_lists(data)

    def _after_create(self, entity: Recipe) -> None:
        masks_logger.debug(
            "Recipe masks stored",
            recipe_id=entity.id,
            allergy_mask=entity.allergy_mask,
            diet_mask=entity.diet_mask,
            kitchen_equipments_mask=entity.kitchen_equipments_mask,
            seasonality_mask=entity.seasonality_mask,
        )

    # =========================================================================
    # Categories
    # =========================================================================

    def get_categories(self, recipe_id: int) -> list[RecipeCategoryOutput]:
        self.get_entity(recipe_id)
        ids = self._categories.category_ids_for_recipe(recipe_id)
        categories = sorted(self._categories.find_by_ids(ids), key=lambda c: text_for(c.name))
        return [RecipeCategoryOutput.model_validate(c) for c in categories]

    def set_categories(self, recipe_id: int, category_ids: list[int]) -> list[RecipeCategoryOutput]:
        """
        Make ``category_ids`` the recipe's exact category set.

        New memberships are appended at the end of their category.
        """
        self.get_entity(recipe_id)
        wanted = list(dict.fromkeys(category_ids))
        found = {c.id for c in self._categories.find_by_ids(wanted)}
        unknown = [category_id for category_id in wanted if category_id not in found]
        if unknown:
            raise ValidationError(f"Unknown recipe categories: {unknown}", recipe_id=recipe_id)

        current = set(self._categories.category_ids_for_recipe(recipe_id))
        for category_id in current - set(wanted):
            pivot = self._categories.find_pivot(category_id, recipe_id)
            if pivot is not None:
                self._db.delete(pivot)
        self._db.flush()
        for category_id in wanted:
            if category_id not in current:
                self._categories.add_recipe(category_id, recipe_id)

        self._commit("update recipe categories", recipe_id=recipe_id)
        logger.info("Recipe categories updated", recipe_id=recipe_id, category_ids=wanted)
        return self.get_categories(recipe_id)

    # =========================================================================
    # Structured ingredients
    # =========================================================================

    def get_ingredients(self, recipe_id: int) -> list[RecipeIngredientOutput]:
        self.get_entity(recipe_id)
        return [
            RecipeIngredientOutput(
                id=line.id,
                ingredient_id=line.ingredient_id,
                ingredient_name=text_for(line.ingredient.name if line.ingredient else None, fallback="Unknown"),
                quantity=line.quantity,
                unit=line.unit,
                is_optional=line.is_optional,
            )
            for line in self._repo.find_ingredient_lines(recipe_id)
        ]

    def set_ingredients(self, recipe_id: int, lines: list[dict[str, Any]]) -> list[RecipeIngredientOutput]:
        """
        Replace the recipe's ingredient lines.

        ingredients_name is rewritten with the French names, in line order.
        """
        recipe = self.get_entity(recipe_id)
        ingredient_ids = [line["ingredient_id"] for line in lines]
        if len(set(ingredient_ids)) != len(ingredient_ids):
            raise ValidationError("An ingredient appears twice in the recipe", recipe_id=recipe_id)

        ingredients = self._repo.find_ingredients(ingredient_ids)
        unknown = [ingredient_id for ingredient_id in ingredient_ids if ingredient_id not in ingredients]
        if unknown:
            raise ValidationError(f"Unknown ingredients: {unknown}", recipe_id=recipe_id)

        self._repo.replace_ingredient_lines(recipe_id, lines)
        recipe.ingredients_name = [text_for(ingredients[ingredient_id].name) for ingredient_id in ingredient_ids]
        self._commit("update recipe ingredients", recipe_id=recipe_id)

        logger.info("Recipe ingredients updated", recipe_id=recipe_id, count=len(lines))
        return self.get_ingredients(recipe_id)


def get_recipe_service(db: Session) -> RecipeService:
    return RecipeService(db)
