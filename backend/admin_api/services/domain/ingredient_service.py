"""
Ingredient Service - ingredient catalog and ingredient categories.

Usage:
    from admin_api.services.domain import IngredientService

    service = IngredientService(db)
    items, total = service.list_page(IngredientFilters(search="tom"), translation_filter="incomplete")
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from admin_api.models import Ingredient, IngredientCategory, IngredientRecipePivot
from admin_api.repositories import (
    IngredientCategoryRepository,
    IngredientFilters,
    IngredientRelationRepository,
    IngredientRepository,
)
from admin_api.services.base_service import BaseCRUDService
from shared.config.constants import Limits, TranslationFilter
from shared.config.logging import get_logger
from shared.config.settings import get_settings
from shared.utils.admin_schemas import (
    AdjacentOutput,
    IngredientCategoryOutput,
    IngredientOutput,
)
from shared.utils.exceptions import ConflictError, ValidationError
from shared.utils.i18n import clean_translations, is_complete, missing_languages

logger = get_logger(__name__)

TRANSLATED_FIELDS = ("name", "suffix_singular", "suffix_plural")


def adjacent(ordered_ids: list[int], entity_id: int) -> AdjacentOutput:
    """Previous/next ids around ``entity_id``; position is 1-based."""
    total = len(ordered_ids)
    try:
        index = ordered_ids.index(entity_id)
    except ValueError:
        return AdjacentOutput(total=total)
    return AdjacentOutput(
        previous_id=ordered_ids[index - 1] if index > 0 else None,
        next_id=ordered_ids[index + 1] if index + 1 < total else None,
        position=index + 1,
        total=total,
    )


class IngredientService(BaseCRUDService[Ingredient, IngredientOutput]):
    """
    Service for ingredients.

    Business rules:
    - name.fr is required (checked by the schema)
    - category must exist
    - an ingredient used by a recipe cannot be deleted
    - deleting an ingredient removes its relations
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=IngredientRepository(db),
            output_schema=IngredientOutput,
            entity_name="Ingredient",
        )
        self._languages = get_settings().translation_language_list

    # =========================================================================
    # Query Methods
    # =========================================================================

    def _translation_superset(self, filters: IngredientFilters, translation_filter: str) -> list[Ingredient]:
        """
        Rows matching SQL filters then the translation filter.

        Completeness is computed on the JSON in Python, so at most
        Limits.MAX_SUPERSET_FETCH rows are examined.
        """
        rows = self._repo.find_superset(filters, cap=Limits.MAX_SUPERSET_FETCH)
        if len(rows) >= Limits.MAX_SUPERSET_FETCH:
            logger.warning(
                "Translation filter hit the fetch cap; results are truncated",
                cap=Limits.MAX_SUPERSET_FETCH,
            )
        want_complete = translation_filter == TranslationFilter.COMPLETE
        return [row for row in rows if is_complete(row.name, self._languages) == want_complete]

    def _check_translation_filter(self, translation_filter: str | None) -> None:
        if translation_filter is not None and translation_filter not in TranslationFilter.ALL:
            raise ValidationError(
                f"translation_filter must be one of {', '.join(TranslationFilter.ALL)}",
                translation_filter=translation_filter,
            )

    def list_page(
        self,
        filters: IngredientFilters,
        translation_filter: str | None = None,
    ) -> tuple[list[IngredientOutput], int]:
        """One page of ingredients and the total matching the filters."""
        self._check_translation_filter(translation_filter)

        if translation_filter:
            matching = self._translation_superset(filters, translation_filter)
            page = matching[filters.offset:filters.offset + filters.limit]
            return [self.to_output(row) for row in page], len(matching)

        rows = self._repo.find_all(filters)
        return [self.to_output(row) for row in rows], self._repo.count(filters)

    def navigation(
        self,
        ingredient_id: int,
        filters: IngredientFilters,
        translation_filter: str | None = None,
    ) -> AdjacentOutput:
        self.get_entity(ingredient_id)
        self._check_translation_filter(translation_filter)

        if translation_filter:
            ordered = [row.id for row in self._translation_superset(filters, translation_filter)]
        else:
            ordered = self._repo.find_ordered_ids(filters)
        return adjacent(ordered, ingredient_id)

    def to_output(self, entity: Ingredient) -> IngredientOutput:
        output = IngredientOutput.model_validate(entity)
        output.missing_translations = missing_languages(entity.name, self._languages)
        return output

    # =========================================================================
    # Validation Hooks
    # =========================================================================

    def _clean(self, data: dict[str, Any]) -> dict[str, Any]:
        for field_name in TRANSLATED_FIELDS:
            if field_name in data and data[field_name] is not None:
                data[field_name] = clean_translations(data[field_name])
        if "name" in data and not (data["name"] or {}).get("fr"):
            raise ValidationError("name.fr is required")

        category_id = data.get("category_id")
        if category_id is not None and self._db.get(IngredientCategory, category_id) is None:
            raise ValidationError(f"Unknown ingredient category {category_id}", category_id=category_id)
        return data

    def _validate_create(self, data: dict[str, Any]) -> dict[str, Any]:
        return self._clean(data)

    def _validate_update(self, entity: Ingredient, data: dict[str, Any]) -> dict[str, Any]:
        for field_name in TRANSLATED_FIELDS:
            if field_name in data and data[field_name] is None:
                data.pop(field_name)
        return self._clean(data)

    def _validate_delete(self, entity: Ingredient) -> None:
        usage = self._db.scalar(
            select(func.count())
            .select_from(IngredientRecipePivot)
            .where(IngredientRecipePivot.ingredient_id == entity.id)
        ) or 0
        if usage:
            raise ConflictError(
                f"Ingredient {entity.id} is used by {usage} recipe(s)",
                ingredient_id=entity.id,
            )
        IngredientRelationRepository(self._db).delete_for_ingredient(entity.id)

    def _get_entity_info(self, entity: Ingredient) -> dict[str, Any]:
        return {"id": entity.id, "name": (entity.name or {}).get("fr")}

    def _after_delete(self, entity_info: dict[str, Any]) -> None:
        logger.info("Ingredient removed from catalog", **entity_info)


class IngredientCategoryService(BaseCRUDService[IngredientCategory, IngredientCategoryOutput]):
    """Ingredient categories. Deleting one leaves its ingredients uncategorised."""

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=IngredientCategoryRepository(db),
            output_schema=IngredientCategoryOutput,
            entity_name="Ingredient category",
        )

    def _validate_create(self, data: dict[str, Any]) -> dict[str, Any]:
        data["title"] = clean_translations(data.get("title"))
        if not data["title"].get("fr"):
            raise ValidationError("title.fr is required")
        return data

    def _validate_update(self, entity: IngredientCategory, data: dict[str, Any]) -> dict[str, Any]:
        if "title" in data:
            if data["title"] is None:
                data.pop("title")
            else:
                return self._validate_create(data)
        return data

    def _validate_delete(self, entity: IngredientCategory) -> None:
        for ingredient in entity.ingredients:
            ingredient.category_id = None

    def _get_entity_info(self, entity: IngredientCategory) -> dict[str, Any]:
        return {"id": entity.id, "ingredient_count": len(entity.ingredients)}

    def _after_delete(self, entity_info: dict[str, Any]) -> None:
        logger.info("Ingredient category deleted", **entity_info)


def get_ingredient_service(db: Session) -> IngredientService:
    return IngredientService(db)


def get_ingredient_category_service(db: Session) -> IngredientCategoryService:
    return IngredientCategoryService(db)
