"""
Namespace Service - ingredient search namespaces and their bits.

CLEAN-ARCH: Handles namespace CRUD (through ReferenceTableService) and
ingredient membership:
- add/remove an ingredient, one atomic UPDATE each
- list ingredients with their membership flag
- exclude the family children of an ingredient from several namespaces

Usage:
    from admin_api.services.domain import NamespaceService

    service = NamespaceService(db)
    service.add_ingredient(ingredient_id=12, bit_index=3)
    result = service.exclude_children(parent_id=12, bit_indexes=[3, 4])
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from admin_api.repositories import IngredientRelationRepository, IngredientRepository
from shared.config.constants import ReferenceTables, RelationType
from shared.config.logging import masks_logger
from shared.config.settings import get_settings
from shared.utils.admin_schemas import (
    ExcludeChildFailure,
    ExcludeChildrenOutput,
    NamespaceIngredientStatus,
    NamespaceToggleOutput,
)
from shared.utils.exceptions import MaskError, NotFoundError, to_http_error
from shared.utils.masks import bit, contains, mask_from_bits
from .reference_service import ReferenceTableService


class NamespaceService(ReferenceTableService):
    """
    Service for ingredient search namespaces.

    Business rules:
    - adding and listing need a namespace holding the bit
    - removing is always allowed, so orphan bits can be cleared
    - toggles are idempotent
    """

    def __init__(self, db: Session):
        super().__init__(db, ReferenceTables.SEARCH_NAMESPACES)
        self._ingredients = IngredientRepository(db)
        self._relations = IngredientRelationRepository(db)

    def _bit(self, bit_index: int) -> int:
        try:
            return bit(bit_index)
        except MaskError as e:
            raise to_http_error(e, bit_index=bit_index)

    def _require_namespace(self, bit_index: int):
        namespace = self._repo.find_by_bit_index(bit_index)
        if namespace is None:
            raise NotFoundError("Namespace", bit_index=bit_index)
        return namespace

    # =========================================================================
    # Membership
    # =========================================================================

    def add_ingredient(self, ingredient_id: int, bit_index: int) -> NamespaceToggleOutput:
        """Set the namespace bit on the ingredient. Idempotent."""
        value = self._bit(bit_index)
        self._require_namespace(bit_index)

        if not self._ingredients.set_namespace_bits(ingredient_id, value):
            self._db.rollback()
            raise NotFoundError("Ingredient", ingredient_id)
        self._commit("add ingredient to namespace", ingredient_id=ingredient_id, bit_index=bit_index)

        mask = self._ingredients.get_namespace_mask(ingredient_id) or 0
        masks_logger.info(
            "Ingredient added to namespace",
            ingredient_id=ingredient_id,
            bit_index=bit_index,
            mask=mask,
        )
        return NamespaceToggleOutput(success=True, ingredient_id=ingredient_id, bit_index=bit_index, mask=mask)

    def remove_ingredient(self, ingredient_id: int, bit_index: int) -> NamespaceToggleOutput:
        """Clear the namespace bit on the ingredient. Idempotent."""
        value = self._bit(bit_index)

        if not self._ingredients.clear_namespace_bits(ingredient_id, value):
            self._db.rollback()
            raise NotFoundError("Ingredient", ingredient_id)
        self._commit("remove ingredient from namespace", ingredient_id=ingredient_id, bit_index=bit_index)

        mask = self._ingredients.get_namespace_mask(ingredient_id) or 0
        masks_logger.info(
            "Ingredient removed from namespace",
            ingredient_id=ingredient_id,
            bit_index=bit_index,
            mask=mask,
        )
        return NamespaceToggleOutput(success=True, ingredient_id=ingredient_id, bit_index=bit_index, mask=mask)

    def list_ingredients(self, bit_index: int) -> list[NamespaceIngredientStatus]:
        """Every ingredient, by French name, flagged with its membership."""
        self._bit(bit_index)
        namespace = self._require_namespace(bit_index)
        return [
            NamespaceIngredientStatus(id=ingredient_id, name=name or {}, is_in_namespace=contains(mask, namespace))
            for ingredient_id, name, mask in self._ingredients.find_with_namespace_masks()
        ]

    # =========================================================================
    # Bulk exclusion
    # =========================================================================

    def exclude_children(self, parent_id: int, bit_indexes: list[int]) -> ExcludeChildrenOutput:
        """
        Clear ``bit_indexes`` on every family descendant of ``parent_id``.

        Each child is updated in its own savepoint; a failing child is
        reported in ``failed`` and the others are still committed. The
        parent itself is left untouched.
        """
        try:
            bits = mask_from_bits(bit_indexes)
        except MaskError as e:
            raise to_http_error(e, bit_indexes=bit_indexes)

        if not self._ingredients.exists(parent_id):
            raise NotFoundError("Ingredient", parent_id)

        related = self._relations.find_related_recursive(
            [parent_id],
            relation_type=RelationType.FAMILY,
            max_depth=get_settings().namespace_max_depth,
        )
        children_ids = [ingredient_id for ingredient_id in related if ingredient_id != parent_id]

        excluded_count = 0
        failed: list[ExcludeChildFailure] = []
        for child_id in children_ids:
            try:
                with self._db.begin_nested():
                    updated = self._ingredients.clear_namespace_bits(child_id, bits)
            except SQLAlchemyError as e:
                masks_logger.warning(
                    "Failed to exclude child from namespaces",
                    parent_id=parent_id,
                    ingredient_id=child_id,
                    error=str(e),
                )
                failed.append(ExcludeChildFailure(ingredient_id=child_id, error=str(e)))
                continue

            if updated:
                excluded_count += 1
            else:
                failed.append(ExcludeChildFailure(ingredient_id=child_id, error="Ingredient not found"))

        self._commit("exclude children from namespaces", parent_id=parent_id)

        masks_logger.info(
            "Children excluded from namespaces",
            parent_id=parent_id,
            bit_indexes=bit_indexes,
            excluded_count=excluded_count,
            failed_count=len(failed),
        )
        return ExcludeChildrenOutput(
            excluded_count=excluded_count,
            children_ids=children_ids,
            failed=failed,
        )


def get_namespace_service(db: Session) -> NamespaceService:
    return NamespaceService(db)
