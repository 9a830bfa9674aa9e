"""
Ingredient Relation Service - family and substitute links.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from admin_api.models import IngredientRelation
from admin_api.repositories import IngredientRelationRepository, IngredientRepository, RelationFilters
from admin_api.services.base_service import BaseService
from shared.config.constants import Limits, RelationType
from shared.config.logging import get_logger
from shared.utils.admin_schemas import (
    FamilyOutput,
    IngredientRelationOutput,
    RelatedIngredientsOutput,
)
from shared.utils.exceptions import DuplicateEntityError, NotFoundError, ValidationError
from shared.utils.i18n import text_for

logger = get_logger(__name__)

UNKNOWN_NAME = "Unknown"


class IngredientRelationService(BaseService[IngredientRelation]):
    """
    Service for ingredient relations.

    Business rules:
    - an ingredient cannot relate to itself
    - both ingredients must exist
    - a (source, target, type) triple exists at most once
    """

    def __init__(self, db: Session):
        super().__init__(db, IngredientRelationRepository(db))
        self._ingredients = IngredientRepository(db)

    def _to_output(self, relation: IngredientRelation, source_name: dict | None, target_name: dict | None) -> IngredientRelationOutput:
        return IngredientRelationOutput(
            id=relation.id,
            ingredient_id=relation.ingredient_id,
            related_ingredient_id=relation.related_ingredient_id,
            relation_type=relation.relation_type,
            ingredient_name=text_for(source_name, fallback=UNKNOWN_NAME),
            related_ingredient_name=text_for(target_name, fallback=UNKNOWN_NAME),
            created_at=relation.created_at,
        )

    def _output_for(self, relation: IngredientRelation) -> IngredientRelationOutput:
        source = self._ingredients.find_by_id(relation.ingredient_id)
        target = self._ingredients.find_by_id(relation.related_ingredient_id)
        return self._to_output(
            relation,
            source.name if source else None,
            target.name if target else None,
        )

    # =========================================================================
    # Query Methods
    # =========================================================================

    def list_page(self, filters: RelationFilters) -> tuple[list[IngredientRelationOutput], int]:
        if filters.relation_type is not None and filters.relation_type not in RelationType.ALL:
            raise ValidationError(f"Unknown relation type: {filters.relation_type}")
        rows = self._repo.find_with_names(filters)
        items = [self._to_output(relation, source, target) for relation, source, target in rows]
        return items, self._repo.count(filters)

    def families(self) -> list[FamilyOutput]:
        return [
            FamilyOutput(id=ingredient_id, name=name or {}, children_count=children_count)
            for ingredient_id, name, children_count in self._repo.find_families()
        ]

    def related(self, ingredient_id: int, relation_type: str, max_depth: int) -> RelatedIngredientsOutput:
        """Ids reachable from ``ingredient_id``, itself excluded, breadth first."""
        if relation_type not in RelationType.ALL:
            raise ValidationError(f"Unknown relation type: {relation_type}")
        if not 1 <= max_depth <= Limits.MAX_RELATION_DEPTH:
            raise ValidationError(
                f"max_depth must be between 1 and {Limits.MAX_RELATION_DEPTH}",
                max_depth=max_depth,
            )
        if not self._ingredients.exists(ingredient_id):
            raise NotFoundError("Ingredient", ingredient_id)

        found = self._repo.find_related_recursive([ingredient_id], relation_type, max_depth)
        return RelatedIngredientsOutput(
            ingredient_id=ingredient_id,
            relation_type=relation_type,
            max_depth=max_depth,
            related_ids=[related_id for related_id in found if related_id != ingredient_id],
        )

    # =========================================================================
    # Write Operations
    # =========================================================================

    def _check_pair(self, ingredient_id: int, related_ingredient_id: int) -> None:
        if ingredient_id == related_ingredient_id:
            raise ValidationError("An ingredient cannot be related to itself", ingredient_id=ingredient_id)
        for candidate in (ingredient_id, related_ingredient_id):
            if not self._ingredients.exists(candidate):
                raise NotFoundError("Ingredient", candidate)

    def _check_absent(self, ingredient_id: int, related_ingredient_id: int, relation_type: str) -> None:
        if self._repo.find_existing(ingredient_id, related_ingredient_id, relation_type) is not None:
            raise DuplicateEntityError(
                "Ingredient relation",
                f"{ingredient_id}->{related_ingredient_id} ({relation_type})",
            )

    def create(self, ingredient_id: int, related_ingredient_id: int, relation_type: str) -> IngredientRelationOutput:
        self._check_pair(ingredient_id, related_ingredient_id)
        self._check_absent(ingredient_id, related_ingredient_id, relation_type)

        relation = IngredientRelation(
            ingredient_id=ingredient_id,
            related_ingredient_id=related_ingredient_id,
            relation_type=relation_type,
        )
        self._db.add(relation)
        self._commit("create ingredient relation", ingredient_id=ingredient_id)
        self._db.refresh(relation)

        logger.info(
            "Ingredient relation created",
            relation_id=relation.id,
            ingredient_id=ingredient_id,
            related_ingredient_id=related_ingredient_id,
            relation_type=relation_type,
        )
        return self._output_for(relation)

    def create_bidirectional(self, ingredient_id: int, related_ingredient_id: int, relation_type: str) -> list[IngredientRelationOutput]:
        """Create A→B and B→A together; neither may exist yet."""
        self._check_pair(ingredient_id, related_ingredient_id)
        self._check_absent(ingredient_id, related_ingredient_id, relation_type)
        self._check_absent(related_ingredient_id, ingredient_id, relation_type)

        relations = [
            IngredientRelation(
                ingredient_id=ingredient_id,
                related_ingredient_id=related_ingredient_id,
                relation_type=relation_type,
            ),
            IngredientRelation(
                ingredient_id=related_ingredient_id,
                related_ingredient_id=ingredient_id,
                relation_type=relation_type,
            ),
        ]
        self._db.add_all(relations)
        self._commit("create bidirectional ingredient relation", ingredient_id=ingredient_id)
        for relation in relations:
            self._db.refresh(relation)
        return [self._output_for(relation) for relation in relations]

    def delete(self, relation_id: int) -> None:
        relation = self._repo.find_by_id(relation_id)
        if relation is None:
            raise NotFoundError("Ingredient relation", relation_id)
        self._repo.delete(relation)
        self._commit("delete ingredient relation", relation_id=relation_id)
        logger.info("Ingredient relation deleted", relation_id=relation_id)

    def delete_bidirectional(self, ingredient_id: int, related_ingredient_id: int) -> int:
        """Delete every relation between the two ingredients, both directions."""
        removed = self._repo.delete_between(ingredient_id, related_ingredient_id)
        self._commit("delete bidirectional ingredient relation", ingredient_id=ingredient_id)
        logger.info(
            "Bidirectional relation deleted",
            ingredient_id=ingredient_id,
            related_ingredient_id=related_ingredient_id,
            removed=removed,
        )
        return removed


def get_ingredient_relation_service(db: Session) -> IngredientRelationService:
    return IngredientRelationService(db)
