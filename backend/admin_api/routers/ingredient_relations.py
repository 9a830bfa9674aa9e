"""
Ingredient relation endpoints (family and substitute links).

Static paths (/families, /bidirectional, /related) are declared before
/{relation_id}.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from admin_api.repositories import RelationFilters
from admin_api.routers._common import Pagination, get_pagination, paginated
from admin_api.services.domain import get_ingredient_relation_service
from shared.config.constants import Limits, RelationType
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    DeleteOutput,
    FamilyOutput,
    IngredientRelationCreate,
    IngredientRelationOutput,
    PaginatedOutput,
    RelatedIngredientsOutput,
)


router = APIRouter(prefix="/ingredient-relations", tags=["ingredient-relations"])


@router.get("", response_model=PaginatedOutput)
def list_relations(
    ingredient_id: int | None = Query(default=None, description="Relations touching this ingredient"),
    relation_type: str | None = Query(default=None),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Relations with both ingredient names, newest first."""
    filters = RelationFilters(
        limit=pagination.limit,
        offset=pagination.offset,
        ingredient_id=ingredient_id,
        relation_type=relation_type,
    )
    items, total = get_ingredient_relation_service(db).list_page(filters)
    return paginated(items, total, pagination)


@router.get("/families", response_model=list[FamilyOutput])
def list_families(db: Session = Depends(get_db)) -> list[FamilyOutput]:
    """Ingredients that have family children, with the child count."""
    return get_ingredient_relation_service(db).families()


@router.get("/related/{ingredient_id}", response_model=RelatedIngredientsOutput)
def get_related_ingredients(
    ingredient_id: int,
    relation_type: str = Query(default=RelationType.FAMILY),
    max_depth: int = Query(default=Limits.DEFAULT_RELATION_DEPTH),
    db: Session = Depends(get_db),
) -> RelatedIngredientsOutput:
    return get_ingredient_relation_service(db).related(ingredient_id, relation_type, max_depth)


@router.post("", response_model=IngredientRelationOutput, status_code=status.HTTP_201_CREATED)
def create_relation(
    body: IngredientRelationCreate,
    db: Session = Depends(get_db),
) -> IngredientRelationOutput:
    return get_ingredient_relation_service(db).create(
        body.ingredient_id, body.related_ingredient_id, body.relation_type
    )


@router.post(
    "/bidirectional",
    response_model=list[IngredientRelationOutput],
    status_code=status.HTTP_201_CREATED,
)
def create_bidirectional_relation(
    body: IngredientRelationCreate,
    db: Session = Depends(get_db),
) -> list[IngredientRelationOutput]:
    """Create A→B and B→A in one transaction."""
    return get_ingredient_relation_service(db).create_bidirectional(
        body.ingredient_id, body.related_ingredient_id, body.relation_type
    )


@router.delete("/bidirectional")
def delete_bidirectional_relation(
    ingredient_id: int,
    related_ingredient_id: int,
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Delete every relation between two ingredients, both directions."""
    removed = get_ingredient_relation_service(db).delete_bidirectional(ingredient_id, related_ingredient_id)
    return {"success": True, "removed": removed}


@router.delete("/{relation_id}", response_model=DeleteOutput)
def delete_relation(relation_id: int, db: Session = Depends(get_db)) -> DeleteOutput:
    get_ingredient_relation_service(db).delete(relation_id)
    return DeleteOutput(id=relation_id)
