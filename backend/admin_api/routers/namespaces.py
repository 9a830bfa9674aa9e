"""
Ingredient search namespace endpoints.

A namespace owns one bit of Ingredient.search_namespace_mask. Membership
toggles are single atomic UPDATEs, so concurrent toggles never lose bits.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from admin_api.routers._common import AdminIdentity, current_admin
from admin_api.services.domain import get_namespace_service
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    DeleteOutput,
    ExcludeChildrenOutput,
    ExcludeChildrenRequest,
    NamespaceCreate,
    NamespaceIngredientStatus,
    NamespaceOutput,
    NamespaceToggleOutput,
    NamespaceUpdate,
)


router = APIRouter(prefix="/namespaces", tags=["namespaces"])


# =============================================================================
# Namespace CRUD
# =============================================================================


@router.get("", response_model=list[NamespaceOutput])
def list_namespaces(db: Session = Depends(get_db)) -> list[NamespaceOutput]:
    """Every namespace, by bit_index."""
    return get_namespace_service(db).list_all()


@router.post("", response_model=NamespaceOutput, status_code=status.HTTP_201_CREATED)
def create_namespace(
    body: NamespaceCreate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> NamespaceOutput:
    return get_namespace_service(db).create(body.model_dump(), admin.email)


@router.post("/exclude-children", response_model=ExcludeChildrenOutput)
def exclude_children(
    body: ExcludeChildrenRequest,
    db: Session = Depends(get_db),
) -> ExcludeChildrenOutput:
    """
    Remove every family descendant of an ingredient from the given namespaces.

    Per-child failures are reported in ``failed``; the others still apply.
    """
    return get_namespace_service(db).exclude_children(body.parent_ingredient_id, body.bit_indexes)


@router.get("/{namespace_id}", response_model=NamespaceOutput)
def get_namespace(namespace_id: int, db: Session = Depends(get_db)) -> NamespaceOutput:
    return get_namespace_service(db).get_by_id(namespace_id)


@router.patch("/{namespace_id}", response_model=NamespaceOutput)
def update_namespace(
    namespace_id: int,
    body: NamespaceUpdate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> NamespaceOutput:
    return get_namespace_service(db).update(namespace_id, body.model_dump(exclude_unset=True), admin.email)


@router.delete("/{namespace_id}", response_model=DeleteOutput)
def delete_namespace(
    namespace_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> DeleteOutput:
    get_namespace_service(db).delete(namespace_id, admin.email)
    return DeleteOutput(id=namespace_id)


# =============================================================================
# Membership
# =============================================================================


@router.get("/{bit_index}/ingredients", response_model=list[NamespaceIngredientStatus])
def list_namespace_ingredients(
    bit_index: int,
    db: Session = Depends(get_db),
) -> list[NamespaceIngredientStatus]:
    """Every ingredient with its membership flag for this bit."""
    return get_namespace_service(db).list_ingredients(bit_index)


@router.post("/{bit_index}/ingredients/{ingredient_id}", response_model=NamespaceToggleOutput)
def add_ingredient_to_namespace(
    bit_index: int,
    ingredient_id: int,
    db: Session = Depends(get_db),
) -> NamespaceToggleOutput:
    return get_namespace_service(db).add_ingredient(ingredient_id, bit_index)


@router.delete("/{bit_index}/ingredients/{ingredient_id}", response_model=NamespaceToggleOutput)
def remove_ingredient_from_namespace(
    bit_index: int,
    ingredient_id: int,
    db: Session = Depends(get_db),
) -> NamespaceToggleOutput:
    return get_namespace_service(db).remove_ingredient(ingredient_id, bit_index)
