"""
Ingredient and ingredient category endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from admin_api.repositories import IngredientFilters
from admin_api.routers._common import (
    AdminIdentity,
    Pagination,
    current_admin,
    get_pagination,
    paginated,
    parse_id_list,
)
from admin_api.services.domain import get_ingredient_category_service, get_ingredient_service
from shared.infrastructure.db import get_db
from shared.utils.exceptions import MaskError, to_http_error
from shared.utils.masks import mask_from_bits
from shared.utils.admin_schemas import (
    AdjacentOutput,
    DeleteOutput,
    IngredientCategoryCreate,
    IngredientCategoryOutput,
    IngredientCategoryUpdate,
    IngredientCreate,
    IngredientOutput,
    IngredientUpdate,
    PaginatedOutput,
)


router = APIRouter(tags=["ingredients"])


def _ingredient_filters(
    search: str | None = Query(default=None),
    no_image: bool = Query(default=False, description="Only ingredients without an image"),
    categories: str | None = Query(default=None, description="Comma-separated category ids"),
    namespaces: str | None = Query(default=None, description="Comma-separated namespace bits, all required"),
) -> IngredientFilters:
    bit_indexes = parse_id_list(namespaces, "namespaces")
    try:
        namespace_mask = mask_from_bits(bit_indexes)
    except MaskError as e:
        raise to_http_error(e, namespaces=namespaces)
    return IngredientFilters(
        search=search,
        no_image=no_image,
        category_ids=parse_id_list(categories, "categories"),
        namespace_mask=namespace_mask,
    )


# =============================================================================
# Ingredients
# =============================================================================


@router.get("/ingredients", response_model=PaginatedOutput)
def list_ingredients(
    translation_filter: str | None = Query(default=None, description="complete or incomplete"),
    filters: IngredientFilters = Depends(_ingredient_filters),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """One page of ingredients ordered by French name."""
    filters.limit = pagination.limit
    filters.offset = pagination.offset
    items, total = get_ingredient_service(db).list_page(filters, translation_filter)
    return paginated(items, total, pagination)


@router.get("/ingredients/{ingredient_id}", response_model=IngredientOutput)
def get_ingredient(ingredient_id: int, db: Session = Depends(get_db)) -> IngredientOutput:
    return get_ingredient_service(db).get_by_id(ingredient_id)


@router.get("/ingredients/{ingredient_id}/navigation", response_model=AdjacentOutput)
def get_ingredient_navigation(
    ingredient_id: int,
    translation_filter: str | None = Query(default=None),
    filters: IngredientFilters = Depends(_ingredient_filters),
    db: Session = Depends(get_db),
) -> AdjacentOutput:
    """Previous and next ingredient under the same filters as the list."""
    return get_ingredient_service(db).navigation(ingredient_id, filters, translation_filter)


@router.post("/ingredients", response_model=IngredientOutput, status_code=status.HTTP_201_CREATED)
def create_ingredient(
    body: IngredientCreate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> IngredientOutput:
    return get_ingredient_service(db).create(body.model_dump(), admin.email)


@router.patch("/ingredients/{ingredient_id}", response_model=IngredientOutput)
def update_ingredient(
    ingredient_id: int,
    body: IngredientUpdate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> IngredientOutput:
    return get_ingredient_service(db).update(ingredient_id, body.model_dump(exclude_unset=True), admin.email)


@router.delete("/ingredients/{ingredient_id}", response_model=DeleteOutput)
def delete_ingredient(
    ingredient_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> DeleteOutput:
    """Delete an ingredient and its relations. Refused while a recipe uses it."""
    get_ingredient_service(db).delete(ingredient_id, admin.email)
    return DeleteOutput(id=ingredient_id)


# =============================================================================
# Ingredient categories
# =============================================================================


@router.get("/ingredient-categories", response_model=list[IngredientCategoryOutput])
def list_ingredient_categories(db: Session = Depends(get_db)) -> list[IngredientCategoryOutput]:
    return get_ingredient_category_service(db).list_all()


@router.post(
    "/ingredient-categories",
    response_model=IngredientCategoryOutput,
    status_code=status.HTTP_201_CREATED,
)
def create_ingredient_category(
    body: IngredientCategoryCreate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> IngredientCategoryOutput:
    return get_ingredient_category_service(db).create(body.model_dump(), admin.email)


@router.patch("/ingredient-categories/{category_id}", response_model=IngredientCategoryOutput)
def update_ingredient_category(
    category_id: int,
    body: IngredientCategoryUpdate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> IngredientCategoryOutput:
    return get_ingredient_category_service(db).update(
        category_id, body.model_dump(exclude_unset=True), admin.email
    )


@router.delete("/ingredient-categories/{category_id}", response_model=DeleteOutput)
def delete_ingredient_category(
    category_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> DeleteOutput:
    """Delete a category; its ingredients become uncategorised."""
    get_ingredient_category_service(db).delete(category_id, admin.email)
    return DeleteOutput(id=category_id)
