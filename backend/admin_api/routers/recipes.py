"""
Recipe endpoints: CRUD, filtered listing, decoded attributes, categories
and structured ingredients.

List filters take reference ids as comma-separated lists:
    GET /api/recipes?diets=1,4&kitchen_equipments=2&exclude_allergies=3
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from admin_api.repositories import RecipeFilters
from admin_api.routers._common import (
    AdminIdentity,
    Pagination,
    current_admin,
    get_pagination,
    paginated,
    parse_id_list,
)
from admin_api.services.domain import get_recipe_service
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    AdjacentOutput,
    DeleteOutput,
    PaginatedOutput,
    RecipeAttributesOutput,
    RecipeCategoriesUpdate,
    RecipeCategoryOutput,
    RecipeCreate,
    RecipeIngredientOutput,
    RecipeIngredientsUpdate,
    RecipeOutput,
    RecipeUpdate,
)


router = APIRouter(prefix="/recipes", tags=["recipes"])


def _recipe_filters(
    search: str | None = Query(default=None),
    no_image: bool = Query(default=False),
    dish_type: int | None = Query(default=None, description="1 starter, 2 main, 3 dessert"),
    quantification_type: int | None = Query(default=None),
    is_visible: bool | None = Query(default=None),
    is_folklore: bool | None = Query(default=None),
    diets: str | None = Query(default=None, description="Recipes compatible with every listed diet"),
    kitchen_equipments: str | None = Query(default=None, description="Recipes using every listed equipment"),
    exclude_allergies: str | None = Query(default=None, description="Recipes containing none of these"),
    db: Session = Depends(get_db),
) -> RecipeFilters:
    return get_recipe_service(db).build_filters(
        diet_ids=parse_id_list(diets, "diets"),
        kitchen_equipment_ids=parse_id_list(kitchen_equipments, "kitchen_equipments"),
        exclude_allergy_ids=parse_id_list(exclude_allergies, "exclude_allergies"),
        search=search,
        no_image=no_image,
        dish_type=dish_type,
        quantification_type=quantification_type,
        is_visible=is_visible,
        is_folklore=is_folklore,
    )


@router.get("", response_model=PaginatedOutput)
def list_recipes(
    filters: RecipeFilters = Depends(_recipe_filters),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """One page of recipes ordered by title."""
    filters.limit = pagination.limit
    filters.offset = pagination.offset
    items, total = get_recipe_service(db).list_page(filters)
    return paginated(items, total, pagination)


@router.get("/{recipe_id}", response_model=RecipeOutput)
def get_recipe(recipe_id: int, db: Session = Depends(get_db)) -> RecipeOutput:
    return get_recipe_service(db).get_by_id(recipe_id)


@router.post("", response_model=RecipeOutput, status_code=status.HTTP_201_CREATED)
def create_recipe(
    body: RecipeCreate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> RecipeOutput:
    """Create a recipe. Masks not given stay unset."""
    return get_recipe_service(db).create(body.model_dump(), admin.email)


@router.patch("/{recipe_id}", response_model=RecipeOutput)
def update_recipe(
    recipe_id: int,
    body: RecipeUpdate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> RecipeOutput:
    """Update a recipe. An id list replaces the whole mask of its dimension."""
    return get_recipe_service(db).update(recipe_id, body.model_dump(exclude_unset=True), admin.email)


@router.delete("/{recipe_id}", response_model=DeleteOutput)
def delete_recipe(
    recipe_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> DeleteOutput:
    get_recipe_service(db).delete(recipe_id, admin.email)
    return DeleteOutput(id=recipe_id)


@router.get("/{recipe_id}/navigation", response_model=AdjacentOutput)
def get_recipe_navigation(
    recipe_id: int,
    filters: RecipeFilters = Depends(_recipe_filters),
    db: Session = Depends(get_db),
) -> AdjacentOutput:
    return get_recipe_service(db).navigation(recipe_id, filters)


@router.get("/{recipe_id}/attributes", response_model=RecipeAttributesOutput)
def get_recipe_attributes(recipe_id: int, db: Session = Depends(get_db)) -> RecipeAttributesOutput:
    """The four masks decoded into labelled reference items."""
    return get_recipe_service(db).attributes(recipe_id)


# =============================================================================
# Categories
# =============================================================================


@router.get("/{recipe_id}/categories", response_model=list[RecipeCategoryOutput])
def get_recipe_categories(recipe_id: int, db: Session = Depends(get_db)) -> list[RecipeCategoryOutput]:
    return get_recipe_service(db).get_categories(recipe_id)


@router.put("/{recipe_id}/categories", response_model=list[RecipeCategoryOutput])
def set_recipe_categories(
    recipe_id: int,
    body: RecipeCategoriesUpdate,
    db: Session = Depends(get_db),
) -> list[RecipeCategoryOutput]:
    return get_recipe_service(db).set_categories(recipe_id, body.category_ids)


# =============================================================================
# Structured ingredients
# =============================================================================


@router.get("/{recipe_id}/ingredients", response_model=list[RecipeIngredientOutput])
def get_recipe_ingredients(recipe_id: int, db: Session = Depends(get_db)) -> list[RecipeIngredientOutput]:
    return get_recipe_service(db).get_ingredients(recipe_id)


@router.put("/{recipe_id}/ingredients", response_model=list[RecipeIngredientOutput])
def set_recipe_ingredients(
    recipe_id: int,
    body: RecipeIngredientsUpdate,
    db: Session = Depends(get_db),
) -> list[RecipeIngredientOutput]:
    """Replace the ingredient lines; ingredients_name follows."""
    lines = [line.model_dump() for line in body.ingredients]
    return get_recipe_service(db).set_ingredients(recipe_id, lines)
