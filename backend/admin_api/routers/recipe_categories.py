"""
Recipe category endpoints: CRUD, home layout (chips and sections) and
the ordered recipes of each category.

/layout and /reorder are declared before /{category_id}.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from admin_api.routers._common import AdminIdentity, current_admin
from admin_api.services.domain import get_recipe_category_service
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    CategoryLayoutOutput,
    CategoryMoveRequest,
    CategoryRecipeAdd,
    CategoryRecipeItem,
    CategoryRecipeReorder,
    CategoryReorderRequest,
    DeleteOutput,
    RecipeCategoryCreate,
    RecipeCategoryOutput,
    RecipeCategoryUpdate,
)


router = APIRouter(prefix="/recipe-categories", tags=["recipe-categories"])


@router.get("", response_model=list[RecipeCategoryOutput])
def list_recipe_categories(db: Session = Depends(get_db)) -> list[RecipeCategoryOutput]:
    """Every category, by French name."""
    return get_recipe_category_service(db).list_all()


@router.get("/layout", response_model=CategoryLayoutOutput)
def get_layout(db: Session = Depends(get_db)) -> CategoryLayoutOutput:
    """Chips and sections in display order, plus the categories available to each."""
    return get_recipe_category_service(db).layout()


@router.post("/reorder", response_model=CategoryLayoutOutput)
def reorder_zone(
    body: CategoryReorderRequest,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> CategoryLayoutOutput:
    return get_recipe_category_service(db).reorder(body.zone, body.category_ids, admin.email)


@router.post("", response_model=RecipeCategoryOutput, status_code=status.HTTP_201_CREATED)
def create_recipe_category(
    body: RecipeCategoryCreate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> RecipeCategoryOutput:
    """Create a category. Zones it is shown in get it appended last."""
    return get_recipe_category_service(db).create(body.model_dump(), admin.email)


@router.get("/{category_id}", response_model=RecipeCategoryOutput)
def get_recipe_category(category_id: int, db: Session = Depends(get_db)) -> RecipeCategoryOutput:
    return get_recipe_category_service(db).get_by_id(category_id)


@router.patch("/{category_id}", response_model=RecipeCategoryOutput)
def update_recipe_category(
    category_id: int,
    body: RecipeCategoryUpdate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> RecipeCategoryOutput:
    """Update display fields. Zones change through /move only."""
    return get_recipe_category_service(db).update(
        category_id, body.model_dump(exclude_unset=True), admin.email
    )


@router.delete("/{category_id}", response_model=DeleteOutput)
def delete_recipe_category(
    category_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> DeleteOutput:
    get_recipe_category_service(db).delete(category_id, admin.email)
    return DeleteOutput(id=category_id)


@router.post("/{category_id}/move", response_model=CategoryLayoutOutput)
def move_recipe_category(
    category_id: int,
    body: CategoryMoveRequest,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> CategoryLayoutOutput:
    """
    Move a category between zones.

    Omit from_zone to add it from the available list, omit to_zone to
    take it out of a zone.
    """
    return get_recipe_category_service(db).move(category_id, body.from_zone, body.to_zone, admin.email)


# =============================================================================
# Recipes in a category
# =============================================================================


@router.get("/{category_id}/recipes", response_model=list[CategoryRecipeItem])
def list_category_recipes(category_id: int, db: Session = Depends(get_db)) -> list[CategoryRecipeItem]:
    return get_recipe_category_service(db).recipes(category_id)


@router.post(
    "/{category_id}/recipes",
    response_model=list[CategoryRecipeItem],
    status_code=status.HTTP_201_CREATED,
)
def add_category_recipe(
    category_id: int,
    body: CategoryRecipeAdd,
    db: Session = Depends(get_db),
) -> list[CategoryRecipeItem]:
    """Append a recipe to the category."""
    return get_recipe_category_service(db).add_recipe(category_id, body.recipe_id)


@router.put("/{category_id}/recipes/order", response_model=list[CategoryRecipeItem])
def reorder_category_recipes(
    category_id: int,
    body: CategoryRecipeReorder,
    db: Session = Depends(get_db),
) -> list[CategoryRecipeItem]:
    return get_recipe_category_service(db).reorder_recipes(category_id, body.recipe_ids)


@router.delete("/{category_id}/recipes/{recipe_id}", response_model=list[CategoryRecipeItem])
def remove_category_recipe(
    category_id: int,
    recipe_id: int,
    db: Session = Depends(get_db),
) -> list[CategoryRecipeItem]:
    return get_recipe_category_service(db).remove_recipe(category_id, recipe_id)
