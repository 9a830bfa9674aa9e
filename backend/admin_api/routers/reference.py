"""
Bit-indexed reference table endpoints: allergies, diets, kitchen equipment
and the read-only seasonality months.

The three editable tables share one set of handlers built by
_register_reference_routes().
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from admin_api.models import SEASON_MONTHS
from admin_api.routers._common import AdminIdentity, current_admin
from admin_api.services.domain import get_reference_service
from shared.config.constants import ReferenceTables
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    AllergyCreate,
    AllergyOutput,
    AllergyUpdate,
    DeleteOutput,
    DietCreate,
    DietOutput,
    DietUpdate,
    KitchenEquipmentCreate,
    KitchenEquipmentOutput,
    KitchenEquipmentUpdate,
    SeasonMonthOutput,
)


router = APIRouter(tags=["reference-tables"])


def _register_reference_routes(
    path: str,
    table: str,
    output_schema: type[BaseModel],
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
) -> None:
    """List, get, create, update and delete routes for one reference table."""

    @router.get(f"/{path}", response_model=list[output_schema], name=f"list_{table}")
    def list_items(db: Session = Depends(get_db)) -> list[Any]:
        return get_reference_service(db, table).list_all()

    @router.get(f"/{path}/{{item_id}}", response_model=output_schema, name=f"get_{table}")
    def get_item(item_id: int, db: Session = Depends(get_db)) -> Any:
        return get_reference_service(db, table).get_by_id(item_id)

    @router.post(
        f"/{path}",
        response_model=output_schema,
        status_code=status.HTTP_201_CREATED,
        name=f"create_{table}",
    )
    def create_item(
        body: create_schema,
        db: Session = Depends(get_db),
        admin: AdminIdentity = Depends(current_admin),
    ) -> Any:
        """Create an item. bit_index defaults to the lowest free bit."""
        return get_reference_service(db, table).create(body.model_dump(), admin.email)

    @router.patch(f"/{path}/{{item_id}}", response_model=output_schema, name=f"update_{table}")
    def update_item(
        item_id: int,
        body: update_schema,
        db: Session = Depends(get_db),
        admin: AdminIdentity = Depends(current_admin),
    ) -> Any:
        """Update an item. bit_index cannot change once assigned."""
        return get_reference_service(db, table).update(
            item_id, body.model_dump(exclude_unset=True), admin.email
        )

    @router.delete(f"/{path}/{{item_id}}", response_model=DeleteOutput, name=f"delete_{table}")
    def delete_item(
        item_id: int,
        db: Session = Depends(get_db),
        admin: AdminIdentity = Depends(current_admin),
    ) -> DeleteOutput:
        """Delete an item. Masks keep its bit."""
        get_reference_service(db, table).delete(item_id, admin.email)
        return DeleteOutput(id=item_id)


@router.get("/diets/slug/{slug}", response_model=DietOutput)
def get_diet_by_slug(slug: str, db: Session = Depends(get_db)) -> DietOutput:
    return get_reference_service(db, ReferenceTables.DIETS).get_by_slug(slug)


@router.get("/seasonality", response_model=list[SeasonMonthOutput])
def list_season_months() -> list[SeasonMonthOutput]:
    """The twelve months; bit_index is month - 1."""
    return [SeasonMonthOutput.model_validate(month) for month in SEASON_MONTHS]


_register_reference_routes(
    "allergies", ReferenceTables.ALLERGIES, AllergyOutput, AllergyCreate, AllergyUpdate
)
_register_reference_routes(
    "diets", ReferenceTables.DIETS, DietOutput, DietCreate, DietUpdate
)
_register_reference_routes(
    "kitchen-equipments", ReferenceTables.KITCHEN_EQUIPMENTS,
    KitchenEquipmentOutput, KitchenEquipmentCreate, KitchenEquipmentUpdate,
)
