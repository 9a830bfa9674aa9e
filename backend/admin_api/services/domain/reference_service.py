"""
Reference Table Service - bit-indexed lookup tables.

Handles the business rules shared by allergies, diets, kitchen equipment
and ingredient search namespaces:
- bit_index in [0, 30], unique per table
- bit_index auto-assigned to the lowest free bit when omitted
- a bit still set on stored masks is never handed out again
- bit_index fixed once set (legacy NULL rows may receive one)
- deleting a row leaves its bit on existing masks

Usage:
    from admin_api.services.domain import get_reference_service

    service = get_reference_service(db, "diets")
    diets = service.list_all()
    diet = service.create({"title": {"fr": "Vegan"}, "slug": "vegan"}, user_email)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence

from pydantic import BaseModel
from sqlalchemy.orm import Session

from admin_api.models import (
    Allergy,
    Diet,
    IngredientSearchNamespace,
    KitchenEquipment,
    SEASON_MONTHS,
)
from admin_api.repositories import ReferenceItemRepository
from admin_api.services.base_service import BaseCRUDService
from shared.config.constants import ReferenceTables
from shared.config.logging import get_logger, masks_logger
from shared.utils.admin_schemas import (
    AllergyOutput,
    DietOutput,
    KitchenEquipmentOutput,
    NamespaceOutput,
    ReferenceItemSummary,
)
from shared.utils.exceptions import (
    BitIndexRangeError,
    ConflictError,
    DuplicateEntityError,
    ImmutableFieldError,
    NotFoundError,
    ValidationError,
    to_http_error,
)
from shared.utils.i18n import text_for
from shared.utils.masks import validate_bit_index

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReferenceTable:
    """How one reference table is stored and displayed."""

    name: str
    model: type | None
    output_schema: type[BaseModel] | None
    entity_name: str
    label: Callable[[Any], str]


def _translated(attribute: str) -> Callable[[Any], str]:
    return lambda item: text_for(getattr(item, attribute), fallback=f"#{item.id}")


REFERENCE_TABLES: dict[str, ReferenceTable] = {
    ReferenceTables.ALLERGIES: ReferenceTable(
        ReferenceTables.ALLERGIES, Allergy, AllergyOutput, "Allergy", _translated("title")
    ),
    ReferenceTables.DIETS: ReferenceTable(
        ReferenceTables.DIETS, Diet, DietOutput, "Diet", _translated("title")
    ),
    ReferenceTables.KITCHEN_EQUIPMENTS: ReferenceTable(
        ReferenceTables.KITCHEN_EQUIPMENTS, KitchenEquipment, KitchenEquipmentOutput,
        "Kitchen equipment", _translated("name"),
    ),
    ReferenceTables.SEARCH_NAMESPACES: ReferenceTable(
        ReferenceTables.SEARCH_NAMESPACES, IngredientSearchNamespace, NamespaceOutput,
        "Namespace", lambda item: item.name,
    ),
    # Fixed list, never persisted
    ReferenceTables.SEASONALITY: ReferenceTable(
        ReferenceTables.SEASONALITY, None, None, "Month", _translated("name")
    ),
}


def get_reference_table(table: str) -> ReferenceTable:
    try:
        return REFERENCE_TABLES[table]
    except KeyError:
        raise ValidationError(f"Unknown reference table: {table}", table=table)


def reference_items(db: Session, table: str) -> Sequence[Any]:
    """Every item of ``table`` in display order, ready for the mask codec."""
    info = get_reference_table(table)
    if info.model is None:
        return SEASON_MONTHS
    return ReferenceItemRepository(db, info.model).find_every()


def summarize(items: Sequence[Any], table: str) -> list[ReferenceItemSummary]:
    """Compact view of decoded items. Items without a bit are skipped."""
    info = get_reference_table(table)
    return [
        ReferenceItemSummary(
            id=item.id,
            bit_index=item.bit_index,
            label=info.label(item),
            emoji=getattr(item, "emoji", None),
        )
        for item in items
        if item.bit_index is not None
    ]


class ReferenceTableService(BaseCRUDService):
    """
    CRUD for one bit-indexed reference table.

    Business rules:
    - bit_index must be in range and unused
    - bit_index cannot change once assigned
    - diets are unique by slug, namespaces by name
    """

    def __init__(self, db: Session, table: str):
        info = get_reference_table(table)
        if info.model is None:
            raise ValidationError(f"Reference table {table} is read-only", table=table)
        super().__init__(
            db=db,
            repo=ReferenceItemRepository(db, info.model),
            output_schema=info.output_schema,
            entity_name=info.entity_name,
        )
        self._table = info

    @property
    def table(self) -> str:
        return self._table.name

    # =========================================================================
    # bit_index rules
    # =========================================================================

    def _checked_bit_index(self, bit_index: Any) -> int:
        """Range and uniqueness check for a bit_index about to be stored."""
        try:
            bit_index = validate_bit_index(bit_index)
        except BitIndexRangeError as e:
            raise to_http_error(e, table=self.table)

        holder = self._repo.find_by_bit_index(bit_index)
        if holder is not None:
            raise ConflictError(
                f"bit_index {bit_index} is already used by {self._table.entity_name.lower()} "
                f"'{self._table.label(holder)}'",
                table=self.table,
                bit_index=bit_index,
                holder_id=holder.id,
            )
        if bit_index in self._repo.bits_in_masks():
            raise ConflictError(
                f"bit_index {bit_index} is still set on stored {self.table} masks",
                table=self.table,
                bit_index=bit_index,
            )
        return bit_index

    def _next_bit_index(self) -> int:
        bit_index = self._repo.lowest_free_bit_index()
        if bit_index is None:
            raise ConflictError(
                f"Every bit of {self.table} is taken; delete an item first",
                table=self.table,
            )
        return bit_index

    # =========================================================================
    # Validation Hooks
    # =========================================================================

    def _validate_create(self, data: dict[str, Any]) -> dict[str, Any]:
        bit_index = data.get("bit_index")
        if bit_index is None:
            data["bit_index"] = self._next_bit_index()
        else:
            data["bit_index"] = self._checked_bit_index(bit_index)

        self._check_unique_keys(data, current_id=None)
        return data

    def _validate_update(self, entity: Any, data: dict[str, Any]) -> dict[str, Any]:
        if "bit_index" in data:
            requested = data.pop("bit_index")
            if entity.bit_index is None and requested is not None:
                data["bit_index"] = self._checked_bit_index(requested)
            elif requested != entity.bit_index:
                raise ImmutableFieldError(
                    self._table.entity_name, "bit_index", entity_id=entity.id
                )

        self._check_unique_keys(data, current_id=entity.id)
        return data

    def _check_unique_keys(self, data: dict[str, Any], current_id: int | None) -> None:
        slug = data.get("slug")
        if slug and self._table.model is Diet:
            existing = self._repo.find_by_slug(slug)
            if existing is not None and existing.id != current_id:
                raise DuplicateEntityError(self._table.entity_name, slug)

        name = data.get("name")
        if isinstance(name, str):
            existing = self._repo.find_by_name(name)
            if existing is not None and existing.id != current_id:
                raise DuplicateEntityError(self._table.entity_name, name)

    # =========================================================================
    # Lifecycle Hooks
    # =========================================================================

    def _after_create(self, entity: Any) -> None:
        masks_logger.info(
            "Reference item registered",
            table=self.table,
            entity_id=entity.id,
            bit_index=entity.bit_index,
        )

    def _get_entity_info(self, entity: Any) -> dict[str, Any]:
        return {"id": entity.id, "bit_index": entity.bit_index}

    def _after_delete(self, entity_info: dict[str, Any]) -> None:
        # The bit stays reserved while any stored mask carries it
        masks_logger.warning(
            "Reference item deleted; its bit stays set on existing masks",
            table=self.table,
            **entity_info,
        )

    # =========================================================================
    # Query Methods
    # =========================================================================

    def get_by_slug(self, slug: str) -> BaseModel:
        entity = self._repo.find_by_slug(slug)
        if entity is None:
            raise NotFoundError(self._table.entity_name, slug=slug)
        return self.to_output(entity)

    def summaries(self) -> list[ReferenceItemSummary]:
        return summarize(self._repo.find_every(), self.table)


def get_reference_service(db: Session, table: str) -> ReferenceTableService:
    return ReferenceTableService(db, table)
