"""
Reference Repository - Data access for bit-indexed reference tables.

One class serves Allergy, Diet, KitchenEquipment and
IngredientSearchNamespace; the model is chosen at construction.
"""

from typing import Generic, Sequence, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from admin_api.models import (
    Allergy,
    Diet,
    Ingredient,
    IngredientSearchNamespace,
    KitchenEquipment,
    Recipe,
)
from shared.config.constants import BitLimits
from shared.utils.masks import bits_of
from .base import BaseRepository

ReferenceT = TypeVar("ReferenceT", Allergy, Diet, KitchenEquipment, IngredientSearchNamespace)

# Subject columns whose masks hold the bits of each reference table
MASK_COLUMNS = {
    Allergy: (Recipe.allergy_mask,),
    Diet: (Recipe.diet_mask,),
    KitchenEquipment: (Recipe.kitchen_equipments_mask,),
    IngredientSearchNamespace: (Ingredient.search_namespace_mask,),
}


class ReferenceItemRepository(BaseRepository[ReferenceT], Generic[ReferenceT]):
    """
    Repository for a bit-indexed reference table.

    Default ordering is display order then bit_index; tables without an
    order column sort by bit_index only.
    """

    def __init__(self, db: Session, model: type[ReferenceT]):
        super().__init__(db)
        self._model = model

    @property
    def model(self) -> type[ReferenceT]:
        return self._model

    def _base_query(self) -> Select:
        query = select(self._model)
        if hasattr(self._model, "order"):
            query = query.order_by(self._model.order, self._model.bit_index, self._model.id)
        else:
            query = query.order_by(self._model.bit_index, self._model.id)
        return query

    def find_by_bit_index(self, bit_index: int) -> ReferenceT | None:
        return self._db.scalar(select(self._model).where(self._model.bit_index == bit_index))

    def used_bit_indexes(self) -> set[int]:
        rows = self._db.execute(
            select(self._model.bit_index).where(self._model.bit_index.is_not(None))
        ).scalars()
        return set(rows)

    def bits_in_masks(self) -> set[int]:
        """Bits still set on at least one stored mask of this table's subjects."""
        carried = 0
        for column in MASK_COLUMNS.get(self._model, ()):
            values = self._db.execute(
                select(column).where(column.is_not(None), column != 0).distinct()
            ).scalars()
            for value in values:
                carried |= value
        return set(bits_of(carried & BitLimits.MAX_MASK))

    def unavailable_bit_indexes(self) -> set[int]:
        """
        Bits that cannot be handed out: owned by a row, or retired.

        A deleted item leaves its bit on existing masks; giving that bit
        to a new item would relabel every one of those rows.
        """
        return self.used_bit_indexes() | self.bits_in_masks()

    def lowest_free_bit_index(self) -> int | None:
        """Smallest available bit position, or None when the table is full."""
        used = self.unavailable_bit_indexes()
        for bit_index in range(BitLimits.MIN_BIT_INDEX, BitLimits.MAX_BIT_INDEX + 1):
            if bit_index not in used:
                return bit_index
        return None

    def find_missing_bit_index(self) -> Sequence[ReferenceT]:
        """Rows created before bit indexes existed, oldest id first."""
        query = (
            select(self._model)
            .where(self._model.bit_index.is_(None))
            .order_by(self._model.id)
        )
        return self._db.execute(query).scalars().all()

    def find_by_slug(self, slug: str) -> ReferenceT | None:
        if not hasattr(self._model, "slug"):
            return None
        return self._db.scalar(select(self._model).where(self._model.slug == slug))

    def find_by_name(self, name: str) -> ReferenceT | None:
        """Exact match on a plain-text name column (namespaces)."""
        column = getattr(self._model, "name", None)
        if column is None or self._model is not IngredientSearchNamespace:
            return None
        return self._db.scalar(select(self._model).where(column == name))


def get_allergy_repository(db: Session) -> ReferenceItemRepository[Allergy]:
    return ReferenceItemRepository(db, Allergy)


def get_diet_repository(db: Session) -> ReferenceItemRepository[Diet]:
    return ReferenceItemRepository(db, Diet)


def get_kitchen_equipment_repository(db: Session) -> ReferenceItemRepository[KitchenEquipment]:
    return ReferenceItemRepository(db, KitchenEquipment)


def get_namespace_repository(db: Session) -> ReferenceItemRepository[IngredientSearchNamespace]:
    return ReferenceItemRepository(db, IngredientSearchNamespace)
