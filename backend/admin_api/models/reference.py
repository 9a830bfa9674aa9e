"""
Bit-indexed reference tables: Allergy, Diet, KitchenEquipment,
IngredientSearchNamespace, plus the fixed SeasonMonth list.

Each row owns one bit of the masks stored on recipes and ingredients.
Deleting a row leaves its bit set on existing masks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import JSON, Boolean, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, ReferenceItemMixin


class Allergy(ReferenceItemMixin, Base):
    """Allergy a recipe can contain (allergy_mask)."""

    __tablename__ = "allergies"

    title: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    emoji: Mapped[Optional[str]] = mapped_column(Text)
    slug: Mapped[Optional[str]] = mapped_column(Text)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class Diet(ReferenceItemMixin, Base):
    """Diet a recipe is compatible with (diet_mask)."""

    __tablename__ = "diets"

    title: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    description: Mapped[Optional[dict]] = mapped_column(JSON)
    emoji: Mapped[Optional[str]] = mapped_column(Text)
    slug: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # "No restriction" diet shown first in the app
    is_all: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class KitchenEquipment(ReferenceItemMixin, Base):
    """Equipment a recipe requires (kitchen_equipments_mask)."""

    __tablename__ = "kitchen_equipments"

    name: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    emoji: Mapped[Optional[str]] = mapped_column(Text)
    slug: Mapped[Optional[str]] = mapped_column(Text)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class IngredientSearchNamespace(ReferenceItemMixin, Base):
    """Named search scope of the app (Ingredient.search_namespace_mask)."""

    __tablename__ = "ingredient_search_namespaces"

    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)


@dataclass(frozen=True)
class SeasonMonth:
    """Month of the year; bit_index is month - 1."""

    id: int
    bit_index: int
    name: dict


_MONTH_NAMES = [
    ("Janvier", "January"), ("Février", "February"), ("Mars", "March"),
    ("Avril", "April"), ("Mai", "May"), ("Juin", "June"),
    ("Juillet", "July"), ("Août", "August"), ("Septembre", "September"),
    ("Octobre", "October"), ("Novembre", "November"), ("Décembre", "December"),
]

SEASON_MONTHS: list[SeasonMonth] = [
    SeasonMonth(id=month, bit_index=month - 1, name={"fr": fr, "en": en})
    for month, (fr, en) in enumerate(_MONTH_NAMES, start=1)
]
