"""
Ingredient Relation Repository - family and substitute links between ingredients.
"""

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import Select, and_, delete, func, or_, select
from sqlalchemy.orm import Session, aliased

from admin_api.models import Ingredient, IngredientRelation
from shared.config.constants import RelationType
from .base import BaseRepository, RepositoryFilters
from .ingredient import french_name


@dataclass
class RelationFilters(RepositoryFilters):
    """Filters specific to ingredient relations."""

    ingredient_id: int | None = None
    relation_type: str | None = None


class IngredientRelationRepository(BaseRepository[IngredientRelation]):
    """Repository for IngredientRelation entities, newest first."""

    @property
    def model(self) -> type[IngredientRelation]:
        return IngredientRelation

    def _base_query(self) -> Select:
        return select(IngredientRelation).order_by(
            IngredientRelation.created_at.desc(), IngredientRelation.id.desc()
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, RelationFilters):
            filters = RelationFilters(**filters.__dict__)

        if filters.ingredient_id is not None:
            query = query.where(
                or_(
                    IngredientRelation.ingredient_id == filters.ingredient_id,
                    IngredientRelation.related_ingredient_id == filters.ingredient_id,
                )
            )

        if filters.relation_type:
            query = query.where(IngredientRelation.relation_type == filters.relation_type)

        return query

    def find_with_names(self, filters: RelationFilters) -> Sequence[tuple[IngredientRelation, dict | None, dict | None]]:
        """One page of relations with both ingredients' translated names."""
        source = aliased(Ingredient)
        target = aliased(Ingredient)
        query = (
            select(IngredientRelation, source.name, target.name)
            .outerjoin(source, source.id == IngredientRelation.ingredient_id)
            .outerjoin(target, target.id == IngredientRelation.related_ingredient_id)
            .order_by(IngredientRelation.created_at.desc(), IngredientRelation.id.desc())
        )
        query = self._apply_filters(query, filters).offset(filters.offset).limit(filters.limit)
        return self._db.execute(query).all()

    def find_existing(self, ingredient_id: int, related_ingredient_id: int, relation_type: str) -> IngredientRelation | None:
        return self._db.scalar(
            select(IngredientRelation).where(
                IngredientRelation.ingredient_id == ingredient_id,
                IngredientRelation.related_ingredient_id == related_ingredient_id,
                IngredientRelation.relation_type == relation_type,
            )
        )

    def delete_between(self, ingredient_id: int, related_ingredient_id: int, relation_type: str | None = None) -> int:
        """Delete A→B and B→A. Returns the number of rows removed."""
        condition = or_(
            and_(
                IngredientRelation.ingredient_id == ingredient_id,
                IngredientRelation.related_ingredient_id == related_ingredient_id,
            ),
            and_(
                IngredientRelation.ingredient_id == related_ingredient_id,
                IngredientRelation.related_ingredient_id == ingredient_id,
            ),
        )
        stmt = delete(IngredientRelation).where(condition)
        if relation_type:
            stmt = stmt.where(IngredientRelation.relation_type == relation_type)
        result = self._db.execute(stmt.execution_options(synchronize_session="fetch"))
        return result.rowcount

    def delete_for_ingredient(self, ingredient_id: int) -> int:
        result = self._db.execute(
            delete(IngredientRelation)
            .where(
                or_(
                    IngredientRelation.ingredient_id == ingredient_id,
                    IngredientRelation.related_ingredient_id == ingredient_id,
                )
            )
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def find_families(self) -> Sequence[tuple[int, dict, int]]:
        """(id, name, children_count) for every ingredient with family children."""
        counts = (
            select(
                IngredientRelation.ingredient_id.label("parent_id"),
                func.count().label("children_count"),
            )
            .where(IngredientRelation.relation_type == RelationType.FAMILY)
            .group_by(IngredientRelation.ingredient_id)
            .subquery()
        )
        query = (
            select(Ingredient.id, Ingredient.name, counts.c.children_count)
            .join(counts, counts.c.parent_id == Ingredient.id)
            .order_by(french_name(Ingredient.name), Ingredient.id)
        )
        return self._db.execute(query).all()

    def find_related_recursive(
        self,
        ingredient_ids: list[int],
        relation_type: str = RelationType.FAMILY,
        max_depth: int = 3,
    ) -> list[int]:
        """
        Breadth-first walk along ingredient_id → related_ingredient_id.

        Returns the starting ids followed by every id reached within
        ``max_depth`` levels, each id once, in discovery order.
        """
        seen: dict[int, None] = dict.fromkeys(ingredient_ids)
        frontier = list(seen)
        depth = 0

        while depth < max_depth and frontier:
            rows = self._db.execute(
                select(IngredientRelation.related_ingredient_id)
                .where(
                    IngredientRelation.ingredient_id.in_(frontier),
                    IngredientRelation.relation_type == relation_type,
                )
                .order_by(IngredientRelation.id)
            ).scalars()

            next_frontier = []
            for related_id in rows:
                if related_id not in seen:
                    seen[related_id] = None
                    next_frontier.append(related_id)

            frontier = next_frontier
            depth += 1

        return list(seen)


def get_ingredient_relation_repository(db: Session) -> IngredientRelationRepository:
    return IngredientRelationRepository(db)
