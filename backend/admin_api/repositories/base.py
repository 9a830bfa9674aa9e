"""
Base Repository implementation.
Provides common data access patterns shared by every table.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TypeVar, Generic, Sequence
from sqlalchemy.orm import Session
from sqlalchemy import ColumnElement, Select, select, func, true

from shared.config.constants import Limits


ModelT = TypeVar("ModelT")


@dataclass
class RepositoryFilters:
    """Base filters for repository queries."""

    # Pagination
    limit: int = Limits.DEFAULT_PAGE_SIZE
    offset: int = 0

    # Search
    search: str | None = None

    def __post_init__(self):
        """Validate and normalize filters."""
        self.limit = min(max(1, self.limit), Limits.MAX_PAGE_SIZE)
        self.offset = max(0, self.offset)
        if self.search:
            self.search = self.search.strip()[:Limits.MAX_SEARCH_TERM_LENGTH] or None


# =============================================================================
# Mask predicates
# =============================================================================


def mask_contains_all(column, required: int) -> ColumnElement[bool]:
    """
    ``(column & required) = required``; NULL masks read as 0.

    A zero requirement places no constraint.
    """
    if not required:
        return true()
    return func.coalesce(column, 0).bitwise_and(required) == required


def mask_contains_none(column, forbidden: int) -> ColumnElement[bool]:
    """``(column & forbidden) = 0``; NULL masks read as 0."""
    if not forbidden:
        return true()
    return func.coalesce(column, 0).bitwise_and(forbidden) == 0


class BaseRepository(ABC, Generic[ModelT]):
    """
    Abstract base repository with common operations.

    Subclasses must implement:
    - model: Return the SQLAlchemy model class
    - _base_query(): Return base query with ordering and eager loading
    - _apply_filters(): Apply entity-specific filters
    """

    def __init__(self, db: Session):
        self._db = db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]:
        """Return the SQLAlchemy model class."""
        ...

    @abstractmethod
    def _base_query(self) -> Select:
        """Return base query with default ordering."""
        ...

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply entity-specific filters to query."""
        return query

    def find_all(self, filters: RepositoryFilters | None = None) -> Sequence[ModelT]:
        """Find one page of entities matching filters."""
        filters = filters or RepositoryFilters()
        query = self._apply_filters(self._base_query(), filters)
        query = query.offset(filters.offset).limit(filters.limit)
        return self._db.execute(query).scalars().unique().all()

    def find_every(self) -> Sequence[ModelT]:
        """All rows in default order, no pagination."""
        return self._db.execute(self._base_query()).scalars().unique().all()

    def find_superset(self, filters: RepositoryFilters, cap: int = Limits.MAX_SUPERSET_FETCH) -> Sequence[ModelT]:
        """Every filtered row in default order, at most ``cap`` of them."""
        query = self._apply_filters(self._base_query(), filters).limit(cap)
        return self._db.execute(query).scalars().unique().all()

    def find_by_id(self, entity_id: int) -> ModelT | None:
        return self._db.get(self.model, entity_id)

    def find_by_ids(self, entity_ids: list[int]) -> Sequence[ModelT]:
        """Find entities by IDs (order not guaranteed)."""
        if not entity_ids:
            return []
        query = select(self.model).where(self.model.id.in_(entity_ids))
        return self._db.execute(query).scalars().all()

    def count(self, filters: RepositoryFilters | None = None) -> int:
        """Count entities matching filters, ignoring pagination."""
        filters = filters or RepositoryFilters()
        filtered = self._apply_filters(select(self.model.id), filters).subquery()
        return self._db.scalar(select(func.count()).select_from(filtered)) or 0

    def exists(self, entity_id: int) -> bool:
        query = select(func.count()).select_from(self.model).where(self.model.id == entity_id)
        return (self._db.scalar(query) or 0) > 0

    def save(self, entity: ModelT) -> ModelT:
        """Save entity (insert or update) and flush."""
        self._db.add(entity)
        self._db.flush()
        self._db.refresh(entity)
        return entity

    def delete(self, entity: ModelT) -> None:
        self._db.delete(entity)
        self._db.flush()
