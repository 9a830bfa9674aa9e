"""
Batch Cooking Repositories - generated sessions and their reviews.
"""

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session, aliased, joinedload

from admin_api.models import BatchCookingSession, BatchCookingSessionReview
from shared.utils.validators import escape_like_pattern
from .base import BaseRepository, RepositoryFilters


@dataclass
class BatchCookingSessionFilters(RepositoryFilters):
    """Filters specific to sessions. None leaves a field unfiltered."""

    is_original: bool | None = None
    is_cooked: bool | None = None
    recipe_generation_status: str | None = None
    ingredient_generation_status: str | None = None
    cooking_step_generation_status: str | None = None
    assembly_step_generation_status: str | None = None
    created_by: int | None = None


STATUS_FILTERS = (
    "recipe_generation_status",
    "ingredient_generation_status",
    "cooking_step_generation_status",
    "assembly_step_generation_status",
)


def children_count_column():
    """Correlated count of sessions regenerated from each row."""
    child = aliased(BatchCookingSession)
    return (
        select(func.count(child.id))
        .where(child.parent_id == BatchCookingSession.id)
        .correlate(BatchCookingSession)
        .scalar_subquery()
    )


class BatchCookingSessionRepository(BaseRepository[BatchCookingSession]):
    """Repository for BatchCookingSession entities, newest first."""

    @property
    def model(self) -> type[BatchCookingSession]:
        return BatchCookingSession

    def _base_query(self) -> Select:
        return select(BatchCookingSession).order_by(
            BatchCookingSession.created_at.desc(), BatchCookingSession.id.desc()
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, BatchCookingSessionFilters):
            filters = BatchCookingSessionFilters(**filters.__dict__)

        if filters.search:
            pattern = f"%{escape_like_pattern(filters.search)}%"
            query = query.where(
                or_(
                    BatchCookingSession.seed.ilike(pattern, escape="\\"),
                    BatchCookingSession.algo_version.ilike(pattern, escape="\\"),
                )
            )

        if filters.is_original is not None:
            query = query.where(BatchCookingSession.is_original == filters.is_original)

        if filters.is_cooked is not None:
            query = query.where(BatchCookingSession.is_cooked == filters.is_cooked)

        for field_name in STATUS_FILTERS:
            value = getattr(filters, field_name)
            if value:
                query = query.where(getattr(BatchCookingSession, field_name) == value)

        if filters.created_by is not None:
            query = query.where(BatchCookingSession.created_by == filters.created_by)

        return query

    def find_with_children_count(self, filters: BatchCookingSessionFilters) -> Sequence[tuple[BatchCookingSession, int]]:
        """
        One page of (session, children_count).

        Sessions with the most children come first, newest first among equals.
        """
        children_count = children_count_column()
        query = select(BatchCookingSession, children_count.label("children_count")).order_by(
            children_count.desc(),
            BatchCookingSession.created_at.desc(),
            BatchCookingSession.id.desc(),
        )
        query = self._apply_filters(query, filters).offset(filters.offset).limit(filters.limit)
        return self._db.execute(query).all()

    def find_children(self, parent_id: int) -> Sequence[BatchCookingSession]:
        query = self._base_query().where(BatchCookingSession.parent_id == parent_id)
        return self._db.execute(query).scalars().all()

    def count_children(self, parent_id: int) -> int:
        return self._db.scalar(
            select(func.count())
            .select_from(BatchCookingSession)
            .where(BatchCookingSession.parent_id == parent_id)
        ) or 0


class BatchCookingSessionReviewRepository(BaseRepository[BatchCookingSessionReview]):
    """Reviews, newest first, loaded with their author and session."""

    @property
    def model(self) -> type[BatchCookingSessionReview]:
        return BatchCookingSessionReview

    def _base_query(self) -> Select:
        return (
            select(BatchCookingSessionReview)
            .options(
                joinedload(BatchCookingSessionReview.session),
                joinedload(BatchCookingSessionReview.user_profile),
            )
            .order_by(BatchCookingSessionReview.created_at.desc(), BatchCookingSessionReview.id.desc())
        )


def get_batch_cooking_session_repository(db: Session) -> BatchCookingSessionRepository:
    return BatchCookingSessionRepository(db)


def get_session_review_repository(db: Session) -> BatchCookingSessionReviewRepository:
    return BatchCookingSessionReviewRepository(db)
