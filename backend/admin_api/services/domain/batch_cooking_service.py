"""
Batch Cooking Service - generated sessions and the reviews users leave on them.

Usage:
    from admin_api.services.domain import BatchCookingSessionService

    service = BatchCookingSessionService(db)
    items, total = service.list_page(BatchCookingSessionFilters(is_cooked=False))
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from admin_api.models import BatchCookingSession, as_utc, utcnow
from admin_api.repositories import (
    BatchCookingSessionFilters,
    BatchCookingSessionRepository,
    BatchCookingSessionReviewRepository,
    RepositoryFilters,
)
from admin_api.repositories.batch_cooking import STATUS_FILTERS
from admin_api.services.base_service import BaseCRUDService, BaseService
from shared.config.constants import GenerationStatus
from shared.config.logging import get_logger
from shared.utils.admin_schemas import BatchCookingSessionOutput, SessionReviewOutput
from shared.utils.exceptions import ValidationError
from shared.utils.i18n import text_for

logger = get_logger(__name__)

NO_ALGO_NAME = "N/A"

# Columns an update may clear; every other None in a patch is ignored
NULLABLE_FIELDS = ("seed", "algo_version")


def algo_name(recipes: list[Any] | None) -> str:
    """Title of the first generated recipe, translated or plain."""
    if not recipes or not isinstance(recipes[0], dict):
        return NO_ALGO_NAME
    title = recipes[0].get("title")
    if isinstance(title, dict):
        return text_for(title, fallback=NO_ALGO_NAME)
    return title if isinstance(title, str) and title else NO_ALGO_NAME


class BatchCookingSessionService(BaseCRUDService[BatchCookingSession, BatchCookingSessionOutput]):
    """
    Service for batch cooking sessions.

    Business rules:
    - a session created from a parent is not an original
    - the parent must exist
    - deleting a session detaches its children and removes its reviews
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=BatchCookingSessionRepository(db),
            output_schema=BatchCookingSessionOutput,
            entity_name="Batch cooking session",
        )

    # =========================================================================
    # Query Methods
    # =========================================================================

    def list_page(self, filters: BatchCookingSessionFilters) -> tuple[list[BatchCookingSessionOutput], int]:
        """One page ordered by children count, then newest first."""
        for field_name in STATUS_FILTERS:
            value = getattr(filters, field_name)
            if value and value not in GenerationStatus.ALL:
                raise ValidationError(
                    f"{field_name} must be one of {', '.join(GenerationStatus.ALL)}",
                    **{field_name: value},
                )

        rows = self._repo.find_with_children_count(filters)
        items = [self.to_output(session, children_count) for session, children_count in rows]
        return items, self._repo.count(filters)

    def list_original(self, filters: BatchCookingSessionFilters) -> tuple[list[BatchCookingSessionOutput], int]:
        filters.is_original = True
        return self.list_page(filters)

    def children(self, session_id: int) -> list[BatchCookingSessionOutput]:
        """Sessions regenerated from ``session_id``, newest first."""
        self.get_entity(session_id)
        return [self.to_output(child) for child in self._repo.find_children(session_id)]

    def to_output(self, entity: BatchCookingSession, children_count: int | None = None) -> BatchCookingSessionOutput:
        output = BatchCookingSessionOutput.model_validate(entity)
        output.created_at = as_utc(entity.created_at)
        output.cooked_at = as_utc(entity.cooked_at)
        output.algo_name = algo_name(entity.recipes)
        if children_count is None:
            children_count = self._repo.count_children(entity.id)
        output.children_count = children_count
        return output

    # =========================================================================
    # Commands
    # =========================================================================

    def mark_cooked(self, session_id: int, user_email: str | None = None) -> BatchCookingSessionOutput:
        session = self.get_entity(session_id)
        session.is_cooked = True
        session.cooked_at = utcnow()
        session.set_updated_by(user_email)

        self._commit("mark session cooked", session_id=session_id)
        self._db.refresh(session)
        logger.info("Batch cooking session marked cooked", session_id=session_id, admin=user_email)
        return self.to_output(session)

    # =========================================================================
    # Validation Hooks
    # =========================================================================

    def _validate_create(self, data: dict[str, Any]) -> dict[str, Any]:
        parent_id = data.get("parent_id")
        if parent_id is not None and not self._repo.exists(parent_id):
            raise ValidationError(f"Unknown parent session {parent_id}", parent_id=parent_id)
        data["is_original"] = parent_id is None
        return data

    def _validate_update(self, entity: BatchCookingSession, data: dict[str, Any]) -> dict[str, Any]:
        return {
            field_name: value
            for field_name, value in data.items()
            if value is not None or field_name in NULLABLE_FIELDS
        }

    def _validate_delete(self, entity: BatchCookingSession) -> None:
        for child in self._repo.find_children(entity.id):
            child.parent_id = None

    def _get_entity_info(self, entity: BatchCookingSession) -> dict[str, Any]:
        return {"id": entity.id, "is_original": entity.is_original, "is_cooked": entity.is_cooked}


class SessionReviewService(BaseService):
    """Read-only listing of session reviews with their author and session."""

    def __init__(self, db: Session):
        super().__init__(db, BatchCookingSessionReviewRepository(db))

    def list_page(self, filters: RepositoryFilters) -> tuple[list[SessionReviewOutput], int]:
        reviews = self._repo.find_all(filters)
        items = []
        for review in reviews:
            output = SessionReviewOutput.model_validate(review)
            output.created_at = as_utc(review.created_at)
            items.append(output)
        return items, self._repo.count(filters)


def get_batch_cooking_session_service(db: Session) -> BatchCookingSessionService:
    return BatchCookingSessionService(db)


def get_session_review_service(db: Session) -> SessionReviewService:
    return SessionReviewService(db)
