"""
Batch cooking session and session review endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from admin_api.repositories import BatchCookingSessionFilters, RepositoryFilters
from admin_api.routers._common import AdminIdentity, Pagination, current_admin, get_pagination, paginated
from admin_api.services.domain import get_batch_cooking_session_service, get_session_review_service
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    BatchCookingSessionCreate,
    BatchCookingSessionOutput,
    BatchCookingSessionUpdate,
    DeleteOutput,
    PaginatedOutput,
)


router = APIRouter(tags=["batch-cooking-sessions"])

STATUS_HELP = "pending, processing, completed or failed"


def _session_filters(
    search: str | None = Query(default=None, description="Matches seed or algo_version"),
    is_original: bool | None = Query(default=None),
    is_cooked: bool | None = Query(default=None),
    recipe_generation_status: str | None = Query(default=None, description=STATUS_HELP),
    ingredient_generation_status: str | None = Query(default=None, description=STATUS_HELP),
    cooking_step_generation_status: str | None = Query(default=None, description=STATUS_HELP),
    assembly_step_generation_status: str | None = Query(default=None, description=STATUS_HELP),
    created_by: int | None = Query(default=None, description="User profile id"),
    pagination: Pagination = Depends(get_pagination),
) -> BatchCookingSessionFilters:
    return BatchCookingSessionFilters(
        limit=pagination.limit,
        offset=pagination.offset,
        search=search,
        is_original=is_original,
        is_cooked=is_cooked,
        recipe_generation_status=recipe_generation_status,
        ingredient_generation_status=ingredient_generation_status,
        cooking_step_generation_status=cooking_step_generation_status,
        assembly_step_generation_status=assembly_step_generation_status,
        created_by=created_by,
    )


# =============================================================================
# Sessions
# =============================================================================


@router.get("/batch-cooking-sessions", response_model=PaginatedOutput)
def list_sessions(
    filters: BatchCookingSessionFilters = Depends(_session_filters),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Sessions with the most regenerations first, then newest first."""
    items, total = get_batch_cooking_session_service(db).list_page(filters)
    return paginated(items, total, pagination)


@router.get("/batch-cooking-sessions/original", response_model=PaginatedOutput)
def list_original_sessions(
    filters: BatchCookingSessionFilters = Depends(_session_filters),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    items, total = get_batch_cooking_session_service(db).list_original(filters)
    return paginated(items, total, pagination)


@router.get("/batch-cooking-sessions/{session_id}", response_model=BatchCookingSessionOutput)
def get_session(session_id: int, db: Session = Depends(get_db)) -> BatchCookingSessionOutput:
    return get_batch_cooking_session_service(db).get_by_id(session_id)


@router.get("/batch-cooking-sessions/{session_id}/children", response_model=list[BatchCookingSessionOutput])
def list_session_children(session_id: int, db: Session = Depends(get_db)) -> list[BatchCookingSessionOutput]:
    """Sessions regenerated from this one, newest first."""
    return get_batch_cooking_session_service(db).children(session_id)


@router.post(
    "/batch-cooking-sessions",
    response_model=BatchCookingSessionOutput,
    status_code=status.HTTP_201_CREATED,
)
def create_session(
    body: BatchCookingSessionCreate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> BatchCookingSessionOutput:
    return get_batch_cooking_session_service(db).create(body.model_dump(), admin.email)


@router.patch("/batch-cooking-sessions/{session_id}", response_model=BatchCookingSessionOutput)
def update_session(
    session_id: int,
    body: BatchCookingSessionUpdate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> BatchCookingSessionOutput:
    return get_batch_cooking_session_service(db).update(
        session_id, body.model_dump(exclude_unset=True), admin.email
    )


@router.patch("/batch-cooking-sessions/{session_id}/cooked", response_model=BatchCookingSessionOutput)
def mark_session_cooked(
    session_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> BatchCookingSessionOutput:
    """Set is_cooked and stamp cooked_at with the current time."""
    return get_batch_cooking_session_service(db).mark_cooked(session_id, admin.email)


@router.delete("/batch-cooking-sessions/{session_id}", response_model=DeleteOutput)
def delete_session(
    session_id: int,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> DeleteOutput:
    """Delete a session and its reviews. Its children become parentless."""
    get_batch_cooking_session_service(db).delete(session_id, admin.email)
    return DeleteOutput(id=session_id)


# =============================================================================
# Reviews
# =============================================================================


@router.get("/batch-cooking-session-reviews", response_model=PaginatedOutput)
def list_session_reviews(
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Reviews newest first, with their author and a summary of the session."""
    filters = RepositoryFilters(limit=pagination.limit, offset=pagination.offset)
    items, total = get_session_review_service(db).list_page(filters)
    return paginated(items, total, pagination)
