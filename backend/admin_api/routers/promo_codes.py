"""
Promo code endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from admin_api.repositories import PromoCodeFilters
from admin_api.routers._common import AdminIdentity, Pagination, current_admin, get_pagination, paginated
from admin_api.services.domain import get_promo_code_service
from shared.config.constants import PromoCodeStatus
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import PaginatedOutput, PromoCodeCreate, PromoCodeOutput


router = APIRouter(prefix="/promo-codes", tags=["promo-codes"])


@router.get("", response_model=PaginatedOutput)
def list_promo_codes(
    status_filter: str = Query(default=PromoCodeStatus.ALL_CODES, alias="status", description="all, used or unused"),
    search: str | None = Query(default=None),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Promo codes, newest first."""
    filters = PromoCodeFilters(
        limit=pagination.limit,
        offset=pagination.offset,
        search=search,
        status=status_filter,
    )
    items, total = get_promo_code_service(db).list_page(filters)
    return paginated(items, total, pagination)


@router.post("", response_model=PromoCodeOutput, status_code=status.HTTP_201_CREATED)
def generate_promo_code(
    body: PromoCodeCreate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> PromoCodeOutput:
    """Generate a unique 8-character code granting one month or one year."""
    return get_promo_code_service(db).generate(body.duration, admin.email)
