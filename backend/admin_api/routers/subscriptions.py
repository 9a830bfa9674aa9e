"""
Subscription endpoints: find users, change premium end dates, audit trail.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from admin_api.routers._common import AdminIdentity, current_admin
from admin_api.services.domain import get_subscription_service
from shared.config.constants import Limits
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    SubscriptionAuditOutput,
    SubscriptionOutput,
    SubscriptionUpdate,
)


router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.get("", response_model=list[SubscriptionOutput])
def search_subscriptions(
    query: str = Query(default="", description="User UUID or part of an email"),
    db: Session = Depends(get_db),
) -> list[SubscriptionOutput]:
    return get_subscription_service(db).search(query)


@router.put("", response_model=SubscriptionOutput)
def update_subscription(
    body: SubscriptionUpdate,
    db: Session = Depends(get_db),
    admin: AdminIdentity = Depends(current_admin),
) -> SubscriptionOutput:
    """Extend or set a user's premium end date. The change is audited."""
    return get_subscription_service(db).update(
        user_id=body.user_id,
        action=body.action,
        custom_date=body.custom_date,
        note=body.note,
        admin_id=admin.id,
        admin_email=admin.email,
    )


@router.get("/audit", response_model=list[SubscriptionAuditOutput])
def list_subscription_audit(
    user_id: str | None = Query(default=None),
    limit: int = Query(default=Limits.DEFAULT_PAGE_SIZE, ge=1, le=Limits.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
) -> list[SubscriptionAuditOutput]:
    """Latest subscription changes, newest first."""
    return get_subscription_service(db).audit(user_id, limit)
