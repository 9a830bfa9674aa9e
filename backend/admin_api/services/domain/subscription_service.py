"""
Subscription Service - premium end dates edited by admins, with audit trail.

Usage:
    from admin_api.services.domain import SubscriptionService

    service = SubscriptionService(db)
    service.update(user_id, "add_1_month", admin=admin)
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from admin_api.models import SubscriptionAuditLog, UserProfile, as_utc, utcnow
from admin_api.repositories import SubscriptionAuditLogRepository, UserProfileRepository
from admin_api.services.base_service import BaseService
from shared.config.constants import Limits, SubscriptionAction
from shared.config.logging import mask_email, subscriptions_logger
from shared.utils.admin_schemas import SubscriptionAuditOutput, SubscriptionOutput
from shared.utils.exceptions import NotFoundError, ValidationError


def is_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def extended_end_date(current_end: datetime | None, days: int, now: datetime) -> datetime:
    """Extend from the current end, or from now when it has already passed."""
    current_end = as_utc(current_end)
    start = current_end if current_end is not None and current_end > now else now
    return start + timedelta(days=days)


class SubscriptionService(BaseService[UserProfile]):
    """
    Service for user subscriptions.

    Business rules:
    - add_1_month / add_1_year extend max(current end, now)
    - custom_date sets the end date as given
    - every change is written to the audit log
    """

    def __init__(self, db: Session):
        super().__init__(db, UserProfileRepository(db))
        self._audit = SubscriptionAuditLogRepository(db)

    def to_output(self, profile: UserProfile) -> SubscriptionOutput:
        end = as_utc(profile.premium_sub_end_at)
        return SubscriptionOutput(
            user_id=profile.user_id,
            email=profile.email,
            premium_sub_end_at=end,
            is_premium=end is not None and end > utcnow(),
            created_at=as_utc(profile.created_at),
        )

    def search(self, query: str) -> list[SubscriptionOutput]:
        """Users matching a UUID exactly or an email partially."""
        query = (query or "").strip()
        if not query:
            raise ValidationError("query is required")

        if is_uuid(query):
            profile = self._repo.find_by_user_id(query)
            profiles = [profile] if profile is not None else []
        else:
            profiles = self._repo.search_by_email(query, limit=Limits.DEFAULT_PAGE_SIZE)
        return [self.to_output(profile) for profile in profiles]

    def update(
        self,
        user_id: str,
        action: str,
        custom_date: datetime | None = None,
        note: str | None = None,
        admin_id: str | None = None,
        admin_email: str | None = None,
    ) -> SubscriptionOutput:
        if action not in SubscriptionAction.ALL:
            raise ValidationError(f"Unknown subscription action: {action}")
        if action == SubscriptionAction.CUSTOM_DATE and custom_date is None:
            raise ValidationError("custom_date is required for the custom_date action")

        profile = self._repo.find_by_user_id(user_id)
        if profile is None:
            raise NotFoundError("User profile", user_id)

        previous_end = as_utc(profile.premium_sub_end_at)
        if action == SubscriptionAction.CUSTOM_DATE:
            new_end = custom_date
        else:
            new_end = extended_end_date(previous_end, SubscriptionAction.DAYS[action], utcnow())

        profile.premium_sub_end_at = new_end
        profile.set_updated_by(admin_email)
        self._db.add(
            SubscriptionAuditLog(
                user_id=user_id,
                admin_id=admin_id,
                admin_email=admin_email,
                action=action,
                previous_end_at=previous_end,
                new_end_at=new_end,
                note=note,
            )
        )
        self._commit("update subscription", user_id=user_id)
        self._db.refresh(profile)

        subscriptions_logger.info(
            "Subscription updated",
            user_id=user_id,
            email=mask_email(profile.email),
            action=action,
            previous_end_at=previous_end,
            new_end_at=new_end,
            admin=mask_email(admin_email),
        )
        return self.to_output(profile)

    def audit(self, user_id: str | None = None, limit: int = Limits.DEFAULT_PAGE_SIZE) -> list[SubscriptionAuditOutput]:
        limit = min(max(1, limit), Limits.MAX_PAGE_SIZE)
        entries = self._audit.find_for_user(user_id, limit)
        return [SubscriptionAuditOutput.model_validate(entry) for entry in entries]


def get_subscription_service(db: Session) -> SubscriptionService:
    return SubscriptionService(db)
