"""
Subscription Repositories - promo codes, user profiles and the audit trail.
"""

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from admin_api.models import PromoCode, SubscriptionAuditLog, UserProfile
from shared.config.constants import PromoCodeStatus
from .base import BaseRepository, RepositoryFilters


@dataclass
class PromoCodeFilters(RepositoryFilters):
    status: str = PromoCodeStatus.ALL_CODES


class PromoCodeRepository(BaseRepository[PromoCode]):
    """Repository for PromoCode entities, newest first."""

    @property
    def model(self) -> type[PromoCode]:
        return PromoCode

    def _base_query(self) -> Select:
        return select(PromoCode).order_by(PromoCode.created_at.desc(), PromoCode.id.desc())

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if not isinstance(filters, PromoCodeFilters):
            filters = PromoCodeFilters(**filters.__dict__)

        if filters.status == PromoCodeStatus.USED:
            query = query.where(PromoCode.used_at.is_not(None))
        elif filters.status == PromoCodeStatus.UNUSED:
            query = query.where(PromoCode.used_at.is_(None))

        if filters.search:
            query = query.where(PromoCode.code.contains(filters.search.upper(), autoescape=True))

        return query


class UserProfileRepository(BaseRepository[UserProfile]):
    """Repository for UserProfile entities. Soft-deleted profiles are hidden."""

    @property
    def model(self) -> type[UserProfile]:
        return UserProfile

    def _base_query(self) -> Select:
        return (
            select(UserProfile)
            .where(UserProfile.deleted_at.is_(None))
            .order_by(UserProfile.created_at.desc(), UserProfile.id.desc())
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        return query.where(UserProfile.deleted_at.is_(None))

    def find_by_user_id(self, user_id: str) -> UserProfile | None:
        return self._db.scalar(
            select(UserProfile).where(
                UserProfile.user_id == user_id,
                UserProfile.deleted_at.is_(None),
            )
        )

    def search_by_email(self, email: str, limit: int) -> Sequence[UserProfile]:
        query = (
            self._base_query()
            .where(func.lower(UserProfile.email).contains(email.lower(), autoescape=True))
            .limit(limit)
        )
        return self._db.execute(query).scalars().all()

    def find_active(self) -> Sequence[UserProfile]:
        return self._db.execute(self._base_query()).scalars().all()


class SubscriptionAuditLogRepository(BaseRepository[SubscriptionAuditLog]):
    """Repository for SubscriptionAuditLog entries, newest first."""

    @property
    def model(self) -> type[SubscriptionAuditLog]:
        return SubscriptionAuditLog

    def _base_query(self) -> Select:
        return select(SubscriptionAuditLog).order_by(
            SubscriptionAuditLog.created_at.desc(), SubscriptionAuditLog.id.desc()
        )

    def find_for_user(self, user_id: str | None, limit: int) -> Sequence[SubscriptionAuditLog]:
        query = self._base_query()
        if user_id:
            query = query.where(SubscriptionAuditLog.user_id == user_id)
        return self._db.execute(query.limit(limit)).scalars().all()


def get_promo_code_repository(db: Session) -> PromoCodeRepository:
    return PromoCodeRepository(db)


def get_user_profile_repository(db: Session) -> UserProfileRepository:
    return UserProfileRepository(db)


def get_subscription_audit_repository(db: Session) -> SubscriptionAuditLogRepository:
    return SubscriptionAuditLogRepository(db)
