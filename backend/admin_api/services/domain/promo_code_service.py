"""
Promo Code Service - premium promo code generation and listing.
"""

from __future__ import annotations

import secrets
from datetime import timedelta
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from admin_api.models import PromoCode, as_utc, utcnow
from admin_api.repositories import PromoCodeFilters, PromoCodeRepository
from admin_api.services.base_service import BaseService
from shared.config.constants import PromoCodeFormat, PromoCodeStatus, PromoDuration
from shared.config.logging import subscriptions_logger
from shared.config.settings import get_settings
from shared.infrastructure.db import safe_commit
from shared.utils.admin_schemas import PromoCodeOutput
from shared.utils.exceptions import ConflictError, ValidationError


def generate_promo_code() -> str:
    """Random code of PromoCodeFormat.LENGTH characters from [A-Z0-9]."""
    return "".join(secrets.choice(PromoCodeFormat.ALPHABET) for _ in range(PromoCodeFormat.LENGTH))


def duration_label(promo_code: PromoCode) -> str:
    """Monthly label for codes granting under 35 days, yearly otherwise."""
    granted = as_utc(promo_code.premium_end_at) - as_utc(promo_code.created_at)
    if granted.days < PromoDuration.MONTH_LABEL_THRESHOLD_DAYS:
        return PromoDuration.MONTH_LABEL
    return PromoDuration.YEAR_LABEL


class PromoCodeService(BaseService[PromoCode]):
    """
    Service for promo codes.

    Business rules:
    - codes are unique; a collision is retried with a fresh code
    - premium_end_at is fixed at generation time
    """

    def __init__(self, db: Session, code_generator: Callable[[], str] = generate_promo_code):
        super().__init__(db, PromoCodeRepository(db))
        self._generate = code_generator

    def to_output(self, promo_code: PromoCode) -> PromoCodeOutput:
        return PromoCodeOutput(
            id=promo_code.id,
            code=promo_code.code,
            premium_end_at=as_utc(promo_code.premium_end_at),
            used_at=as_utc(promo_code.used_at),
            used_by_user_id=promo_code.used_by_user_id,
            duration_label=duration_label(promo_code),
            created_at=as_utc(promo_code.created_at),
        )

    def list_page(self, filters: PromoCodeFilters) -> tuple[list[PromoCodeOutput], int]:
        if filters.status not in PromoCodeStatus.ALL:
            raise ValidationError(
                f"status must be one of {', '.join(PromoCodeStatus.ALL)}",
                status=filters.status,
            )
        rows = self._repo.find_all(filters)
        return [self.to_output(row) for row in rows], self._repo.count(filters)

    def generate(self, duration: str, user_email: str | None = None) -> PromoCodeOutput:
        """
        Create a promo code granting ``duration`` of premium.

        Raises:
            ConflictError: Every attempt collided with an existing code.
        """
        if duration not in PromoDuration.ALL:
            raise ValidationError(f"duration must be one of {', '.join(PromoDuration.ALL)}")

        max_attempts = get_settings().promo_code_max_attempts
        now = utcnow()
        premium_end_at = now + timedelta(days=PromoDuration.DAYS[duration])

        for attempt in range(1, max_attempts + 1):
            promo_code = PromoCode(
                code=self._generate(),
                premium_end_at=premium_end_at,
                created_at=now,
                updated_by_email=user_email,
            )
            self._db.add(promo_code)
            try:
                safe_commit(self._db)
            except IntegrityError:
                subscriptions_logger.warning("Promo code collision, retrying", attempt=attempt)
                continue

            self._db.refresh(promo_code)
            subscriptions_logger.info(
                "Promo code generated",
                promo_code_id=promo_code.id,
                duration=duration,
                admin=user_email,
            )
            return self.to_output(promo_code)

        raise ConflictError(
            f"Could not generate a unique promo code after {max_attempts} attempts",
            max_attempts=max_attempts,
        )


def get_promo_code_service(db: Session) -> PromoCodeService:
    return PromoCodeService(db)
