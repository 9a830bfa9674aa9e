"""
Statistics Service - onboarding questionnaire statistics.

Aggregates are computed in Python over the active (not soft-deleted)
profiles so the same code runs on PostgreSQL and SQLite.
"""

from __future__ import annotations

import csv
import io
from collections import Counter
from datetime import datetime
from typing import Any, Iterable, Sequence

from sqlalchemy.orm import Session

from admin_api.models import UserProfile, as_utc, utcnow
from admin_api.repositories import (
    UserProfileRepository,
    get_allergy_repository,
    get_diet_repository,
    get_kitchen_equipment_repository,
)
from shared.config.constants import Limits, OnboardingLabels
from shared.config.logging import get_logger
from shared.utils.admin_schemas import (
    LabelCount,
    MonthCount,
    OnboardingKpis,
    OnboardingStatsOutput,
    SizeCount,
)
from shared.utils.i18n import text_for

logger = get_logger(__name__)


def _average(values: Iterable[Any]) -> float:
    """Mean rounded to one decimal; missing values count as 0."""
    values = [float(value or 0) for value in values]
    if not values:
        return 0.0
    return round(sum(values) / len(values), 1)


def last_months(now: datetime, count: int = Limits.REGISTRATION_MONTHS) -> list[str]:
    """``count`` month keys (YYYY-MM) ending with the month of ``now``, oldest first."""
    months = []
    year, month = now.year, now.month
    for _ in range(count):
        months.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def _contains_count(profiles: Sequence[UserProfile], attribute: str, value: Any) -> int:
    return sum(1 for profile in profiles if value in (getattr(profile, attribute) or []))


class StatisticsService:
    def __init__(self, db: Session):
        self._db = db
        self._profiles = UserProfileRepository(db)

    def _reference_distribution(self, repo, profiles, attribute: str, label_attribute: str, fallback: str) -> list[LabelCount]:
        items = sorted(repo.find_every(), key=lambda item: item.id)
        return [
            LabelCount(
                label=text_for(getattr(item, label_attribute), fallback=f"{fallback} {item.id}"),
                count=_contains_count(profiles, attribute, item.id),
            )
            for item in items
        ]

    def onboarding(self, now: datetime | None = None) -> OnboardingStatsOutput:
        now = now or utcnow()
        profiles = self._profiles.find_active()

        total = len(profiles)
        premium = sum(
            1 for profile in profiles
            if profile.premium_sub_end_at is not None and as_utc(profile.premium_sub_end_at) > now
        )
        kpis = OnboardingKpis(
            total_users=total,
            premium_users=premium,
            premium_percentage=round(100 * premium / total, 1) if total else 0.0,
            avg_household_size=_average(profile.meal_people_quantity for profile in profiles),
            avg_session_count=_average(profile.batch_cooking_session_count for profile in profiles),
        )

        registrations = Counter(
            as_utc(profile.created_at).strftime("%Y-%m") for profile in profiles if profile.created_at
        )
        registrations_by_month = [
            MonthCount(month=month, count=registrations.get(month, 0)) for month in last_months(now)
        ]

        frequency = Counter(profile.batch_cooking_frequency for profile in profiles)
        household = Counter(profile.meal_people_quantity for profile in profiles)
        appetite = Counter(profile.appetite for profile in profiles)

        stats = OnboardingStatsOutput(
            kpis=kpis,
            registrations_by_month=registrations_by_month,
            diet_distribution=self._reference_distribution(
                get_diet_repository(self._db), profiles, "diets", "title", "Diet"
            ),
            allergy_distribution=self._reference_distribution(
                get_allergy_repository(self._db), profiles, "allergies", "title", "Allergy"
            ),
            equipment_distribution=self._reference_distribution(
                get_kitchen_equipment_repository(self._db), profiles, "kitchen_equipment", "name", "Equip"
            ),
            frequency_distribution=[
                LabelCount(label=label, count=frequency.get(value, 0))
                for value, label in OnboardingLabels.FREQUENCY.items()
            ],
            household_size_distribution=[
                SizeCount(size=size, count=household.get(size, 0))
                for size in OnboardingLabels.HOUSEHOLD_SIZES
            ],
            appetite_distribution=[
                LabelCount(label=label, count=appetite.get(value, 0))
                for value, label in OnboardingLabels.APPETITE.items()
            ],
            goals_distribution=[
                LabelCount(label=label, count=_contains_count(profiles, "batch_cooking_goals", value))
                for value, label in OnboardingLabels.GOALS.items()
            ],
        )
        logger.debug("Onboarding statistics computed", total_users=total)
        return stats

    def onboarding_csv(self, now: datetime | None = None) -> str:
        return onboarding_csv(self.onboarding(now))


def onboarding_csv(stats: OnboardingStatsOutput) -> str:
    """Sectioned CSV export of the onboarding statistics."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    def section(title: str, header: tuple[str, str], rows: Iterable[tuple[Any, Any]], last: bool = False) -> None:
        writer.writerow([f"=== {title} ==="])
        writer.writerow(header)
        writer.writerows(rows)
        if not last:
            writer.writerow([])

    kpis = stats.kpis
    section("KPIs", ("Metrique", "Valeur"), [
        ("Utilisateurs totaux", kpis.total_users),
        ("Utilisateurs premium", kpis.premium_users),
        ("Pourcentage premium", f"{kpis.premium_percentage}%"),
        ("Taille moyenne du foyer", kpis.avg_household_size),
        ("Sessions BC moyennes", kpis.avg_session_count),
    ])
    section("Inscriptions par mois", ("Mois", "Inscriptions"),
            [(row.month, row.count) for row in stats.registrations_by_month])
    section("Regimes alimentaires", ("Regime", "Nombre"),
            [(row.label, row.count) for row in stats.diet_distribution])
    section("Allergies", ("Allergie", "Nombre"),
            [(row.label, row.count) for row in stats.allergy_distribution])
    section("Equipement cuisine", ("Equipement", "Nombre"),
            [(row.label, row.count) for row in stats.equipment_distribution])
    section("Frequence batch cooking", ("Frequence", "Nombre"),
            [(row.label, row.count) for row in stats.frequency_distribution])
    section("Nombre de personnes par foyer", ("Personnes", "Nombre"),
            [(row.size, row.count) for row in stats.household_size_distribution])
    section("Appetit", ("Appetit", "Nombre"),
            [(row.label, row.count) for row in stats.appetite_distribution])
    section("Objectifs batch cooking", ("Objectif", "Nombre"),
            [(row.label, row.count) for row in stats.goals_distribution], last=True)

    return buffer.getvalue()


def get_statistics_service(db: Session) -> StatisticsService:
    return StatisticsService(db)
