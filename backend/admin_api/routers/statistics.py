"""
Onboarding statistics endpoints (JSON and CSV export).
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from admin_api.models import utcnow
from admin_api.services.domain import get_statistics_service
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import OnboardingStatsOutput


router = APIRouter(prefix="/statistics", tags=["statistics"])


@router.get("/onboarding", response_model=OnboardingStatsOutput)
def get_onboarding_statistics(db: Session = Depends(get_db)) -> OnboardingStatsOutput:
    return get_statistics_service(db).onboarding()


@router.get("/onboarding.csv")
def export_onboarding_statistics(db: Session = Depends(get_db)) -> Response:
    """Same data as /onboarding, as a sectioned CSV download."""
    content = get_statistics_service(db).onboarding_csv()
    filename = f"statistiques-onboarding-{utcnow():%Y-%m-%d}.csv"
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
