"""
Health check endpoints.
"""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select, text
from sqlalchemy.orm import Session

from admin_api.models import Allergy, Diet, IngredientSearchNamespace, KitchenEquipment
from shared.config.constants import ReferenceTables
from shared.config.settings import settings
from shared.infrastructure.db import get_db
from shared.utils.health import HealthStatus, aggregate_health_checks, run_health_check


router = APIRouter(prefix="/health", tags=["health"])

_BIT_INDEXED_MODELS = {
    ReferenceTables.ALLERGIES: Allergy,
    ReferenceTables.DIETS: Diet,
    ReferenceTables.KITCHEN_EQUIPMENTS: KitchenEquipment,
    ReferenceTables.SEARCH_NAMESPACES: IngredientSearchNamespace,
}


@router.get("")
def health_check() -> dict[str, Any]:
    """Service status, without touching dependencies."""
    return {
        "status": HealthStatus.HEALTHY.value,
        "service": "admin-api",
        "environment": settings.environment,
    }


def missing_bit_indexes(db: Session) -> dict[str, int]:
    """Rows per reference table that have no bit_index yet."""
    missing = {}
    for table, model in _BIT_INDEXED_MODELS.items():
        count = db.scalar(select(func.count()).select_from(model).where(model.bit_index.is_(None)))
        if count:
            missing[table] = count
    return missing


@router.get("/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """
    Database connectivity and bit_index coverage.

    Reference rows without a bit_index cannot be encoded, so they report
    the service as degraded. Returns 503 when the database is unreachable.
    """

    def check_database() -> dict[str, Any]:
        db.execute(text("SELECT 1"))
        return {"dialect": db.get_bind().dialect.name}

    def check_bit_indexes() -> dict[str, Any]:
        missing = missing_bit_indexes(db)
        if missing:
            return {"degraded": True, "missing_bit_index": missing}
        return {}

    summary = aggregate_health_checks([
        run_health_check("database", check_database),
        run_health_check("bit_indexes", check_bit_indexes),
    ])
    body = {
        "service": "admin-api",
        "environment": settings.environment,
        "status": summary["status"],
        "dependencies": summary["components"],
    }
    if summary["status"] == HealthStatus.UNHEALTHY.value:
        return JSONResponse(content=body, status_code=503)
    return body
