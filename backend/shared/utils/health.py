"""
Health Check Utilities.

Consistent timing and response formatting for dependency checks.

Usage:
    from shared.utils.health import run_health_check, aggregate_health_checks

    result = run_health_check("database", lambda: db.execute(text("SELECT 1")))
    summary = aggregate_health_checks([result])
    # {"status": "healthy", "components": {"database": {...}}}
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from shared.config.logging import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    """Health check status values."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class HealthCheckResult:
    """Result of a health check operation."""
    status: HealthStatus
    component: str
    latency_ms: float | None = None
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result = {
            "status": self.status.value,
            "component": self.component,
        }
        if self.latency_ms is not None:
            result["latency_ms"] = round(self.latency_ms, 2)
        if self.error:
            result["error"] = self.error
        if self.details:
            result["details"] = self.details
        return result


def run_health_check(
    component: str,
    check: Callable[[], dict[str, Any] | None],
) -> HealthCheckResult:
    """
    Run ``check`` and time it.

    The check may return a details dict. A details dict carrying
    ``"degraded": True`` marks the component as degraded rather than healthy.
    Any exception marks the component unhealthy.
    """
    start_time = time.perf_counter()
    try:
        result = check()
    except Exception as e:
        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.warning("Health check failed", component=component, error=str(e))
        return HealthCheckResult(
            status=HealthStatus.UNHEALTHY,
            component=component,
            latency_ms=latency_ms,
            error=str(e),
        )

    latency_ms = (time.perf_counter() - start_time) * 1000
    details = dict(result) if isinstance(result, dict) else {}
    degraded = details.pop("degraded", False)
    return HealthCheckResult(
        status=HealthStatus.DEGRADED if degraded else HealthStatus.HEALTHY,
        component=component,
        latency_ms=latency_ms,
        details=details,
    )


def aggregate_health_checks(results: list[HealthCheckResult]) -> dict[str, Any]:
    """
    Aggregate individual results.

    Overall status is unhealthy if any component is unhealthy, degraded if
    any is degraded, healthy otherwise.
    """
    components = {result.component: result.to_dict() for result in results}
    statuses = {result.status for result in results}

    if HealthStatus.UNHEALTHY in statuses:
        overall = HealthStatus.UNHEALTHY
    elif HealthStatus.DEGRADED in statuses:
        overall = HealthStatus.DEGRADED
    else:
        overall = HealthStatus.HEALTHY

    return {"status": overall.value, "components": components}
