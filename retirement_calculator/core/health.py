"""Health report used by the API health-check."""

from __future__ import annotations

from retirement_calculator.core.service import RetirementCalculatorService
from retirement_calculator.schemas.health import HealthResponse

OPERATIONAL_MESSAGE = "Retirement Calculator API is operational"
DEGRADED_MESSAGE = "Retirement Calculator API cache is unavailable"


def get_health_report(service: RetirementCalculatorService) -> HealthResponse:
    """Combine both cache sentinels into a single UP/DOWN signal."""
    caches = service.cache_health()
    healthy = all(caches.values())
    return HealthResponse(
        status="UP" if healthy else "DOWN",
        message=OPERATIONAL_MESSAGE if healthy else DEGRADED_MESSAGE,
        cache=caches,
    )
