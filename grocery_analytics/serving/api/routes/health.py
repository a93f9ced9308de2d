"""
Health Check Endpoints
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from grocery_analytics.analytics.windows import RangeSelector
from grocery_analytics.config import get_settings
from grocery_analytics.database.connection import check_database_health
from grocery_analytics.serving.cache import get_redis

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


async def _cache_check() -> Dict[str, Any]:
    try:
        await get_redis().ping()
    except Exception as e:
        return {"status": "unavailable", "error": str(e)}
    return {"status": "healthy"}


def _analytics_check(request: Request) -> Dict[str, Any]:
    service = getattr(request.app.state, "analytics_service", None)
    if service is None:
        return {"status": "unhealthy", "error": "Analytics service not initialized"}

    computed: Dict[str, Optional[str]] = {}
    for selector in RangeSelector:
        snapshot = service.last_snapshot(selector)
        computed[selector.value] = snapshot.reference_time.isoformat() if snapshot else None
    return {"status": "healthy", "last_computed": computed}


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Readiness of everything a recompute needs.

    The database and the analytics service are required; the snapshot cache
    is optional, so losing it only degrades the status.
    """
    settings = get_settings()
    checks = {
        "database": await check_database_health(),
        "analytics": _analytics_check(request),
        "cache": await _cache_check(),
    }

    if any(checks[name]["status"] != "healthy" for name in ("database", "analytics")):
        overall_status = "unhealthy"
    elif checks["cache"]["status"] != "healthy":
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    return HealthResponse(
        status=overall_status,
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    return {"status": "alive"}
