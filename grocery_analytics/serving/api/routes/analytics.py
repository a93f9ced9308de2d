"""
Analytics API Endpoints

Dashboard data endpoints backed by the aggregation engine.
"""

from typing import Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
import structlog

from grocery_analytics.analytics.snapshot import AnalyticsSnapshot
from grocery_analytics.analytics.windows import RangeSelector
from grocery_analytics.config import get_settings
from grocery_analytics.exceptions import InvalidRangeError, RecomputeCancelled, RetrievalError
from grocery_analytics.export.sales import daily_sales_csv, export_filename
from grocery_analytics.serving.service import DashboardAnalyticsService

router = APIRouter()
logger = structlog.get_logger(__name__)

STALE_HEADER = "X-Snapshot-Stale"


def get_analytics_service(request: Request) -> DashboardAnalyticsService:
    """FastAPI dependency returning the application's analytics service."""
    service = getattr(request.app.state, "analytics_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Analytics service not initialized",
        )
    return service


async def _load_snapshot(
    service: DashboardAnalyticsService,
    range_value: Optional[str],
    refresh: bool,
) -> Tuple[AnalyticsSnapshot, bool]:
    """
    Snapshot for the requested range and whether it is stale.

    A failed recompute falls back to the last good snapshot of the range;
    only when there is none does the request fail with 503.
    """
    try:
        selected = RangeSelector.parse(range_value or get_settings().analytics.default_range)
    except InvalidRangeError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    try:
        if refresh:
            return await service.refresh(selected), False
        return await service.get(selected), False
    except RecomputeCancelled as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except RetrievalError as e:
        previous = service.last_snapshot(selected)
        if previous is None:
            logger.error("snapshot_unavailable", collection=e.collection, error=e.detail)
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
        logger.warning(
            "stale_snapshot_served",
            range=selected.value,
            collection=e.collection,
            reference_time=previous.reference_time.isoformat(),
        )
        return previous, True


@router.get("/snapshot", response_model=AnalyticsSnapshot)
async def get_snapshot(
    response: Response,
    range_value: Optional[str] = Query(None, alias="range", description="week, month or year"),
    refresh: bool = Query(False, description="Force a recompute"),
    service: DashboardAnalyticsService = Depends(get_analytics_service),
) -> AnalyticsSnapshot:
    """
    Get the full analytics snapshot for a reporting range.
    """
    logger.info("snapshot_requested", range=range_value, refresh=refresh)
    snapshot, stale = await _load_snapshot(service, range_value, refresh)
    if stale:
        response.headers[STALE_HEADER] = "true"
    return snapshot


@router.get("/sales/export")
async def export_daily_sales(
    range_value: Optional[str] = Query(None, alias="range", description="week, month or year"),
    service: DashboardAnalyticsService = Depends(get_analytics_service),
) -> Response:
    """Download the daily sales series as CSV."""
    snapshot, stale = await _load_snapshot(service, range_value, refresh=False)
    filename = export_filename(snapshot.range, snapshot.reference_time.date())
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    if stale:
        headers[STALE_HEADER] = "true"

    return Response(
        content=daily_sales_csv(snapshot).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers=headers,
    )
