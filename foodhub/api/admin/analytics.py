"""Admin Analytics Router - delivery analytics, daily sales and restaurant stats.

Requires the ``view_analytics`` permission (super admins bypass).
"""

from datetime import date
from io import BytesIO
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import require_permission
from foodhub.database import get_db
from foodhub.models.admin import Admin
from foodhub.schemas.analytics import (
    ANALYTICS_RANGE_PATTERN,
    DailySalesResponse,
    OverallAnalytics,
    PersonnelPerformance,
    RestaurantStatsResponse,
    TimeSlot,
    TrendPoint,
    ZonePerformance,
)
from foodhub.services.analytics_service import analytics_service
from foodhub.services.dashboard_service import dashboard_service
from foodhub.services.restaurant_service import restaurant_service

router: APIRouter = APIRouter()

_view_analytics = require_permission("view_analytics")

RangeQuery = Annotated[str, Query(alias="range", pattern=ANALYTICS_RANGE_PATTERN)]
XLSX_MEDIA_TYPE: str = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/overall", response_model=OverallAnalytics)
async def get_overall(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_view_analytics)],
    range_name: RangeQuery = "week",
) -> OverallAnalytics:
    return await analytics_service.get_overall(db, range_name)


@router.get("/zones", response_model=list[ZonePerformance])
async def get_zone_performance(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_view_analytics)],
    range_name: RangeQuery = "week",
) -> list[ZonePerformance]:
    """Per-zone performance, most efficient first."""
    return await analytics_service.get_zone_performance(db, range_name)


@router.get("/personnel", response_model=list[PersonnelPerformance])
async def get_personnel_performance(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_view_analytics)],
    range_name: RangeQuery = "week",
) -> list[PersonnelPerformance]:
    return await analytics_service.get_personnel_performance(db, range_name)


@router.get("/time", response_model=list[TimeSlot])
async def get_time_analytics(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_view_analytics)],
    range_name: RangeQuery = "week",
) -> list[TimeSlot]:
    return await analytics_service.get_time_analytics(db, range_name)


@router.get("/trends", response_model=list[TrendPoint])
async def get_delivery_trends(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_view_analytics)],
    range_name: RangeQuery = "week",
) -> list[TrendPoint]:
    return await analytics_service.get_delivery_trends(db, range_name)


@router.get("/top-zones", response_model=list[ZonePerformance])
async def get_top_zones(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_view_analytics)],
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[ZonePerformance]:
    return await analytics_service.get_top_zones(db, limit)


@router.get("/top-personnel", response_model=list[PersonnelPerformance])
async def get_top_personnel(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_view_analytics)],
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[PersonnelPerformance]:
    return await analytics_service.get_top_personnel(db, limit)


@router.get("/daily-sales", response_model=list[DailySalesResponse])
async def list_daily_sales(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_view_analytics)],
    start_date: date,
    end_date: date,
    restaurant_id: UUID | None = None,
) -> list[DailySalesResponse]:
    return await analytics_service.list_daily_sales(db, start_date, end_date, restaurant_id)


@router.get("/daily-sales/export")
async def export_daily_sales(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_view_analytics)],
    start_date: date | None = None,
    end_date: date | None = None,
    restaurant_id: UUID | None = None,
) -> StreamingResponse:
    """Download DailySales rows for a date range as an Excel workbook."""
    excel_bytes: bytes = await dashboard_service.export_sales_excel(db, start_date, end_date, restaurant_id)
    return StreamingResponse(
        BytesIO(excel_bytes),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": "attachment; filename=daily_sales.xlsx"},
    )


@router.post("/restaurants/{restaurant_id}/stats", response_model=RestaurantStatsResponse)
async def compute_restaurant_stats(
    restaurant_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_view_analytics)],
    period: Annotated[str, Query(pattern=r"^(daily|weekly|monthly|yearly)$")] = "daily",
    reference: date | None = None,
) -> RestaurantStatsResponse:
    """Compute and store a listing's statistics for the period containing ``reference``."""
    await restaurant_service.get_listing_or_404(db, restaurant_id)
    result: RestaurantStatsResponse = await analytics_service.compute_restaurant_stats(
        db, restaurant_id, period, reference
    )
    await db.commit()
    return result
