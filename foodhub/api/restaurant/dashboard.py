"""Restaurant Dashboard Router - today's summary, sales and period statistics."""

from datetime import date
from io import BytesIO
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import get_owner_listing
from foodhub.database import get_db
from foodhub.models.restaurant import Restaurant
from foodhub.schemas.analytics import DailySalesResponse, RestaurantStatsResponse
from foodhub.schemas.dashboard import RestaurantDashboard
from foodhub.services.analytics_service import analytics_service
from foodhub.services.dashboard_service import dashboard_service

router: APIRouter = APIRouter()


@router.get("", response_model=RestaurantDashboard)
async def get_dashboard(
    db: Annotated[AsyncSession, Depends(get_db)],
    listing: Annotated[Restaurant, Depends(get_owner_listing)],
) -> RestaurantDashboard:
    """Today's orders and revenue, ten recent orders and the rating."""
    return await dashboard_service.get_restaurant_dashboard(db, listing)


@router.get("/stats", response_model=RestaurantStatsResponse)
async def get_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    listing: Annotated[Restaurant, Depends(get_owner_listing)],
    period: Annotated[str, Query(pattern=r"^(daily|weekly|monthly|yearly)$")] = "daily",
    reference: date | None = None,
) -> RestaurantStatsResponse:
    result: RestaurantStatsResponse = await analytics_service.compute_restaurant_stats(
        db, listing.id, period, reference
    )
    await db.commit()
    return result


@router.get("/daily-sales", response_model=list[DailySalesResponse])
async def list_daily_sales(
    db: Annotated[AsyncSession, Depends(get_db)],
    listing: Annotated[Restaurant, Depends(get_owner_listing)],
    start_date: date,
    end_date: date,
) -> list[DailySalesResponse]:
    return await analytics_service.list_daily_sales(db, start_date, end_date, listing.id)


@router.get("/daily-sales/export")
async def export_daily_sales(
    db: Annotated[AsyncSession, Depends(get_db)],
    listing: Annotated[Restaurant, Depends(get_owner_listing)],
    start_date: date | None = None,
    end_date: date | None = None,
) -> StreamingResponse:
    excel_bytes: bytes = await dashboard_service.export_sales_excel(db, start_date, end_date, listing.id)
    return StreamingResponse(
        BytesIO(excel_bytes),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=daily_sales.xlsx"},
    )
