"""Admin Dashboard Router - platform overview and delivery operations."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import get_current_super_admin, require_permission
from foodhub.database import get_db
from foodhub.models.admin import Admin
from foodhub.schemas.dashboard import AdminOverview, DeliveryDashboard
from foodhub.services.dashboard_service import dashboard_service

router: APIRouter = APIRouter()


@router.get("/overview", response_model=AdminOverview)
async def get_overview(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_super_admin)],
) -> AdminOverview:
    """Restaurants, customers, orders and revenue with month-over-month growth. Super admin only."""
    return await dashboard_service.get_admin_overview(db)


@router.get("/delivery", response_model=DeliveryDashboard)
async def get_delivery_dashboard(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(require_permission("view_analytics"))],
) -> DeliveryDashboard:
    """Tracking, courier and zone statistics in one payload."""
    return await dashboard_service.get_delivery_dashboard(db)
