"""Admin Zone Router - delivery zone management.

Every endpoint requires an admin or super-admin token.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import get_current_admin
from foodhub.database import get_db
from foodhub.models.admin import Admin
from foodhub.schemas.analytics import ANALYTICS_RANGE_PATTERN, ZonePerformance
from foodhub.schemas.common import BulkStatusResult
from foodhub.schemas.zone import (
    ZoneBulkStatus,
    ZoneCreate,
    ZoneDropdownItem,
    ZoneResponse,
    ZoneStats,
    ZoneUpdate,
)
from foodhub.services.analytics_service import analytics_service
from foodhub.services.zone_service import zone_service
from foodhub.utils.pagination import Page

router: APIRouter = APIRouter()


@router.get("")
async def list_zones(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
    status: str | None = None,
    search: str | None = None,
    sort_by: str = "name",
    sort_order: Annotated[str, Query(pattern=r"^(asc|desc)$")] = "asc",
    dropdown: bool = False,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=500)] = 100,
) -> Page | list[ZoneDropdownItem]:
    """List zones; ``dropdown=true`` returns only active zones as select options."""
    if dropdown:
        return await zone_service.get_dropdown(db)
    items, total = await zone_service.list_zones(db, status, search, sort_by, sort_order, page, per_page)
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.get("/stats", response_model=ZoneStats)
async def get_zone_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> ZoneStats:
    return await zone_service.get_stats(db)


@router.get("/area/{area}", response_model=list[ZoneResponse])
async def find_by_area(
    area: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> list[ZoneResponse]:
    return await zone_service.find_by_area(db, area)


@router.get("/pincode/{pincode}", response_model=list[ZoneResponse])
async def find_by_pincode(
    pincode: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> list[ZoneResponse]:
    return await zone_service.find_by_pincode(db, pincode)


@router.patch("/bulk-status", response_model=BulkStatusResult)
async def bulk_update_status(
    data: ZoneBulkStatus,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> BulkStatusResult:
    result: BulkStatusResult = await zone_service.bulk_update_status(db, data, current_admin.id)
    await db.commit()
    return result


@router.get("/{zone_id}", response_model=ZoneResponse)
async def get_zone(
    zone_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> ZoneResponse:
    return await zone_service.get_zone(db, zone_id)


@router.get("/{zone_id}/performance", response_model=list[ZonePerformance])
async def get_zone_performance(
    zone_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
    range_name: Annotated[str, Query(alias="range", pattern=ANALYTICS_RANGE_PATTERN)] = "week",
) -> list[ZonePerformance]:
    """Zone delivery performance over a named date range."""
    await zone_service.get_zone_or_404(db, zone_id)
    return await analytics_service.get_zone_performance(db, range_name, zone_id)


@router.post("", response_model=ZoneResponse, status_code=201)
async def create_zone(
    data: ZoneCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> ZoneResponse:
    result: ZoneResponse = await zone_service.create_zone(db, data, current_admin.id)
    await db.commit()
    return result


@router.put("/{zone_id}", response_model=ZoneResponse)
async def update_zone(
    zone_id: UUID,
    data: ZoneUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> ZoneResponse:
    result: ZoneResponse = await zone_service.update_zone(db, zone_id, data, current_admin.id)
    await db.commit()
    return result


@router.delete("/{zone_id}", status_code=204)
async def delete_zone(
    zone_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> None:
    """Delete a zone; refused while couriers are still assigned to it."""
    await zone_service.delete_zone(db, zone_id)
    await db.commit()
