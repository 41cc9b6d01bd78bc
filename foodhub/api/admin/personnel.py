"""Admin Delivery Personnel Router - courier management."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import get_current_admin
from foodhub.database import get_db
from foodhub.models.admin import Admin
from foodhub.schemas.analytics import ANALYTICS_RANGE_PATTERN, PersonnelPerformance
from foodhub.schemas.common import BulkStatusResult
from foodhub.schemas.personnel import (
    LocationUpdate,
    PersonnelBulkStatus,
    PersonnelCreate,
    PersonnelResponse,
    PersonnelStats,
    PersonnelStatusUpdate,
    PersonnelUpdate,
)
from foodhub.services.analytics_service import analytics_service
from foodhub.services.personnel_service import personnel_service
from foodhub.utils.pagination import Page

router: APIRouter = APIRouter()


@router.get("", response_model=Page)
async def list_personnel(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
    status: str | None = None,
    zone_id: UUID | None = None,
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 10,
) -> Page:
    items, total = await personnel_service.list_personnel(db, status, zone_id, search, page, per_page)
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.get("/stats", response_model=PersonnelStats)
async def get_personnel_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> PersonnelStats:
    return await personnel_service.get_stats(db)


@router.get("/available/{zone_id}", response_model=list[PersonnelResponse])
async def get_available_in_zone(
    zone_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> list[PersonnelResponse]:
    """Online couriers in a working status for one zone, best rated first."""
    return await personnel_service.get_available_in_zone(db, zone_id)


@router.patch("/bulk-status", response_model=BulkStatusResult)
async def bulk_update_status(
    data: PersonnelBulkStatus,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> BulkStatusResult:
    result: BulkStatusResult = await personnel_service.bulk_update_status(db, data, current_admin.id)
    await db.commit()
    return result


@router.get("/{personnel_id}", response_model=PersonnelResponse)
async def get_personnel(
    personnel_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> PersonnelResponse:
    return await personnel_service.get_personnel(db, personnel_id)


@router.get("/{personnel_id}/performance", response_model=list[PersonnelPerformance])
async def get_personnel_performance(
    personnel_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
    range_name: Annotated[str, Query(alias="range", pattern=ANALYTICS_RANGE_PATTERN)] = "week",
) -> list[PersonnelPerformance]:
    await personnel_service.get_personnel_or_404(db, personnel_id)
    return await analytics_service.get_personnel_performance(db, range_name, personnel_id)


@router.post("", response_model=PersonnelResponse, status_code=201)
async def create_personnel(
    data: PersonnelCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> PersonnelResponse:
    result: PersonnelResponse = await personnel_service.create_personnel(db, data, current_admin.id)
    await db.commit()
    return result


@router.put("/{personnel_id}", response_model=PersonnelResponse)
async def update_personnel(
    personnel_id: UUID,
    data: PersonnelUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> PersonnelResponse:
    result: PersonnelResponse = await personnel_service.update_personnel(db, personnel_id, data, current_admin.id)
    await db.commit()
    return result


@router.delete("/{personnel_id}", status_code=204)
async def delete_personnel(
    personnel_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> None:
    await personnel_service.delete_personnel(db, personnel_id)
    await db.commit()


@router.patch("/{personnel_id}/status", response_model=PersonnelResponse)
async def update_status(
    personnel_id: UUID,
    data: PersonnelStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> PersonnelResponse:
    """Change status; on_duty brings the courier online, off-duty statuses take it offline."""
    result: PersonnelResponse = await personnel_service.update_status(db, personnel_id, data, current_admin.id)
    await db.commit()
    return result


@router.patch("/{personnel_id}/location", response_model=PersonnelResponse)
async def update_location(
    personnel_id: UUID,
    data: LocationUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> PersonnelResponse:
    result: PersonnelResponse = await personnel_service.update_location(db, personnel_id, data)
    await db.commit()
    return result


@router.patch("/{personnel_id}/online", response_model=PersonnelResponse)
async def go_online(
    personnel_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> PersonnelResponse:
    result: PersonnelResponse = await personnel_service.set_online(db, personnel_id, True)
    await db.commit()
    return result


@router.patch("/{personnel_id}/offline", response_model=PersonnelResponse)
async def go_offline(
    personnel_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(get_current_admin)],
) -> PersonnelResponse:
    result: PersonnelResponse = await personnel_service.set_online(db, personnel_id, False)
    await db.commit()
    return result
