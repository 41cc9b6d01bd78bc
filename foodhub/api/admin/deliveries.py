"""Admin Delivery Router - courier assignment and live tracking.

Requires the ``manage_orders`` permission (super admins bypass).
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import require_permission
from foodhub.database import get_db
from foodhub.models.admin import Admin
from foodhub.schemas.delivery import (
    DeliveryAssign,
    DeliveryDelay,
    DeliveryResponse,
    DeliveryStatusUpdate,
    TrackingStats,
)
from foodhub.schemas.personnel import LocationUpdate
from foodhub.services.delivery_service import delivery_service
from foodhub.utils.pagination import Page

router: APIRouter = APIRouter()

_manage_orders = require_permission("manage_orders")


@router.post("", response_model=DeliveryResponse, status_code=201)
async def assign_delivery(
    data: DeliveryAssign,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_orders)],
) -> DeliveryResponse:
    """Assign an order to an available courier; the zone is the courier's."""
    result: DeliveryResponse = await delivery_service.assign(db, data)
    await db.commit()
    return result


@router.get("", response_model=Page)
async def list_deliveries(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_orders)],
    status: str | None = None,
    personnel_id: UUID | None = None,
    zone_id: UUID | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 10,
) -> Page:
    items, total = await delivery_service.list_deliveries(db, status, personnel_id, zone_id, page, per_page)
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.get("/active", response_model=list[DeliveryResponse])
async def list_active_deliveries(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_orders)],
    personnel_id: UUID | None = None,
    zone_id: UUID | None = None,
) -> list[DeliveryResponse]:
    return await delivery_service.get_active(db, personnel_id, zone_id)


@router.get("/tracking-stats", response_model=TrackingStats)
async def get_tracking_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_orders)],
) -> TrackingStats:
    return await delivery_service.get_tracking_stats(db)


@router.get("/{delivery_id}", response_model=DeliveryResponse)
async def get_delivery(
    delivery_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_orders)],
) -> DeliveryResponse:
    return await delivery_service.get_delivery(db, delivery_id)


@router.patch("/{delivery_id}/status", response_model=DeliveryResponse)
async def update_delivery_status(
    delivery_id: UUID,
    data: DeliveryStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_orders)],
) -> DeliveryResponse:
    result: DeliveryResponse = await delivery_service.update_status(db, delivery_id, data)
    await db.commit()
    return result


@router.patch("/{delivery_id}/location", response_model=DeliveryResponse)
async def update_delivery_location(
    delivery_id: UUID,
    data: LocationUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_orders)],
) -> DeliveryResponse:
    result: DeliveryResponse = await delivery_service.update_location(db, delivery_id, data)
    await db.commit()
    return result


@router.post("/{delivery_id}/delay", response_model=DeliveryResponse)
async def add_delivery_delay(
    delivery_id: UUID,
    data: DeliveryDelay,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_orders)],
) -> DeliveryResponse:
    result: DeliveryResponse = await delivery_service.add_delay(db, delivery_id, data)
    await db.commit()
    return result
