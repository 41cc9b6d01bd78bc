"""Courier Delivery Router - the caller's own deliveries.

Deliveries assigned to someone else answer 404.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import get_current_courier
from foodhub.database import get_db
from foodhub.models.personnel import DeliveryPersonnel
from foodhub.schemas.delivery import DeliveryDelay, DeliveryResponse, DeliveryStatusUpdate
from foodhub.schemas.personnel import LocationUpdate
from foodhub.services.delivery_service import delivery_service
from foodhub.utils.pagination import Page

router: APIRouter = APIRouter()


@router.get("/active", response_model=list[DeliveryResponse])
async def list_active_deliveries(
    db: Annotated[AsyncSession, Depends(get_db)],
    courier: Annotated[DeliveryPersonnel, Depends(get_current_courier)],
) -> list[DeliveryResponse]:
    return await delivery_service.get_active(db, personnel_id=courier.id)


@router.get("", response_model=Page)
async def list_my_deliveries(
    db: Annotated[AsyncSession, Depends(get_db)],
    courier: Annotated[DeliveryPersonnel, Depends(get_current_courier)],
    status: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 10,
) -> Page:
    items, total = await delivery_service.list_deliveries(
        db, status=status, personnel_id=courier.id, page=page, per_page=per_page
    )
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.get("/{delivery_id}", response_model=DeliveryResponse)
async def get_delivery(
    delivery_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    courier: Annotated[DeliveryPersonnel, Depends(get_current_courier)],
) -> DeliveryResponse:
    return await delivery_service.get_delivery(db, delivery_id, courier.id)


@router.patch("/{delivery_id}/status", response_model=DeliveryResponse)
async def update_delivery_status(
    delivery_id: UUID,
    data: DeliveryStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    courier: Annotated[DeliveryPersonnel, Depends(get_current_courier)],
) -> DeliveryResponse:
    """Advance an own delivery; pickup and hand-over are mirrored onto the order."""
    result: DeliveryResponse = await delivery_service.update_status(db, delivery_id, data, courier.id)
    await db.commit()
    return result


@router.patch("/{delivery_id}/location", response_model=DeliveryResponse)
async def update_delivery_location(
    delivery_id: UUID,
    data: LocationUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    courier: Annotated[DeliveryPersonnel, Depends(get_current_courier)],
) -> DeliveryResponse:
    result: DeliveryResponse = await delivery_service.update_location(db, delivery_id, data, courier.id)
    await db.commit()
    return result


@router.post("/{delivery_id}/delay", response_model=DeliveryResponse)
async def report_delay(
    delivery_id: UUID,
    data: DeliveryDelay,
    db: Annotated[AsyncSession, Depends(get_db)],
    courier: Annotated[DeliveryPersonnel, Depends(get_current_courier)],
) -> DeliveryResponse:
    result: DeliveryResponse = await delivery_service.add_delay(db, delivery_id, data, courier.id)
    await db.commit()
    return result
