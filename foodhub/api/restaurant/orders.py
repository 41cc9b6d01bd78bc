"""Restaurant Order Router - orders placed with the caller's restaurant.

All endpoints need a verified restaurant (its public listing must exist).
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import get_owner_listing
from foodhub.database import get_db
from foodhub.models.restaurant import Restaurant
from foodhub.schemas.order import OrderResponse, OrderStatusUpdate
from foodhub.services.order_service import RESTAURANT_STATUSES, order_service
from foodhub.utils.pagination import Page

router: APIRouter = APIRouter()


@router.get("", response_model=Page)
async def list_orders(
    db: Annotated[AsyncSession, Depends(get_db)],
    listing: Annotated[Restaurant, Depends(get_owner_listing)],
    status: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 10,
) -> Page:
    items, total = await order_service.list_orders(
        db, status=status, restaurant_id=listing.id, page=page, per_page=per_page
    )
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    listing: Annotated[Restaurant, Depends(get_owner_listing)],
) -> OrderResponse:
    return await order_service.get_order(db, order_id, restaurant_id=listing.id)


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    data: OrderStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    listing: Annotated[Restaurant, Depends(get_owner_listing)],
) -> OrderResponse:
    """Confirm, prepare, mark ready or cancel one of the restaurant's orders."""
    result: OrderResponse = await order_service.update_status(
        db, order_id, data, restaurant_id=listing.id, allowed_statuses=RESTAURANT_STATUSES
    )
    await db.commit()
    return result
