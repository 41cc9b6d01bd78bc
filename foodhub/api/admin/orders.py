"""Admin Order Router - platform-wide order management.

Requires the ``manage_orders`` permission (super admins bypass).
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import require_permission
from foodhub.database import get_db
from foodhub.models.admin import Admin
from foodhub.schemas.order import OrderResponse, OrderStatusUpdate
from foodhub.services.order_service import order_service
from foodhub.utils.pagination import Page

router: APIRouter = APIRouter()


@router.get("", response_model=Page)
async def list_orders(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(require_permission("manage_orders"))],
    status: str | None = None,
    restaurant_id: UUID | None = None,
    customer_id: UUID | None = None,
    delivery_person_id: UUID | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 10,
) -> Page:
    items, total = await order_service.list_orders(
        db,
        status=status,
        restaurant_id=restaurant_id,
        customer_id=customer_id,
        delivery_person_id=delivery_person_id,
        page=page,
        per_page=per_page,
    )
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(require_permission("manage_orders"))],
) -> OrderResponse:
    return await order_service.get_order(db, order_id)


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    data: OrderStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(require_permission("manage_orders"))],
) -> OrderResponse:
    """Move an order forward (or cancel it); delivered and cancelled are final."""
    result: OrderResponse = await order_service.update_status(db, order_id, data)
    await db.commit()
    return result


@router.delete("/{order_id}", status_code=204)
async def delete_order(
    order_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(require_permission("manage_orders"))],
) -> None:
    await order_service.delete_order(db, order_id)
    await db.commit()
