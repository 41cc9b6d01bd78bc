"""Customer Order Router - placing, tracking, cancelling and reviewing orders."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import get_current_customer
from foodhub.database import get_db
from foodhub.models.customer import Customer
from foodhub.schemas.delivery import DeliveryRating, DeliveryResponse
from foodhub.schemas.order import OrderCancel, OrderCreate, OrderResponse
from foodhub.schemas.review import ReviewCreate, ReviewResponse
from foodhub.services.delivery_service import delivery_service
from foodhub.services.order_service import order_service
from foodhub.services.review_service import review_service
from foodhub.utils.pagination import Page

router: APIRouter = APIRouter()


@router.post("/orders", response_model=OrderResponse, status_code=201)
async def create_order(
    data: OrderCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    customer: Annotated[Customer, Depends(get_current_customer)],
) -> OrderResponse:
    """Place an order with an active, verified restaurant."""
    result: OrderResponse = await order_service.create_order(db, customer, data)
    await db.commit()
    return result


@router.get("/orders", response_model=Page)
async def list_orders(
    db: Annotated[AsyncSession, Depends(get_db)],
    customer: Annotated[Customer, Depends(get_current_customer)],
    status: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 10,
) -> Page:
    items, total = await order_service.list_orders(
        db, status=status, customer_id=customer.id, page=page, per_page=per_page
    )
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    customer: Annotated[Customer, Depends(get_current_customer)],
) -> OrderResponse:
    return await order_service.get_order(db, order_id, customer_id=customer.id)


@router.get("/orders/{order_id}/delivery", response_model=DeliveryResponse)
async def track_order_delivery(
    order_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    customer: Annotated[Customer, Depends(get_current_customer)],
) -> DeliveryResponse:
    """Live delivery record of one of the customer's orders."""
    await order_service.get_order_or_404(db, order_id, customer_id=customer.id)
    return await delivery_service.get_for_order(db, order_id)


@router.post("/orders/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: UUID,
    data: OrderCancel,
    db: Annotated[AsyncSession, Depends(get_db)],
    customer: Annotated[Customer, Depends(get_current_customer)],
) -> OrderResponse:
    """Cancel an order that has not been picked up yet."""
    result: OrderResponse = await order_service.cancel_order(db, order_id, customer.id, data)
    await db.commit()
    return result


@router.post("/reviews", response_model=ReviewResponse, status_code=201)
async def create_review(
    data: ReviewCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    customer: Annotated[Customer, Depends(get_current_customer)],
) -> ReviewResponse:
    result: ReviewResponse = await review_service.create_review(db, customer, data)
    await db.commit()
    return result


@router.post("/deliveries/{delivery_id}/rate", response_model=DeliveryResponse)
async def rate_delivery(
    delivery_id: UUID,
    data: DeliveryRating,
    db: Annotated[AsyncSession, Depends(get_db)],
    customer: Annotated[Customer, Depends(get_current_customer)],
) -> DeliveryResponse:
    result: DeliveryResponse = await delivery_service.rate(db, delivery_id, data, customer.id)
    await db.commit()
    return result
