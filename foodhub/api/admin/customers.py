"""Admin Customer Router - customer account management.

Requires the ``manage_users`` permission (super admins bypass).
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import require_permission
from foodhub.database import get_db
from foodhub.models.admin import Admin
from foodhub.schemas.customer import CustomerAnalyticsResponse, CustomerResponse, CustomerStatusUpdate
from foodhub.services.customer_service import customer_service
from foodhub.utils.pagination import Page

router: APIRouter = APIRouter()

_manage_users = require_permission("manage_users")


@router.get("", response_model=Page)
async def list_customers(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_users)],
    status: Annotated[str | None, Query(pattern=r"^(active|inactive)$")] = None,
    segment: Annotated[str | None, Query(pattern=r"^(new|regular|premium)$")] = None,
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 10,
) -> Page:
    items, total = await customer_service.list_customers(db, status, segment, search, page, per_page)
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.get("/analytics", response_model=CustomerAnalyticsResponse)
async def get_customer_analytics(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_users)],
) -> CustomerAnalyticsResponse:
    return await customer_service.get_analytics(db)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_users)],
) -> CustomerResponse:
    return await customer_service.get_customer(db, customer_id)


@router.patch("/{customer_id}/status", response_model=CustomerResponse)
async def update_customer_status(
    customer_id: UUID,
    data: CustomerStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_users)],
) -> CustomerResponse:
    result: CustomerResponse = await customer_service.update_status(db, customer_id, data)
    await db.commit()
    return result


@router.delete("/{customer_id}", status_code=204)
async def delete_customer(
    customer_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_users)],
) -> None:
    await customer_service.delete_customer(db, customer_id)
    await db.commit()
