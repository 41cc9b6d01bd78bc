"""Admin Restaurant Router - restaurant accounts and verification.

Path ids are restaurant owner account ids; the public listing is created
or synchronised when an account is approved. Requires the
``manage_restaurants`` permission (super admins bypass).
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.api.deps import require_permission
from foodhub.database import get_db
from foodhub.models.admin import Admin
from foodhub.schemas.restaurant import (
    BulkVerifyRequest,
    BulkVerifyResult,
    RestaurantAdminUpdate,
    RestaurantUserResponse,
    VerificationStats,
    VerifyRequest,
)
from foodhub.services.restaurant_service import restaurant_service
from foodhub.utils.pagination import Page

router: APIRouter = APIRouter()

_manage_restaurants = require_permission("manage_restaurants")


@router.get("", response_model=Page)
async def list_restaurants(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_restaurants)],
    status: Annotated[str | None, Query(pattern=r"^(pending|verified|active|inactive)$")] = None,
    city: str | None = None,
    cuisine: str | None = None,
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 10,
) -> Page:
    items, total = await restaurant_service.list_restaurants(db, status, city, cuisine, search, page, per_page)
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.get("/verification/queue", response_model=Page)
async def get_verification_queue(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_restaurants)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 10,
) -> Page:
    """Accounts waiting for a decision, oldest first."""
    items, total = await restaurant_service.get_verification_queue(db, page, per_page)
    return Page(items=items, total=total, page=page, per_page=per_page)


@router.get("/verification/stats", response_model=VerificationStats)
async def get_verification_stats(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_restaurants)],
) -> VerificationStats:
    return await restaurant_service.get_verification_stats(db)


@router.post("/verification/bulk", response_model=BulkVerifyResult)
async def bulk_verify(
    data: BulkVerifyRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_restaurants)],
) -> BulkVerifyResult:
    result: BulkVerifyResult = await restaurant_service.bulk_verify(db, data, current_admin.id)
    await db.commit()
    return result


@router.get("/{restaurant_id}", response_model=RestaurantUserResponse)
async def get_restaurant(
    restaurant_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_restaurants)],
) -> RestaurantUserResponse:
    return await restaurant_service.get_restaurant(db, restaurant_id)


@router.put("/{restaurant_id}", response_model=RestaurantUserResponse)
async def update_restaurant(
    restaurant_id: UUID,
    data: RestaurantAdminUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_restaurants)],
) -> RestaurantUserResponse:
    result: RestaurantUserResponse = await restaurant_service.update_restaurant(db, restaurant_id, data)
    await db.commit()
    return result


@router.delete("/{restaurant_id}", status_code=204)
async def delete_restaurant(
    restaurant_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_restaurants)],
) -> None:
    await restaurant_service.delete_restaurant(db, restaurant_id)
    await db.commit()


@router.patch("/{restaurant_id}/verify", response_model=RestaurantUserResponse)
async def verify_restaurant(
    restaurant_id: UUID,
    data: VerifyRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_admin: Annotated[Admin, Depends(_manage_restaurants)],
) -> RestaurantUserResponse:
    """Approve or reject a pending account (rejection needs a reason)."""
    result: RestaurantUserResponse = await restaurant_service.verify_restaurant(
        db, restaurant_id, data, current_admin.id
    )
    await db.commit()
    return result
